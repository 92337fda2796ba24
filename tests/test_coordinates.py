"""Tests for inkpatch.core.page.coordinates"""

import pytest

from inkpatch.core.page import coordinates
from inkpatch.core.page.coordinates import (
    canvas_height_for,
    canvas_rect_to_pdf,
    canvas_scale,
    canvas_to_pdf,
    canvas_to_raster,
    pdf_to_canvas,
    raster_to_canvas,
)

PDF_SIZE = (612.0, 792.0)


def test_canvas_scale_is_width_ratio():
    assert canvas_scale(876, 734) == pytest.approx(876 / 734)


@pytest.mark.parametrize("canvas_width,raster_width", [(0, 100), (100, 0), (-5, 100)])
def test_canvas_scale_rejects_non_positive(canvas_width, raster_width):
    with pytest.raises(ValueError):
        canvas_scale(canvas_width, raster_width)


def test_canvas_height_keeps_raster_aspect():
    assert canvas_height_for((734, 950), 876) == round(950 / 734 * 876)


def test_canvas_to_pdf_flips_y_axis():
    canvas_size = (306.0, 396.0)  # Half the page size

    x, y = canvas_to_pdf(10, 20, 0, canvas_size, PDF_SIZE)

    assert x == pytest.approx(20)
    assert y == pytest.approx(792 - 40)


def test_canvas_to_pdf_returns_bottom_left_of_box():
    x, y = canvas_to_pdf(50, 80, 12, PDF_SIZE, PDF_SIZE)

    assert (x, y) == pytest.approx((50, 700))


def test_canvas_rect_to_pdf():
    rect = canvas_rect_to_pdf(10, 20, 30, 40, (306.0, 396.0), PDF_SIZE)

    assert rect.x0 == pytest.approx(20)
    assert rect.y0 == pytest.approx(792 - 40 - 80)
    assert rect.width == pytest.approx(60)
    assert rect.height == pytest.approx(80)


def test_canvas_to_pdf_rejects_empty_canvas():
    with pytest.raises(ValueError):
        canvas_to_pdf(0, 0, 0, (0, 100), PDF_SIZE)


@pytest.mark.parametrize("k", [0.25, 1.0, 1.1934, 3.0])
@pytest.mark.parametrize("point", [(0.0, 0.0), (73.5, 958.6), (611.9, 12.25)])
def test_raster_canvas_pdf_round_trip(k, point):
    raster_size = (734.0, 950.0)
    canvas_size = (raster_size[0] * k, raster_size[1] * k)

    cx = raster_to_canvas(point[0], k)
    cy = raster_to_canvas(point[1], k)
    px, py = canvas_to_pdf(cx, cy, 0, canvas_size, PDF_SIZE)
    bx, by = pdf_to_canvas(px, py, 0, canvas_size, PDF_SIZE)

    assert canvas_to_raster(bx, k) == pytest.approx(point[0], rel=1e-6, abs=1e-9)
    assert canvas_to_raster(by, k) == pytest.approx(point[1], rel=1e-6, abs=1e-9)


def test_pdf_to_canvas_inverts_box_height():
    canvas_size = (876.0, 1133.0)

    px, py = canvas_to_pdf(120, 300, 25, canvas_size, PDF_SIZE)

    assert pdf_to_canvas(px, py, 25, canvas_size, PDF_SIZE) == pytest.approx((120, 300))


def test_canvas_to_raster_rejects_zero_scale():
    with pytest.raises(ValueError):
        coordinates.canvas_to_raster(10, 0)
