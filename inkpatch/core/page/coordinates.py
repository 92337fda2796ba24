"""
Conversions between raster pixels, canvas pixels and PDF user space.

Raster and canvas differ by a single uniform factor ``k``. PDF user space has
its origin at the bottom-left, so the y-axis flip happens only when mapping
canvas coordinates to the PDF (export time), never for display.
"""

from typing import Tuple

import fitz

Size = Tuple[float, float]


def canvas_scale(canvas_width: float, raster_width: float) -> float:
    """Uniform raster -> canvas factor ``k``."""
    if canvas_width <= 0 or raster_width <= 0:
        raise ValueError(
            f"Widths must be positive (canvas={canvas_width}, raster={raster_width})"
        )
    return canvas_width / raster_width


def canvas_height_for(raster_size: Size, canvas_width: float) -> int:
    """Canvas height that keeps the raster's aspect ratio."""
    raster_width, raster_height = raster_size
    if raster_width <= 0:
        raise ValueError(f"Raster width must be positive, got {raster_width}")
    return round((raster_height / raster_width) * canvas_width)


def raster_to_canvas(value: float, k: float) -> float:
    return value * k


def canvas_to_raster(value: float, k: float) -> float:
    if k <= 0:
        raise ValueError(f"Scale factor must be positive, got {k}")
    return value / k


def rect_raster_to_canvas(rect: fitz.Rect, k: float) -> fitz.Rect:
    """Scale a raster rectangle into canvas pixels."""
    return fitz.Rect(rect.x0 * k, rect.y0 * k, rect.x1 * k, rect.y1 * k)


def _ratios(canvas_size: Size, pdf_size: Size) -> Tuple[float, float]:
    canvas_w, canvas_h = canvas_size
    pdf_w, pdf_h = pdf_size
    if canvas_w <= 0 or canvas_h <= 0:
        raise ValueError(f"Canvas size must be positive, got {canvas_size}")
    return pdf_w / canvas_w, pdf_h / canvas_h


def canvas_to_pdf(
    x: float, y: float, height: float, canvas_size: Size, pdf_size: Size
) -> Tuple[float, float]:
    """
    Map the top-left corner of a canvas box to the PDF.

    Args:
        x: Canvas x of the box's left edge
        y: Canvas y of the box's top edge
        height: Box height in canvas pixels (0 for a bare point)
        canvas_size: (width, height) of the canvas
        pdf_size: (width, height) of the PDF page in points

    Returns:
        (x, y) of the box's bottom-left corner in PDF user space
    """
    sx, sy = _ratios(canvas_size, pdf_size)
    pdf_h = pdf_size[1]
    return x * sx, pdf_h - y * sy - height * sy


def pdf_to_canvas(
    x: float, y: float, height: float, canvas_size: Size, pdf_size: Size
) -> Tuple[float, float]:
    """Inverse of :func:`canvas_to_pdf`; ``height`` is in canvas pixels."""
    sx, sy = _ratios(canvas_size, pdf_size)
    if sx <= 0 or sy <= 0:
        raise ValueError(f"PDF size must be positive, got {pdf_size}")
    pdf_h = pdf_size[1]
    return x / sx, (pdf_h - y) / sy - height


def canvas_rect_to_pdf(
    left: float,
    top: float,
    width: float,
    height: float,
    canvas_size: Size,
    pdf_size: Size,
) -> fitz.Rect:
    """Canvas box -> rectangle in PDF user space, y growing upward."""
    sx, sy = _ratios(canvas_size, pdf_size)
    x, y = canvas_to_pdf(left, top, height, canvas_size, pdf_size)
    return fitz.Rect(x, y, x + width * sx, y + height * sy)
