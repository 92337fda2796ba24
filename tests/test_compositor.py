"""Tests for inkpatch.core.document.compositor"""

import pytest

from inkpatch.core.canvas.manager import CanvasObjectManager
from inkpatch.core.canvas.models import EditedText, LineMarker, OriginalRect, Shape
from inkpatch.core.document.compositor import (
    BLACK,
    EditCompositor,
    MaskRect,
    RectOp,
    TextOp,
)
from inkpatch.core.page.models import LineBox

PDF_SIZE = (612.0, 792.0)
SAME_SIZE = PDF_SIZE
HALF_SIZE = (306.0, 396.0)


@pytest.fixture
def compositor():
    return EditCompositor()


@pytest.fixture
def hello_box():
    return LineBox("line-0-80", "Hello", left=50, top=80, width=33, height=12, font_size=12)


@pytest.fixture
def manager(hello_box):
    manager = CanvasObjectManager()
    manager.load_lines([hello_box])
    return manager


# =============================================================================
# Edited text
# =============================================================================

class TestEditedText:

    def test_replacement_masks_then_draws(self, compositor, manager, hello_box):
        textbox = manager.promote(hello_box.id)
        manager.commit_edit(textbox, "Goodbye")

        ops = compositor.compose(manager.exportable_objects(), SAME_SIZE, PDF_SIZE)

        assert [type(op) for op in ops] == [MaskRect, TextOp]
        mask, text = ops

        padding = 12 * 0.12
        assert mask.x == pytest.approx(50 - padding)
        assert mask.width == pytest.approx(33 + 2 * padding)
        assert mask.height == pytest.approx(12 + 2 * padding)
        assert mask.y == pytest.approx(792 - (80 - padding) - (12 + 2 * padding))

        assert text.text == "Goodbye"
        assert text.x == pytest.approx(50)
        assert text.y == pytest.approx(792 - 80 - 12)
        assert text.size == pytest.approx(12)
        assert text.line_height == pytest.approx(14.4)
        assert text.max_width == pytest.approx(33)
        assert text.color == pytest.approx((0x11 / 255, 0x18 / 255, 0x27 / 255))

    def test_mask_uses_original_rect_after_move_and_resize(self, compositor, manager, hello_box):
        textbox = manager.promote(hello_box.id)
        manager.move(textbox, 300, 400)
        manager.resize(textbox, 2, 2)

        mask = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)[0]

        assert isinstance(mask, MaskRect)
        assert mask.x == pytest.approx(50 - 1.44)

    def test_mask_precedes_its_text_for_every_replacement(self, compositor):
        manager = CanvasObjectManager()
        manager.load_lines(
            [
                LineBox(f"line-{i}", f"row {i}", 50, 80 + i * 20, 40, 12, 12)
                for i in range(3)
            ]
        )
        for i in (2, 0, 1):
            manager.promote(f"line-{i}")

        ops = compositor.compose(manager.exportable_objects(), SAME_SIZE, PDF_SIZE)

        for i in range(3):
            owner = manager.line_edits[f"line-{i}"].id
            kinds = [type(op) for op in ops if op.source_id == owner]
            assert kinds == [MaskRect, TextOp]

    def test_padding_has_a_floor_of_one(self, compositor):
        textbox = EditedText(
            "t", "x", 10, 10, font_size=5, original_rect=OriginalRect(10, 10, 20, 4)
        )

        mask = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)[0]

        assert mask.width == pytest.approx(22)
        assert mask.height == pytest.approx(6)

    def test_mask_is_clamped_at_canvas_origin(self, compositor):
        textbox = EditedText(
            "t", "x", 0, 0, font_size=12, original_rect=OriginalRect(0, 0, 20, 12)
        )

        mask = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)[0]

        assert mask.x == 0
        assert mask.y + mask.height == pytest.approx(792)

    def test_scales_between_canvas_and_page(self, compositor):
        textbox = EditedText("t", "scaled", left=10, top=20, font_size=16, width=100)

        (text,) = compositor.compose([textbox], HALF_SIZE, PDF_SIZE)

        assert text.x == pytest.approx(20)
        assert text.size == pytest.approx(32)
        assert text.y == pytest.approx(792 - 40 - 32)
        assert text.max_width == pytest.approx(200)

    def test_object_scale_applies_to_font_and_width(self, compositor):
        textbox = EditedText("t", "x", 0, 0, font_size=10, width=50, scale_x=2, scale_y=3)

        (text,) = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)

        assert text.size == pytest.approx(30)
        assert text.max_width == pytest.approx(100)

    def test_no_explicit_width_means_no_wrapping(self, compositor):
        textbox = EditedText("t", "free", 80, 80, font_size=32)

        (text,) = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)

        assert text.max_width is None

    def test_explicit_line_height(self, compositor):
        textbox = EditedText("t", "x", 0, 0, font_size=10, line_height=2.0)

        (text,) = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)

        assert text.line_height == pytest.approx(20)

    def test_unparseable_fill_is_black(self, compositor):
        textbox = EditedText("t", "x", 0, 0, font_size=10, fill="nope")

        (text,) = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)

        assert text.color == BLACK
        assert text.opacity == 1

    def test_fill_alpha_becomes_opacity(self, compositor):
        textbox = EditedText("t", "x", 0, 0, font_size=10, fill="rgba(0,0,255,0.4)")

        (text,) = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)

        assert text.color == pytest.approx((0, 0, 1))
        assert text.opacity == pytest.approx(0.4)

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_text_emits_nothing_not_even_a_mask(self, compositor, content):
        textbox = EditedText(
            "t", content, 0, 0, font_size=10, original_rect=OriginalRect(0, 0, 10, 10)
        )

        assert compositor.compose([textbox], SAME_SIZE, PDF_SIZE) == []


# =============================================================================
# Shapes
# =============================================================================

class TestShapes:

    def test_rectangle_geometry_and_colors(self, compositor):
        shape = Shape(
            "r", left=140, top=160, width=180, height=120,
            fill="rgba(100,116,139,0.15)", stroke="#334155", stroke_width=2,
        )

        (op,) = compositor.compose([shape], HALF_SIZE, PDF_SIZE)

        assert isinstance(op, RectOp)
        assert op.x == pytest.approx(280)
        assert op.y == pytest.approx(792 - 320 - 240)
        assert op.width == pytest.approx(360)
        assert op.height == pytest.approx(240)
        assert op.fill == pytest.approx((100 / 255, 116 / 255, 139 / 255))
        assert op.fill_opacity == pytest.approx(0.15)
        assert op.stroke == pytest.approx((0x33 / 255, 0x41 / 255, 0x55 / 255))
        assert op.stroke_width == pytest.approx(4)

    def test_unparseable_colors_mean_no_fill_no_stroke(self, compositor):
        shape = Shape("r", 0, 0, 10, 10, fill="bogus", stroke=None, stroke_width=1)

        (op,) = compositor.compose([shape], SAME_SIZE, PDF_SIZE)

        assert op.fill is None
        assert op.stroke is None

    @pytest.mark.parametrize(
        "width,height,scale_x,scale_y",
        [(0, 10, 1, 1), (10, 0, 1, 1), (10, 10, 0, 1), (10, 10, 1, -1)],
    )
    def test_degenerate_rectangles_are_skipped(self, compositor, width, height, scale_x, scale_y):
        shape = Shape("r", 0, 0, width, height, fill="#000", scale_x=scale_x, scale_y=scale_y)

        assert compositor.compose([shape], SAME_SIZE, PDF_SIZE) == []

    def test_scaled_rectangle(self, compositor):
        shape = Shape("r", 0, 0, 10, 20, fill="#000", scale_x=3, scale_y=0.5)

        (op,) = compositor.compose([shape], SAME_SIZE, PDF_SIZE)

        assert (op.width, op.height) == pytest.approx((30, 10))


# =============================================================================
# Whole canvas
# =============================================================================

def test_untouched_canvas_exports_nothing(compositor, manager):
    assert compositor.compose(manager.objects, SAME_SIZE, PDF_SIZE) == []


def test_markers_and_hidden_objects_are_never_exported(compositor, hello_box):
    hidden = Shape("r", 0, 0, 10, 10, fill="#000", visible=False)
    objects = [LineMarker(hello_box), hidden]

    assert compositor.compose(objects, SAME_SIZE, PDF_SIZE) == []


def test_ops_follow_z_order(compositor):
    shape = Shape("r", 0, 0, 10, 10, fill="#000")
    textbox = EditedText("t", "on top", 0, 0, font_size=10)

    ops = compositor.compose([shape, textbox], SAME_SIZE, PDF_SIZE)

    assert [op.source_id for op in ops] == ["r", "t"]


def test_custom_padding_ratio():
    compositor = EditCompositor(mask_padding_ratio=0.5)
    textbox = EditedText("t", "x", 0, 0, font_size=10, original_rect=OriginalRect(10, 10, 10, 10))

    mask = compositor.compose([textbox], SAME_SIZE, PDF_SIZE)[0]

    assert mask.width == pytest.approx(20)
