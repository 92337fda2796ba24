"""
Turns the final canvas object list into page-1 draw operations.

All operations are expressed in PDF user space (origin bottom-left). Bad
colours, degenerate shapes and empty text are skipped, so any object list
yields a valid (possibly empty) operation list.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..canvas.models import CanvasObject, EditedText, LineMarker, Shape, ShapeKind
from ..page.coordinates import Size, canvas_rect_to_pdf
from .colors import parse_color

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

WHITE: RGB = (1.0, 1.0, 1.0)
BLACK: RGB = (0.0, 0.0, 0.0)

DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_MASK_PADDING_RATIO = 0.12
MIN_MASK_PADDING = 1.0


# ==============================================================================
# Draw Operations
# ==============================================================================


@dataclass(frozen=True)
class MaskRect:
    """Opaque white rectangle hiding original glyphs."""

    x: float
    y: float
    width: float
    height: float
    source_id: Optional[str] = None


@dataclass(frozen=True)
class TextOp:
    """Text whose first baseline starts at (x, y)."""

    text: str
    x: float
    y: float
    size: float
    line_height: float
    color: RGB = BLACK
    opacity: float = 1.0
    max_width: Optional[float] = None
    source_id: Optional[str] = None


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[RGB] = None
    fill_opacity: float = 1.0
    stroke: Optional[RGB] = None
    stroke_opacity: float = 1.0
    stroke_width: float = 0.0
    source_id: Optional[str] = None


DrawOp = Union[MaskRect, TextOp, RectOp]


# ==============================================================================
# Compositor
# ==============================================================================


class EditCompositor:
    """Maps canvas objects to draw operations for the PDF writer."""

    def __init__(
        self,
        line_height: float = DEFAULT_LINE_HEIGHT,
        mask_padding_ratio: float = DEFAULT_MASK_PADDING_RATIO,
    ):
        self.line_height = line_height
        self.mask_padding_ratio = mask_padding_ratio

    def compose(
        self,
        objects: Sequence[CanvasObject],
        canvas_size: Size,
        pdf_size: Size,
    ) -> List[DrawOp]:
        """
        Build draw operations for objects in canvas z-order.

        Args:
            objects: Canvas objects, bottom to top
            canvas_size: (width, height) of the canvas in pixels
            pdf_size: (width, height) of page 1 in points

        Returns:
            Operations in drawing order
        """
        ops: List[DrawOp] = []
        for obj in objects:
            if not obj.visible or isinstance(obj, LineMarker):
                continue
            if isinstance(obj, EditedText):
                ops.extend(self._text_ops(obj, canvas_size, pdf_size))
            elif isinstance(obj, Shape):
                op = self._shape_op(obj, canvas_size, pdf_size)
                if op is not None:
                    ops.append(op)
        return ops

    def _text_ops(
        self, textbox: EditedText, canvas_size: Size, pdf_size: Size
    ) -> List[DrawOp]:
        text = textbox.text or ""
        if not text.strip():
            logger.debug("Skipping empty text box %s", textbox.id)
            return []

        sx = pdf_size[0] / canvas_size[0]
        sy = pdf_size[1] / canvas_size[1]
        pdf_h = pdf_size[1]

        ops: List[DrawOp] = []

        # Mask first so the replacement text lands on top
        original = textbox.original_rect
        if original is not None:
            padding = max(MIN_MASK_PADDING, original.height * self.mask_padding_ratio)
            mask = canvas_rect_to_pdf(
                max(0.0, original.left - padding),
                max(0.0, original.top - padding),
                original.width + padding * 2,
                original.height + padding * 2,
                canvas_size,
                pdf_size,
            )
            ops.append(
                MaskRect(
                    x=mask.x0,
                    y=mask.y0,
                    width=mask.width,
                    height=mask.height,
                    source_id=textbox.id,
                )
            )

        font_size_pdf = textbox.font_size * textbox.scale_y * sy
        max_width = textbox.width * textbox.scale_x * sx
        color = parse_color(textbox.fill)
        if color is None and textbox.fill:
            logger.debug("Unparseable text colour %r, using black", textbox.fill)

        ops.append(
            TextOp(
                text=text,
                x=textbox.left * sx,
                y=pdf_h - textbox.top * sy - font_size_pdf,
                size=font_size_pdf,
                line_height=(textbox.line_height or self.line_height) * font_size_pdf,
                color=color.rgb if color else BLACK,
                opacity=color.alpha if color else 1.0,
                max_width=max_width or None,
                source_id=textbox.id,
            )
        )
        return ops

    def _shape_op(
        self, shape: Shape, canvas_size: Size, pdf_size: Size
    ) -> Optional[RectOp]:
        if shape.kind != ShapeKind.RECTANGLE:
            return None

        width = shape.scaled_width
        height = shape.scaled_height
        if width <= 0 or height <= 0:
            logger.debug("Skipping degenerate shape %s", shape.id)
            return None

        rect = canvas_rect_to_pdf(
            shape.left, shape.top, width, height, canvas_size, pdf_size
        )
        fill = parse_color(shape.fill)
        stroke = parse_color(shape.stroke)
        sx = pdf_size[0] / canvas_size[0]

        return RectOp(
            x=rect.x0,
            y=rect.y0,
            width=rect.width,
            height=rect.height,
            fill=fill.rgb if fill else None,
            fill_opacity=fill.alpha if fill else 1.0,
            stroke=stroke.rgb if stroke else None,
            stroke_opacity=stroke.alpha if stroke else 1.0,
            stroke_width=shape.stroke_width * sx,
            source_id=shape.id,
        )
