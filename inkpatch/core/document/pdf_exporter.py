import logging
from typing import List, Optional, Sequence

import fitz  # PyMuPDF
from PyQt5.QtCore import QObject, pyqtSignal

from ..errors import ExportError
from .compositor import DrawOp, MaskRect, RectOp, TextOp, WHITE

logger = logging.getLogger(__name__)

DEFAULT_FONT = "helv"


def wrap_text(
    text: str, fontsize: float, max_width: Optional[float], fontname: str = DEFAULT_FONT
) -> List[str]:
    """
    Split text into lines for drawing.

    Explicit newlines always break. With a max width, words are packed
    greedily; a single word wider than the limit keeps its own line.
    """
    paragraphs = text.splitlines() or [text]
    if not max_width:
        return paragraphs

    lines: List[str] = []
    for paragraph in paragraphs:
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            width = fitz.get_text_length(candidate, fontname=fontname, fontsize=fontsize)
            if current and width > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


class PDFExporter(QObject):
    """Writes draw operations onto page 1 of a PDF and re-serializes it."""

    # Emitted as operations are applied
    progress_signal = pyqtSignal(int, int)  # current, total

    def __init__(self, fontname: str = DEFAULT_FONT):
        super().__init__()
        self.fontname = fontname

    def export(self, source: bytes, ops: Sequence[DrawOp]) -> bytes:
        """
        Apply operations to page 1.

        Args:
            source: Original document bytes
            ops: Draw operations in PDF user space, in drawing order

        Returns:
            The full re-serialized document

        Raises:
            ExportError: If the document cannot be opened, drawn on or saved
        """
        try:
            doc = fitz.open(stream=bytes(source), filetype="pdf")
        except Exception as e:
            logger.error("Failed to open PDF for export: %s", e)
            raise ExportError(f"Unable to open PDF for export: {e}") from e

        try:
            if doc.page_count == 0:
                raise ExportError("PDF has no pages")

            page = doc[0]
            # Displayed page, y up -> displayed page, y down -> unrotated drawing space
            to_page = (
                fitz.Matrix(1, 0, 0, -1, 0, page.rect.height) * page.derotation_matrix
            )
            total = len(ops)

            for index, op in enumerate(ops):
                self.progress_signal.emit(index, total)
                self._apply(page, op, to_page)
            self.progress_signal.emit(total, total)

            return doc.tobytes(garbage=4, deflate=True)
        except ExportError:
            raise
        except Exception as e:
            logger.exception("Export failed")
            raise ExportError(f"Failed to export PDF: {e}") from e
        finally:
            doc.close()

    def _apply(self, page: fitz.Page, op: DrawOp, to_page: fitz.Matrix) -> None:
        if isinstance(op, MaskRect):
            rect = fitz.Rect(op.x, op.y, op.x + op.width, op.y + op.height) * to_page
            page.draw_rect(rect, color=None, fill=WHITE, width=0, fill_opacity=1)

        elif isinstance(op, RectOp):
            if op.fill is None and op.stroke is None:
                logger.debug("Rectangle %s has neither fill nor stroke", op.source_id)
                return
            rect = fitz.Rect(op.x, op.y, op.x + op.width, op.y + op.height) * to_page
            page.draw_rect(
                rect,
                color=op.stroke,
                fill=op.fill,
                width=op.stroke_width if op.stroke is not None else 0,
                fill_opacity=op.fill_opacity,
                stroke_opacity=op.stroke_opacity,
            )

        elif isinstance(op, TextOp):
            lines = wrap_text(op.text, op.size, op.max_width, self.fontname)
            for index, line in enumerate(lines):
                if not line:
                    continue
                baseline = fitz.Point(op.x, op.y - index * op.line_height) * to_page
                page.insert_text(
                    baseline,
                    line,
                    fontsize=op.size,
                    fontname=self.fontname,
                    rotate=page.rotation,
                    color=op.color,
                    fill_opacity=op.opacity,
                    stroke_opacity=op.opacity,
                )
