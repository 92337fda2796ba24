"""
Page 1 rasterization and text-run extraction on top of PyMuPDF.
"""

import logging
import math
from typing import List

import fitz  # PyMuPDF

from ..errors import DecodeError, DecodeErrorKind
from .models import DecodedPage, TextRun

logger = logging.getLogger(__name__)

DEFAULT_RENDER_SCALE = 1.2


class PageRasterizer:
    """Decodes the first page of a PDF into a raster preview plus text runs."""

    def __init__(self, scale: float = DEFAULT_RENDER_SCALE):
        if scale <= 0:
            raise ValueError(f"Render scale must be positive, got {scale}")
        self.scale = scale

    def decode(self, source: bytes) -> DecodedPage:
        """
        Render page 1 and collect its text runs.

        Args:
            source: Raw PDF bytes

        Returns:
            DecodedPage with the raster, view transform and runs in document order

        Raises:
            DecodeError: CORRUPT if the bytes cannot be parsed or rendered,
                UNSUPPORTED if the document has no pages
        """
        if not source:
            raise DecodeError("No PDF data provided", DecodeErrorKind.CORRUPT)

        try:
            doc = fitz.open(stream=bytes(source), filetype="pdf")
        except Exception as e:
            logger.error("Failed to open PDF: %s", e)
            raise DecodeError(f"Unable to load PDF file: {e}", DecodeErrorKind.CORRUPT) from e

        try:
            if doc.page_count == 0:
                raise DecodeError("PDF has no pages", DecodeErrorKind.UNSUPPORTED)

            try:
                page = doc.load_page(0)
                # User space -> unrotated MuPDF space -> displayed page -> pixels
                view_transform = (
                    page.transformation_matrix
                    * page.rotation_matrix
                    * fitz.Matrix(self.scale, self.scale)
                )
                pix = page.get_pixmap(
                    matrix=fitz.Matrix(self.scale, self.scale), alpha=False
                )
                raster_png = pix.tobytes("png")
            except Exception as e:
                logger.error("Failed to render page 1: %s", e)
                raise DecodeError(
                    f"Unable to render PDF: {e}", DecodeErrorKind.CORRUPT
                ) from e

            decoded = DecodedPage(
                raster_width=pix.width,
                raster_height=pix.height,
                raster_png=raster_png,
                view_transform=view_transform,
                page_width=page.rect.width,
                page_height=page.rect.height,
                scale=self.scale,
            )

            # The raster is usable even if the text layer is not
            try:
                decoded.text_runs = self._extract_runs(page)
            except Exception as e:
                logger.warning("Text extraction failed on page 1: %s", e)
                decoded.text_error = f"Text extraction failed: {e}"

            logger.debug(
                "Decoded page 1: raster %dx%d, %d runs",
                decoded.raster_width,
                decoded.raster_height,
                len(decoded.text_runs),
            )
            return decoded
        finally:
            doc.close()

    def _extract_runs(self, page: fitz.Page) -> List[TextRun]:
        """Build one TextRun per text span, in content order."""
        flags = fitz.TEXT_PRESERVE_WHITESPACE | fitz.TEXT_PRESERVE_LIGATURES
        text_dict = page.get_text("dict", flags=flags)

        # Unrotated MuPDF space (top-left origin) -> PDF user space
        to_user = ~page.transformation_matrix

        runs: List[TextRun] = []
        for block in text_dict.get("blocks", []):
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                dx, dy = line.get("dir", (1, 0))
                for span in line.get("spans", []):
                    runs.append(self._span_to_run(span, dx, dy, to_user))
        return runs

    @staticmethod
    def _span_to_run(span: dict, dx: float, dy: float, to_user: fitz.Matrix) -> TextRun:
        """Express a span as a glyph matrix in PDF user space."""
        size = float(span.get("size", 0.0))
        ox, oy = span.get("origin", (0.0, 0.0))

        origin = fitz.Point(ox, oy) * to_user
        tip = fitz.Point(ox + dx, oy + dy) * to_user
        ux, uy = tip.x - origin.x, tip.y - origin.y
        norm = math.hypot(ux, uy) or 1.0
        ux, uy = ux / norm, uy / norm

        x0, _, x1, _ = span.get("bbox", (0, 0, 0, 0))
        return TextRun(
            text=span.get("text", ""),
            glyph_matrix=fitz.Matrix(
                size * ux, size * uy, -size * uy, size * ux, origin.x, origin.y
            ),
            declared_width=abs(x1 - x0),
            declared_height=size,
        )
