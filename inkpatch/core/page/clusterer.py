"""
Groups text runs into editable horizontal lines.

Single pass over runs in document order. A run joins the first existing line
whose top lies within tolerance of its own; otherwise it opens a new line.
Grouping therefore depends on run order, and reordering runs changes output.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import fitz

from .models import ClusterResult, DecodedPage, Line, LineBox, TextRun

logger = logging.getLogger(__name__)

DEFAULT_FONT_HEIGHT = 12.0
MIN_FONT_HEIGHT = 0.5
MIN_RUN_HEIGHT = 0.5
CHAR_WIDTH_RATIO = 0.55  # Average glyph advance / font height
REESTIMATE_WIDTH_RATIO = 0.5
REESTIMATE_MIN_FONT = 10.0
COLLAPSED_WIDTH = 1.0

MIN_TOLERANCE = 3.0
TOLERANCE_RATIO = 0.6

# Minimum hit target for pointer interaction
MIN_BOX_WIDTH = 6.0
MIN_BOX_HEIGHT = 12.0
MIN_BOX_FONT_SIZE = 10.0


@dataclass
class _PlacedRun:
    """A run resolved to raster pixels."""

    index: int
    text: str
    left: float
    top: float
    width: float
    height: float
    font_size: float


class TextRunClusterer:
    """Builds line boxes in raster space from one page decode."""

    def cluster_page(self, page: DecodedPage, merge_lines: bool = True) -> ClusterResult:
        """Cluster the runs of a decoded page."""
        return self.cluster(
            page.text_runs,
            page.view_transform,
            page.raster_width,
            page.viewport_width,
            merge_lines=merge_lines,
        )

    def cluster(
        self,
        runs: List[TextRun],
        view_transform: fitz.Matrix,
        raster_width: float,
        viewport_width: float,
        merge_lines: bool = True,
    ) -> ClusterResult:
        """
        Group runs into lines.

        Args:
            runs: Text runs in decoder order
            view_transform: PDF user space -> viewport pixels
            raster_width: Width of the raster actually produced
            viewport_width: Unrounded page width at the render scale
            merge_lines: False to emit one box per run without merging

        Returns:
            ClusterResult with padded boxes in raster pixels
        """
        scale_factor = raster_width / viewport_width if viewport_width > 0 else 1.0
        view_scale = math.hypot(view_transform.a, view_transform.b) or 1.0

        placed = [
            p
            for p in (
                self._place(index, run, view_transform, view_scale, scale_factor)
                for index, run in enumerate(runs)
            )
            if p is not None
        ]

        if not merge_lines:
            return ClusterResult(
                boxes=[self._run_box(p) for p in placed],
                run_count=len(runs),
            )

        lines = self._fold(placed)
        if not lines and runs:
            logger.debug("No lines from %d runs, using per-run boxes", len(runs))
            return ClusterResult(
                boxes=[self._run_box(p) for p in placed],
                line_count=0,
                run_count=len(runs),
                fallback_used=True,
            )

        return ClusterResult(
            boxes=[self._line_box(line) for line in lines],
            line_count=len(lines),
            run_count=len(runs),
        )

    def _place(
        self,
        index: int,
        run: TextRun,
        view_transform: fitz.Matrix,
        view_scale: float,
        scale_factor: float,
    ) -> Optional[_PlacedRun]:
        """Resolve a run's geometry, or None if it should be skipped."""
        text = run.text or ""
        if not text.strip() or run.glyph_matrix is None:
            return None

        tx = run.glyph_matrix * view_transform

        declared_height = (
            run.declared_height * view_scale
            if run.declared_height and run.declared_height > 0
            else None
        )
        declared_width = (
            run.declared_width * view_scale
            if run.declared_width and run.declared_width > 0
            else None
        )

        font_height = math.hypot(tx.a, tx.b)
        if font_height < MIN_FONT_HEIGHT:
            font_height = declared_height or DEFAULT_FONT_HEIGHT

        raw_width = declared_width or len(text) * font_height * CHAR_WIDTH_RATIO
        raw_height = declared_height or font_height

        advance = raw_width * scale_factor
        ascent = raw_height * scale_factor

        if advance <= COLLAPSED_WIDTH:
            advance = (
                len(text)
                * max(font_height, REESTIMATE_MIN_FONT)
                * REESTIMATE_WIDTH_RATIO
                * scale_factor
            )

        if ascent <= MIN_RUN_HEIGHT:
            return None

        left, top, width, height = self._run_rect(tx, advance, ascent, scale_factor)
        return _PlacedRun(
            index=index,
            text=text.strip(),
            left=left,
            top=top,
            width=width,
            height=height,
            font_size=font_height * scale_factor,
        )

    @staticmethod
    def _run_rect(
        tx: fitz.Matrix, advance: float, ascent: float, scale_factor: float
    ) -> Tuple[float, float, float, float]:
        """
        Axis-aligned raster rect of a run's glyph quad.

        The quad starts at the baseline origin, runs ``advance`` along the
        text direction and ``ascent`` towards the glyph tops. Horizontal
        text gives left = origin x and top = baseline - ascent.
        """
        ox = tx.e * scale_factor
        oy = tx.f * scale_factor

        run_norm = math.hypot(tx.a, tx.b)
        up_norm = math.hypot(tx.c, tx.d)
        if run_norm < MIN_FONT_HEIGHT or up_norm < MIN_FONT_HEIGHT:
            # Degenerate transform, assume upright text
            return ox, oy - ascent, advance, ascent

        dx, dy = tx.a / run_norm * advance, tx.b / run_norm * advance
        # Glyph y grows upward; in raster space that is the (c, d) column
        ux, uy = tx.c / up_norm * ascent, tx.d / up_norm * ascent

        xs = (ox, ox + dx, ox + ux, ox + dx + ux)
        ys = (oy, oy + dy, oy + uy, oy + dy + uy)
        return min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)

    @staticmethod
    def _fold(placed: List[_PlacedRun]) -> List[Line]:
        """First-fit merge of runs into lines, scanning lines in creation order."""
        lines: List[Line] = []
        for run in placed:
            tolerance = max(MIN_TOLERANCE, run.height * TOLERANCE_RATIO)

            line = None
            for candidate in lines:
                if abs(candidate.top - run.top) < tolerance:
                    line = candidate
                    break

            if line is None:
                lines.append(
                    Line(
                        id=f"line-{run.index}-{round(run.top)}",
                        text=run.text,
                        left=run.left,
                        top=run.top,
                        right=run.left + run.width,
                        height=run.height,
                        font_size=run.font_size,
                    )
                )
                continue

            line.absorb(run.text, run.left, run.width, run.height, run.font_size)
        return lines

    @staticmethod
    def _line_box(line: Line) -> LineBox:
        """Pad a line to the minimum hit target, centred vertically."""
        width = max(MIN_BOX_WIDTH, line.width)
        height = max(MIN_BOX_HEIGHT, line.height)
        return LineBox(
            id=line.id,
            text=line.text,
            left=line.left,
            top=line.top - (height - line.height) / 2,
            width=width,
            height=height,
            font_size=max(MIN_BOX_FONT_SIZE, line.font_size),
        )

    @staticmethod
    def _run_box(run: _PlacedRun) -> LineBox:
        return LineBox(
            id=f"item-{run.index}-{round(run.left)}-{round(run.top)}",
            text=run.text,
            left=run.left,
            top=run.top,
            width=max(MIN_BOX_WIDTH, run.width),
            height=max(MIN_BOX_HEIGHT, run.height),
            font_size=max(MIN_BOX_FONT_SIZE, run.font_size),
        )
