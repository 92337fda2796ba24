"""
Per-document editing context.

Everything that belongs to the active document lives on one EditSession and
is dropped with it when another document is loaded.
"""
import logging
from enum import Enum
from typing import List, Optional, Tuple

from ..config import EditorSettings
from .canvas.manager import CanvasObjectManager
from .canvas.models import EditedText, OriginalRect, Shape
from .document.compositor import DrawOp, EditCompositor
from .page.coordinates import canvas_height_for, canvas_scale
from .page.models import ClusterResult, DecodedPage, LineBox

logger = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No selectable text detected in this PDF."
NATIVE_PREVIEW_SUFFIX = "Showing native PDF preview instead."
NO_DETECTION_SUFFIX = "Auto text detection is unavailable for this PDF."


class SessionStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class EditSession:
    """State of one document from decode through export."""

    def __init__(
        self,
        token: int,
        source: Optional[bytes] = None,
        settings: Optional[EditorSettings] = None,
        canvas_width: Optional[int] = None,
    ):
        self.token = token
        self.source = source
        self.settings = settings or EditorSettings()

        self.status = SessionStatus.LOADING if source else SessionStatus.IDLE
        self.message: Optional[str] = None
        self.use_native_preview = False

        self.page: Optional[DecodedPage] = None
        self.clusters: Optional[ClusterResult] = None
        self.canvas = CanvasObjectManager()

        self.canvas_width = canvas_width or self.settings.canvas_width_for(None)
        self.canvas_height = self.settings.initial_canvas_height(self.canvas_width)

        self.text_item_count = 0
        self.line_count = 0
        self.box_count = 0

    def __repr__(self) -> str:
        return f"EditSession(token={self.token}, status={self.status.value})"

    @property
    def is_ready(self) -> bool:
        return self.status == SessionStatus.READY

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return self.canvas_width, self.canvas_height

    @property
    def pdf_size(self) -> Tuple[float, float]:
        if self.page is None:
            return 0.0, 0.0
        return self.page.pdf_size

    @property
    def scale(self) -> float:
        """Raster -> canvas factor ``k``."""
        if self.page is None:
            return 1.0
        return canvas_scale(self.canvas_width, self.page.raster_width)

    def apply_decoded(self, page: DecodedPage, clusters: Optional[ClusterResult]) -> None:
        """
        Install a decoded page and its detected lines.

        Args:
            page: Raster and runs of page 1
            clusters: Line boxes in raster space, None if text extraction failed
        """
        self.page = page
        self.canvas_height = canvas_height_for(page.raster_size, self.canvas_width)
        self.canvas.clear()
        self.status = SessionStatus.READY
        self.use_native_preview = False
        self.message = None

        if page.text_error is not None or clusters is None:
            self.clusters = None
            self.text_item_count = 0
            self.line_count = 0
            self.box_count = 0
            reason = page.text_error or "Text extraction failed"
            self.message = f"{reason}. {NO_DETECTION_SUFFIX}"
            return

        self.clusters = clusters
        self.canvas.load_lines(self._projected_boxes())
        self.text_item_count = clusters.run_count
        self.line_count = clusters.line_count
        self.box_count = len(clusters)

        if not self.line_count and not self.box_count:
            self.message = NO_TEXT_MESSAGE

    def apply_decode_failure(self, reason: str) -> None:
        """Terminal decode failure; the host shows the raw file instead."""
        self.page = None
        self.clusters = None
        self.canvas.clear()
        self.text_item_count = 0
        self.line_count = 0
        self.box_count = 0
        self.status = SessionStatus.ERROR
        self.use_native_preview = True
        self.message = f"{reason.rstrip('.')}. {NATIVE_PREVIEW_SUFFIX}"

    def _projected_boxes(self) -> List[LineBox]:
        if self.clusters is None:
            return []
        return self.clusters.project(self.scale)

    def resize_canvas(self, canvas_width: int) -> None:
        """
        Change the canvas width, keeping every object on the same page spot.

        Detected lines are re-projected from the raster-space cluster result;
        user objects are scaled by the width ratio.
        """
        if canvas_width <= 0:
            raise ValueError(f"Canvas width must be positive, got {canvas_width}")
        ratio = canvas_width / self.canvas_width
        self.canvas_width = canvas_width
        if self.page is not None:
            self.canvas_height = canvas_height_for(self.page.raster_size, canvas_width)
        else:
            self.canvas_height = self.settings.initial_canvas_height(canvas_width)

        boxes = self._projected_boxes()
        self.canvas.line_boxes = boxes
        by_id = {box.id: box for box in boxes}

        for obj in self.canvas.objects:
            if isinstance(obj, (EditedText, Shape)):
                obj.left *= ratio
                obj.top *= ratio
                obj.width *= ratio
                if isinstance(obj, Shape):
                    obj.height *= ratio
                    obj.stroke_width *= ratio
                else:
                    obj.font_size *= ratio
                    if obj.original_rect is not None:
                        box = by_id.get(obj.line_id)
                        obj.original_rect = (
                            OriginalRect(box.left, box.top, box.width, box.height)
                            if box is not None
                            else OriginalRect(
                                obj.original_rect.left * ratio,
                                obj.original_rect.top * ratio,
                                obj.original_rect.width * ratio,
                                obj.original_rect.height * ratio,
                            )
                        )
            elif obj.id in by_id:
                obj.box = by_id[obj.id]

    def compose(self, compositor: Optional[EditCompositor] = None) -> List[DrawOp]:
        """Draw operations for the current canvas."""
        if self.page is None:
            return []
        if compositor is None:
            compositor = EditCompositor(
                line_height=self.settings.text_line_height,
                mask_padding_ratio=self.settings.mask_padding_ratio,
            )
        return compositor.compose(
            self.canvas.exportable_objects(), self.canvas_size, self.pdf_size
        )
