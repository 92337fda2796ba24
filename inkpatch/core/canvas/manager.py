"""
Canvas object list for one editing session.
"""
import itertools
import logging
from typing import Dict, List, Optional

from ..page.models import LineBox
from .models import (
    CanvasObject,
    EditedText,
    LineMarker,
    OriginalRect,
    RegionState,
    Shape,
    ShapeKind,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "Edit text"
EDIT_FILL = "#111827"


class CanvasObjectManager:
    """Owns the canvas objects in z-order (last is topmost)."""

    def __init__(self):
        self.objects: List[CanvasObject] = []
        self.line_boxes: List[LineBox] = []
        self.line_edits: Dict[str, EditedText] = {}
        self.selected: Optional[CanvasObject] = None
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def load_lines(self, boxes: List[LineBox]) -> None:
        """
        Replace everything with one marker per detected line.

        Args:
            boxes: Line boxes already projected into canvas space
        """
        self.clear()
        self.line_boxes = list(boxes)
        self.objects.extend(LineMarker(box) for box in self.line_boxes)

    def clear(self) -> None:
        self.objects.clear()
        self.line_boxes = []
        self.line_edits.clear()
        self.selected = None

    def add_object(self, obj: CanvasObject) -> CanvasObject:
        self.objects.append(obj)
        self.selected = obj
        return obj

    def remove_object(self, obj: CanvasObject) -> bool:
        """
        Remove an object.

        Returns:
            True if the object was found and removed
        """
        if obj not in self.objects:
            return False
        self.objects.remove(obj)
        if isinstance(obj, EditedText) and obj.line_id:
            self.line_edits.pop(obj.line_id, None)
        if self.selected is obj:
            self.selected = None
        return True

    def add_text_box(self, left: float = 80, top: float = 80) -> EditedText:
        """Add a free-standing text box."""
        textbox = EditedText(
            id=self._next_id("text"),
            text=PLACEHOLDER_TEXT,
            left=left,
            top=top,
            font_size=32,
            fill="#1f2937",
            state=RegionState.EDITING,
        )
        return self.add_object(textbox)

    def add_rectangle(self, left: float = 140, top: float = 160) -> Shape:
        rect = Shape(
            id=self._next_id("rect"),
            left=left,
            top=top,
            width=180,
            height=120,
            kind=ShapeKind.RECTANGLE,
            fill="rgba(100,116,139,0.15)",
            stroke="#334155",
            stroke_width=2,
        )
        return self.add_object(rect)

    @property
    def markers(self) -> List[LineMarker]:
        return [obj for obj in self.objects if isinstance(obj, LineMarker)]

    def get_line_box(self, line_id: str) -> Optional[LineBox]:
        for box in self.line_boxes:
            if box.id == line_id:
                return box
        return None

    def object_at(self, x: float, y: float) -> Optional[CanvasObject]:
        """Topmost visible object at a canvas point."""
        for obj in reversed(self.objects):
            if obj.visible and obj.contains_point(x, y):
                return obj
        return None

    def line_at(self, x: float, y: float) -> Optional[LineBox]:
        """First detected line box containing a canvas point."""
        for box in self.line_boxes:
            if box.contains_point(x, y):
                return box
        return None

    def promote(self, line_id: str) -> Optional[EditedText]:
        """
        Turn a detected line into an editable text box.

        The marker is replaced by a text box seeded from the line that keeps
        the line's rectangle as its masking footprint. Promoting a line twice
        returns the existing box.

        Args:
            line_id: Id of the detected line

        Returns:
            The text box in EDITING state, or None for an unknown id
        """
        existing = self.line_edits.get(line_id)
        if existing is not None:
            existing.state = RegionState.EDITING
            self.selected = existing
            return existing

        box = self.get_line_box(line_id)
        if box is None:
            logger.debug("No detected line with id %s", line_id)
            return None

        textbox = EditedText(
            id=self._next_id("edit"),
            text=box.text.strip() or PLACEHOLDER_TEXT,
            left=box.left,
            top=box.top,
            width=box.width,
            font_size=box.font_size,
            fill=EDIT_FILL,
            line_id=box.id,
            original_rect=OriginalRect(box.left, box.top, box.width, box.height),
            state=RegionState.EDITING,
        )
        self.line_edits[line_id] = textbox

        for marker in self.markers:
            if marker.id == line_id:
                self.objects.remove(marker)
                break

        return self.add_object(textbox)

    def handle_pointer_down(self, x: float, y: float) -> Optional[EditedText]:
        """
        Promote whatever detected line lies under a canvas point.

        Marker hits win; otherwise the line boxes are scanned so clicks on an
        already-promoted region reopen its text box.
        """
        target = self.object_at(x, y)
        if isinstance(target, LineMarker):
            return self.promote(target.id)

        box = self.line_at(x, y)
        if box is None:
            return None
        return self.promote(box.id)

    def commit_edit(self, textbox: EditedText, text: str) -> None:
        textbox.text = text
        textbox.state = RegionState.EDITED

    def move(self, obj: CanvasObject, left: float, top: float) -> None:
        if isinstance(obj, LineMarker):
            raise ValueError("Detected line markers are locked in place")
        obj.left = left
        obj.top = top

    def resize(self, obj: CanvasObject, scale_x: float, scale_y: float) -> None:
        if isinstance(obj, LineMarker):
            raise ValueError("Detected line markers cannot be resized")
        obj.scale_x = scale_x
        obj.scale_y = scale_y

    def exportable_objects(self) -> List[CanvasObject]:
        """Visible objects in z-order, markers excluded."""
        return [
            obj
            for obj in self.objects
            if obj.visible and not isinstance(obj, LineMarker)
        ]

    def __len__(self) -> int:
        return len(self.objects)
