from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..page.models import LineBox

# ==============================================================================
# Types
# ==============================================================================


class RegionState(Enum):
    """Lifecycle of a detected text region."""

    DETECTED = "detected"  # Read-only highlight, never exported
    EDITING = "editing"  # Promoted on first pointer interaction
    EDITED = "edited"  # Text committed


class ShapeKind(Enum):
    RECTANGLE = "rectangle"


# ==============================================================================
# Canvas Objects
# ==============================================================================


@dataclass(frozen=True)
class OriginalRect:
    """Canvas-space footprint of the glyphs a text edit replaces."""

    left: float
    top: float
    width: float
    height: float


@dataclass
class EditedText:
    """A replacement or free-standing text box."""

    id: str
    text: str
    left: float
    top: float
    font_size: float
    width: float = 0.0  # 0 means no explicit width, no wrapping
    fill: Optional[str] = "#111827"
    line_height: Optional[float] = None  # Multiple of the font size
    scale_x: float = 1.0
    scale_y: float = 1.0
    visible: bool = True

    # Set when the box replaced a detected line
    line_id: Optional[str] = None
    original_rect: Optional[OriginalRect] = None
    state: RegionState = RegionState.EDITED

    @property
    def replaces_line(self) -> bool:
        return self.original_rect is not None

    def contains_point(self, x: float, y: float) -> bool:
        width = self.width * self.scale_x
        height = self.font_size * self.scale_y * (self.line_height or 1.2)
        return self.left <= x <= self.left + width and self.top <= y <= self.top + height


@dataclass
class Shape:
    """A user-drawn shape."""

    id: str
    left: float
    top: float
    width: float
    height: float
    kind: ShapeKind = ShapeKind.RECTANGLE
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    visible: bool = True

    @property
    def scaled_width(self) -> float:
        return self.width * self.scale_x

    @property
    def scaled_height(self) -> float:
        return self.height * self.scale_y

    def contains_point(self, x: float, y: float) -> bool:
        return (
            self.left <= x <= self.left + self.scaled_width
            and self.top <= y <= self.top + self.scaled_height
        )


@dataclass
class LineMarker:
    """Highlight over a detected line that has not been edited yet."""

    box: LineBox  # Canvas space
    visible: bool = True
    state: RegionState = field(default=RegionState.DETECTED, init=False)

    @property
    def id(self) -> str:
        return self.box.id

    def contains_point(self, x: float, y: float) -> bool:
        return self.box.contains_point(x, y)


CanvasObject = Union[EditedText, Shape, LineMarker]
