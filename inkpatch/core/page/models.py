from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import fitz
from PyQt5.QtGui import QImage

# ==============================================================================
# Decoder Output
# ==============================================================================


@dataclass(frozen=True)
class TextRun:
    """One glyph-positioning run from the page content stream."""

    text: str
    glyph_matrix: Optional[fitz.Matrix]  # PDF user space, origin bottom-left
    declared_width: Optional[float] = None  # PDF points
    declared_height: Optional[float] = None  # PDF points


@dataclass
class DecodedPage:
    """Raster preview and text runs of page 1 at a fixed render scale."""

    raster_width: int
    raster_height: int
    raster_png: bytes
    view_transform: fitz.Matrix  # PDF user space -> raster pixels
    text_runs: List[TextRun] = field(default_factory=list)
    page_width: float = 0.0  # points
    page_height: float = 0.0  # points
    scale: float = 1.0

    # Set when the raster rendered but text extraction failed
    text_error: Optional[str] = None

    @property
    def viewport_width(self) -> float:
        """Unrounded page width at the render scale."""
        return self.page_width * self.scale

    @property
    def viewport_height(self) -> float:
        return self.page_height * self.scale

    @property
    def raster_size(self) -> Tuple[int, int]:
        return self.raster_width, self.raster_height

    @property
    def pdf_size(self) -> Tuple[float, float]:
        return self.page_width, self.page_height

    def to_qimage(self) -> QImage:
        """Decode the raster for display in a Qt host."""
        return QImage.fromData(self.raster_png, "PNG")


# ==============================================================================
# Clusterer Output
# ==============================================================================


@dataclass
class Line:
    """
    Runs believed to form one visual text line, in raster pixels.

    Mutated while later runs are folded in; treat as immutable afterwards.
    """

    id: str
    text: str
    left: float
    top: float
    right: float
    height: float
    font_size: float

    @property
    def width(self) -> float:
        return self.right - self.left

    def absorb(self, text: str, left: float, width: float, height: float,
               font_size: float) -> None:
        """Fold one more run into this line."""
        self.text = f"{self.text} {text}".strip()
        self.left = min(self.left, left)
        self.right = max(self.right, left + width)
        self.height = max(self.height, height)
        self.font_size = max(self.font_size, font_size)


@dataclass(frozen=True)
class LineBox:
    """Padded, hit-testable rectangle of a detected line (or single run)."""

    id: str
    text: str
    left: float
    top: float
    width: float
    height: float
    font_size: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains_point(self, x: float, y: float) -> bool:
        """Check if a point is within the box, edges included."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def scaled(self, k: float) -> "LineBox":
        """Project every coordinate by a uniform factor."""
        return LineBox(
            id=self.id,
            text=self.text,
            left=self.left * k,
            top=self.top * k,
            width=self.width * k,
            height=self.height * k,
            font_size=self.font_size * k,
        )


@dataclass
class ClusterResult:
    """Boxes produced from one page decode."""

    boxes: List[LineBox] = field(default_factory=list)
    line_count: int = 0
    run_count: int = 0

    # True when line merging produced nothing and per-run boxes were used
    fallback_used: bool = False

    def project(self, k: float) -> List[LineBox]:
        """Boxes in canvas space for a raster-to-canvas factor ``k``."""
        return [box.scaled(k) for box in self.boxes]

    def __len__(self) -> int:
        return len(self.boxes)
