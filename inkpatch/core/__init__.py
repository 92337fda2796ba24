"""
Core pipeline: decode, cluster, edit, compose, export.
"""

from .canvas import CanvasObjectManager, EditedText, LineMarker, RegionState, Shape
from .document import EditCompositor, PDFExporter, parse_color
from .errors import DecodeError, DecodeErrorKind, ExportError, InkpatchError
from .page import (
    ClusterResult,
    DecodedPage,
    LineBox,
    PageRasterizer,
    TextRun,
    TextRunClusterer,
)
from .session import EditSession, SessionStatus

__all__ = [
    "PageRasterizer",
    "TextRunClusterer",
    "TextRun",
    "DecodedPage",
    "LineBox",
    "ClusterResult",
    "CanvasObjectManager",
    "EditedText",
    "Shape",
    "LineMarker",
    "RegionState",
    "EditCompositor",
    "PDFExporter",
    "parse_color",
    "EditSession",
    "SessionStatus",
    "InkpatchError",
    "DecodeError",
    "DecodeErrorKind",
    "ExportError",
]
