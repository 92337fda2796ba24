"""
Page decoding, text-run clustering and coordinate mapping.
"""

from . import coordinates
from .clusterer import TextRunClusterer
from .models import ClusterResult, DecodedPage, Line, LineBox, TextRun
from .rasterizer import DEFAULT_RENDER_SCALE, PageRasterizer

__all__ = [
    "PageRasterizer",
    "DEFAULT_RENDER_SCALE",
    "TextRunClusterer",
    "TextRun",
    "DecodedPage",
    "Line",
    "LineBox",
    "ClusterResult",
    "coordinates",
]
