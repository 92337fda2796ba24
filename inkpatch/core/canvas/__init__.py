"""
Interactive canvas objects and their lifecycle.
"""
from .manager import CanvasObjectManager
from .models import (
    CanvasObject,
    EditedText,
    LineMarker,
    OriginalRect,
    RegionState,
    Shape,
    ShapeKind,
)

__all__ = [
    'CanvasObjectManager',
    'CanvasObject',
    'EditedText',
    'Shape',
    'ShapeKind',
    'LineMarker',
    'OriginalRect',
    'RegionState',
]
