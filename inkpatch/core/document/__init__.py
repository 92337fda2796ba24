"""
Composition of canvas edits and PDF export.
"""
from .colors import RGBA, parse_color
from .compositor import DrawOp, EditCompositor, MaskRect, RectOp, TextOp
from .pdf_exporter import PDFExporter, wrap_text

__all__ = [
    'EditCompositor',
    'DrawOp',
    'MaskRect',
    'TextOp',
    'RectOp',
    'PDFExporter',
    'wrap_text',
    'parse_color',
    'RGBA',
]
