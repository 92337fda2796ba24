"""
Controllers coordinating sessions and background work.
"""
from .editor_controller import EditorController
from .workers import DecodeWorker, ExportWorker

__all__ = ['EditorController', 'DecodeWorker', 'ExportWorker']
