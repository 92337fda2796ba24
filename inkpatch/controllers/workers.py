"""
Background workers for decoding and exporting without freezing the UI.

Each worker carries the request token of the session that started it and
echoes it back with its result, so stale results can be told apart.
"""
import logging
import threading
from typing import List

from PyQt5.QtCore import QThread, pyqtSignal

from ..core.document.compositor import DrawOp
from ..core.document.pdf_exporter import DEFAULT_FONT, PDFExporter
from ..core.errors import DecodeError, ExportError
from ..core.page.clusterer import TextRunClusterer
from ..core.page.rasterizer import DEFAULT_RENDER_SCALE, PageRasterizer

logger = logging.getLogger(__name__)

# MuPDF keeps one context for the process; workers touch documents one at a time
_document_lock = threading.Lock()


class DecodeWorker(QThread):
    """Decodes page 1 and clusters its text runs."""

    # Signals
    decoded = pyqtSignal(int, object, object)  # token, DecodedPage, ClusterResult or None
    failed = pyqtSignal(int, str)  # token, message

    def __init__(self, token: int, source: bytes, scale: float = DEFAULT_RENDER_SCALE,
                 parent=None):
        super().__init__(parent)
        self.token = token
        self.source = source
        self.scale = scale
        self._cancelled = False

    def cancel(self):
        """Advisory; the consumer still checks the token."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def run(self):
        """Execute the decode."""
        if self._cancelled:
            return
        try:
            with _document_lock:
                page = PageRasterizer(self.scale).decode(self.source)
        except DecodeError as e:
            if not self._cancelled:
                self.failed.emit(self.token, e.message)
            return
        except Exception as e:
            logger.exception("Unexpected decode failure")
            if not self._cancelled:
                self.failed.emit(self.token, f"Unable to render PDF: {e}")
            return

        clusters = None
        if page.text_error is None:
            clusters = TextRunClusterer().cluster_page(page)

        if self._cancelled:
            logger.debug("Decode %d cancelled, dropping result", self.token)
            return
        self.decoded.emit(self.token, page, clusters)


class ExportWorker(QThread):
    """Applies draw operations to the source PDF."""

    # Signals
    exported = pyqtSignal(int, object)  # token, bytes
    failed = pyqtSignal(int, str)  # token, message
    progress = pyqtSignal(int, int)  # current, total operations

    def __init__(self, token: int, source: bytes, ops: List[DrawOp],
                 fontname: str = DEFAULT_FONT, parent=None):
        super().__init__(parent)
        self.token = token
        self.source = source
        self.ops = ops
        self.exporter = PDFExporter(fontname)

    def run(self):
        """Execute the export."""
        self.exporter.progress_signal.connect(self.progress)
        try:
            with _document_lock:
                data = self.exporter.export(self.source, self.ops)
        except ExportError as e:
            self.failed.emit(self.token, e.message)
            return
        except Exception as e:
            logger.exception("Unexpected export failure")
            self.failed.emit(self.token, f"Error during export: {e}")
            return
        self.exported.emit(self.token, data)
