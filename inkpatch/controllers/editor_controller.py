"""
Controller that owns the active editing session.
"""
import itertools
import logging
from pathlib import Path
from typing import Optional, Set, Union

from PyQt5.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from ..config import EditorSettings
from ..core.document.pdf_exporter import PDFExporter
from ..core.page.clusterer import TextRunClusterer
from ..core.page.models import ClusterResult, DecodedPage
from ..core.session import EditSession, SessionStatus
from .workers import DecodeWorker, ExportWorker

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, str, Path, None]


class EditorController(QObject):
    """
    Loads documents, routes decode results and runs exports.

    Every load gets a fresh request token and a fresh EditSession. Worker
    results carrying any other token are dropped, so a slow decode of an
    earlier document cannot overwrite the current one.
    """

    # Signals
    session_changed = pyqtSignal(object)  # EditSession
    export_finished = pyqtSignal(object)  # bytes
    export_failed = pyqtSignal(str)  # message

    def __init__(
        self,
        settings: Optional[EditorSettings] = None,
        host_width: Optional[float] = None,
        run_synchronously: bool = False,
        parent=None,
    ):
        super().__init__(parent)
        self.settings = settings or EditorSettings()
        self.host_width = host_width
        self.run_synchronously = run_synchronously

        self._tokens = itertools.count(1)
        self.session: Optional[EditSession] = None
        self._decode_worker: Optional[DecodeWorker] = None
        self._export_worker: Optional[ExportWorker] = None
        # Started threads stay referenced until they finish, even once retired
        self._running: Set[QThread] = set()

    def next_token(self) -> int:
        return next(self._tokens)

    def is_current(self, token: int) -> bool:
        return self.session is not None and self.session.token == token

    def _start(self, worker: QThread) -> None:
        if self.run_synchronously:
            worker.run()
            return
        self._running.add(worker)
        worker.finished.connect(self._on_worker_finished)
        worker.start()

    @pyqtSlot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if worker in self._running:
            self._running.discard(worker)
            worker.deleteLater()

    @property
    def busy(self) -> bool:
        """True while any decode or export thread is still running."""
        return bool(self._running)

    def shutdown(self, timeout_ms: int = 5000) -> bool:
        """
        Cancel pending decodes and wait for every worker thread to stop.

        Args:
            timeout_ms: Per-thread wait limit

        Returns:
            True if all threads stopped in time
        """
        if self._decode_worker is not None:
            self._decode_worker.cancel()
        stopped = True
        for worker in list(self._running):
            if worker.wait(timeout_ms):
                self._running.discard(worker)
                worker.deleteLater()
            else:
                logger.warning("Worker for token %d did not stop", worker.token)
                stopped = False
        return stopped

    def load_document(self, source: Source) -> EditSession:
        """
        Start editing a new document, discarding the previous session.

        Args:
            source: PDF bytes, a path to a PDF file, or None to reset

        Returns:
            The new session (LOADING, or IDLE when source is None)
        """
        if self._decode_worker is not None:
            self._decode_worker.cancel()
            self._decode_worker = None

        canvas_width = self.settings.canvas_width_for(self.host_width)
        token = self.next_token()

        if source is None:
            self.session = EditSession(token, None, self.settings, canvas_width)
            self.session_changed.emit(self.session)
            return self.session

        if isinstance(source, (str, Path)):
            try:
                data = Path(source).read_bytes()
            except OSError as e:
                logger.error("Failed to read %s: %s", source, e)
                self.session = EditSession(token, None, self.settings, canvas_width)
                self.session.apply_decode_failure(f"Unable to load PDF file: {e}")
                self.session_changed.emit(self.session)
                return self.session
        else:
            data = bytes(source)

        self.session = EditSession(token, data, self.settings, canvas_width)
        self.session.status = SessionStatus.LOADING
        self.session_changed.emit(self.session)

        worker = DecodeWorker(token, data, self.settings.render_scale)
        worker.decoded.connect(self._on_decoded)
        worker.failed.connect(self._on_decode_failed)
        self._decode_worker = worker

        self._start(worker)
        return self.session

    def _on_decoded(self, token: int, page: DecodedPage,
                    clusters: Optional[ClusterResult]) -> None:
        if not self.is_current(token):
            logger.debug("Discarding stale decode result for token %d", token)
            return
        self._decode_worker = None
        self.session.apply_decoded(page, clusters)
        logger.info(
            "Page ready: %d runs, %d lines, %d boxes",
            self.session.text_item_count,
            self.session.line_count,
            self.session.box_count,
        )
        self.session_changed.emit(self.session)

    def _on_decode_failed(self, token: int, message: str) -> None:
        if not self.is_current(token):
            logger.debug("Discarding stale decode failure for token %d", token)
            return
        self._decode_worker = None
        logger.error("Decode failed: %s", message)
        self.session.apply_decode_failure(message)
        self.session_changed.emit(self.session)

    def recluster(self, merge_lines: bool = True) -> None:
        """Re-run clustering on the current page, dropping all canvas edits."""
        session = self.session
        if session is None or session.page is None or session.page.text_error:
            return
        clusters = TextRunClusterer().cluster_page(session.page, merge_lines=merge_lines)
        session.apply_decoded(session.page, clusters)
        self.session_changed.emit(session)

    @property
    def export_in_flight(self) -> bool:
        return self._export_worker is not None

    def export_pdf(self) -> bool:
        """
        Start exporting the current session.

        Returns:
            False if there is nothing to export or an export is in flight
        """
        session = self.session
        if session is None or session.source is None:
            return False
        if self.export_in_flight:
            logger.warning("Export already in progress for token %d", session.token)
            return False

        ops = session.compose() if session.page is not None else []
        worker = ExportWorker(
            session.token, session.source, ops, self.settings.substitute_font
        )
        worker.exported.connect(self._on_exported)
        worker.failed.connect(self._on_export_failed)
        self._export_worker = worker

        self._start(worker)
        return True

    def export_now(self) -> Optional[bytes]:
        """
        Export the current session in the calling thread.

        Returns:
            The edited PDF, or None when no document is loaded

        Raises:
            ExportError: If the PDF writer fails
        """
        session = self.session
        if session is None or session.source is None:
            return None
        if session.page is None:
            return bytes(session.source)
        return PDFExporter(self.settings.substitute_font).export(
            session.source, session.compose()
        )

    def _on_exported(self, token: int, data: bytes) -> None:
        self._export_worker = None
        if not self.is_current(token):
            logger.debug("Discarding stale export for token %d", token)
            return
        self.export_finished.emit(data)

    def _on_export_failed(self, token: int, message: str) -> None:
        self._export_worker = None
        if not self.is_current(token):
            logger.debug("Discarding stale export failure for token %d", token)
            return
        logger.error("Export failed: %s", message)
        self.export_failed.emit(message)

    def close_session(self) -> None:
        """End editing and drop all per-document state."""
        if self._decode_worker is not None:
            self._decode_worker.cancel()
            self._decode_worker = None
        self.session = None
        self.session_changed.emit(None)
