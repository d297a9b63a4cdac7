"""Non-blocking line input for the Qt event loop."""

from __future__ import annotations

import logging
import os

from PyQt6.QtCore import QObject, QSocketNotifier, pyqtSignal

logger = logging.getLogger(__name__)


class LineReader(QObject):
    """Watches a file descriptor and emits one signal per complete line.

    Reads straight from the descriptor so that several lines arriving in
    one chunk (e.g. piped input) each produce their own signal.
    """

    line_received = pyqtSignal(str)
    closed = pyqtSignal()

    def __init__(self, fd: int, parent: QObject | None = None, *, encoding: str = "utf-8") -> None:
        super().__init__(parent)
        self._fd = fd
        self._encoding = encoding
        self._buffer = b""
        self._notifier = QSocketNotifier(fd, QSocketNotifier.Type.Read, self)
        self._notifier.activated.connect(self._on_ready)

    def _on_ready(self) -> None:
        try:
            chunk = os.read(self._fd, 4096)
        except OSError:
            logger.warning("reading standard input failed", exc_info=True)
            chunk = b""

        if not chunk:
            self._notifier.setEnabled(False)
            if self._buffer:
                tail, self._buffer = self._buffer, b""
                self.line_received.emit(self._decode(tail))
            self.closed.emit()
            return

        self._buffer += chunk
        while b"\n" in self._buffer:
            line, _, self._buffer = self._buffer.partition(b"\n")
            self.line_received.emit(self._decode(line))

    def _decode(self, raw: bytes) -> str:
        return raw.decode(self._encoding, errors="replace").rstrip("\r")

    def close(self) -> None:
        """Stop watching the descriptor.  The descriptor itself stays open."""
        self._notifier.setEnabled(False)
