"""Desktop popups.

Prefers a Qt system-tray balloon when the platform has a tray; otherwise
hands the message to the OS helper (``notify-send`` on Linux,
``osascript`` on macOS) as a detached process so the event loop never
waits on it.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

from PyQt6.QtCore import QObject
from PyQt6.QtGui import QColor, QGuiApplication, QIcon, QPainter, QPixmap
from PyQt6.QtWidgets import QSystemTrayIcon

logger = logging.getLogger(__name__)

APP_NAME = "PomoTimer"
DEFAULT_MESSAGE = "Pomodoro Timer Notification"
ICON_COLOR = "#E4572E"


def _tomato_icon() -> QIcon:
    """Plain filled circle; a tray entry needs some icon to be visible."""
    pixmap = QPixmap(64, 64)
    pixmap.fill(QColor(0, 0, 0, 0))
    p = QPainter(pixmap)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(QColor(ICON_COLOR))
    p.setPen(QColor(ICON_COLOR).darker(120))
    p.drawEllipse(4, 4, 56, 56)
    p.end()
    return QIcon(pixmap)


def _helper_command(title: str, message: str) -> list[str] | None:
    if sys.platform.startswith("linux") and shutil.which("notify-send"):
        return ["notify-send", "--app-name", APP_NAME, title, message]
    if sys.platform == "darwin" and shutil.which("osascript"):
        script = "display notification {} with title {}".format(
            _applescript_str(message), _applescript_str(title)
        )
        return ["osascript", "-e", script]
    return None


def _applescript_str(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier(QObject):
    """Shows one-shot desktop notifications."""

    def __init__(self, parent: QObject | None = None, *, use_tray: bool = True) -> None:
        super().__init__(parent)
        self._enabled = True
        self._use_tray = use_tray
        self._tray: QSystemTrayIcon | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def notify(self, title: str, message: str | None = None) -> None:
        """Fire and forget.  OSError from launching a helper propagates."""
        if not self._enabled:
            return
        body = message or DEFAULT_MESSAGE

        tray = self._tray_icon()
        if tray is not None:
            tray.showMessage(title, body)
            return

        command = _helper_command(title, body)
        if command is None:
            logger.info("no desktop notification backend; dropped %r", title)
            return
        subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def _tray_icon(self) -> QSystemTrayIcon | None:
        if not self._use_tray:
            return None
        if self._tray is None:
            # QSystemTrayIcon needs a GUI application, not a bare QCoreApplication
            if not isinstance(QGuiApplication.instance(), QGuiApplication):
                self._use_tray = False
                return None
            if not QSystemTrayIcon.isSystemTrayAvailable():
                self._use_tray = False
                return None
            self._tray = QSystemTrayIcon(_tomato_icon(), self)
            self._tray.setToolTip(APP_NAME)
            self._tray.show()
        return self._tray
