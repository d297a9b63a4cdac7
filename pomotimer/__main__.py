"""Allow running PomoTimer as a module: python -m pomotimer."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys

from PyQt6.QtWidgets import QApplication

from . import __version__
from .audio.sounds import SoundManager
from .cli.app import PomodoroApp
from .cli.reader import LineReader
from .config import AppPaths
from .notifications.bridge import NotificationBridge
from .notifications.desktop import DesktopNotifier
from .storage.history import SessionHistory
from .storage.presets import PresetStore

logger = logging.getLogger("pomotimer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pomotimer",
        description="Work/break interval timer with notifications and history.",
    )
    parser.add_argument(
        "--data-dir",
        help="where history, presets and the sound cache are kept "
        "(default: $POMOTIMER_DATA_DIR or the per-user data directory)",
    )
    parser.add_argument("--no-sound", action="store_true", help="disable the session bell")
    parser.add_argument("--no-notify", action="store_true", help="disable desktop notifications")
    parser.add_argument("--volume", type=int, default=70, help="bell volume 0-100 (default: 70)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    # no display server: Qt still needs a platform plugin to start
    if (
        sys.platform.startswith("linux")
        and not os.environ.get("DISPLAY")
        and not os.environ.get("WAYLAND_DISPLAY")
    ):
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("PomoTimer")
    app.setQuitOnLastWindowClosed(False)
    # Ctrl+C ends the process even while Qt owns the main loop
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    paths = AppPaths.resolve(args.data_dir)
    logger.debug("data directory: %s", paths.data_dir)

    notifier = DesktopNotifier(app)
    notifier.set_enabled(not args.no_notify)
    player = SoundManager(paths.sounds_dir, app)
    player.set_volume(args.volume)
    player.set_enabled(not args.no_sound)

    pomodoro = PomodoroApp(
        history=SessionHistory(paths.history_file),
        presets=PresetStore(paths.presets_file),
        bridge=NotificationBridge(notifier, player),
        parent=app,
    )
    reader = LineReader(sys.stdin.fileno(), app)
    reader.line_received.connect(pomodoro.handle_line)
    reader.closed.connect(pomodoro.handle_eof)
    pomodoro.finished.connect(app.exit)

    pomodoro.begin()
    code = app.exec()
    reader.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
