"""Append-only session history log.

Every completed session (work or break) becomes one fixed text block::

    Session: Work
    Date: 10/19/26 14:02:11
    Duration: 25 minutes
    Total Work Time: 50 minutes
    Total Break Time: 5 minutes
    Completed Pomodoro Sessions: 2
    ---

The file is never rotated or truncated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from ..errors import HistoryWriteError

logger = logging.getLogger(__name__)

SEPARATOR = "---"


class SessionKind(Enum):
    WORK = "Work"
    BREAK = "Break"


@dataclass(frozen=True)
class HistoryRecord:
    """One completed session plus the running totals at completion time."""

    session_type: SessionKind
    timestamp_local: str
    duration_minutes: int
    total_work_minutes: int
    total_break_minutes: int
    completed_work_sessions: int

    @staticmethod
    def local_timestamp(moment: datetime | None = None) -> str:
        """Locale-formatted date and time, e.g. ``10/19/26 14:02:11``."""
        return (moment or datetime.now()).strftime("%x %X")

    def to_block(self) -> str:
        return (
            f"Session: {self.session_type.value}\n"
            f"Date: {self.timestamp_local}\n"
            f"Duration: {self.duration_minutes} minutes\n"
            f"Total Work Time: {self.total_work_minutes} minutes\n"
            f"Total Break Time: {self.total_break_minutes} minutes\n"
            f"Completed Pomodoro Sessions: {self.completed_work_sessions}\n"
            f"{SEPARATOR}\n"
        )


class SessionHistory:
    """Text log of completed sessions at *path*."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, record: HistoryRecord) -> None:
        """Append *record*.  Raises HistoryWriteError on any I/O failure."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(record.to_block())
        except OSError as exc:
            raise HistoryWriteError(self._path, exc) from exc
        logger.debug("history block appended to %s", self._path)

    def read_all(self) -> str | None:
        """Raw log contents, or ``None`` when nothing was recorded yet.

        Bytes that are not UTF-8 (a hand-edited log) show up as U+FFFD.
        """
        try:
            return self._path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
