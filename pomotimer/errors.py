"""Exception hierarchy for PomoTimer."""

from __future__ import annotations


class PomotimerError(Exception):
    """Base class for every error raised by PomoTimer."""


class HistoryWriteError(PomotimerError):
    """Appending a session block to the history log failed.

    Fatal: the CLI terminates with exit code 1 when this escapes a tick.
    """

    def __init__(self, path, cause: OSError) -> None:
        super().__init__(f"Could not write session history to {path}: {cause}")
        self.path = path
        self.cause = cause


class InvalidSelectionError(PomotimerError):
    """The user picked a preset number that does not exist."""
