"""Session commands typed while a timer is active."""

from __future__ import annotations

from enum import Enum


class Command(Enum):
    CONFIRM = ""
    PAUSE = "p"
    RESUME = "r"
    STOP = "s"
    RESET = "x"
    HISTORY = "history"
    STATS = "stats"
    HELP = "help"
    UNKNOWN = None


_BY_TEXT = {c.value: c for c in Command if c is not Command.UNKNOWN}

COMMAND_PROMPT = 'Enter "p" to pause, "r" to resume, "s" to stop, or "x" to reset.'

UNKNOWN_COMMAND = (
    'Unknown command. Use "p" to pause, "r" to resume, "s" to stop, '
    'or "x" to reset.'
)

HELP_TEXT = """\
Commands:
  p        pause the countdown
  r        resume a paused countdown
  s        stop the timer (then choose to set up again or quit)
  x        reset to the first work session
  history  show the session history log
  stats    show totals for this run
  help     show this list
  <Enter>  start the next session when prompted"""


def parse_command(text: str) -> Command:
    return _BY_TEXT.get(text.strip().lower(), Command.UNKNOWN)
