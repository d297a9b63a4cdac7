"""Command dispatcher: routes each input line to the setup wizard, the
timer engine, or the restart question, depending on the current mode.

Modes
-----
SETUP            Lines answer the setup wizard.
SESSION          Lines are session commands (see ``commands.Command``).
CONFIRM_RESTART  After a stop: "Y" runs setup again, "N" exits with 0.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum, auto
from typing import TextIO

from PyQt6.QtCore import QObject, pyqtSignal

from ..errors import HistoryWriteError
from ..notifications.bridge import NotificationBridge
from ..storage.history import HistoryRecord, SessionHistory
from ..storage.presets import PresetStore
from ..timer.engine import Phase, TimerEngine
from .commands import COMMAND_PROMPT, HELP_TEXT, UNKNOWN_COMMAND, Command, parse_command
from .report import format_stats, format_time
from .wizard import SetupWizard

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_HISTORY_FAILURE = 1


class Mode(Enum):
    SETUP = auto()
    SESSION = auto()
    CONFIRM_RESTART = auto()


class AfterStop(Enum):
    RESTART = auto()
    EXIT = auto()


def parse_restart_answer(text: str) -> AfterStop | None:
    answer = text.strip().upper()
    if answer == "Y":
        return AfterStop.RESTART
    if answer == "N":
        return AfterStop.EXIT
    return None


class PomodoroApp(QObject):
    """Owns at most one TimerEngine and feeds it user commands.

    Signals
    -------
    finished(exit_code: int)
        The user quit (0), input ended (0), or history could not be
        written (1).  The owner should leave the event loop.
    """

    finished = pyqtSignal(int)

    def __init__(
        self,
        history: SessionHistory,
        presets: PresetStore,
        bridge: NotificationBridge | None = None,
        parent: QObject | None = None,
        *,
        out: TextIO | None = None,
    ) -> None:
        super().__init__(parent)
        self._history = history
        self._presets = presets
        self._bridge = bridge or NotificationBridge()
        self._out = out if out is not None else sys.stdout

        self._mode = Mode.SETUP
        self._wizard: SetupWizard | None = None
        self._engine: TimerEngine | None = None
        self._countdown_shown = False
        self._exit_code: int | None = None

    # ── public API ────────────────────────────────────────────────────

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def engine(self) -> TimerEngine | None:
        return self._engine

    @property
    def wizard(self) -> SetupWizard | None:
        return self._wizard

    @property
    def exit_code(self) -> int | None:
        """Set once ``finished`` has been emitted."""
        return self._exit_code

    def begin(self) -> None:
        """Show the setup flow.  Call once the event loop is ready."""
        self._discard_engine()
        self._mode = Mode.SETUP
        self._wizard = SetupWizard(self._presets)
        for line in self._wizard.intro():
            self._say(line)
        self._ask(self._wizard.prompt)

    def handle_line(self, line: str) -> None:
        if self._exit_code is not None:
            return
        if self._mode == Mode.SETUP:
            self._handle_setup(line)
        elif self._mode == Mode.SESSION:
            self.dispatch(parse_command(line))
        else:
            self._handle_restart_answer(line)

    def handle_eof(self) -> None:
        self._say("")
        self._finish(EXIT_OK)

    def dispatch(self, command: Command) -> None:
        engine = self._engine
        if command == Command.CONFIRM:
            engine.confirm()
        elif command == Command.PAUSE:
            engine.pause()
        elif command == Command.RESUME:
            engine.resume()
        elif command == Command.STOP:
            engine.stop()
        elif command == Command.RESET:
            engine.reset()
        elif command == Command.HISTORY:
            self._show_history()
        elif command == Command.STATS:
            self._say(format_stats(engine.snapshot()))
        elif command == Command.HELP:
            self._say(HELP_TEXT)
        else:
            self._say(UNKNOWN_COMMAND)
            self._say(COMMAND_PROMPT)

    # ── modes ─────────────────────────────────────────────────────────

    def _handle_setup(self, line: str) -> None:
        wizard = self._wizard
        for message in wizard.feed(line):
            self._say(message)
        if not wizard.done:
            self._ask(wizard.prompt)
            return
        self._start_engine(wizard)

    def _start_engine(self, wizard: SetupWizard) -> None:
        config = wizard.config
        self._wizard = None
        engine = TimerEngine(config, self, history=self._history, bridge=self._bridge)
        engine.tick.connect(self._on_tick)
        engine.session_started.connect(self._on_session_started)
        engine.session_completed.connect(self._on_session_completed)
        engine.paused.connect(self._on_paused)
        engine.resumed.connect(self._on_resumed)
        engine.stopped.connect(self._on_stopped)
        engine.was_reset.connect(self._on_reset)
        engine.warning.connect(self._say)
        engine.fatal_error.connect(self._on_fatal_error)
        self._engine = engine
        self._mode = Mode.SESSION
        logger.debug("timer configured: %s", config.describe())

        self._say("")
        self._say("Customizable Pomodoro Timer Setup Complete!")
        self._say(config.describe())
        self._say(COMMAND_PROMPT)
        self._say('Press "Enter" to start your first work session.')

    def _handle_restart_answer(self, line: str) -> None:
        decision = parse_restart_answer(line)
        if decision is None:
            self._say("Invalid input. Please enter Y or N.")
            self._ask("Would you like to start a new session? (Y/N) ")
        elif decision == AfterStop.RESTART:
            self._say("Starting a new session...")
            self.begin()
        else:
            self._say("")
            self._say("Thank you for using this timer!")
            self._finish(EXIT_OK)

    # ── engine signal handlers ────────────────────────────────────────

    def _on_tick(self, remaining: int) -> None:
        self._out.write(f"\rTime remaining: {format_time(remaining)}")
        self._out.flush()
        self._countdown_shown = True

    def _on_session_started(self, phase: Phase, number: int) -> None:
        kind = "Break" if phase == Phase.ON_BREAK else "Work"
        self._say("")
        self._say(f"Session {number}: {kind} session started!")

    def _on_session_completed(self, record: HistoryRecord) -> None:
        self._say("Session history saved.")
        self._say("Session complete. Press 'Enter' to start the next session.")

    def _on_paused(self, remaining: int) -> None:
        self._say(f"Timer paused at {format_time(remaining)}.")

    def _on_resumed(self, remaining: int) -> None:
        self._say("Timer resumed.")

    def _on_stopped(self) -> None:
        self._say("Timer stopped.")
        self._mode = Mode.CONFIRM_RESTART
        self._ask("Would you like to start a new session? (Y/N) ")

    def _on_reset(self) -> None:
        self._say('Timer has been reset. Press "Enter" to start again with the same settings.')

    def _on_fatal_error(self, exc: HistoryWriteError) -> None:
        self._say(f"Error: {exc}")
        self._discard_engine()
        self._finish(EXIT_HISTORY_FAILURE)

    # ── helpers ───────────────────────────────────────────────────────

    def _show_history(self) -> None:
        try:
            contents = self._history.read_all()
        except OSError as exc:
            logger.warning("could not read %s", self._history.path, exc_info=True)
            self._say(f"Could not read session history: {exc}")
            return
        self._say(contents.rstrip("\n") if contents else "No session history yet.")

    def _discard_engine(self) -> None:
        if self._engine is not None:
            self._engine.shutdown()
            self._engine.deleteLater()
            self._engine = None

    def _finish(self, code: int) -> None:
        if self._exit_code is not None:
            return
        self._exit_code = code
        self.finished.emit(code)

    def _say(self, text: str) -> None:
        if self._countdown_shown:
            self._out.write("\n")
            self._countdown_shown = False
        print(text, file=self._out, flush=True)

    def _ask(self, prompt: str) -> None:
        if self._countdown_shown:
            self._out.write("\n")
            self._countdown_shown = False
        print(prompt, end="", file=self._out, flush=True)
