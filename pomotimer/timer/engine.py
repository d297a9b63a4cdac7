"""Timer state machine for PomoTimer.

Phases
------
IDLE      Conceptual "before anything"; never entered after construction.
WORKING   The current (or next) countdown is a work interval.
ON_BREAK  The current (or next) countdown is a break.

``running`` and ``paused`` are flags orthogonal to the phase, so the same
countdown mechanics serve work and break intervals alike.

Transitions
-----------
start()     !running            → running, countdown loaded from phase
pause()     running && !paused  → paused (remaining kept)
resume()    paused              → ticking again from remaining
stop()      running             → not running; the CLI asks restart/exit
reset()     any                 → WORKING, cycle 0, session 1, not running
tick        remaining hits 0    → history appended, phase toggled,
                                  awaiting confirmation

Every session boundary (start and end) pings the notification bridge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..config import DurationConfig
from ..errors import HistoryWriteError
from ..notifications.bridge import NotificationBridge
from ..storage.history import HistoryRecord, SessionHistory, SessionKind

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


# ── enums / snapshots ─────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    WORKING = "working"
    ON_BREAK = "on_break"


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only copy of every piece of timer state."""

    phase: Phase
    running: bool
    paused: bool
    remaining_seconds: int
    session_number: int
    current_cycle: int
    total_work_seconds: int
    total_break_seconds: int
    completed_work_sessions: int
    awaiting_confirmation: bool


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-driven work/break countdown with history logging.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted every second while counting down.
    session_started(phase: Phase, session_number: int)
    session_completed(record: HistoryRecord)
        Emitted after the history block is written and the phase toggled.
    paused(remaining_seconds: int)
    resumed(remaining_seconds: int)
    stopped()
        The countdown was stopped by the user; the owner decides whether
        to set up a new timer or exit.
    was_reset()
    warning(message: str)
        A command was rejected (e.g. start while running).
    fatal_error(exc: HistoryWriteError)
        Emitted instead of raising when a QTimer-driven tick failed to
        write history.
    """

    tick = pyqtSignal(int)
    session_started = pyqtSignal(object, int)
    session_completed = pyqtSignal(object)
    paused = pyqtSignal(int)
    resumed = pyqtSignal(int)
    stopped = pyqtSignal()
    was_reset = pyqtSignal()
    warning = pyqtSignal(str)
    fatal_error = pyqtSignal(object)

    def __init__(
        self,
        config: DurationConfig,
        parent: QObject | None = None,
        *,
        history: SessionHistory | None = None,
        bridge: NotificationBridge | None = None,
    ) -> None:
        super().__init__(parent)

        self._config = config
        self._history = history
        self._bridge = bridge or NotificationBridge()

        # ── session state ─────────────────────────────────────────────
        self._phase: Phase = Phase.WORKING
        self._running: bool = False
        self._paused: bool = False
        self._remaining: int = config.work_seconds
        self._session_number: int = 1
        self._current_cycle: int = 0
        # first start is triggered by the user's confirmation
        self._awaiting_confirmation: bool = True

        # ── accumulators ──────────────────────────────────────────────
        self._total_work_seconds: int = 0
        self._total_break_seconds: int = 0
        self._completed_work_sessions: int = 0

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_timeout)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> DurationConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def remaining(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def session_number(self) -> int:
        return self._session_number

    @property
    def current_cycle(self) -> int:
        """Completed sessions (work or break) since construction or reset."""
        return self._current_cycle

    @property
    def total_work_seconds(self) -> int:
        return self._total_work_seconds

    @property
    def total_break_seconds(self) -> int:
        return self._total_break_seconds

    @property
    def completed_work_sessions(self) -> int:
        return self._completed_work_sessions

    @property
    def awaiting_confirmation(self) -> bool:
        return self._awaiting_confirmation

    @property
    def ticking(self) -> bool:
        """True while the underlying QTimer is active."""
        return self._qt_timer.isActive()

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self._phase,
            running=self._running,
            paused=self._paused,
            remaining_seconds=self._remaining,
            session_number=self._session_number,
            current_cycle=self._current_cycle,
            total_work_seconds=self._total_work_seconds,
            total_break_seconds=self._total_break_seconds,
            completed_work_sessions=self._completed_work_sessions,
            awaiting_confirmation=self._awaiting_confirmation,
        )

    def phase_duration(self) -> int:
        """Countdown length for the current phase.

        Breaks always use the short-break length.  ``long_break_seconds``
        and ``cycles_before_long_break`` are carried in the config but no
        long-break substitution happens here.
        """
        if self._phase == Phase.ON_BREAK:
            return self._config.short_break_seconds
        return self._config.work_seconds

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> bool:
        """Load the phase's full duration and start ticking."""
        if self._running:
            self.warning.emit("The timer is already running!")
            return False
        self._running = True
        self._paused = False
        self._awaiting_confirmation = False
        self._remaining = self.phase_duration()

        working = self._phase == Phase.WORKING
        kind = _session_kind(self._phase)
        self._bridge.notify(
            f"{kind.value} session started",
            "Time to work!" if working else "Time to relax!",
        )
        self._bridge.play_tone()
        self.session_started.emit(self._phase, self._session_number)
        self._qt_timer.start()
        return True

    def confirm(self) -> bool:
        """The user's "go" (Enter).  Starts the next session if one is
        waiting for confirmation; otherwise does nothing."""
        if not self._awaiting_confirmation or self._running:
            return False
        return self.start()

    def pause(self) -> bool:
        if not self._running or self._paused:
            return False
        self._qt_timer.stop()
        self._paused = True
        self.paused.emit(self._remaining)
        return True

    def resume(self) -> bool:
        if not self._paused:
            return False
        self._paused = False
        self.resumed.emit(self._remaining)
        self._qt_timer.start()
        return True

    def stop(self) -> bool:
        if not self._running:
            return False
        self._qt_timer.stop()
        self._running = False
        self._paused = False
        self.stopped.emit()
        return True

    def reset(self) -> None:
        """Back to the first work session.  Lifetime totals are kept."""
        self._qt_timer.stop()
        self._running = False
        self._paused = False
        self._current_cycle = 0
        self._session_number = 1
        self._phase = Phase.WORKING
        self._remaining = self._config.work_seconds
        self._awaiting_confirmation = True
        self.was_reset.emit()

    def shutdown(self) -> None:
        """Stop ticking for good, without signals.  Used when the owner
        throws this engine away."""
        self._qt_timer.stop()
        self._running = False
        self._paused = False

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_timeout(self) -> None:
        try:
            self._on_tick()
        except HistoryWriteError as exc:
            logger.error("%s", exc)
            self.fatal_error.emit(exc)

    def _on_tick(self) -> None:
        if not self._running or self._paused:
            return
        if self._remaining > 0:
            self._remaining -= 1
            self.tick.emit(self._remaining)
        if self._remaining == 0:
            self._finish_session()

    def _finish_session(self) -> None:
        self._qt_timer.stop()
        self._running = False
        record = self._complete_session()
        self.session_completed.emit(record)
        # after the history write and the phase toggle
        self._bridge.notify("Session Ended")
        self._bridge.play_tone()

    def _complete_session(self) -> HistoryRecord:
        finished = self._phase
        if finished == Phase.WORKING:
            duration = self._config.work_seconds
            self._total_work_seconds += duration
            self._completed_work_sessions += 1
        else:
            duration = self._config.short_break_seconds
            self._total_break_seconds += duration

        record = HistoryRecord(
            session_type=_session_kind(finished),
            timestamp_local=HistoryRecord.local_timestamp(),
            duration_minutes=duration // 60,
            total_work_minutes=self._total_work_seconds // 60,
            total_break_minutes=self._total_break_seconds // 60,
            completed_work_sessions=self._completed_work_sessions,
        )
        if self._history is not None:
            self._history.append(record)

        self._phase = Phase.ON_BREAK if finished == Phase.WORKING else Phase.WORKING
        self._current_cycle += 1
        self._session_number += 1
        self._remaining = self.phase_duration()
        self._awaiting_confirmation = True
        return record


def _session_kind(phase: Phase) -> SessionKind:
    return SessionKind.BREAK if phase == Phase.ON_BREAK else SessionKind.WORK
