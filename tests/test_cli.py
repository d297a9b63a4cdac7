"""Tests for the command dispatcher, setup wizard, and text rendering."""

from __future__ import annotations

import io
import os

import pytest

from pomotimer.cli.app import AfterStop, Mode, PomodoroApp, parse_restart_answer
from pomotimer.cli.commands import Command, parse_command
from pomotimer.cli.reader import LineReader
from pomotimer.cli.report import format_stats, format_time
from pomotimer.cli.wizard import SetupWizard, Step
from pomotimer.config import DEFAULT_CONFIG, DurationConfig
from pomotimer.storage.history import SessionHistory
from pomotimer.storage.presets import SavedPreset
from pomotimer.timer.engine import Phase

from helpers import SignalCollector, complete_session, history_blocks


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def app(qapp, history, presets, bridge, out):
    a = PomodoroApp(history, presets, bridge, out=out)
    a.begin()
    return a


@pytest.fixture
def finished(app):
    c = SignalCollector()
    app.finished.connect(c)
    return c


def feed(app, *lines):
    for line in lines:
        app.handle_line(line)


def configured(app):
    """Manual setup with 1-minute work and break, defaults elsewhere."""
    feed(app, "1", "1", "", "", "N")
    return app.engine


# ═══════════════════════════════════════════════════════════════════════
#  COMMAND PARSING
# ═══════════════════════════════════════════════════════════════════════


class TestParseCommand:
    @pytest.mark.parametrize("text,command", [
        ("p", Command.PAUSE),
        (" R ", Command.RESUME),
        ("s", Command.STOP),
        ("X", Command.RESET),
        ("history", Command.HISTORY),
        ("STATS", Command.STATS),
        ("help", Command.HELP),
        ("", Command.CONFIRM),
        ("   ", Command.CONFIRM),
        ("pause", Command.UNKNOWN),
        ("q", Command.UNKNOWN),
    ])
    def test_parse(self, text, command):
        assert parse_command(text) is command

    @pytest.mark.parametrize("text,answer", [
        ("y", AfterStop.RESTART),
        (" Y ", AfterStop.RESTART),
        ("n", AfterStop.EXIT),
        ("yes", None),
        ("", None),
    ])
    def test_restart_answer(self, text, answer):
        assert parse_restart_answer(text) is answer


# ═══════════════════════════════════════════════════════════════════════
#  REPORT
# ═══════════════════════════════════════════════════════════════════════


class TestReport:
    @pytest.mark.parametrize("seconds,text", [
        (0, "00:00"),
        (59, "00:59"),
        (1500, "25:00"),
        (6000, "100:00"),
        (-3, "00:00"),
    ])
    def test_format_time(self, seconds, text):
        assert format_time(seconds) == text

    def test_format_stats(self, engine):
        engine.start()
        complete_session(engine)
        report = format_stats(engine.snapshot())
        assert report.splitlines()[0] == "Session statistics"
        assert "2 (Break, waiting)" in report
        assert "Work sessions done:" in report
        assert "Total work time:" in report and "1 minutes" in report


# ═══════════════════════════════════════════════════════════════════════
#  SETUP WIZARD
# ═══════════════════════════════════════════════════════════════════════


class TestSetupWizard:
    def test_manual_flow_without_presets(self, presets):
        w = SetupWizard(presets)
        assert w.step == Step.WORK
        for line in ("50", "10", "30", "3", "n"):
            assert not w.done
            w.feed(line)
        assert w.done
        assert w.config == DurationConfig(3000, 600, 1800, 3)

    def test_blank_answers_use_defaults(self, presets):
        w = SetupWizard(presets)
        for line in ("", "oops", "0", "-1", "N"):
            w.feed(line)
        assert w.config == DEFAULT_CONFIG

    def test_save_prompt_reprompts_on_bad_answer(self, presets):
        w = SetupWizard(presets)
        for line in ("", "", "", ""):
            w.feed(line)
        assert w.feed("maybe") == ["Invalid input. Please enter Y or N."]
        assert w.step == Step.SAVE

    def test_saving_a_named_preset(self, presets):
        w = SetupWizard(presets)
        for line in ("45", "", "", "", "y"):
            w.feed(line)
        assert w.step == Step.NAME
        assert w.feed("Long focus") == ['Saved preset "Long focus".']
        assert w.done
        (saved,) = presets.load_all()
        assert saved.name == "Long focus"
        assert saved.config.work_seconds == 45 * 60

    def test_unnamed_preset_gets_positional_name(self, presets):
        presets.append(SavedPreset(DEFAULT_CONFIG, name="first"))
        w = SetupWizard(presets)
        for line in ("", "", "", "", "", "Y"):
            w.feed(line)
        assert '"Preset 2"' in w.prompt
        w.feed("")
        assert [p.name for p in presets.load_all()] == ["first", "Preset 2"]

    def test_save_failure_is_reported(self, tmp_path):
        from pomotimer.storage.presets import PresetStore

        store = PresetStore(tmp_path)  # a directory: reads as empty, writes fail
        w = SetupWizard(store)
        for line in ("", "", "", "", "Y"):
            w.feed(line)
        messages = w.feed("x")
        assert messages[0].startswith("Could not save preset:")
        assert w.done
        assert w.config == DEFAULT_CONFIG

    def test_preset_selection(self, presets):
        presets.append(SavedPreset(DurationConfig(600, 120, 300, 2), name="Short"))
        presets.append(SavedPreset(DurationConfig(3000, 600, 1800, 3)))
        w = SetupWizard(presets)
        intro = "\n".join(w.intro())
        assert "1. Short: work 10m" in intro
        assert "2. Preset 2: work 50m" in intro
        assert w.step == Step.PRESET
        assert w.feed("2") == ["Loaded Preset 2: work 50m | short 10m | long 30m | 3 cycles"]
        assert w.config == DurationConfig(3000, 600, 1800, 3)

    def test_invalid_preset_reprompts(self, presets):
        presets.append(SavedPreset(DEFAULT_CONFIG))
        w = SetupWizard(presets)
        messages = w.feed("7")
        assert messages[0].startswith("Invalid preset number")
        assert w.step == Step.PRESET
        assert not w.done

    def test_blank_preset_choice_goes_manual(self, presets):
        presets.append(SavedPreset(DEFAULT_CONFIG))
        w = SetupWizard(presets)
        w.feed("")
        assert w.step == Step.WORK


# ═══════════════════════════════════════════════════════════════════════
#  DISPATCHER
# ═══════════════════════════════════════════════════════════════════════


class TestSetupMode:
    def test_begin_shows_welcome_and_first_question(self, app, out):
        text = out.getvalue()
        assert "Welcome to the Pomodoro Timer setup!" in text
        assert text.endswith("Enter work duration in minutes (default is 25): ")
        assert app.mode == Mode.SETUP

    def test_completing_setup_creates_engine(self, app, out):
        engine = configured(app)
        assert app.mode == Mode.SESSION
        assert engine.config == DurationConfig(60, 60, 15 * 60, 4)
        assert engine.running is False
        assert 'Press "Enter" to start your first work session.' in out.getvalue()

    def test_preset_flow(self, qapp, history, presets, bridge, out):
        presets.append(SavedPreset(DurationConfig(120, 60, 300, 2), name="Quick"))
        a = PomodoroApp(history, presets, bridge, out=out)
        a.begin()
        feed(a, "9")
        assert a.mode == Mode.SETUP
        assert "Invalid preset number" in out.getvalue()
        feed(a, "1")
        assert a.mode == Mode.SESSION
        assert a.engine.config.work_seconds == 120


class TestSessionMode:
    def test_enter_starts_session(self, app, out):
        engine = configured(app)
        feed(app, "")
        assert engine.running is True
        assert "Session 1: Work session started!" in out.getvalue()

    def test_pause_and_resume(self, app, out):
        engine = configured(app)
        feed(app, "", "p")
        assert engine.is_paused is True
        assert "Timer paused at 01:00." in out.getvalue()
        feed(app, "r")
        assert engine.is_paused is False
        assert "Timer resumed." in out.getvalue()

    def test_start_while_running_warns(self, app, out):
        engine = configured(app)
        feed(app, "")
        engine.start()
        assert "The timer is already running!" in out.getvalue()

    def test_tick_rewrites_line(self, app, out):
        engine = configured(app)
        feed(app, "")
        engine._on_tick()
        engine._on_tick()
        assert "\rTime remaining: 00:59\rTime remaining: 00:58" in out.getvalue()
        feed(app, "p")
        assert out.getvalue().endswith("00:58\nTimer paused at 00:58.\n")

    def test_completion_then_enter_starts_break(self, app, out, history):
        engine = configured(app)
        feed(app, "")
        complete_session(engine)
        assert "Session complete. Press 'Enter' to start the next session." in out.getvalue()
        feed(app, "")
        assert engine.phase == Phase.ON_BREAK
        assert engine.running is True
        assert "Session 2: Break session started!" in out.getvalue()
        assert len(history_blocks(history.read_all())) == 1

    def test_reset(self, app, out):
        engine = configured(app)
        feed(app, "")
        complete_session(engine)
        feed(app, "x")
        assert engine.session_number == 1
        assert "Timer has been reset." in out.getvalue()

    def test_history_when_empty(self, app, out):
        configured(app)
        feed(app, "history")
        assert "No session history yet." in out.getvalue()

    def test_history_with_non_utf8_bytes(self, app, out, history):
        configured(app)
        history.path.write_bytes(b"Session: Work\nDate: caf\xe9\n---\n")
        app.dispatch(Command.HISTORY)
        text = out.getvalue()
        assert "Session: Work" in text
        assert "Date: caf\ufffd" in text
        assert app.exit_code is None

    def test_history_dump(self, app, out):
        engine = configured(app)
        feed(app, "")
        complete_session(engine)
        feed(app, "history")
        assert "Session: Work" in out.getvalue()
        assert "Completed Pomodoro Sessions: 1" in out.getvalue()

    def test_stats(self, app, out):
        configured(app)
        feed(app, "stats")
        assert "Session statistics" in out.getvalue()

    def test_help(self, app, out):
        configured(app)
        feed(app, "help")
        assert "history  show the session history log" in out.getvalue()

    def test_unknown_command(self, app, out):
        engine = configured(app)
        feed(app, "", "jump")
        text = out.getvalue()
        assert "Unknown command." in text
        assert text.rstrip().endswith('or "x" to reset.')
        assert engine.running is True


class TestStopAndExit:
    def test_stop_then_no_exits_cleanly(self, app, out, finished, history):
        engine = configured(app)
        feed(app, "")
        engine._on_tick()
        feed(app, "s")
        assert app.mode == Mode.CONFIRM_RESTART
        assert out.getvalue().endswith("Would you like to start a new session? (Y/N) ")

        feed(app, "N")
        assert finished.items == [0]
        assert app.exit_code == 0
        assert "Thank you for using this timer!" in out.getvalue()
        assert history.read_all() is None

    def test_lines_after_exit_are_ignored(self, app, finished):
        configured(app)
        feed(app, "", "s", "n", "", "s")
        assert finished.items == [0]

    def test_invalid_answer_reprompts(self, app, out, finished):
        configured(app)
        feed(app, "", "s", "perhaps")
        assert "Invalid input. Please enter Y or N." in out.getvalue()
        assert app.mode == Mode.CONFIRM_RESTART
        assert finished.items == []

    def test_yes_restarts_setup_with_new_engine(self, app, out):
        old = configured(app)
        feed(app, "", "s", "y")
        assert app.mode == Mode.SETUP
        assert app.engine is None
        assert old.ticking is False
        assert "Starting a new session..." in out.getvalue()
        feed(app, "2", "", "", "", "n")
        assert app.engine is not old
        assert app.engine.config.work_seconds == 120

    def test_stop_when_idle_does_nothing(self, app, finished):
        configured(app)
        feed(app, "s")
        assert app.mode == Mode.SESSION
        assert finished.items == []

    def test_eof_exits_zero(self, app, finished):
        app.handle_eof()
        assert finished.items == [0]


class TestFatalHistoryFailure:
    def test_write_failure_exits_with_one(self, qapp, presets, bridge, out, tmp_path):
        a = PomodoroApp(SessionHistory(tmp_path), presets, bridge, out=out)
        a.begin()
        c = SignalCollector()
        a.finished.connect(c)
        engine = configured(a)
        feed(a, "")
        engine._remaining = 1
        engine._on_timeout()
        assert c.items == [1]
        assert "Error: Could not write session history" in out.getvalue()
        assert a.engine is None


class TestLineReader:
    def test_splits_chunks_into_lines_and_reports_eof(self, qapp):
        read_fd, write_fd = os.pipe()
        reader = LineReader(read_fd)
        lines, closed = SignalCollector(), SignalCollector()
        reader.line_received.connect(lines)
        reader.closed.connect(closed)
        try:
            os.write(write_fd, b"p\r\nstats\npart")
            reader._on_ready()
            assert lines.items == ["p", "stats"]
            assert len(closed) == 0

            os.close(write_fd)
            reader._on_ready()
            assert lines.items == ["p", "stats", "part"]
            assert len(closed) == 1
        finally:
            os.close(read_fd)
