"""Shared pytest fixtures for PomoTimer tests."""

import os
import sys

# Qt needs a platform plugin even when no display is attached
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from pomotimer.config import DurationConfig
from pomotimer.notifications.bridge import NotificationBridge
from pomotimer.storage.history import SessionHistory
from pomotimer.storage.presets import PresetStore
from pomotimer.timer.engine import TimerEngine

from helpers import FakeNotifier, FakePlayer


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def config():
    """One-minute work, 30 s short break, 90 s long break, 4 cycles."""
    return DurationConfig(
        work_seconds=60,
        short_break_seconds=30,
        long_break_seconds=90,
        cycles_before_long_break=4,
    )


@pytest.fixture
def history(tmp_path):
    return SessionHistory(tmp_path / "pomodoro_history.txt")


@pytest.fixture
def presets(tmp_path):
    return PresetStore(tmp_path / "presets.json")


@pytest.fixture
def events():
    """Shared, ordered log of collaborator calls."""
    return []


@pytest.fixture
def notifier(events):
    return FakeNotifier(events)


@pytest.fixture
def player(events):
    return FakePlayer(events)


@pytest.fixture
def bridge(notifier, player):
    return NotificationBridge(notifier, player)


@pytest.fixture
def engine(qapp, config, history, bridge):
    """Fresh TimerEngine writing history to a temp file."""
    return TimerEngine(config, history=history, bridge=bridge)


@pytest.fixture
def engine_no_history(qapp, config, bridge):
    """TimerEngine without a history store (pure state-machine tests)."""
    return TimerEngine(config, bridge=bridge)
