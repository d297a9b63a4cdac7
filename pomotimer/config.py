"""Duration configuration and on-disk locations.

A ``DurationConfig`` is built once by the setup flow (or loaded from a
preset) and handed to the timer engine, which never mutates it.

Usage::

    config = DurationConfig(work_seconds=50 * 60, short_break_seconds=600,
                            long_break_seconds=1800, cycles_before_long_break=3)
    paths = AppPaths.resolve()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, asdict
from pathlib import Path

from platformdirs import user_data_dir


# ── defaults ──────────────────────────────────────────────────────────────

DEFAULT_WORK_MINUTES = 25
DEFAULT_SHORT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 15
DEFAULT_CYCLES = 4

DATA_DIR_ENV = "POMOTIMER_DATA_DIR"
HISTORY_FILENAME = "pomodoro_history.txt"
PRESETS_FILENAME = "presets.json"


@dataclass(frozen=True)
class DurationConfig:
    """Work / short-break / long-break lengths in seconds, plus the
    number of cycles before a long break.  All four must be positive."""

    work_seconds: int = DEFAULT_WORK_MINUTES * 60
    short_break_seconds: int = DEFAULT_SHORT_BREAK_MINUTES * 60
    long_break_seconds: int = DEFAULT_LONG_BREAK_MINUTES * 60
    cycles_before_long_break: int = DEFAULT_CYCLES

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> DurationConfig:
        """Build from a stored mapping.  Raises ValueError on missing,
        non-integer or non-positive fields."""
        values: dict[str, int] = {}
        for name in (
            "work_seconds",
            "short_break_seconds",
            "long_break_seconds",
            "cycles_before_long_break",
        ):
            raw = data.get(name)
            # bool is an int subclass; reject it explicitly
            if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
                raise ValueError(f"invalid {name}: {raw!r}")
            values[name] = raw
        return cls(**values)

    def describe(self) -> str:
        """One-line human summary, e.g. ``work 25m | short 5m | long 15m | 4 cycles``."""
        return (
            f"work {_fmt_minutes(self.work_seconds)} | "
            f"short {_fmt_minutes(self.short_break_seconds)} | "
            f"long {_fmt_minutes(self.long_break_seconds)} | "
            f"{self.cycles_before_long_break} cycles"
        )


DEFAULT_CONFIG = DurationConfig()


def _fmt_minutes(seconds: int) -> str:
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


# ── input parsing ─────────────────────────────────────────────────────────


def parse_count(text: str, default: int) -> int:
    """Parse a positive integer, falling back to *default* when the text
    is blank, unparsable, zero or negative."""
    try:
        value = int(text.strip())
    except (ValueError, AttributeError):
        return default
    return value if value > 0 else default


def parse_minutes(text: str, default_seconds: int) -> int:
    """Parse a minute count typed by the user and return seconds."""
    minutes = parse_count(text, 0)
    return minutes * 60 if minutes else default_seconds


# ── paths ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AppPaths:
    """Where the history log, preset store and sound cache live."""

    data_dir: Path

    @classmethod
    def resolve(cls, override: str | os.PathLike | None = None) -> AppPaths:
        """``--data-dir`` wins, then ``$POMOTIMER_DATA_DIR``, then the
        platform's per-user data directory."""
        if override:
            return cls(Path(override).expanduser())
        env = os.environ.get(DATA_DIR_ENV)
        if env:
            return cls(Path(env).expanduser())
        return cls(Path(user_data_dir("pomotimer", appauthor=False)))

    @property
    def history_file(self) -> Path:
        return self.data_dir / HISTORY_FILENAME

    @property
    def presets_file(self) -> Path:
        return self.data_dir / PRESETS_FILENAME

    @property
    def sounds_dir(self) -> Path:
        return self.data_dir / "sounds"
