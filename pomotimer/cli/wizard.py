"""Line-driven setup flow that produces a DurationConfig.

The wizard never reads input itself: the app feeds it one line at a time
and prints whatever it returns, followed by the next ``prompt``.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from ..config import (
    DEFAULT_CONFIG,
    DurationConfig,
    parse_count,
    parse_minutes,
)
from ..errors import InvalidSelectionError
from ..storage.presets import PresetStore, SavedPreset, select_preset

logger = logging.getLogger(__name__)


class Step(Enum):
    PRESET = auto()
    WORK = auto()
    SHORT_BREAK = auto()
    LONG_BREAK = auto()
    CYCLES = auto()
    SAVE = auto()
    NAME = auto()
    DONE = auto()


_PROMPTS = {
    Step.PRESET: "Select a preset number, or press Enter to set durations manually: ",
    Step.WORK: "Enter work duration in minutes (default is {}): ".format(
        DEFAULT_CONFIG.work_seconds // 60
    ),
    Step.SHORT_BREAK: "Enter short break duration in minutes (default is {}): ".format(
        DEFAULT_CONFIG.short_break_seconds // 60
    ),
    Step.LONG_BREAK: "Enter long break duration in minutes (default is {}): ".format(
        DEFAULT_CONFIG.long_break_seconds // 60
    ),
    Step.CYCLES: "Enter number of cycles before a long break (default is {}): ".format(
        DEFAULT_CONFIG.cycles_before_long_break
    ),
    Step.SAVE: "Save these durations as a preset? (Y/N) ",
    Step.NAME: "Preset name (press Enter for \"{}\"): ",
}


class SetupWizard:
    """Collects the four durations, or loads them from a saved preset."""

    def __init__(self, store: PresetStore) -> None:
        self._store = store
        self._presets: list[SavedPreset] = store.load_all()
        self._values: dict[str, int] = {}
        self._config: DurationConfig | None = None
        self._step = Step.PRESET if self._presets else Step.WORK

    @property
    def done(self) -> bool:
        return self._step == Step.DONE

    @property
    def config(self) -> DurationConfig | None:
        """The finished configuration; ``None`` until ``done``."""
        return self._config

    @property
    def step(self) -> Step:
        return self._step

    @property
    def prompt(self) -> str:
        if self._step == Step.DONE:
            return ""
        if self._step == Step.NAME:
            return _PROMPTS[Step.NAME].format(self._default_name())
        return _PROMPTS[self._step]

    def intro(self) -> list[str]:
        lines = ["", "Welcome to the Pomodoro Timer setup!"]
        if self._presets:
            lines.append("Saved presets:")
            for position, preset in enumerate(self._presets, start=1):
                lines.append(f"  {position}. {preset.label(position)}: {preset.config.describe()}")
        return lines

    def feed(self, text: str) -> list[str]:
        """Consume one line of input; return lines to show the user."""
        handler = {
            Step.PRESET: self._on_preset,
            Step.WORK: self._on_work,
            Step.SHORT_BREAK: self._on_short_break,
            Step.LONG_BREAK: self._on_long_break,
            Step.CYCLES: self._on_cycles,
            Step.SAVE: self._on_save,
            Step.NAME: self._on_name,
        }.get(self._step)
        if handler is None:
            return []
        return handler(text)

    # ── steps ─────────────────────────────────────────────────────────

    def _on_preset(self, text: str) -> list[str]:
        if not text.strip():
            self._step = Step.WORK
            return []
        try:
            preset = select_preset(self._presets, text)
        except InvalidSelectionError as exc:
            return [f"Invalid preset number: {exc}."]
        position = int(text.strip())
        self._finish(preset.config)
        return [f"Loaded {preset.label(position)}: {preset.config.describe()}"]

    def _on_work(self, text: str) -> list[str]:
        self._values["work_seconds"] = parse_minutes(text, DEFAULT_CONFIG.work_seconds)
        self._step = Step.SHORT_BREAK
        return []

    def _on_short_break(self, text: str) -> list[str]:
        self._values["short_break_seconds"] = parse_minutes(
            text, DEFAULT_CONFIG.short_break_seconds
        )
        self._step = Step.LONG_BREAK
        return []

    def _on_long_break(self, text: str) -> list[str]:
        self._values["long_break_seconds"] = parse_minutes(
            text, DEFAULT_CONFIG.long_break_seconds
        )
        self._step = Step.CYCLES
        return []

    def _on_cycles(self, text: str) -> list[str]:
        self._values["cycles_before_long_break"] = parse_count(
            text, DEFAULT_CONFIG.cycles_before_long_break
        )
        self._config = DurationConfig(**self._values)
        self._step = Step.SAVE
        return []

    def _on_save(self, text: str) -> list[str]:
        answer = text.strip().upper()
        if answer == "Y":
            self._step = Step.NAME
            return []
        if answer == "N":
            self._finish(self._config)
            return []
        return ["Invalid input. Please enter Y or N."]

    def _on_name(self, text: str) -> list[str]:
        preset = SavedPreset(config=self._config, name=text.strip() or self._default_name())
        self._finish(self._config)
        try:
            self._store.append(preset)
        except OSError as exc:
            logger.warning("could not save preset to %s", self._store.path, exc_info=True)
            return [f"Could not save preset: {exc}"]
        return [f"Saved preset \"{preset.name}\"."]

    # ── helpers ───────────────────────────────────────────────────────

    def _default_name(self) -> str:
        return f"Preset {len(self._presets) + 1}"

    def _finish(self, config: DurationConfig) -> None:
        self._config = config
        self._step = Step.DONE
