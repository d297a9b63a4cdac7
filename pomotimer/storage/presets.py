"""Saved duration presets with JSON persistence.

Presets are stored at ``<data dir>/presets.json``::

    {
      "presets": [
        {"name": "Deep work", "work_seconds": 3000, "short_break_seconds": 600,
         "long_break_seconds": 1800, "cycles_before_long_break": 3}
      ]
    }

The list is ordered and users pick entries by 1-based position.  Every
save rewrites the whole file.

Usage::

    store = PresetStore(paths.presets_file)
    store.append(SavedPreset(config, name="Deep work"))
    presets = store.load_all()
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import DurationConfig
from ..errors import InvalidSelectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedPreset:
    config: DurationConfig
    name: str = ""

    def label(self, position: int) -> str:
        """Display name; unnamed presets show as ``Preset <position>``."""
        return self.name or f"Preset {position}"

    def to_dict(self) -> dict:
        return {"name": self.name, **self.config.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> SavedPreset:
        name = data.get("name") or ""
        if not isinstance(name, str):
            raise ValueError(f"invalid name: {name!r}")
        return cls(config=DurationConfig.from_dict(data), name=name)


class PresetStore:
    """Ordered list of presets in a single JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[SavedPreset]:
        """Load every preset.  A missing or malformed file yields ``[]``."""
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable preset file %s: %s", self._path, exc)
            return []

        entries = data.get("presets") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("ignoring preset file %s: no preset list", self._path)
            return []

        presets: list[SavedPreset] = []
        for index, entry in enumerate(entries, start=1):
            try:
                presets.append(SavedPreset.from_dict(entry))
            except (ValueError, AttributeError) as exc:
                logger.warning("skipping preset #%d in %s: %s", index, self._path, exc)
        return presets

    def append(self, preset: SavedPreset) -> None:
        """Read, append, and rewrite the whole store.  OSError propagates."""
        presets = self.load_all()
        presets.append(preset)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps({"presets": [p.to_dict() for p in presets]}, indent=2) + "\n",
            encoding="utf-8",
        )


def select_preset(presets: list[SavedPreset], text: str) -> SavedPreset:
    """Resolve the user's 1-based choice.  Raises InvalidSelectionError."""
    try:
        position = int(text.strip())
    except ValueError:
        raise InvalidSelectionError(f"not a preset number: {text.strip()!r}") from None
    if not 1 <= position <= len(presets):
        raise InvalidSelectionError(
            f"choose a number between 1 and {len(presets)}"
        )
    return presets[position - 1]
