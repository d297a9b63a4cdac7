"""Persistence package: session history log and duration presets."""

from .history import SessionHistory, HistoryRecord, SessionKind
from .presets import PresetStore, SavedPreset, select_preset

__all__ = [
    "SessionHistory",
    "HistoryRecord",
    "SessionKind",
    "PresetStore",
    "SavedPreset",
    "select_preset",
]
