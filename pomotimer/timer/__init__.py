"""Timer package."""

from .engine import TimerEngine, TimerSnapshot, Phase, TICK_INTERVAL_MS

__all__ = ["TimerEngine", "TimerSnapshot", "Phase", "TICK_INTERVAL_MS"]
