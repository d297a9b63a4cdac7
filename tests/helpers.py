"""Shared test helpers for PomoTimer."""

from pomotimer.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeNotifier:
    """Records ``notify`` calls; optionally observes engine state at call time."""

    def __init__(self, events):
        self.events = events
        self.calls: list[tuple[str, str | None]] = []
        self.observe = None

    def notify(self, title, message=None):
        self.calls.append((title, message))
        self.events.append(("notify", title))
        if self.observe is not None:
            self.observe()


class FakePlayer:
    def __init__(self, events):
        self.events = events
        self.count = 0

    def play_tone(self):
        self.count += 1
        self.events.append(("tone", None))


class BrokenSink:
    """Raises from every call, like a notification daemon that went away."""

    def notify(self, title, message=None):
        raise OSError("no notification daemon")

    def play_tone(self):
        raise RuntimeError("audio device busy")


def complete_session(engine: TimerEngine) -> None:
    """Fast-complete the current session by jumping to the last tick."""
    engine._remaining = 1
    engine._on_tick()


def history_blocks(text: str | None) -> list[str]:
    """Split a history log into its session blocks."""
    if not text:
        return []
    return [b.strip() for b in text.split("---") if b.strip()]
