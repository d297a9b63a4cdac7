"""Best-effort notification bridge used by the timer engine.

Both calls swallow and log collaborator failures: a broken notification
daemon or audio device must never interrupt a running countdown.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, title: str, message: str | None = None) -> None: ...


class TonePlayer(Protocol):
    def play_tone(self) -> None: ...


class NotificationBridge:
    """Forwards session-boundary events to a popup sink and a sound sink.

    Either sink may be ``None``, which makes that call a no-op.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        player: TonePlayer | None = None,
    ) -> None:
        self._notifier = notifier
        self._player = player

    def notify(self, title: str, message: str | None = None) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(title, message)
        except Exception:
            logger.warning("desktop notification failed", exc_info=True)

    def play_tone(self) -> None:
        if self._player is None:
            return
        try:
            self._player.play_tone()
        except Exception:
            logger.warning("sound playback failed", exc_info=True)
