"""Desktop notification and sound bridge."""

from .bridge import NotificationBridge
from .desktop import DesktopNotifier

__all__ = ["NotificationBridge", "DesktopNotifier"]
