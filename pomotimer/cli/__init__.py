"""Interactive terminal front end."""

from .app import PomodoroApp, Mode, AfterStop
from .commands import Command, parse_command
from .wizard import SetupWizard

__all__ = ["PomodoroApp", "Mode", "AfterStop", "Command", "parse_command", "SetupWizard"]
