"""PySide6 presentation of a LogStore."""

from .bridge import SnapshotBridge
from .console_widget import DebugConsole
from .settings_manager import SettingsManager

__all__ = ["DebugConsole", "SettingsManager", "SnapshotBridge"]
