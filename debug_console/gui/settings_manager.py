from PySide6.QtCore import QSettings, QByteArray
from PySide6.QtGui import QColor
from typing import Dict, Any, Optional

from debug_console.log_entry import LogLevel
from debug_console.logging_config import get_logger

logger = get_logger("Settings")

class SettingsManager:
    """
    Manages saving and loading console preferences using QSettings.
    """
    ORGANIZATION_NAME = "DebugConsole"
    APPLICATION_NAME = "DebugConsole"

    # Keys for settings
    FILTER_TEXT = "filters/text"
    EXPAND_STACK_TRACE = "view/expand_stack_trace"
    SAVE_ENABLED = "persistence/save"
    LOG_LEVEL_COLORS = "colors/log_levels" # Stores a dict: {level_label: hex_color_str}
    WINDOW_GEOMETRY = "window/geometry"

    DEFAULT_LOG_LEVEL_COLORS = {
        "debug": "#A9A9A9",    # DarkGray
        "info": "#00BFFF",     # DeepSkyBlue
        "normal": "#E0E0E0",   # LightGray
        "warning": "#FFD700",  # Gold
        "error": "#FF4500",    # OrangeRed
        "fatal": "#DC143C",    # Crimson
    }

    def __init__(self, settings: Optional[QSettings] = None):
        self.settings = settings if settings is not None else QSettings(self.ORGANIZATION_NAME, self.APPLICATION_NAME)
        logger.debug(f"Settings file location: {self.settings.fileName()}")

    def save_setting(self, key: str, value: Any):
        self.settings.setValue(key, value)
        self.settings.sync() # Ensure data is written to disk

    def load_setting(self, key: str, default: Any = None) -> Any:
        return self.settings.value(key, default)

    def _load_bool(self, key: str, default: bool) -> bool:
        value = self.load_setting(key, default)
        # INI backends hand booleans back as strings
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)

    def get_filter_text(self) -> str:
        return str(self.load_setting(self.FILTER_TEXT, "") or "")

    def set_filter_text(self, text: str):
        self.save_setting(self.FILTER_TEXT, text)

    def get_expand_stack_trace(self, default: bool = False) -> bool:
        return self._load_bool(self.EXPAND_STACK_TRACE, default)

    def set_expand_stack_trace(self, expanded: bool):
        self.save_setting(self.EXPAND_STACK_TRACE, expanded)

    def get_save_enabled(self, default: bool = True) -> bool:
        return self._load_bool(self.SAVE_ENABLED, default)

    def set_save_enabled(self, enabled: bool):
        self.save_setting(self.SAVE_ENABLED, enabled)

    def get_window_geometry(self) -> Optional[QByteArray]:
        return self.load_setting(self.WINDOW_GEOMETRY)

    def set_window_geometry(self, geometry: QByteArray):
        self.save_setting(self.WINDOW_GEOMETRY, geometry)

    def get_log_level_colors(self) -> Dict[LogLevel, QColor]:
        saved_colors_str = self.load_setting(self.LOG_LEVEL_COLORS, self.DEFAULT_LOG_LEVEL_COLORS)
        if not isinstance(saved_colors_str, dict):
            saved_colors_str = self.DEFAULT_LOG_LEVEL_COLORS
        colors: Dict[LogLevel, QColor] = {}
        for level in LogLevel:
            hex_color = saved_colors_str.get(level.label, self.DEFAULT_LOG_LEVEL_COLORS[level.label])
            colors[level] = QColor(hex_color)
        return colors

    def set_log_level_colors(self, colors: Dict[LogLevel, QColor]):
        # Store colors as hex strings for QSettings compatibility
        colors_str = {level.label: color.name() for level, color in colors.items()}
        self.save_setting(self.LOG_LEVEL_COLORS, colors_str)
