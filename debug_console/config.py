#!/usr/bin/env python3
"""
Configuration of the debug console.

Settings are read from a JSON file. A missing or broken file never stops the
console from starting; the defaults below are used instead.
"""

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .logging_config import get_logger
from .log_store import DEFAULT_LOAD_PATH

logger = get_logger("Config")

DEFAULT_CONFIG_FILE = "debug_console.json"


@dataclass
class ConsoleConfig:
    """Settings for the default store and the console widget."""
    load_path: str = DEFAULT_LOAD_PATH
    save_path: Optional[str] = None
    title: str = "Debug Console"
    expand_stack_trace: bool = False
    show_toolbar: bool = True
    diagnostics_level: str = "WARNING"

    @property
    def diagnostics_levelno(self) -> int:
        level = logging.getLevelName(self.diagnostics_level.upper())
        return level if isinstance(level, int) else logging.WARNING

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsoleConfig":
        known = {f.name: f for f in dataclasses.fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.debug(f"Ignoring unknown config key '{key}'")
                continue
            default = known[key].default
            if isinstance(default, bool) and not isinstance(value, bool):
                logger.warning(f"Config key '{key}' expects true/false, got {value!r}. Using default.")
                continue
            if isinstance(default, str) and not isinstance(value, str):
                logger.warning(f"Config key '{key}' expects a string, got {value!r}. Using default.")
                continue
            if key == "save_path" and value is not None and not isinstance(value, str):
                logger.warning(f"Config key 'save_path' expects a path, got {value!r}. Using default.")
                continue
            values[key] = value
        return cls(**values)


def load_config(file_path: str = DEFAULT_CONFIG_FILE) -> ConsoleConfig:
    """
    Load the configuration from a JSON file.

    Args:
        file_path: Path of the JSON file.

    Returns:
        The loaded configuration, or the defaults if the file is missing or invalid.
    """
    if not os.path.exists(file_path):
        logger.info(f"Config file not found at {file_path}. Using defaults.")
        return ConsoleConfig()

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Error loading config from {file_path}: {e}. Using defaults.")
        return ConsoleConfig()

    if not isinstance(data, dict):
        logger.warning(f"Config file {file_path} does not contain an object. Using defaults.")
        return ConsoleConfig()

    return ConsoleConfig.from_dict(data)


def save_config(config: ConsoleConfig, file_path: str = DEFAULT_CONFIG_FILE) -> None:
    """Save the configuration to a JSON file."""
    try:
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=4)
    except OSError as e:
        logger.error(f"Error saving config to {file_path}: {e}")
        raise
