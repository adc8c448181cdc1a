"""
In-app debug console.

Capture prints, errors and logging records into a LogStore and show them in a
filterable, pausable panel (see debug_console.gui).

    import debug_console

    debug_console.listen(main)
    debug_console.info("Connected")
"""

from datetime import datetime
from typing import Any, Optional

from .broadcaster import Broadcaster, Subscription
from .config import ConsoleConfig, load_config, save_config
from .filter_model import LogFilter, filter_entries, parse_filter, sort_for_display
from .handler import LogStoreHandler
from .interceptor import capture, capture_loop_errors, listen
from .log_entry import LogEntry, LogLevel
from .log_store import LogStore, get_default_store, get_load_path, set_default_store, set_load_path
from .logging_config import configure_logging, get_logger
from .persistence import LogFileWriter, read_log_file

__version__ = "0.1.0"


def apply_config(config: ConsoleConfig):
    """Apply the non-GUI parts of a configuration."""
    set_load_path(config.load_path)
    configure_logging(config.diagnostics_levelno)


def log(message: Any, level: LogLevel = LogLevel.NORMAL,
        timestamp: Optional[datetime] = None, stack_trace: Optional[str] = None) -> LogEntry:
    """
    Add a log to the default store.

    Same as ``get_default_store().log(...)``.
    """
    return get_default_store().log(message, level=level, timestamp=timestamp, stack_trace=stack_trace)


def debug(message: Any, **kwargs) -> LogEntry:
    return log(message, level=LogLevel.DEBUG, **kwargs)


def info(message: Any, **kwargs) -> LogEntry:
    return log(message, level=LogLevel.INFO, **kwargs)


def warning(message: Any, **kwargs) -> LogEntry:
    return log(message, level=LogLevel.WARNING, **kwargs)


def error(message: Any, **kwargs) -> LogEntry:
    return log(message, level=LogLevel.ERROR, **kwargs)


def fatal(message: Any, **kwargs) -> LogEntry:
    return log(message, level=LogLevel.FATAL, **kwargs)


def clear():
    """Clear the default store."""
    get_default_store().clear()


__all__ = [
    "Broadcaster", "Subscription", "ConsoleConfig", "load_config", "save_config",
    "LogFilter", "filter_entries", "parse_filter", "sort_for_display", "LogStoreHandler",
    "capture", "capture_loop_errors", "listen", "LogEntry", "LogLevel", "LogStore",
    "get_default_store", "set_default_store", "get_load_path", "set_load_path",
    "configure_logging", "get_logger", "LogFileWriter", "read_log_file",
    "apply_config", "log", "debug", "info", "warning", "error", "fatal", "clear",
]
