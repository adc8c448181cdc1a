"""
Diagnostic logging for the debug console itself.

These loggers report problems of the console (failed writes, misbehaving
observers). They live under the ``debug_console`` namespace, which
LogStoreHandler never forwards into a LogStore.
"""

import os
import sys
import logging
import logging.handlers
import time
from typing import Dict, Optional

# Global configuration
ROOT_LOGGER_NAME = "debug_console"
DEFAULT_LEVEL = logging.WARNING
LOGGERS: Dict[str, logging.Logger] = {}
LOGGER_FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: int = DEFAULT_LEVEL, log_directory: Optional[str] = None) -> None:
    """
    Configure the diagnostic loggers.

    Args:
        level: The log level to use.
        log_directory: Optional directory for a rotating diagnostics file.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOGGER_FORMAT, DATE_FORMAT)

    # sys.stdout may be wrapped by a capture scope, write to the real stderr
    console_handler = logging.StreamHandler(sys.__stderr__)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_directory:
        os.makedirs(log_directory, exist_ok=True)
        log_file = os.path.join(log_directory, f'debug_console_{time.strftime("%Y%m%d_%H%M%S")}.log')
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=5*1024*1024,  # 5 MB
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Diagnostic logging configured")


def get_logger(name: str) -> logging.Logger:
    """
    Get a diagnostic logger with the given name.

    Args:
        name: Short name, namespaced under ``debug_console``.

    Returns:
        The logger.
    """
    if name in LOGGERS:
        return LOGGERS[name]

    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    LOGGERS[name] = logger
    return logger


def is_diagnostic_logger(logger_name: str) -> bool:
    return logger_name == ROOT_LOGGER_NAME or logger_name.startswith(ROOT_LOGGER_NAME + ".")
