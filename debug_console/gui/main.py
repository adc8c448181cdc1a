#!/usr/bin/env python3
"""
Demo application: a debug console window that captures its own prints,
errors and logging records.
"""

import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QAction

import debug_console
from debug_console.config import DEFAULT_CONFIG_FILE, ConsoleConfig, load_config
from debug_console.handler import LogStoreHandler
from debug_console.log_store import LogStore

from .console_widget import DebugConsole

logger = logging.getLogger("DebugConsoleDemo")


def _raise_error():
    raise RuntimeError("Raised from the demo menu")


def _run_app(argv: List[str], config: ConsoleConfig, store: LogStore) -> int:
    app = QApplication.instance() or QApplication(argv)
    app.setStyle("Fusion")

    print_action = QAction("Print a message")
    print_action.triggered.connect(lambda: print("Hello from print()"))
    log_action = QAction("Log a warning")
    log_action.triggered.connect(lambda: logger.warning("Warning from the logging module"))
    error_action = QAction("Raise an error")
    error_action.triggered.connect(_raise_error)

    console = DebugConsole(
        store=store,
        actions=[print_action, log_action, error_action],
        title=config.title,
        show_toolbar=config.show_toolbar,
        expand_stack_trace=config.expand_stack_trace,
        save_path=config.save_path,
    )
    console.setWindowTitle(config.title)
    console.resize(800, 600)
    console.show()

    print("Debug console started")
    return app.exec()


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    config_path = argv[1] if len(argv) > 1 else DEFAULT_CONFIG_FILE
    config = load_config(config_path)
    debug_console.apply_config(config)

    store = debug_console.get_default_store()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(LogStoreHandler(store))

    return debug_console.listen(_run_app, argv, config, store, store=store)


if __name__ == "__main__":
    sys.exit(main())
