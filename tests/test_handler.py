#!/usr/bin/env python3
import logging
import threading
import time

import pytest

from debug_console.handler import LogStoreHandler, level_for_record
from debug_console.log_entry import LogLevel
from debug_console.logging_config import get_logger


@pytest.fixture
def app_logger(store):
    logger = logging.getLogger("tests.app")
    logger.setLevel(logging.DEBUG)
    handler = LogStoreHandler(store)
    logger.addHandler(handler)
    yield logger
    logger.removeHandler(handler)


@pytest.mark.parametrize("levelno, expected", [
    (logging.DEBUG, LogLevel.DEBUG),
    (logging.INFO, LogLevel.INFO),
    (logging.WARNING, LogLevel.WARNING),
    (logging.ERROR, LogLevel.ERROR),
    (logging.CRITICAL, LogLevel.FATAL),
    (5, LogLevel.DEBUG),
])
def test_level_mapping(levelno, expected):
    assert level_for_record(levelno) is expected


def test_records_become_entries(store, app_logger):
    app_logger.info("connected to %s", "db")
    app_logger.warning("slow query")

    entries = store.entries()
    assert [(e.text, e.level) for e in entries] == [
        ("connected to db", LogLevel.INFO),
        ("slow query", LogLevel.WARNING),
    ]
    assert all(e.stack_trace is None for e in entries)


def test_exception_info_becomes_stack_trace(store, app_logger):
    try:
        {}["missing"]
    except KeyError:
        app_logger.exception("lookup failed")

    entry = store.entries()[0]
    assert entry.level is LogLevel.ERROR
    assert entry.text == "lookup failed"
    assert "KeyError: 'missing'" in entry.stack_trace


def test_diagnostic_loggers_are_not_forwarded(store):
    diagnostics = get_logger("HandlerTest")
    handler = LogStoreHandler(store)
    diagnostics.addHandler(handler)
    try:
        diagnostics.warning("internal problem")
    finally:
        diagnostics.removeHandler(handler)
    assert store.entries() == ()


def test_observer_failure_does_not_deadlock_with_other_threads(store):
    handler = LogStoreHandler(store)
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    in_fan_out = threading.Event()
    release = threading.Event()
    calls = []

    def blocking_observer(snapshot):
        calls.append(len(snapshot))
        if len(calls) == 1:
            in_fan_out.set()
            release.wait(timeout=5)
            raise RuntimeError("observer failed")

    store.subscribe(blocking_observer)
    appender = threading.Thread(target=store.log, args=("from appender",))
    other_logger = logging.getLogger("tests.other_thread")
    other_logger.setLevel(logging.WARNING)
    other = threading.Thread(target=other_logger.warning, args=("from other thread",))
    try:
        appender.start()
        assert in_fan_out.wait(timeout=5)
        # The other thread takes the handler lock and waits for the store
        other.start()
        time.sleep(0.2)
        release.set()
        appender.join(timeout=5)
        other.join(timeout=5)
        assert not appender.is_alive()
        assert not other.is_alive()
    finally:
        release.set()
        root_logger.removeHandler(handler)

    assert sorted(entry.text for entry in store.entries()) == ["from appender", "from other thread"]


def test_handler_filter_rejects_diagnostics_before_locking(store):
    handler = LogStoreHandler(store)
    record = logging.LogRecord("debug_console.Broadcaster", logging.ERROR, __file__, 1, "internal", None, None)
    assert not handler.filter(record)
    record = logging.LogRecord("app", logging.ERROR, __file__, 1, "external", None, None)
    assert handler.filter(record)
