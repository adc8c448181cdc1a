#!/usr/bin/env python3
from datetime import datetime

import pytest

from debug_console.log_entry import LogEntry, LogLevel


class Unprintable:
    def __str__(self):
        raise RuntimeError("no text for you")


def test_defaults():
    before = datetime.now()
    entry = LogEntry("hello")
    after = datetime.now()

    assert entry.level is LogLevel.NORMAL
    assert entry.stack_trace is None
    assert before <= entry.timestamp <= after


def test_levels_are_ordered():
    assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.NORMAL < LogLevel.WARNING < LogLevel.ERROR < LogLevel.FATAL
    assert LogLevel.from_label("Warning") is LogLevel.WARNING
    with pytest.raises(ValueError):
        LogLevel.from_label("verbose")


def test_render_without_stack_trace():
    entry = LogEntry("hello", level=LogLevel.INFO, timestamp=datetime(2024, 5, 1, 10, 0))
    assert entry.render() == "[info] 2024-05-01T10:00:00: hello"
    assert str(entry) == entry.render()
    assert entry.header() == entry.render()


def test_render_with_stack_trace():
    entry = LogEntry(
        "boom",
        level=LogLevel.ERROR,
        timestamp=datetime(2024, 5, 1, 10, 1),
        stack_trace="line one\nline two",
    )
    assert entry.render() == "[error] 2024-05-01T10:01:00: boom\nline one\nline two"
    assert entry.header() == "[error] 2024-05-01T10:01:00: boom"


def test_message_is_stringified_lazily():
    calls = []

    class Counting:
        def __str__(self):
            calls.append(1)
            return "counted"

    entry = LogEntry(Counting())
    assert calls == []
    assert entry.text == "counted"
    assert entry.text == "counted"
    assert len(calls) == 1


def test_unprintable_message_uses_placeholder():
    entry = LogEntry(Unprintable())
    assert entry.text == "<unprintable Unprintable>"
    assert entry.render().endswith(": <unprintable Unprintable>")


def test_entry_is_immutable():
    entry = LogEntry("hello")
    with pytest.raises(AttributeError):
        entry.message = "changed"
