#!/usr/bin/env python3
import logging
from datetime import datetime, timedelta

from debug_console.log_entry import LogEntry, LogLevel
from debug_console.log_parser import LogParser
from debug_console.log_store import LogStore
from debug_console.persistence import LogFileWriter, read_log_file, serialize_entries

START = datetime(2024, 3, 1, 12, 0, 0)


def _entries():
    return [
        LogEntry("started", level=LogLevel.INFO, timestamp=START),
        LogEntry("plain print", timestamp=START + timedelta(seconds=1, microseconds=250)),
        LogEntry(
            "boom",
            level=LogLevel.ERROR,
            timestamp=START + timedelta(seconds=2),
            stack_trace='Traceback (most recent call last):\n  File "app.py", line 3, in <module>\nValueError: boom',
        ),
        LogEntry("careful: [brackets] inside", level=LogLevel.WARNING, timestamp=START + timedelta(seconds=3)),
    ]


def test_file_is_most_recent_first(tmp_path):
    path = tmp_path / "console.log"
    LogFileWriter(str(path)).write_now(_entries())

    lines = path.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "[warning] 2024-03-01T12:00:03: careful: [brackets] inside"
    assert lines[1] == "[error] 2024-03-01T12:00:02: boom"
    assert lines[-1] == "[info] 2024-03-01T12:00:00: started"


def test_round_trip_through_seeding(tmp_path):
    path = tmp_path / "console.log"
    written = _entries()
    LogFileWriter(str(path)).write_now(written)

    store = LogStore.from_file(str(path))

    assert [entry.render() for entry in store.entries()] == [entry.render() for entry in written]
    assert serialize_entries(store.entries()) == path.read_text(encoding="utf-8")


def test_empty_snapshot_deletes_file(tmp_path):
    path = tmp_path / "console.log"
    writer = LogFileWriter(str(path))
    writer.write_now(_entries())
    assert path.exists()

    assert writer.write_now([])
    assert not path.exists()
    # Deleting a missing file is fine
    assert writer.write_now([])


def test_background_writes_keep_order(tmp_path):
    path = tmp_path / "nested" / "console.log"
    writer = LogFileWriter(str(path))
    entries = _entries()
    for count in range(1, len(entries) + 1):
        writer.write(entries[:count])
    writer.flush(timeout=5)
    writer.close()

    assert path.read_text(encoding="utf-8") == serialize_entries(entries)


def test_write_failure_is_reported_not_raised(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    writer = LogFileWriter(str(blocker / "console.log"))

    with caplog.at_level(logging.WARNING, logger="debug_console"):
        assert writer.write_now(_entries()) is False

    assert any("Could not write log file" in record.getMessage() for record in caplog.records)


def test_malformed_lines_are_skipped():
    content = "\n".join([
        "garbage before any record",
        "[info] 2024-03-01T12:00:05: kept",
        "[nonsense] 2024-03-01T12:00:04: unknown level",
        "orphaned trace line",
        "[debug] not-a-time: broken timestamp",
        "[error] 2024-03-01T12:00:03: also kept",
        "  trace line",
        "",
    ])
    entries = LogParser.parse_file_content(content)

    assert [(entry.level, entry.text) for entry in entries] == [
        (LogLevel.INFO, "kept"),
        (LogLevel.ERROR, "also kept"),
    ]
    assert entries[0].stack_trace is None
    assert entries[1].stack_trace == "  trace line"


def test_read_missing_file_returns_nothing(tmp_path):
    assert read_log_file(str(tmp_path / "nothing.log")) == []
