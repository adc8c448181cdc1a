"""
Flat-file persistence of log snapshots.

Files hold one rendered entry per record, most recent first. An empty
snapshot removes the file.
"""

import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable, List, Optional

from .log_entry import LogEntry
from .log_parser import LogParser
from .logging_config import get_logger

logger = get_logger("Persistence")


def sort_most_recent_first(entries: Iterable[LogEntry]) -> List[LogEntry]:
    ordered = sorted(entries, key=lambda entry: entry.timestamp)
    ordered.reverse()
    return ordered


def serialize_entries(entries: Iterable[LogEntry]) -> str:
    return "\n".join(entry.render() for entry in sort_most_recent_first(entries))


def read_log_file(path: str) -> List[LogEntry]:
    """
    Read a persisted file.

    Returns:
        The entries in file order (most recent first). Empty if the file is
        missing or unreadable.
    """
    if not path or not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read log file {path}: {e}")
        return []
    return LogParser.parse_file_content(content)


class LogFileWriter:
    """
    Writes snapshots to a file on a single background thread.

    Writes are queued in submission order; ``write`` returns immediately.
    Failures are reported on the diagnostic logger and otherwise ignored.
    """

    def __init__(self, path: str):
        self.path = path
        self._executor: Optional[ThreadPoolExecutor] = None
        self._last_future: Optional[Future] = None

    def write(self, entries: Iterable[LogEntry]) -> Future:
        """Queue a write of ``entries``. The snapshot is copied before returning."""
        snapshot = tuple(entries)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="debug-console-writer")
        self._last_future = self._executor.submit(self.write_now, snapshot)
        return self._last_future

    def write_now(self, entries: Iterable[LogEntry]) -> bool:
        """Write synchronously. Returns False if the write failed."""
        entries = tuple(entries)
        try:
            if not entries:
                try:
                    os.remove(self.path)
                except FileNotFoundError:
                    pass
                return True

            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(serialize_entries(entries))
            return True
        except OSError as e:
            logger.warning(f"Could not write log file {self.path}: {e}")
            return False

    def flush(self, timeout: Optional[float] = None):
        """Block until every queued write has finished."""
        if self._last_future is not None:
            self._last_future.result(timeout=timeout)

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._last_future = None
