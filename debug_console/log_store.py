"""
The log store: an ordered, append-only (until cleared) collection of LogEntry.

A default store is available through get_default_store() for code that does
not want to pass a store around. It is created on first use and seeded from
DEFAULT_LOAD_PATH.
"""

import threading
from datetime import datetime
from typing import Any, Iterable, List, Optional

from .broadcaster import Broadcaster, Observer, Snapshot, Subscription
from .log_entry import LogEntry, LogLevel
from .logging_config import get_logger
from .persistence import read_log_file

logger = get_logger("Store")

DEFAULT_LOAD_PATH = "debug_console.log"


class LogStore:
    """
    Holds the captured log entries of one console and notifies observers.

    Every mutation emits exactly one snapshot through ``broadcaster`` once the
    mutation is applied. Observers only ever see immutable tuples.
    """

    def __init__(self, entries: Optional[Iterable[LogEntry]] = None):
        self._entries: List[LogEntry] = list(entries) if entries else []
        self._lock = threading.RLock()
        self.broadcaster = Broadcaster()

    @classmethod
    def from_file(cls, path: str) -> "LogStore":
        """
        Create a store seeded from a file written by LogFileWriter.

        Unreadable or malformed content never raises, the store starts empty instead.
        """
        # Files are most recent first, the store is oldest first
        entries = list(reversed(read_log_file(path)))
        if entries:
            logger.info(f"Seeded {len(entries)} entries from {path}")
        return cls(entries)

    def append(self, entry: LogEntry):
        if not isinstance(entry, LogEntry):
            raise TypeError(f"Expected LogEntry, got {type(entry).__name__}")
        with self._lock:
            self._entries.append(entry)
            self.broadcaster.emit(tuple(self._entries))

    def log(self, message: Any, level: LogLevel = LogLevel.NORMAL,
            timestamp: Optional[datetime] = None, stack_trace: Optional[str] = None) -> LogEntry:
        """Build a LogEntry and append it. Returns the new entry."""
        entry = LogEntry(
            message=message,
            level=level,
            timestamp=timestamp if timestamp is not None else datetime.now(),
            stack_trace=stack_trace,
        )
        self.append(entry)
        return entry

    def debug(self, message: Any, **kwargs) -> LogEntry:
        return self.log(message, level=LogLevel.DEBUG, **kwargs)

    def info(self, message: Any, **kwargs) -> LogEntry:
        return self.log(message, level=LogLevel.INFO, **kwargs)

    def warning(self, message: Any, **kwargs) -> LogEntry:
        return self.log(message, level=LogLevel.WARNING, **kwargs)

    def error(self, message: Any, **kwargs) -> LogEntry:
        return self.log(message, level=LogLevel.ERROR, **kwargs)

    def fatal(self, message: Any, **kwargs) -> LogEntry:
        return self.log(message, level=LogLevel.FATAL, **kwargs)

    def clear(self):
        with self._lock:
            self._entries.clear()
            self.broadcaster.emit(())

    def entries(self) -> Snapshot:
        with self._lock:
            return tuple(self._entries)

    def subscribe(self, observer: Observer) -> Subscription:
        return self.broadcaster.subscribe(observer)

    def __len__(self) -> int:
        return len(self._entries)


_default_store: Optional[LogStore] = None
_default_lock = threading.Lock()
_load_path = DEFAULT_LOAD_PATH


def get_default_store() -> LogStore:
    """Return the process-wide store, creating it from the load path on first use."""
    global _default_store
    with _default_lock:
        if _default_store is None:
            _default_store = LogStore.from_file(_load_path)
        return _default_store


def set_default_store(store: Optional[LogStore]):
    """Replace the process-wide store. ``None`` makes the next access create a fresh one."""
    global _default_store
    with _default_lock:
        _default_store = store


def set_load_path(path: str):
    """Set the file the default store is seeded from. Only affects a store not created yet."""
    global _load_path
    _load_path = path


def get_load_path() -> str:
    return _load_path
