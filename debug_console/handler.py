import logging
from datetime import datetime
from typing import Optional

from .log_entry import LogEntry, LogLevel
from .log_store import LogStore, get_default_store
from .logging_config import is_diagnostic_logger


def level_for_record(levelno: int) -> LogLevel:
    """Map a logging level number onto the closest LogLevel."""
    if levelno >= logging.CRITICAL:
        return LogLevel.FATAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class DiagnosticRecordFilter(logging.Filter):
    """Rejects records of the console's own diagnostic loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not is_diagnostic_logger(record.name)


class LogStoreHandler(logging.Handler):
    """Forwards logging records into a LogStore."""

    def __init__(self, store: Optional[LogStore] = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.store = store if store is not None else get_default_store()
        # Filters run before the handler lock is taken. Diagnostics are
        # emitted while the store lock is held, so they must never reach it.
        self.addFilter(DiagnosticRecordFilter())

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record) if self.formatter else record.getMessage()
            stack_trace = None
            if record.exc_info:
                stack_trace = logging.Formatter().formatException(record.exc_info)
            elif record.stack_info:
                stack_trace = record.stack_info
            self.store.append(LogEntry(
                message=message,
                level=level_for_record(record.levelno),
                timestamp=datetime.fromtimestamp(record.created),
                stack_trace=stack_trace,
            ))
        except Exception:
            self.handleError(record)
