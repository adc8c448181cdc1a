from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from functools import cached_property
from typing import Any, Optional


class LogLevel(IntEnum):
    """Ordered severity of a log entry. Only affects how an entry is displayed."""
    DEBUG = 0
    INFO = 1
    NORMAL = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "LogLevel":
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {label!r}") from None


@dataclass(frozen=True)
class LogEntry:
    """
    Represents a single captured log event.

    The message may be any object; its display text is only computed the
    first time it is needed.
    """
    message: Any
    level: LogLevel = LogLevel.NORMAL
    timestamp: datetime = field(default_factory=datetime.now)
    stack_trace: Optional[str] = None

    @cached_property
    def text(self) -> str:
        if isinstance(self.message, str):
            return self.message
        try:
            return str(self.message)
        except Exception:
            return f"<unprintable {type(self.message).__name__}>"

    def header(self) -> str:
        """The first line of the rendered entry, without the stack trace."""
        return f"[{self.level.label}] {self.timestamp.isoformat()}: {self.text}"

    def render(self) -> str:
        if self.stack_trace:
            return f"{self.header()}\n{self.stack_trace}"
        return self.header()

    def __str__(self) -> str:
        return self.render()
