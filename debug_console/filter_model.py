"""
Display ordering and text filtering of log entries, shared by the widget
and anything else that presents a store.
"""

from typing import Iterable, List, Optional, Set

from .log_entry import LogEntry, LogLevel
from .persistence import sort_most_recent_first


def sort_for_display(entries: Iterable[LogEntry]) -> List[LogEntry]:
    """Most recent first."""
    return sort_most_recent_first(entries)


def parse_filter(text: str) -> List[str]:
    """Split a comma separated filter into lowercase tokens, dropping blank ones."""
    if not text:
        return []
    return [token.strip().lower() for token in text.split(",") if token.strip()]


def matches(entry: LogEntry, tokens: List[str]) -> bool:
    """True if any token is a substring of the entry text. No tokens matches everything."""
    if not tokens:
        return True
    text = entry.text.lower()
    return any(token in text for token in tokens)


def filter_entries(entries: Iterable[LogEntry], text: str) -> List[LogEntry]:
    tokens = parse_filter(text)
    return [entry for entry in entries if matches(entry, tokens)]


class LogFilter:
    """
    Filter state of a console view: the text filter plus an optional set of
    visible levels (None shows every level).
    """

    def __init__(self, text: str = "", levels: Optional[Set[LogLevel]] = None):
        self._text = ""
        self._tokens: List[str] = []
        self.levels = levels
        self.set_text(text)

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str):
        self._text = text or ""
        self._tokens = parse_filter(self._text)

    def set_levels(self, levels: Optional[Set[LogLevel]]):
        self.levels = set(levels) if levels is not None else None

    def clear(self):
        self.set_text("")
        self.levels = None

    @property
    def is_active(self) -> bool:
        return bool(self._tokens) or self.levels is not None

    def accepts(self, entry: LogEntry) -> bool:
        if self.levels is not None and entry.level not in self.levels:
            return False
        return matches(entry, self._tokens)

    def apply(self, entries: Iterable[LogEntry]) -> List[LogEntry]:
        return [entry for entry in entries if self.accepts(entry)]
