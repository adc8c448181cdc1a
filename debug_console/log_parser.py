import re
from datetime import datetime
from typing import List, Optional

from .log_entry import LogEntry, LogLevel
from .logging_config import get_logger

logger = get_logger("Parser")


class LogParser:
    """
    Parses a persisted debug console file back into LogEntry objects.
    Expected record format: [level] ISO-TIMESTAMP: Message
    Lines that follow a record header and are not headers themselves belong
    to that record's stack trace.
    """
    HEADER_REGEX = re.compile(
        r"^\[(?P<level>[a-z]+)\]\s"
        r"(?P<timestamp>\d{4}-\d{2}-\d{2}T\S+):\s"
        r"(?P<message>.*)$"
    )

    @staticmethod
    def parse_header(line: str) -> Optional[LogEntry]:
        """
        Parses a single record header.

        Args:
            line: The header line, without the trailing newline.

        Returns:
            A LogEntry without stack trace, or None if the line is not a valid header.
        """
        match = LogParser.HEADER_REGEX.match(line)
        if not match:
            return None

        parts = match.groupdict()
        try:
            level = LogLevel.from_label(parts["level"])
            timestamp = datetime.fromisoformat(parts["timestamp"])
        except ValueError:
            logger.debug(f"Skipping malformed header: {line!r}")
            return None

        return LogEntry(message=parts["message"], level=level, timestamp=timestamp)

    @staticmethod
    def parse_file_content(content: str) -> List[LogEntry]:
        """
        Parses the content of a persisted file.

        Args:
            content: The whole file content.

        Returns:
            The LogEntry objects in file order (most recent first).
        """
        log_entries: List[LogEntry] = []
        current: Optional[LogEntry] = None
        trace_lines: List[str] = []
        # False after an unparseable header, until the next valid one
        in_record = False

        def finish():
            if current is None:
                return
            lines = list(trace_lines)
            while lines and not lines[-1].strip():
                lines.pop()
            if lines:
                log_entries.append(LogEntry(
                    message=current.message,
                    level=current.level,
                    timestamp=current.timestamp,
                    stack_trace="\n".join(lines),
                ))
            else:
                log_entries.append(current)

        for line in content.split("\n"):
            if line.startswith("["):
                entry = LogParser.parse_header(line)
                if entry is not None:
                    finish()
                    current, trace_lines, in_record = entry, [], True
                    continue
                if LogParser._looks_like_header(line):
                    finish()
                    current, trace_lines, in_record = None, [], False
                    continue
            if in_record:
                trace_lines.append(line)

        finish()
        return log_entries

    @staticmethod
    def _looks_like_header(line: str) -> bool:
        return re.match(r"^\[[A-Za-z]+\]\s", line) is not None
