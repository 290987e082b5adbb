"""Append-only activity log shown under the preview.

The log lives for the lifetime of the process and is never trimmed. Readers
only ever get tuple snapshots.
"""

from datetime import datetime
from typing import Callable

from embedview.config import DEFAULT_TIMESTAMP_FORMAT
from embedview.views import LogEntry, Severity


class ActivityLog:
    def __init__(
        self,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.timestamp_format = timestamp_format
        self._clock = clock
        self._entries: list[LogEntry] = []

    def append(self, severity: Severity, message: str) -> LogEntry:
        entry = LogEntry(
            timestamp=self._clock().strftime(self.timestamp_format),
            severity=severity,
            message=message,
        )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def tail(self, n: int) -> tuple[LogEntry, ...]:
        """Last ``n`` entries, oldest first."""
        if n <= 0:
            return ()
        return tuple(self._entries[-n:])

    def __len__(self) -> int:
        return len(self._entries)
