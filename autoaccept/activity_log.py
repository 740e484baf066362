"""
Lolytics Auto Accept - Activity Log
User-visible record of what the controller and the engine did

- Bounded to MAX_ENTRIES, oldest entries evicted first
- Entries are immutable once appended
- Listeners are told about every append (UI, Telegram mirror)
- Not persisted across restarts
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Deque, List, Tuple


MAX_ENTRIES = 50


class Severity(str, Enum):
    """Severity of an activity log entry"""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LogEntry:
    """Single timestamped activity log line"""
    message: str
    severity: Severity = Severity.INFO
    capture_time: datetime = field(default_factory=datetime.now)

    def format(self) -> str:
        return f"[{self.capture_time.strftime('%H:%M:%S')}] {self.message}"


class ActivityLog:
    """
    Append-only FIFO log of LogEntry objects.
    Size never exceeds max_entries; survivors keep arrival order.
    """

    def __init__(self, max_entries: int = MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: Deque[LogEntry] = deque(maxlen=max_entries)
        self._listeners: List[Callable[[LogEntry], None]] = []

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def entries(self) -> Tuple[LogEntry, ...]:
        """Get entries, oldest first"""
        return tuple(self._entries)

    def append(self, entry: LogEntry) -> LogEntry:
        """Append an entry, evicting from the front when full"""
        self._entries.append(entry)

        if entry.severity == Severity.ERROR:
            logging.error(f"[Activity] {entry.message}")
        else:
            logging.info(f"[Activity] {entry.message}")

        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception as e:
                logging.debug(f"Activity log listener error: {e}")
        return entry

    def add(self, message: str, severity: Severity = Severity.INFO) -> LogEntry:
        """Build and append an entry stamped with the current time"""
        return self.append(LogEntry(message=message, severity=severity))

    def info(self, message: str) -> LogEntry:
        return self.add(message, Severity.INFO)

    def success(self, message: str) -> LogEntry:
        return self.add(message, Severity.SUCCESS)

    def error(self, message: str) -> LogEntry:
        return self.add(message, Severity.ERROR)

    # ==================== LISTENERS ====================

    def add_listener(self, callback: Callable[[LogEntry], None]):
        """Add append listener"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[LogEntry], None]):
        """Remove append listener"""
        if callback in self._listeners:
            self._listeners.remove(callback)
