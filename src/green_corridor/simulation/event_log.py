"""
Timestamped event log, newest entry first
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Optional


@dataclass(frozen=True)
class LogEntry:
    time: str
    message: str

    def __str__(self) -> str:
        return f"[{self.time}] {self.message}"


class EventLog:
    """Append-only log of human-readable drive events"""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now
        self._entries: List[LogEntry] = []

    def append(self, message: str) -> LogEntry:
        entry = LogEntry(time=self._clock().strftime("%H:%M:%S"), message=message)
        self._entries.insert(0, entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def messages(self) -> List[str]:
        return [e.message for e in self._entries]

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
