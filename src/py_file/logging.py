"""Audit log — what the library did to the filesystem, and what went wrong.

Handles record structured entries for the events a caller cannot see in
a return value: a descriptor replaced without being closed, a watch
started or stopped, a best-effort ``destroy`` that failed quietly.

- **LogLevel** — DEBUG < INFO < WARNING < ERROR, comparable with ``<``.
- **LogEntry** — one frozen record: level, message, source, path.
- **Logger** — an in-memory buffer with a level threshold, an optional
  capacity (oldest entries fall off first), and query helpers.

Every handle writes to ``default_logger()`` unless it was given its own
``Logger``, so one buffer collects the whole process's history.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How serious an audit event is; higher is worse."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One audit record.

    Attributes:
        level: How serious the event is.
        message: What happened, in words.
        source: Which part of the library logged it ("file", "stream").
        path: The filesystem path concerned, or ``""``.

    """

    level: LogLevel
    message: str
    source: str
    path: str = ""

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message (path)``."""
        suffix = f" ({self.path})" if self.path else ""
        return f"[{self.level.name}] {self.source}: {self.message}{suffix}"


class Logger:
    """In-memory audit buffer."""

    def __init__(self, min_level: LogLevel = LogLevel.DEBUG, capacity: int | None = None) -> None:
        """Create an empty buffer.

        Args:
            min_level: Entries below this level are dropped on arrival.
            capacity: Keep at most this many entries (None keeps all).

        Raises:
            ValueError: If *capacity* is not positive.

        """
        if capacity is not None and capacity <= 0:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self.min_level = min_level
        self._records: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of the buffered entries, oldest first."""
        return list(self._records)

    def log(self, level: LogLevel, message: str, *, source: str, path: str = "") -> None:
        """Record one event, unless it is below the threshold."""
        if level < self.min_level:
            return
        self._records.append(LogEntry(level=level, message=message, source=source, path=path))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        path: str | None = None,
    ) -> list[LogEntry]:
        """Return the entries that satisfy every given criterion.

        Args:
            min_level: Keep entries at or above this level.
            source: Keep entries from this component.
            path: Keep entries about this path.

        """
        return [
            entry
            for entry in self._records
            if (min_level is None or entry.level >= min_level)
            and (source is None or entry.source == source)
            and (path is None or entry.path == path)
        ]

    def dump(self) -> str:
        """Return every entry formatted, one per line."""
        return "\n".join(str(entry) for entry in self._records)

    def clear(self) -> None:
        """Drop every buffered entry."""
        self._records.clear()

    def __len__(self) -> int:
        """Return the number of buffered entries."""
        return len(self._records)


_default_logger = Logger()


def default_logger() -> Logger:
    """Return the process-wide log buffer handles write to by default."""
    return _default_logger
