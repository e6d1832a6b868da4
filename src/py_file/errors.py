"""Error kinds — the closed set of failure causes the library reports itself.

Native calls fail with ordinary ``OSError`` subclasses
(``FileNotFoundError``, ``PermissionError``, ...) and those are passed to
callers untouched.  Everything the library detects on its own, *before*
a native call is attempted, is reported as a ``FileError`` carrying one
``ErrorKind``:

- **Precondition violations** — a required argument is missing
  (``SOURCE_NOT_FOUND``, ``FILE_DESCRIPTOR_NOT_FOUND``, ...).
- **Type mismatches** — a stat succeeded but the entry is the wrong
  kind (``NOT_A_FILE``, ``NOT_A_DIRECTORY``).
- **Logical-state violations** — closing something that is not open,
  reading a closed stream, copying past a buffer's end.

The kind names are part of the observable contract, so they live in a
``StrEnum``: comparable by value, printable without ``.value``, and
closed against typos.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Enumerate every failure cause raised by the library itself."""

    SOURCE_NOT_FOUND = "source-not-found"
    PATH_NOT_FOUND = "path-not-found"
    FILE_NOT_FOUND = "file-not-found"
    FILE_ALREADY_EXISTS = "file-already-exists"
    NOT_A_FILE = "not-a-file"
    NOT_A_DIRECTORY = "not-a-directory"
    STREAM_CLOSED = "stream-closed"
    INDEX_OUT_OF_BOUNDS = "index-out-of-bounds"
    FILE_DESCRIPTOR_NOT_FOUND = "file-descriptor-not-found"
    STAT_TARGET_NOT_FOUND = "stat-target-not-found"
    PREFIX_NOT_FOUND = "prefix-not-found"
    FILE_NOT_OPEN = "file-not-open"


class FileError(Exception):
    """Raise when the library rejects an operation before touching the OS.

    Attributes:
        kind: The closed-set cause of the failure.

    """

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        """Create an error for *kind* with an optional detail message.

        Args:
            kind: The failure cause.
            message: Human-readable detail (defaults to the kind name).

        """
        super().__init__(f"{kind}: {message}" if message else str(kind))
        self.kind = kind
