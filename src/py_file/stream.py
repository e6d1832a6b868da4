"""Buffered input stream — a file's bytes held in memory, read with a cursor.

The stream moves through three states and never goes back::

    UNOPENED --open()--> OPENED --close()--> CLOSED

``open`` stats the file, opens it read-only through the owning ``File``
handle, and fills the buffer exactly once.  Everything after that
(``read``, ``skip``, ``mark``/``reset``) is pure in-memory cursor work,
so those methods raise ``FileError`` directly instead of going through
the result convention.

Cursor invariant: ``0 <= position <= count <= len(buffer)``.  An
``offset``/``length`` pair given to ``open`` narrows the visible window
to ``[offset, min(offset + length, size))``; the cursor starts at the
window's first byte.  The mark starts at zero whatever the window, so
``reset`` before any ``mark`` rewinds to the start of the buffer.
"""

import os
from collections.abc import Iterator
from enum import StrEnum
from functools import partial
from types import TracebackType
from typing import Any

from py_file.config import FileConfig
from py_file.dispatch import Steps, perform, resolve_sync
from py_file.errors import ErrorKind, FileError
from py_file.flags import OpenFlag
from py_file.handle import File
from py_file.logging import Logger, LogLevel
from py_file.result import Callback, Status, last_error

EOF = -1


class StreamState(StrEnum):
    """Lifecycle of a ``FileInputStream``."""

    UNOPENED = "unopened"
    OPENED = "opened"
    CLOSED = "closed"


def _read_to_end(fd: int, chunk_size: int) -> bytearray:
    """Read chunks from *fd* until end of file and concatenate them."""
    chunks = bytearray()
    while chunk := os.read(fd, chunk_size):
        chunks += chunk
    return chunks


def _read_one_chunk(fd: int, chunk_size: int, size: int) -> bytearray:
    """Read a single chunk from *fd* into a zero-filled buffer of *size* bytes.

    Only correct when the whole file arrives in one read.
    """
    buffer = bytearray(size)
    chunk = os.read(fd, chunk_size)[:size]
    buffer[: len(chunk)] = chunk
    return buffer


class FileInputStream:
    """Read a file's bytes from an in-memory buffer filled at open time."""

    def __init__(
        self,
        source: File | str | os.PathLike[str] | None,
        parent: File | str | None = None,
        *,
        logger: Logger | None = None,
        config: FileConfig | None = None,
    ) -> None:
        """Create an unopened stream over *source*.

        Args:
            source: A ``File`` handle, or a path to build one from.
            parent: Resolve a path *source* against this directory.
            logger: Audit log for a handle built here.
            config: Configuration for a handle built here.

        Raises:
            FileError: If *source* is None.

        """
        if source is None:
            msg = "a stream needs a file"
            raise FileError(ErrorKind.FILE_NOT_FOUND, msg)
        if isinstance(source, File):
            self.file = source
        else:
            self.file = File(source, parent, logger=logger, config=config)
        self._buffer: bytearray | None = None
        self._position = 0
        self._count = 0
        self._mark = 0
        self._state = StreamState.UNOPENED

    @property
    def state(self) -> StreamState:
        """Return the lifecycle state."""
        return self._state

    @property
    def position(self) -> int:
        """Return the read cursor."""
        return self._position

    @property
    def count(self) -> int:
        """Return the end of the visible window."""
        return self._count

    def _ensure_open(self) -> bytearray:
        if self._buffer is None:
            raise FileError(ErrorKind.STREAM_CLOSED, self.file.path)
        return self._buffer

    def _open_steps(self, offset: int, length: int, blocking: bool) -> Steps:
        if self._state is not StreamState.UNOPENED:
            raise FileError(ErrorKind.STREAM_CLOSED, f"cannot reopen a {self._state} stream")
        info = yield from self.file.stat_steps()
        size = info.st_size
        fd = yield from self.file.open_steps(OpenFlag.READ)
        chunk_size = self.file.config.chunk_size
        if blocking:
            buffer = yield partial(_read_one_chunk, fd, chunk_size, size)
        else:
            buffer = yield partial(_read_to_end, fd, chunk_size)

        if offset > 0 and length > 0:
            start, end = offset, min(offset + length, size)
        else:
            start, end = 0, size
        self._buffer = buffer
        self._count = min(end, len(buffer))
        self._position = min(start, self._count)
        self._mark = 0
        self._state = StreamState.OPENED
        self.file.logger.log(
            LogLevel.DEBUG,
            f"stream opened, {self.available()} of {size} bytes visible",
            source="stream",
            path=self.file.path,
        )
        return self.available()

    def open(
        self,
        offset: int = 0,
        length: int = 0,
        blocking: bool = True,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Fill the buffer from the file.

        Args:
            offset: First visible byte, when both offset and length are positive.
            length: Number of visible bytes from *offset*.
            blocking: Take a single chunk as the whole file; otherwise
                accumulate chunks until end of file.
            callback: Receives ``(status, available_or_cause)``.
            sync: Force blocking or async mode.

        Returns:
            The number of bytes available (blocking, no callback).

        """
        operation = self._open_steps(offset, length, blocking)
        return perform(operation, sync=resolve_sync(sync, callback), callback=callback)

    def read(self, destination: bytearray | memoryview | None = None, off: int = 0, length: int = 0) -> int:
        """Read bytes from the buffer.

        Without *destination*, return the next byte's value, or ``-1`` at
        end of data.  With one, copy up to *length* bytes (default: its
        whole size) to ``destination[off:]``.

        Returns:
            The byte value or the number copied; ``-1`` at end of data.

        Raises:
            FileError: ``STREAM_CLOSED`` when not open, or
                ``INDEX_OUT_OF_BOUNDS`` when the range does not fit.

        """
        buffer = self._ensure_open()
        if destination is None:
            if self._position >= self._count:
                return EOF
            value = buffer[self._position]
            self._position += 1
            return value

        length = length or len(destination)
        if off < 0 or length < 0 or length > len(destination) - off:
            msg = f"range off={off} length={length} exceeds destination of {len(destination)}"
            raise FileError(ErrorKind.INDEX_OUT_OF_BOUNDS, msg)
        if self._position >= self._count:
            return EOF
        length = min(length, self._count - self._position)
        if length <= 0:
            return 0
        destination[off : off + length] = buffer[self._position : self._position + length]
        self._position += length
        return length

    def available(self) -> int:
        """Return the number of bytes left in the window."""
        return self._count - self._position

    def skip(self, n: int) -> int:
        """Advance the cursor by up to *n* bytes; return how many were skipped."""
        if self._position + n > self._count:
            n = self._count - self._position
        if n < 0:
            return 0
        self._position += n
        return n

    def mark(self, read_ahead_limit: int = 0) -> None:  # noqa: ARG002
        """Remember the cursor; there is no read-ahead limit."""
        self._mark = self._position

    @staticmethod
    def mark_supported() -> bool:
        """Return True; marking is always supported."""
        return True

    def reset(self) -> None:
        """Move the cursor back to the mark (zero if never marked)."""
        self._position = self._mark

    def close(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Drop the buffer, zero the cursors, and close the file's descriptor."""
        self._buffer = None
        self._position = self._count = self._mark = 0
        self._state = StreamState.CLOSED
        return self.file.close(callback, sync=sync)

    def __enter__(self) -> "FileInputStream":
        """Open the stream (blocking) unless already open."""
        if self._state is StreamState.UNOPENED and self.open(sync=True) is Status.ERROR:
            raise last_error() or FileError(ErrorKind.STREAM_CLOSED, self.file.path)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the stream (blocking)."""
        if self._state is StreamState.OPENED:
            self.close(sync=True)

    def __iter__(self) -> Iterator[int]:
        """Yield the remaining bytes one at a time."""
        while (value := self.read()) != EOF:
            yield value
