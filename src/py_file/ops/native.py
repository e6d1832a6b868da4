"""Native calls — the blocking leaf operations everything else is built from.

Each function here performs one (or a tightly bound pair of) OS calls and
either returns a payload or raises.  They know nothing about execution
modes or callbacks: ``py_file.dispatch`` runs them inline or in a worker
thread, and the primitives, composites and handle methods ``yield`` them
as steps.

Errors are raised the way the OS reports them (``OSError`` subclasses
with ``errno`` set), except where the library detects a problem first,
which raises ``FileError``.
"""

import errno
import io
import os
import tempfile
from typing import Any

from py_file.errors import ErrorKind, FileError
from py_file.flags import DEFAULT_FILE_MODE, OpenFlag
from py_file.result import EntityKind

_HAS_PREAD = hasattr(os, "pread")


def _os_error(code: int, path: str) -> OSError:
    """Build the ``OSError`` subclass the OS would raise for *code*."""
    return OSError(code, os.strerror(code), path)


def probe_access(path: str, mode: int = os.R_OK | os.W_OK) -> None:
    """Check that *path* exists and grants *mode*.

    Raises:
        FileNotFoundError: If nothing exists at *path*.
        PermissionError: If the access check fails.

    """
    if not os.path.lexists(path):
        raise _os_error(errno.ENOENT, path)
    if not os.access(path, mode):
        raise _os_error(errno.EACCES, path)


def open_descriptor(path: str, flags: OpenFlag | str, mode: int = DEFAULT_FILE_MODE) -> int:
    """Open *path* with the given flag string and return the descriptor."""
    return os.open(path, OpenFlag(flags).os_flags, mode)


def _check_window(size: int, offset: int, length: int) -> int:
    """Resolve and validate an ``offset``/``length`` window into *size* bytes.

    A zero *length* means "everything after *offset*".
    """
    length = length or size - offset
    if offset < 0 or length < 0 or offset + length > size:
        msg = f"window [{offset}, {offset}+{length}) outside buffer of {size} bytes"
        raise FileError(ErrorKind.INDEX_OUT_OF_BOUNDS, msg)
    return length


def read_into(
    fd: int,
    buffer: bytearray | memoryview,
    offset: int = 0,
    length: int = 0,
    position: int | None = None,
) -> int:
    """Read from *fd* into ``buffer[offset:offset + length]``.

    Args:
        fd: An open descriptor.
        buffer: Writable destination.
        offset: First byte of *buffer* to fill.
        length: Bytes to read (0 means up to the end of *buffer*).
        position: File offset to read at, or None for the current offset.

    Returns:
        The number of bytes actually read (0 at end of file).

    """
    length = _check_window(len(buffer), offset, length)
    if position is None:
        data = os.read(fd, length)
    elif _HAS_PREAD:
        data = os.pread(fd, length, position)
    else:
        os.lseek(fd, position, os.SEEK_SET)
        data = os.read(fd, length)
    memoryview(buffer)[offset : offset + len(data)] = data
    return len(data)


def write_from(
    fd: int,
    data: bytes | bytearray | memoryview | str,
    offset: int = 0,
    length: int = 0,
    position: int | None = None,
    encoding: str = "utf-8",
) -> int:
    """Write ``data[offset:offset + length]`` to *fd*.

    Strings are encoded first; *offset* and *length* then apply to the
    encoded bytes.

    Returns:
        The number of bytes written.

    """
    payload = data.encode(encoding) if isinstance(data, str) else data
    length = _check_window(len(payload), offset, length)
    view = memoryview(payload)[offset : offset + length]
    if position is None:
        return os.write(fd, view)
    if _HAS_PREAD:
        return os.pwrite(fd, view, position)
    os.lseek(fd, position, os.SEEK_SET)
    return os.write(fd, view)


def read_content(path: str, encoding: str | None = None) -> bytes | str:
    """Return the whole content of the file at *path*."""
    with open(path, "rb") as handle:
        content = handle.read()
    return content.decode(encoding) if encoding is not None else content


def write_content(
    path: str,
    data: bytes | bytearray | str,
    *,
    flags: OpenFlag | str = OpenFlag.WRITE,
    encoding: str = "utf-8",
    mode: int = DEFAULT_FILE_MODE,
) -> None:
    """Write *data* to *path*, opening it with *flags* (``w`` or ``a`` style)."""
    payload = data.encode(encoding) if isinstance(data, str) else bytes(data)
    fd = open_descriptor(path, flags, mode)
    try:
        view = memoryview(payload)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    finally:
        os.close(fd)


def list_names(path: str) -> list[str]:
    """Return the entry names of the directory at *path*, sorted."""
    return sorted(os.listdir(path))


def remove_entry(path: str, kind: EntityKind = EntityKind.FILE) -> None:
    """Remove one file (``unlink``) or one empty directory (``rmdir``).

    The entry must be readable and writable first; a symbolic link is
    removed without consulting its target.
    """
    if not os.path.islink(path):
        probe_access(path)
    if kind is EntityKind.DIR:
        os.rmdir(path)
    else:
        os.unlink(path)


def make_temp_dir(prefix: str) -> str:
    """Create a uniquely named directory whose path starts with *prefix*.

    ``"/tmp/job-"`` yields ``/tmp/job-XXXXXXXX``; a prefix ending in a
    separator creates an unprefixed directory inside that folder.
    """
    directory, name = os.path.split(prefix)
    return tempfile.mkdtemp(prefix=name, dir=directory or None)


def set_times(target: str | int, atime: float, mtime: float) -> None:
    """Set access and modification times of a path or descriptor."""
    os.utime(target, (atime, mtime))


def truncate_target(target: str | int, length: int = 0) -> None:
    """Truncate a path or descriptor to *length* bytes."""
    if isinstance(target, int):
        os.ftruncate(target, length)
    else:
        os.truncate(target, length)


def data_sync(fd: int) -> None:
    """Flush *fd*'s data (not necessarily its metadata) to storage."""
    getattr(os, "fdatasync", os.fsync)(fd)


class ByteRange(io.RawIOBase):
    """Read-only view of the inclusive byte range ``[start, end]`` of a file."""

    def __init__(self, raw: io.FileIO, start: int, end: int) -> None:
        """Position *raw* at *start*; it is closed along with this view."""
        super().__init__()
        raw.seek(start)
        self._raw = raw
        self._remaining = max(end - start + 1, 0)

    def readable(self) -> bool:
        """Return True."""
        return True

    def readinto(self, buffer: Any) -> int:
        """Fill *buffer* without passing the range end; 0 once it is reached."""
        if self._remaining == 0:
            return 0
        count = self._raw.readinto(memoryview(buffer)[: self._remaining]) or 0
        self._remaining -= count
        return count

    def close(self) -> None:
        """Close the underlying file, then this view."""
        if not self.closed:
            self._raw.close()
        super().close()


def open_reader(path: str, start: int = -1, end: int = -1) -> io.BufferedReader:
    """Open *path* as a buffered binary reader.

    With both *start* and *end* non-negative, only bytes ``start..end``
    (inclusive) are visible; otherwise the reader covers the whole file.
    """
    raw = io.FileIO(path, "r")
    if start < 0 or end < 0:
        return io.BufferedReader(raw)
    try:
        return io.BufferedReader(ByteRange(raw, start, end))
    except OSError:
        raw.close()
        raise


def open_writer(path: str, append: bool = False) -> io.BufferedWriter:
    """Open *path* as a buffered binary writer, truncating unless *append*."""
    return io.BufferedWriter(io.FileIO(path, "a" if append else "w"))
