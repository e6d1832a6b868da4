"""Primitive operations — one native call each, in either execution mode.

Every function here follows the same shape::

    def primitive(<required>, <options>, *, callback=None, sync=False): ...

- A missing required argument is reported through the result convention
  as a ``FileError`` naming the missing precondition; no native call is
  attempted.
- Otherwise the native call from ``py_file.ops.native`` (or ``os``) is
  handed to ``py_file.dispatch.perform`` together with the mode.

Payloads: ``stat`` → ``os.stat_result``; ``open_fd`` → descriptor;
``read_fd`` / ``write_fd`` → byte count; ``read_file_or_dir`` → bytes,
text or a sorted name list; ``realpath`` / ``create_temp_dir`` → path.
The rest have no payload (``Status.SUCCESS`` when blocking without a
callback).
"""

import os
from functools import partial
from typing import Any

from py_file.dispatch import perform, reject
from py_file.errors import ErrorKind
from py_file.flags import DEFAULT_DIR_MODE, DEFAULT_FILE_MODE, OpenFlag
from py_file.ops import native
from py_file.result import Callback, EntityKind

_READ_WRITE = os.R_OK | os.W_OK


def access(
    path: str | None,
    mode: int = _READ_WRITE,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Check that *path* exists and grants the ``os.*_OK`` bits in *mode*."""
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "access needs a path", sync=sync, callback=callback)
    return perform(partial(native.probe_access, path, mode), sync=sync, callback=callback)


def append_file(
    path: str | None,
    data: bytes | str,
    *,
    encoding: str = "utf-8",
    mode: int = DEFAULT_FILE_MODE,
    flag: OpenFlag | str = OpenFlag.APPEND,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Append *data* to *path*, creating the file if needed."""
    if path is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "append_file needs a path", sync=sync, callback=callback)
    return perform(
        partial(native.write_content, path, data, flags=flag, encoding=encoding, mode=mode),
        sync=sync,
        callback=callback,
    )


def chmod(path: str | None, mode: int, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Set the permission bits of *path* to *mode*, unchanged."""
    if path is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "chmod needs a path", sync=sync, callback=callback)
    return perform(partial(os.chmod, path, mode), sync=sync, callback=callback)


def close_fd(fd: int | None, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Close descriptor *fd*."""
    if fd is None:
        return reject(
            ErrorKind.FILE_DESCRIPTOR_NOT_FOUND, "close_fd needs a descriptor", sync=sync, callback=callback
        )
    return perform(partial(os.close, fd), sync=sync, callback=callback)


def create_temp_dir(prefix: str | None, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Create a unique directory named *prefix* plus random characters."""
    if prefix is None:
        return reject(ErrorKind.PREFIX_NOT_FOUND, "create_temp_dir needs a prefix", sync=sync, callback=callback)
    return perform(partial(native.make_temp_dir, prefix), sync=sync, callback=callback)


def data_sync(fd: int | None, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Flush the data of descriptor *fd* to storage."""
    if fd is None:
        return reject(
            ErrorKind.FILE_DESCRIPTOR_NOT_FOUND, "data_sync needs a descriptor", sync=sync, callback=callback
        )
    return perform(partial(native.data_sync, fd), sync=sync, callback=callback)


def fsync(fd: int | None, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Flush data and metadata of descriptor *fd* to storage."""
    if fd is None:
        return reject(ErrorKind.FILE_DESCRIPTOR_NOT_FOUND, "fsync needs a descriptor", sync=sync, callback=callback)
    return perform(partial(os.fsync, fd), sync=sync, callback=callback)


# Public name of the full flush; ``fsync`` mirrors ``os``.
sync = fsync


def futimes(
    fd: int | None,
    atime: float = 0,
    mtime: float = 0,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Set access and modification times through descriptor *fd*."""
    if fd is None:
        return reject(
            ErrorKind.FILE_DESCRIPTOR_NOT_FOUND, "futimes needs a descriptor", sync=sync, callback=callback
        )
    return perform(partial(native.set_times, fd, atime, mtime), sync=sync, callback=callback)


def mkdir(
    path: str | None,
    mode: int = DEFAULT_DIR_MODE,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Create one directory; its parent must already exist."""
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "mkdir needs a path", sync=sync, callback=callback)
    return perform(partial(os.mkdir, path, mode), sync=sync, callback=callback)


def open_fd(
    path: str | None,
    flags: OpenFlag | str = OpenFlag.READ_WRITE,
    mode: int = DEFAULT_FILE_MODE,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Open *path* with *flags*; the payload is the new descriptor."""
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "open_fd needs a path", sync=sync, callback=callback)
    return perform(partial(native.open_descriptor, path, flags, mode), sync=sync, callback=callback)


def read_fd(
    fd: int | None,
    buffer: bytearray | memoryview,
    offset: int = 0,
    length: int = 0,
    position: int | None = None,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Read from *fd* into *buffer*; the payload is the byte count."""
    if fd is None:
        return reject(ErrorKind.FILE_DESCRIPTOR_NOT_FOUND, "read_fd needs a descriptor", sync=sync, callback=callback)
    return perform(
        partial(native.read_into, fd, buffer, offset, length, position),
        sync=sync,
        callback=callback,
    )


def read_file_or_dir(
    path: str | None,
    kind: EntityKind = EntityKind.FILE,
    *,
    encoding: str | None = None,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Read a file's content, or a directory's sorted entry names."""
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "read_file_or_dir needs a path", sync=sync, callback=callback)
    if kind is EntityKind.DIR:
        return perform(partial(native.list_names, path), sync=sync, callback=callback)
    return perform(partial(native.read_content, path, encoding), sync=sync, callback=callback)


def realpath(path: str | None, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Resolve every symbolic link in *path*; the path must exist."""
    if path is None:
        return reject(ErrorKind.PATH_NOT_FOUND, "realpath needs a path", sync=sync, callback=callback)
    return perform(partial(os.path.realpath, path, strict=True), sync=sync, callback=callback)


def remove_file_or_dir(
    path: str | None,
    kind: EntityKind = EntityKind.FILE,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Unlink a file or remove an empty directory, after an access check."""
    if path is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "remove_file_or_dir needs a path", sync=sync, callback=callback)
    return perform(partial(native.remove_entry, path, kind), sync=sync, callback=callback)


def rename(
    src: str | None,
    dst: str | None,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Rename *src* to *dst*."""
    if src is None or dst is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "rename needs src and dst", sync=sync, callback=callback)
    return perform(partial(os.rename, src, dst), sync=sync, callback=callback)


def stat(
    target: str | int | None,
    *,
    follow_symlinks: bool = True,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Return metadata for a path, or for an open descriptor."""
    if target is None:
        return reject(ErrorKind.STAT_TARGET_NOT_FOUND, "stat needs a path or descriptor", sync=sync, callback=callback)
    return perform(partial(os.stat, target, follow_symlinks=follow_symlinks), sync=sync, callback=callback)


def symlink(
    src: str | None,
    dst: str | None,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Create a symbolic link at *dst* pointing to *src*."""
    if src is None or dst is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "symlink needs src and dst", sync=sync, callback=callback)
    return perform(partial(os.symlink, src, dst), sync=sync, callback=callback)


def truncate(
    target: str | int | None,
    length: int = 0,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Truncate a path or descriptor to *length* bytes."""
    if target is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "truncate needs a path or descriptor", sync=sync, callback=callback)
    return perform(partial(native.truncate_target, target, length), sync=sync, callback=callback)


def utimes(
    path: str | None,
    atime: float = 0,
    mtime: float = 0,
    *,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Set access and modification times of *path* (seconds since the epoch)."""
    if path is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "utimes needs a path", sync=sync, callback=callback)
    return perform(partial(native.set_times, path, atime, mtime), sync=sync, callback=callback)


def write_fd(
    fd: int | None,
    data: bytes | bytearray | memoryview | str,
    offset: int = 0,
    length: int = 0,
    position: int | None = None,
    *,
    encoding: str = "utf-8",
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Write *data* (or a window of it) to *fd*; the payload is the byte count."""
    if fd is None:
        return reject(ErrorKind.FILE_DESCRIPTOR_NOT_FOUND, "write_fd needs a descriptor", sync=sync, callback=callback)
    return perform(
        partial(native.write_from, fd, data, offset, length, position, encoding),
        sync=sync,
        callback=callback,
    )


def write_file(
    path: str | None,
    data: bytes | bytearray | str,
    *,
    encoding: str = "utf-8",
    mode: int = DEFAULT_FILE_MODE,
    flag: OpenFlag | str = OpenFlag.WRITE,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Replace the content of *path* with *data*, creating the file if needed."""
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "write_file needs a path", sync=sync, callback=callback)
    return perform(
        partial(native.write_content, path, data, flags=flag, encoding=encoding, mode=mode),
        sync=sync,
        callback=callback,
    )
