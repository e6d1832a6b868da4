"""The File handle — one object per path, exposing every operation on it.

A ``File`` wraps:

- an absolute, normalized **path** (only ``create_temp_dir`` re-points it);
- at most one open **descriptor**, owned by the handle;
- at most one **watch subscription**, plus the policy deciding whether
  cancelling it also destroys the path.

Calling convention
------------------
Every operating method takes ``callback=None, *, sync=None``:

- no callback → blocking; the payload is returned directly, or
  ``Status.ERROR`` with the cause available from ``File.exception()``;
- a callback → scheduled on the running event loop; the callback gets
  ``(status, payload_or_cause)`` and an ``asyncio.Task`` is returned;
- ``sync=True`` / ``sync=False`` forces either mode explicitly.

Each method is a generator of native steps (``py_file.dispatch``), and
the ``*_steps`` methods are public so that higher layers (the input
stream, callers' own composites) can chain them with ``yield from``.

Derived checks (``exists``, ``is_file``, ``is_dir``) succeed with
``True``.  A stat that succeeds on the wrong kind of entry is a failure
with its own cause (``NOT_A_FILE`` / ``NOT_A_DIRECTORY``), never a
silent ``False``.
"""

from __future__ import annotations

import asyncio
import atexit
import os
import stat
import tempfile
import time
from collections.abc import Sequence
from functools import partial
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from py_file.config import FileConfig
from py_file.dispatch import Steps, perform, resolve_sync
from py_file.errors import ErrorKind, FileError
from py_file.filters import as_callable
from py_file.flags import EXECUTE_BITS, READ_BITS, WRITE_BITS, OpenFlag, Permission
from py_file.logging import Logger, LogLevel, default_logger
from py_file.ops import native
from py_file.ops.composite import mkdirs_steps, rimraf_steps
from py_file.ops.exec import ExecResult, run_executable
from py_file.result import Callback, EntityKind, Status, last_error
from py_file.watch import EventListener, UnwatchPolicy, WatchSubscription

if TYPE_CHECKING:
    from py_file.env import Environment
    from py_file.filters import Accept

_SOURCE = "file"


def _running_loop() -> asyncio.AbstractEventLoop | None:
    """Return the running event loop, or None outside one."""
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class File:
    """A filesystem path plus the resources opened on it."""

    def __init__(
        self,
        path: str | os.PathLike[str] | None,
        parent: File | str | os.PathLike[str] | None = None,
        *,
        delete_on_unwatch: bool | UnwatchPolicy = False,
        logger: Logger | None = None,
        config: FileConfig | None = None,
    ) -> None:
        """Create a handle for *path*.

        Args:
            path: The path, absolute or relative.
            parent: Resolve *path* against this handle or directory
                (``""`` means the current working directory).
            delete_on_unwatch: Destroy the path when the watch ends.
            logger: Audit log to write to (default: the process log).
            config: Defaults for modes, flags and encoding.

        Raises:
            FileError: If *path* is None.

        """
        if path is None:
            msg = "a File needs a path"
            raise FileError(ErrorKind.PATH_NOT_FOUND, msg)
        self._path = self._resolve(os.fspath(path), parent)
        self._fd: int | None = None
        self._watcher: WatchSubscription | None = None
        if isinstance(delete_on_unwatch, UnwatchPolicy):
            self._unwatch_policy = delete_on_unwatch
        else:
            self._unwatch_policy = UnwatchPolicy.DELETE if delete_on_unwatch else UnwatchPolicy.KEEP
        self._logger = logger if logger is not None else default_logger()
        self._config = config if config is not None else FileConfig.from_environment()

    @staticmethod
    def _resolve(path: str, parent: File | str | os.PathLike[str] | None) -> str:
        """Turn *path* into an absolute, normalized path."""
        if parent is None:
            return os.path.abspath(path)
        if isinstance(parent, File):
            base = parent.path
        elif parent == "":
            base = os.getcwd()
        else:
            base = os.fspath(parent)
        return os.path.abspath(os.path.join(base, path))

    # -- Plumbing -----------------------------------------------------------

    def _run(self, operation: Steps, callback: Callback | None, sync: bool | None) -> Any:
        """Dispatch *operation* in the mode the caller asked for."""
        return perform(operation, sync=resolve_sync(sync, callback), callback=callback)

    def _log(self, level: LogLevel, message: str) -> None:
        """Append an entry about this path to the audit log."""
        self._logger.log(level, message, source=_SOURCE, path=self._path)

    def _child(self, name: str) -> File:
        """Return a handle for entry *name* of this directory."""
        return File(name, parent=self, logger=self._logger, config=self._config)

    # -- Path properties ----------------------------------------------------

    @property
    def path(self) -> str:
        """Return the absolute, normalized path."""
        return self._path

    @property
    def fd(self) -> int | None:
        """Return the tracked descriptor, or None when unopened."""
        return self._fd

    @property
    def name(self) -> str:
        """Return the last path component."""
        return os.path.basename(self._path)

    @property
    def parent(self) -> str:
        """Return the containing directory's path."""
        return os.path.dirname(self._path)

    @property
    def extension(self) -> str:
        """Return the extension including the dot, or ``""``."""
        return os.path.splitext(self._path)[1]

    @property
    def absolute_path(self) -> str:
        """Return the absolute path (always the same as ``path``)."""
        return os.path.abspath(self._path)

    @property
    def canonical_path(self) -> str:
        """Return the path with forward slashes on every platform."""
        return PurePath(self._path).as_posix()

    @property
    def config(self) -> FileConfig:
        """Return the configuration this handle uses."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the audit log this handle writes to."""
        return self._logger

    @property
    def unwatch_policy(self) -> UnwatchPolicy:
        """Return what ``unwatch`` does to the path."""
        return self._unwatch_policy

    def parent_file(self) -> File:
        """Return a handle for the containing directory."""
        return File(self.parent, logger=self._logger, config=self._config)

    def absolute_file(self) -> File:
        """Return a handle for the absolute path."""
        return File(self.absolute_path, logger=self._logger, config=self._config)

    def canonical_file(self) -> File:
        """Return a handle for the canonical path."""
        return File(self.canonical_path, logger=self._logger, config=self._config)

    def is_absolute(self) -> bool:
        """Return True; handles always hold absolute paths."""
        return os.path.isabs(self._path)

    def is_relative(self) -> bool:
        """Return the opposite of ``is_absolute``."""
        return not self.is_absolute()

    def is_open(self) -> bool:
        """Return True while a descriptor is tracked."""
        return self._fd is not None

    def is_watched(self) -> bool:
        """Return True while a watch subscription is live."""
        return self._watcher is not None

    def to_dict(self) -> dict[str, str]:
        """Split the path into root, dir, base, ext and name."""
        pure = PurePath(self._path)
        return {
            "root": pure.anchor,
            "dir": self.parent,
            "base": pure.name,
            "ext": pure.suffix,
            "name": pure.stem,
        }

    @staticmethod
    def exception() -> BaseException | None:
        """Return the cause of the last blocking, callback-less failure."""
        return last_error()

    @staticmethod
    def join(*parts: str) -> str:
        """Join path components."""
        return os.path.join(*parts)

    @staticmethod
    def home_dir() -> File:
        """Return a handle for the user's home directory."""
        return File(os.path.expanduser("~"))

    @staticmethod
    def tmp_dir() -> File:
        """Return a handle for the system temporary directory."""
        return File(tempfile.gettempdir())

    @staticmethod
    def slashify(path: str, is_dir: bool = False) -> str:
        """Return *path* with ``/`` separators, a leading ``/``, and a trailing one for directories."""
        slashed = path.replace(os.sep, "/") if os.sep != "/" else path
        if not slashed.startswith("/"):
            slashed = "/" + slashed
        if is_dir and not slashed.endswith("/"):
            slashed += "/"
        return slashed

    # -- Composable steps ---------------------------------------------------

    def stat_steps(self) -> Steps:
        """Stat the path; returns the ``os.stat_result``."""
        info = yield partial(os.stat, self._path)
        return info

    def is_file_steps(self) -> Steps:
        """Require a plain file at the path."""
        info = yield from self.stat_steps()
        if not stat.S_ISREG(info.st_mode):
            raise FileError(ErrorKind.NOT_A_FILE, self._path)
        return True

    def is_dir_steps(self) -> Steps:
        """Require a directory at the path."""
        info = yield from self.stat_steps()
        if not stat.S_ISDIR(info.st_mode):
            raise FileError(ErrorKind.NOT_A_DIRECTORY, self._path)
        return True

    def absent_steps(self) -> Steps:
        """Require that nothing exists at the path yet."""
        try:
            yield partial(os.stat, self._path)
        except FileNotFoundError:
            return None
        raise FileError(ErrorKind.FILE_ALREADY_EXISTS, self._path)

    def open_steps(self, flags: OpenFlag | str | None = None) -> Steps:
        """Open the path and track the descriptor; returns it."""
        flag = OpenFlag(flags if flags is not None else self._config.open_flags)
        if flag.requires_existing:
            yield from self.is_file_steps()
        fd = yield partial(native.open_descriptor, self._path, flag, self._config.file_mode)
        if self._fd is not None:
            self._log(LogLevel.WARNING, f"descriptor {self._fd} replaced by {fd} without close")
        self._fd = fd
        self._log(LogLevel.DEBUG, f"opened descriptor {fd} ({flag})")
        return fd

    def close_steps(self) -> Steps:
        """Close the tracked descriptor."""
        if self._fd is None:
            raise FileError(ErrorKind.FILE_NOT_OPEN, self._path)
        fd = self._fd
        yield partial(os.close, fd)
        self._fd = None
        self._log(LogLevel.DEBUG, f"closed descriptor {fd}")

    def _access_steps(self, mode: int) -> Steps:
        yield partial(native.probe_access, self._path, mode)
        return True

    def _update_mode_steps(self, *, set_bits: int = 0, clear_bits: int = 0) -> Steps:
        info = yield from self.stat_steps()
        mode = (stat.S_IMODE(info.st_mode) | set_bits) & ~clear_bits
        yield partial(os.chmod, self._path, mode)

    # -- Existence and type checks ------------------------------------------

    def exists(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Succeed when something exists at the path."""

        def steps() -> Steps:
            yield from self.stat_steps()
            return True

        return self._run(steps(), callback, sync)

    def is_file(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Succeed when the path is a plain file (else ``NOT_A_FILE``)."""
        return self._run(self.is_file_steps(), callback, sync)

    def is_dir(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Succeed when the path is a directory (else ``NOT_A_DIRECTORY``)."""
        return self._run(self.is_dir_steps(), callback, sync)

    def can_read(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Succeed when the path is readable."""
        return self._run(self._access_steps(os.R_OK), callback, sync)

    def can_write(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Succeed when the path is writable."""
        return self._run(self._access_steps(os.W_OK), callback, sync)

    def can_execute(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Succeed when the path is executable."""
        return self._run(self._access_steps(os.X_OK), callback, sync)

    # -- Metadata -----------------------------------------------------------

    def length(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Return the size in bytes."""

        def steps() -> Steps:
            info = yield from self.stat_steps()
            return info.st_size

        return self._run(steps(), callback, sync)

    def last_modified(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Return the modification time in seconds since the epoch."""

        def steps() -> Steps:
            info = yield from self.stat_steps()
            return info.st_mtime

        return self._run(steps(), callback, sync)

    def set_last_modified(
        self,
        mtime: float | None = None,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Set access and modification time (default: now)."""
        when = time.time() if mtime is None else mtime

        def steps() -> Steps:
            yield partial(native.set_times, self._path, when, when)

        return self._run(steps(), callback, sync)

    def get_real_path(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Return the path with every symbolic link resolved."""

        def steps() -> Steps:
            resolved = yield partial(os.path.realpath, self._path, strict=True)
            return resolved

        return self._run(steps(), callback, sync)

    def set_executable(
        self,
        executable: bool = True,
        callback: Callback | None = None,
        *,
        owner_only: bool = True,
        sync: bool | None = None,
    ) -> Any:
        """Grant or revoke execute permission for the owner (or everybody)."""
        bits = Permission.S_IXUSR if owner_only else EXECUTE_BITS
        return self._run(self._flip_bits(bits, enable=executable), callback, sync)

    def set_readable(
        self,
        readable: bool = True,
        callback: Callback | None = None,
        *,
        owner_only: bool = True,
        sync: bool | None = None,
    ) -> Any:
        """Grant or revoke read permission for the owner (or everybody)."""
        bits = Permission.S_IRUSR if owner_only else READ_BITS
        return self._run(self._flip_bits(bits, enable=readable), callback, sync)

    def set_writable(
        self,
        writable: bool = True,
        callback: Callback | None = None,
        *,
        owner_only: bool = True,
        sync: bool | None = None,
    ) -> Any:
        """Grant or revoke write permission for the owner (or everybody)."""
        bits = Permission.S_IWUSR if owner_only else WRITE_BITS
        return self._run(self._flip_bits(bits, enable=writable), callback, sync)

    def set_read_only(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Revoke write permission for everybody."""
        return self._run(self._flip_bits(WRITE_BITS, enable=False), callback, sync)

    def _flip_bits(self, bits: int, *, enable: bool) -> Steps:
        if enable:
            return self._update_mode_steps(set_bits=bits)
        return self._update_mode_steps(clear_bits=bits)

    # -- Descriptor lifecycle -----------------------------------------------

    def open(
        self,
        flags: OpenFlag | str | None = None,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Open the path and track the descriptor.

        Read and plain append flags require an existing plain file.  A
        descriptor that is already tracked is replaced, not closed.

        Returns:
            The new descriptor (blocking, no callback).

        """
        return self._run(self.open_steps(flags), callback, sync)

    def close(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Close the tracked descriptor; ``FILE_NOT_OPEN`` when there is none."""
        return self._run(self.close_steps(), callback, sync)

    # -- Content ------------------------------------------------------------

    def get_content(
        self,
        encoding: str | None = None,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Return the whole file as bytes, or as text when *encoding* is given."""

        def steps() -> Steps:
            yield from self.is_file_steps()
            content = yield partial(native.read_content, self._path, encoding)
            return content

        return self._run(steps(), callback, sync)

    def set_content(
        self,
        data: bytes | bytearray | str,
        callback: Callback | None = None,
        *,
        encoding: str | None = None,
        sync: bool | None = None,
    ) -> Any:
        """Replace the file's content, creating it if needed."""

        def steps() -> Steps:
            try:
                info = yield from self.stat_steps()
            except FileNotFoundError:
                info = None
            if info is not None and stat.S_ISDIR(info.st_mode):
                raise FileError(ErrorKind.NOT_A_FILE, self._path)
            yield partial(
                native.write_content,
                self._path,
                data,
                flags=OpenFlag.WRITE,
                encoding=encoding or self._config.encoding,
                mode=self._config.file_mode,
            )

        return self._run(steps(), callback, sync)

    def read(
        self,
        buffer: bytearray | memoryview,
        offset: int = 0,
        length: int = 0,
        position: int | None = None,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Read into *buffer* through a short-lived descriptor; returns the byte count."""

        def steps() -> Steps:
            yield from self.is_file_steps()
            fd = yield partial(native.open_descriptor, self._path, OpenFlag.READ)
            try:
                count = yield partial(native.read_into, fd, buffer, offset, length, position)
            finally:
                yield partial(os.close, fd)
            return count

        return self._run(steps(), callback, sync)

    def write(
        self,
        data: bytes | bytearray | memoryview | str,
        offset: int = 0,
        length: int = 0,
        position: int | None = None,
        callback: Callback | None = None,
        *,
        encoding: str | None = None,
        sync: bool | None = None,
    ) -> Any:
        """Write *data* through a short-lived descriptor; returns the byte count."""

        def steps() -> Steps:
            yield from self.is_file_steps()
            fd = yield partial(native.open_descriptor, self._path, OpenFlag.READ_WRITE)
            try:
                count = yield partial(
                    native.write_from,
                    fd,
                    data,
                    offset,
                    length,
                    position,
                    encoding or self._config.encoding,
                )
            finally:
                yield partial(os.close, fd)
            return count

        return self._run(steps(), callback, sync)

    def get_input_stream(
        self,
        start: int = -1,
        end: int = -1,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Open the file as a read-only binary file object.

        Args:
            start: First byte to expose, used together with *end*.
            end: Last byte to expose (inclusive).  Leaving either bound
                negative exposes the whole file.
            callback: Receives ``(status, reader_or_cause)``.
            sync: Force blocking or async mode.

        Returns:
            An ``io.BufferedReader`` the caller must close (blocking, no callback).

        """

        def steps() -> Steps:
            yield from self.is_file_steps()
            reader = yield partial(native.open_reader, self._path, start, end)
            return reader

        return self._run(steps(), callback, sync)

    def get_output_stream(
        self,
        append: bool = False,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Open the existing file as a binary writer, truncating unless *append*."""

        def steps() -> Steps:
            yield from self.is_file_steps()
            writer = yield partial(native.open_writer, self._path, append)
            return writer

        return self._run(steps(), callback, sync)

    # -- Creation -----------------------------------------------------------

    def create_file(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Create an empty file; ``FILE_ALREADY_EXISTS`` if the path is taken."""

        def steps() -> Steps:
            yield from self.absent_steps()
            fd = yield partial(
                native.open_descriptor, self._path, OpenFlag.WRITE_CREATE_EXCLUSIVE, self._config.file_mode
            )
            yield partial(os.close, fd)

        return self._run(steps(), callback, sync)

    def create_dir(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Create the directory; its parent must exist."""

        def steps() -> Steps:
            yield from self.absent_steps()
            yield partial(os.mkdir, self._path, self._config.dir_mode)

        return self._run(steps(), callback, sync)

    def create_dirs(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Create the directory and every missing ancestor."""

        def steps() -> Steps:
            yield from self.absent_steps()
            yield from mkdirs_steps(self._path, self._config.dir_mode, exist_ok=False)

        return self._run(steps(), callback, sync)

    def create_temp_dir(
        self,
        callback: Callback | None = None,
        *,
        append_separator: bool = False,
        sync: bool | None = None,
    ) -> Any:
        """Create a unique directory using the path as prefix, and point the handle at it.

        With *append_separator* the path is an existing directory and the
        new directory is created inside it.

        Returns:
            The created directory's path.

        """

        def steps() -> Steps:
            if append_separator:
                prefix = self._path + os.sep
            else:
                yield from self.absent_steps()
                prefix = self._path
            created = yield partial(native.make_temp_dir, prefix)
            self._path = created
            return created

        return self._run(steps(), callback, sync)

    # -- Destruction --------------------------------------------------------

    def destroy_file(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Unlink the path as a plain file."""

        def steps() -> Steps:
            yield partial(native.remove_entry, self._path, EntityKind.FILE)

        return self._run(steps(), callback, sync)

    def destroy_dir(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """Delete the directory tree rooted at the path."""
        return self._run(rimraf_steps(self._path), callback, sync)

    def safe_destroy(
        self,
        kind: EntityKind = EntityKind.FILE,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Destroy the path after checking it is the expected kind of entry."""

        def steps() -> Steps:
            if kind is EntityKind.DIR:
                yield from self.is_dir_steps()
                yield from rimraf_steps(self._path)
            else:
                yield from self.is_file_steps()
                yield partial(native.remove_entry, self._path, EntityKind.FILE)

        return self._run(steps(), callback, sync)

    def destroy(self) -> None:
        """Remove the path, whatever it is, and log the outcome.

        Best effort: failures are logged, never raised or recorded as
        the last error.  Runs on the event loop when one is running,
        blocking otherwise.
        """

        def steps() -> Steps:
            info = yield partial(os.lstat, self._path)
            if stat.S_ISDIR(info.st_mode):
                yield from rimraf_steps(self._path)
                return EntityKind.DIR
            yield partial(native.remove_entry, self._path, EntityKind.FILE)
            return EntityKind.FILE

        def report(status: Status, outcome: Any) -> None:
            if status is Status.SUCCESS:
                noun = "directory" if outcome is EntityKind.DIR else "file"
                self._log(LogLevel.INFO, f"{noun} {self.name} destroyed")
            else:
                self._log(LogLevel.ERROR, f"destroy failed: {outcome}")

        perform(steps(), sync=_running_loop() is None, callback=report)

    def delete_on_exit(self) -> None:
        """Destroy the path (or end its watch) when the interpreter exits."""
        atexit.register(self._exit_cleanup)
        self._log(LogLevel.INFO, "registered for deletion on exit")

    def _exit_cleanup(self) -> None:
        if self.is_watched() and self._unwatch_policy is UnwatchPolicy.DELETE:
            self.unwatch()
        else:
            self.destroy()

    def delete_on_unwatch(self, enabled: bool = True) -> None:
        """Choose whether ``unwatch`` also destroys the path."""
        self._unwatch_policy = UnwatchPolicy.DELETE if enabled else UnwatchPolicy.KEEP

    # -- Naming -------------------------------------------------------------

    def rename_to(
        self,
        dst: File | str | os.PathLike[str],
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Rename the path to *dst*.  The handle keeps its old path."""
        target = dst.path if isinstance(dst, File) else os.fspath(dst)

        def steps() -> Steps:
            yield partial(os.rename, self._path, target)

        return self._run(steps(), callback, sync)

    def alias(
        self,
        dst: File | str | os.PathLike[str],
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Create a symbolic link at *dst* pointing to this path."""
        target = dst.path if isinstance(dst, File) else os.fspath(dst)

        def steps() -> Steps:
            yield partial(os.symlink, self._path, target)

        return self._run(steps(), callback, sync)

    def exec(
        self,
        args: Sequence[str] = (),
        callback: Callback | None = None,
        *,
        env: Environment | None = None,
        cwd: str | None = None,
        sync: bool | None = None,
    ) -> Any:
        """Run the path as a program; returns an ``ExecResult``."""

        def steps() -> Steps:
            yield from self._access_steps(os.X_OK)
            result: ExecResult = yield partial(
                run_executable, self._path, args, env=env, cwd=cwd, encoding=self._config.encoding
            )
            return result

        return self._run(steps(), callback, sync)

    # -- Listing ------------------------------------------------------------

    def list(
        self,
        accept: Accept | None = None,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Return the sorted entry names the predicate accepts."""
        return self._run(self._list_steps(accept), callback, sync)

    def list_files(
        self,
        accept: Accept | None = None,
        callback: Callback | None = None,
        *,
        sync: bool | None = None,
    ) -> Any:
        """Return handles for the entries the predicate accepts."""

        def steps() -> Steps:
            names = yield from self._list_steps(accept)
            return [self._child(name) for name in names]

        return self._run(steps(), callback, sync)

    def _list_steps(self, accept: Accept | None) -> Steps:
        yield from self.is_dir_steps()
        names = yield partial(native.list_names, self._path)
        predicate = as_callable(accept)
        if predicate is None:
            return names
        return [name for name in names if predicate(self, name)]

    # -- Watching -----------------------------------------------------------

    def watch(
        self,
        on_event: EventListener,
        callback: Callback | None = None,
        *,
        recursive: bool = False,
        sync: bool | None = None,
    ) -> Any:
        """Subscribe *on_event* to changes of the path.

        The path must exist.  A previous subscription is cancelled first.

        Returns:
            The live ``WatchSubscription``.

        """
        loop = _running_loop()

        def steps() -> Steps:
            yield from self.stat_steps()
            if self._watcher is not None:
                yield self._watcher.cancel
                self._watcher = None
            subscription = WatchSubscription(self._path, on_event, recursive=recursive, loop=loop)
            yield subscription.start
            self._watcher = subscription
            self._log(LogLevel.INFO, "watch started")
            return subscription

        return self._run(steps(), callback, sync)

    def unwatch(self) -> None:
        """Cancel the watch; under ``UnwatchPolicy.DELETE`` also destroy the path."""
        if self._watcher is None:
            return
        self._watcher.cancel()
        self._watcher = None
        self._log(LogLevel.INFO, "watch stopped")
        if self._unwatch_policy is UnwatchPolicy.DELETE:
            self._log(LogLevel.INFO, "deleting on unwatch")
            self.destroy()

    # -- Dunder -------------------------------------------------------------

    def __fspath__(self) -> str:
        """Return the path, so handles work wherever ``os`` takes a path."""
        return self._path

    def __eq__(self, other: object) -> bool:
        """Compare handles by path."""
        if not isinstance(other, File):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        """Hash by path."""
        return hash(self._path)

    def __repr__(self) -> str:
        """Return ``File('/abs/path')``."""
        return f"File({self._path!r})"

    def __str__(self) -> str:
        """Summarize name, path, parent and canonical path."""
        return f"File(name={self.name}, path={self._path}, parent={self.parent}, canon={self.canonical_path})"
