"""Tests for the primitive operation set.

Each primitive performs one native call and reports through the result
convention.  A missing required argument is rejected with a named
``ErrorKind`` before the OS is touched.
"""

import os
import sys
from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import Any

import pytest

from py_file import ops
from py_file.errors import ErrorKind, FileError
from py_file.result import EntityKind, Status, last_error

CONTENT = b"hello world"

MISSING_ARGUMENT_CASES: list[tuple[Callable[..., Any], ErrorKind]] = [
    (partial(ops.access, None), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.append_file, None, b""), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.chmod, None, 0o644), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.close_fd, None), ErrorKind.FILE_DESCRIPTOR_NOT_FOUND),
    (partial(ops.create_temp_dir, None), ErrorKind.PREFIX_NOT_FOUND),
    (partial(ops.data_sync, None), ErrorKind.FILE_DESCRIPTOR_NOT_FOUND),
    (partial(ops.fsync, None), ErrorKind.FILE_DESCRIPTOR_NOT_FOUND),
    (partial(ops.futimes, None), ErrorKind.FILE_DESCRIPTOR_NOT_FOUND),
    (partial(ops.mkdir, None), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.open_fd, None), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.read_fd, None, bytearray(1)), ErrorKind.FILE_DESCRIPTOR_NOT_FOUND),
    (partial(ops.read_file_or_dir, None), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.realpath, None), ErrorKind.PATH_NOT_FOUND),
    (partial(ops.remove_file_or_dir, None), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.rename, None, "/tmp/x"), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.stat, None), ErrorKind.STAT_TARGET_NOT_FOUND),
    (partial(ops.symlink, "/tmp/x", None), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.truncate, None), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.utimes, None), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.write_fd, None, b""), ErrorKind.FILE_DESCRIPTOR_NOT_FOUND),
    (partial(ops.write_file, None, b""), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.mkdirs, None), ErrorKind.SOURCE_NOT_FOUND),
    (partial(ops.rimraf, None), ErrorKind.FILE_NOT_FOUND),
    (partial(ops.exec_file, None), ErrorKind.SOURCE_NOT_FOUND),
]


class TestMissingArguments:
    """Verify precondition rejection for every primitive."""

    @pytest.mark.parametrize(("call", "kind"), MISSING_ARGUMENT_CASES)
    def test_blocking_without_callback(self, call: Callable[..., Any], kind: ErrorKind) -> None:
        """A missing argument should return ERROR and record the named kind."""
        assert call(sync=True) is Status.ERROR
        error = last_error()
        assert isinstance(error, FileError)
        assert error.kind is kind

    @pytest.mark.parametrize(("call", "kind"), MISSING_ARGUMENT_CASES)
    def test_blocking_with_callback(self, call: Callable[..., Any], kind: ErrorKind) -> None:
        """A missing argument should reach the callback, never raise."""
        outcomes: list[tuple[Status, Any]] = []
        call(sync=True, callback=lambda status, value: outcomes.append((status, value)))
        assert len(outcomes) == 1
        status, error = outcomes[0]
        assert status is Status.ERROR
        assert error.kind is kind

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("call", "kind"), MISSING_ARGUMENT_CASES)
    async def test_async(self, call: Callable[..., Any], kind: ErrorKind) -> None:
        """Async mode should report the same kind through the task."""
        status, error = await call()
        assert status is Status.ERROR
        assert error.kind is kind


class TestPathPrimitives:
    """Verify the primitives that operate on paths."""

    def test_stat_file(self, tmp_path: Path) -> None:
        """stat should return the native record."""
        target = tmp_path / "a"
        target.write_bytes(CONTENT)
        info = ops.stat(str(target), sync=True)
        assert info.st_size == len(CONTENT)

    def test_stat_missing_records_native_error(self, tmp_path: Path) -> None:
        """A missing path should record FileNotFoundError untouched."""
        assert ops.stat(str(tmp_path / "missing"), sync=True) is Status.ERROR
        assert isinstance(last_error(), FileNotFoundError)

    def test_stat_without_following_links(self, tmp_path: Path) -> None:
        """follow_symlinks=False should describe the link itself."""
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "nowhere")
        info = ops.stat(str(link), follow_symlinks=False, sync=True)
        assert os.path.islink(link)
        assert info.st_mode & 0o170000 == 0o120000

    def test_access(self, tmp_path: Path) -> None:
        """access should succeed on an existing readable path."""
        assert ops.access(str(tmp_path), os.R_OK, sync=True) is Status.SUCCESS

    def test_access_missing(self, tmp_path: Path) -> None:
        """access on a missing path should fail with FileNotFoundError."""
        assert ops.access(str(tmp_path / "missing"), sync=True) is Status.ERROR
        assert isinstance(last_error(), FileNotFoundError)

    def test_write_then_read_file(self, tmp_path: Path) -> None:
        """write_file should replace content and read_file_or_dir return it."""
        target = str(tmp_path / "a.txt")
        ops.write_file(target, "old content", sync=True)
        ops.write_file(target, "new", sync=True)
        assert ops.read_file_or_dir(target, encoding="utf-8", sync=True) == "new"
        assert ops.read_file_or_dir(target, sync=True) == b"new"

    def test_append_file(self, tmp_path: Path) -> None:
        """append_file should extend the file, creating it first if needed."""
        target = str(tmp_path / "log")
        ops.append_file(target, b"a", sync=True)
        ops.append_file(target, b"b", sync=True)
        assert Path(target).read_bytes() == b"ab"

    def test_read_dir_lists_sorted_names(self, tmp_path: Path) -> None:
        """With EntityKind.DIR, read_file_or_dir should list the directory."""
        for name in ("b", "c", "a"):
            (tmp_path / name).touch()
        assert ops.read_file_or_dir(str(tmp_path), EntityKind.DIR, sync=True) == ["a", "b", "c"]

    def test_mkdir_and_remove_dir(self, tmp_path: Path) -> None:
        """mkdir should create one directory; remove_file_or_dir(DIR) removes it."""
        target = str(tmp_path / "d")
        assert ops.mkdir(target, sync=True) is Status.SUCCESS
        assert os.path.isdir(target)
        assert ops.remove_file_or_dir(target, EntityKind.DIR, sync=True) is Status.SUCCESS
        assert not os.path.exists(target)

    def test_mkdir_needs_parent(self, tmp_path: Path) -> None:
        """mkdir should not create missing ancestors."""
        assert ops.mkdir(str(tmp_path / "a" / "b"), sync=True) is Status.ERROR
        assert isinstance(last_error(), FileNotFoundError)

    def test_remove_file(self, tmp_path: Path) -> None:
        """remove_file_or_dir should unlink a file by default."""
        target = tmp_path / "f"
        target.touch()
        assert ops.remove_file_or_dir(str(target), sync=True) is Status.SUCCESS
        assert not target.exists()

    def test_rename(self, tmp_path: Path) -> None:
        """rename should move the entry."""
        src, dst = tmp_path / "a", tmp_path / "b"
        src.write_bytes(CONTENT)
        ops.rename(str(src), str(dst), sync=True)
        assert not src.exists()
        assert dst.read_bytes() == CONTENT

    def test_symlink_and_realpath(self, tmp_path: Path) -> None:
        """realpath should resolve a link created by symlink."""
        target = tmp_path / "target"
        target.touch()
        link = tmp_path / "link"
        ops.symlink(str(target), str(link), sync=True)
        assert ops.realpath(str(link), sync=True) == os.path.realpath(target)

    def test_realpath_missing(self, tmp_path: Path) -> None:
        """realpath of a missing path should fail."""
        assert ops.realpath(str(tmp_path / "missing"), sync=True) is Status.ERROR
        assert isinstance(last_error(), OSError)

    def test_truncate_path(self, tmp_path: Path) -> None:
        """truncate should shorten a file to the given length."""
        target = tmp_path / "f"
        target.write_bytes(CONTENT)
        keep = 5
        ops.truncate(str(target), keep, sync=True)
        assert target.read_bytes() == CONTENT[:keep]

    def test_utimes(self, tmp_path: Path) -> None:
        """utimes should set access and modification times."""
        target = tmp_path / "f"
        target.touch()
        when = 1_000_000
        ops.utimes(str(target), when, when, sync=True)
        assert target.stat().st_mtime == when

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    def test_chmod_forwards_mode(self, tmp_path: Path) -> None:
        """chmod should set the given bits unchanged."""
        target = tmp_path / "f"
        target.touch()
        ops.chmod(str(target), 0o640, sync=True)
        assert target.stat().st_mode & 0o777 == 0o640

    def test_create_temp_dir(self, tmp_path: Path) -> None:
        """create_temp_dir should return a new directory starting with the prefix."""
        prefix = str(tmp_path / "job-")
        created = ops.create_temp_dir(prefix, sync=True)
        assert created.startswith(prefix)
        assert os.path.isdir(created)


class TestDescriptorPrimitives:
    """Verify the primitives that operate on descriptors."""

    def test_open_write_read_close(self, tmp_path: Path) -> None:
        """Bytes written through a descriptor should be readable back."""
        target = str(tmp_path / "f")
        fd = ops.open_fd(target, "w+", sync=True)
        try:
            assert ops.write_fd(fd, CONTENT, sync=True) == len(CONTENT)
            buffer = bytearray(len(CONTENT))
            assert ops.read_fd(fd, buffer, position=0, sync=True) == len(CONTENT)
            assert bytes(buffer) == CONTENT
        finally:
            assert ops.close_fd(fd, sync=True) is Status.SUCCESS

    def test_write_window(self, tmp_path: Path) -> None:
        """offset and length should select a window of the data."""
        target = tmp_path / "f"
        fd = ops.open_fd(str(target), "w", sync=True)
        ops.write_fd(fd, CONTENT, 6, 5, sync=True)
        ops.close_fd(fd, sync=True)
        assert target.read_bytes() == b"world"

    def test_read_window_out_of_bounds(self, tmp_path: Path) -> None:
        """A window beyond the buffer should be INDEX_OUT_OF_BOUNDS."""
        target = tmp_path / "f"
        target.write_bytes(CONTENT)
        fd = ops.open_fd(str(target), "r", sync=True)
        try:
            assert ops.read_fd(fd, bytearray(2), 1, 5, sync=True) is Status.ERROR
        finally:
            ops.close_fd(fd, sync=True)
        error = last_error()
        assert isinstance(error, FileError)
        assert error.kind is ErrorKind.INDEX_OUT_OF_BOUNDS

    def test_open_missing_for_read(self, tmp_path: Path) -> None:
        """Opening a missing file with r should fail natively."""
        assert ops.open_fd(str(tmp_path / "missing"), "r", sync=True) is Status.ERROR
        assert isinstance(last_error(), FileNotFoundError)

    def test_exclusive_open_on_existing(self, tmp_path: Path) -> None:
        """wx on an existing path should fail with FileExistsError."""
        target = tmp_path / "f"
        target.touch()
        assert ops.open_fd(str(target), "wx", sync=True) is Status.ERROR
        assert isinstance(last_error(), FileExistsError)

    def test_sync_calls_and_futimes(self, tmp_path: Path) -> None:
        """sync, data_sync, futimes and truncate should accept descriptors."""
        target = tmp_path / "f"
        fd = ops.open_fd(str(target), "w+", sync=True)
        try:
            ops.write_fd(fd, CONTENT, sync=True)
            assert ops.sync(fd, sync=True) is Status.SUCCESS
            assert ops.sync is ops.fsync
            assert ops.data_sync(fd, sync=True) is Status.SUCCESS
            assert ops.truncate(fd, 0, sync=True) is Status.SUCCESS
            when = 2_000_000
            assert ops.futimes(fd, when, when, sync=True) is Status.SUCCESS
            assert ops.stat(fd, sync=True).st_size == 0
        finally:
            ops.close_fd(fd, sync=True)
        assert target.stat().st_mtime == when

    def test_close_twice_fails_natively(self, tmp_path: Path) -> None:
        """Closing a closed descriptor should record the OS error."""
        fd = ops.open_fd(str(tmp_path / "f"), "w", sync=True)
        ops.close_fd(fd, sync=True)
        assert ops.close_fd(fd, sync=True) is Status.ERROR
        assert isinstance(last_error(), OSError)


class TestAsyncPrimitives:
    """Verify that primitives default to async mode."""

    @pytest.mark.asyncio
    async def test_default_is_async(self, tmp_path: Path) -> None:
        """Without sync=True a primitive should return an awaitable task."""
        target = str(tmp_path / "f")
        status, _ = await ops.write_file(target, CONTENT)
        assert status is Status.SUCCESS
        status, content = await ops.read_file_or_dir(target)
        assert status is Status.SUCCESS
        assert content == CONTENT

    @pytest.mark.asyncio
    async def test_async_callback(self, tmp_path: Path) -> None:
        """The callback should receive the native error in async mode."""
        outcomes: list[tuple[Status, Any]] = []
        await ops.stat(str(tmp_path / "missing"), callback=lambda s, v: outcomes.append((s, v)))
        assert len(outcomes) == 1
        assert outcomes[0][0] is Status.ERROR
        assert isinstance(outcomes[0][1], FileNotFoundError)
        assert last_error() is None
