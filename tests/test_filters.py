"""Tests for entry predicates and FilenameFilter."""

from pathlib import Path
from typing import Any

import pytest

from py_file.errors import ErrorKind, FileError
from py_file.filters import EntryPredicate, FilenameFilter, as_callable
from py_file.handle import File
from py_file.result import Status


class TextOnly(FilenameFilter):
    """Keep only .txt entries."""

    def accept(self, directory: File, name: str) -> bool:
        """Return True for names ending in .txt."""
        return name.endswith(".txt")


@pytest.fixture
def directory(tmp_path: Path) -> File:
    """Return a handle for a directory with mixed entries."""
    for name in ("notes.txt", "image.png", "todo.txt"):
        (tmp_path / name).touch()
    return File(tmp_path)


class TestAsCallable:
    """Verify predicate normalization."""

    def test_none(self) -> None:
        """No predicate stays None."""
        assert as_callable(None) is None

    def test_plain_callable(self) -> None:
        """A plain function should be used unchanged."""

        def keep(_directory: File, _name: str) -> bool:
            return True

        assert as_callable(keep) is keep

    def test_protocol_object(self, directory: File) -> None:
        """An object with accept should be reduced to its bound method."""
        predicate = TextOnly(directory)
        assert isinstance(predicate, EntryPredicate)
        normalized = as_callable(predicate)
        assert normalized is not None
        assert normalized(directory, "a.txt")
        assert not normalized(directory, "a.png")


class TestFilenameFilter:
    """Verify the filter object."""

    def test_none_file_rejected(self) -> None:
        """A filter needs a directory handle."""
        with pytest.raises(FileError) as info:
            FilenameFilter(None)
        assert info.value.kind is ErrorKind.FILE_NOT_FOUND

    def test_default_accepts_everything(self, directory: File) -> None:
        """Without a predicate, every entry should pass."""
        assert FilenameFilter(directory).filter() == ["image.png", "notes.txt", "todo.txt"]

    def test_subclass_override(self, directory: File) -> None:
        """A subclass overriding accept should filter names."""
        assert TextOnly(directory).filter() == ["notes.txt", "todo.txt"]

    def test_callable_argument(self, directory: File) -> None:
        """A callable given at construction should replace accept."""
        images = FilenameFilter(directory, lambda _d, name: name.endswith(".png"))
        assert images.filter() == ["image.png"]

    def test_filter_files(self, directory: File) -> None:
        """filter_files should return handles inside the directory."""
        files = TextOnly(directory).filter_files()
        assert [f.name for f in files] == ["notes.txt", "todo.txt"]
        assert all(f.parent == directory.path for f in files)

    def test_filter_on_plain_file(self, tmp_path: Path) -> None:
        """Filtering a plain file should fail like File.list."""
        target = tmp_path / "f"
        target.touch()
        assert FilenameFilter(File(target)).filter() is Status.ERROR

    @pytest.mark.asyncio
    async def test_async_filter(self, directory: File) -> None:
        """With a callback, filtering should run on the loop."""
        outcomes: list[tuple[Status, Any]] = []
        await TextOnly(directory).filter(lambda s, v: outcomes.append((s, v)))
        assert outcomes == [(Status.SUCCESS, ["notes.txt", "todo.txt"])]
