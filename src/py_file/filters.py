"""Entry predicates — choosing which directory entries a listing keeps.

``File.list`` and ``File.list_files`` accept an optional predicate that
sees the containing handle and each raw entry name.  Two shapes work:

- anything implementing ``EntryPredicate`` (an ``accept`` method), and
- a plain callable ``(handle, name) -> bool``.

``FilenameFilter`` bundles a directory handle with its predicate, for
callers that pass filters around as objects.  Subclass it and override
``accept``, or hand it a callable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from py_file.errors import ErrorKind, FileError
from py_file.result import Callback

if TYPE_CHECKING:
    from py_file.handle import File


@runtime_checkable
class EntryPredicate(Protocol):
    """Decide whether one directory entry survives a listing."""

    def accept(self, directory: File, name: str) -> bool:
        """Return True to keep *name*, an entry of *directory*."""
        ...


if TYPE_CHECKING:
    Accept = EntryPredicate | Callable[[File, str], bool]


def as_callable(accept: Accept | None) -> Callable[[File, str], bool] | None:
    """Normalize a predicate to a plain ``(handle, name) -> bool`` callable."""
    if accept is None:
        return None
    if isinstance(accept, EntryPredicate):
        return accept.accept
    return accept


class FilenameFilter:
    """A directory handle paired with the predicate that filters it."""

    def __init__(self, file: File | None, accept: Callable[[File, str], bool] | None = None) -> None:
        """Create a filter over the entries of *file*.

        Args:
            file: The directory to list.
            accept: Predicate replacing ``accept`` for this instance.

        Raises:
            FileError: If *file* is None.

        """
        if file is None:
            msg = "a filter needs a directory handle"
            raise FileError(ErrorKind.FILE_NOT_FOUND, msg)
        self.file = file
        self._accept = accept

    def accept(self, directory: File, name: str) -> bool:
        """Return True to keep *name*; keeps everything unless overridden."""
        if self._accept is not None:
            return self._accept(directory, name)
        return True

    def filter(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """List the entry names this filter accepts."""
        return self.file.list(self, callback, sync=sync)

    def filter_files(self, callback: Callback | None = None, *, sync: bool | None = None) -> Any:
        """List the accepted entries as ``File`` handles."""
        return self.file.list_files(self, callback, sync=sync)
