"""Recursive composites — creating a directory chain, destroying a tree.

Both operations are sequences of primitive native calls with
stop-at-first-failure semantics and no rollback: whatever was created or
removed before the failure stays that way.

**mkdirs** walks the ancestor chain left to right::

    /tmp/x/y/z  →  /tmp, /tmp/x, /tmp/x/y, /tmp/x/y/z

Every ancestor is probed and created only if missing; the leaf is always
created, because its absence is the reason for the call.

**rimraf** empties a directory depth-first and removes it.  Instead of
recursing, it keeps an explicit stack of ``(directory, pending names)``
frames, so neither very wide nor very deep trees grow the Python call
stack.  Entries are visited one at a time in name order, so the first
failure is always the same one for the same tree.

Both are generators of native steps (see ``py_file.dispatch``), which is
what lets one body serve the blocking and the async mode alike.
"""

import errno
import os
import stat
from collections import deque
from functools import partial
from pathlib import PurePath
from typing import Any

from py_file.dispatch import Steps, perform, reject
from py_file.errors import ErrorKind
from py_file.flags import DEFAULT_DIR_MODE
from py_file.ops import native
from py_file.result import Callback, EntityKind


def split_paths(path: str) -> list[str]:
    """Return the ancestor chain of *path*, ending with *path* itself.

    The filesystem root is never part of the chain, since it always exists.

    Examples::

        "/tmp/x/y" → ["/tmp", "/tmp/x", "/tmp/x/y"]
        "a/b"      → ["a", "a/b"]
        "/"        → []

    """
    pure = PurePath(os.path.normpath(path))
    current = PurePath(pure.anchor) if pure.anchor else PurePath()
    chain: list[str] = []
    for part in pure.parts[1 if pure.anchor else 0 :]:
        current = current / part
        chain.append(str(current))
    return chain


def _require_directory(path: str) -> None:
    """Raise ``FileExistsError`` unless *path* is an existing directory."""
    if not os.path.isdir(path):
        raise OSError(errno.EEXIST, os.strerror(errno.EEXIST), path)


def mkdirs_steps(path: str, mode: int = DEFAULT_DIR_MODE, *, exist_ok: bool = True) -> Steps:
    """Yield the native steps that create *path* and its missing ancestors."""
    chain = split_paths(path) or [path]
    for ancestor in chain[:-1]:
        try:
            yield partial(native.probe_access, ancestor, os.R_OK)
        except OSError:
            yield partial(os.mkdir, ancestor, mode)

    leaf = chain[-1]
    try:
        yield partial(os.mkdir, leaf, mode)
    except FileExistsError:
        if not exist_ok:
            raise
        yield partial(_require_directory, leaf)


def rimraf_steps(path: str) -> Steps:
    """Yield the native steps that delete the tree rooted at *path*."""
    names = yield partial(native.list_names, path)
    stack: list[tuple[str, deque[str]]] = [(path, deque(names))]
    while stack:
        directory, pending = stack[-1]
        if not pending:
            stack.pop()
            yield partial(native.remove_entry, directory, EntityKind.DIR)
            continue
        entry = os.path.join(directory, pending.popleft())
        info = yield partial(os.lstat, entry)
        if stat.S_ISDIR(info.st_mode):
            children = yield partial(native.list_names, entry)
            stack.append((entry, deque(children)))
        else:
            yield partial(native.remove_entry, entry, EntityKind.FILE)


def mkdirs(
    path: str | None,
    mode: int = DEFAULT_DIR_MODE,
    *,
    exist_ok: bool = True,
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Create *path* together with every missing ancestor.

    Args:
        path: The directory to create.
        mode: Mode bits for every directory created.
        exist_ok: Accept an already existing leaf directory as success.
        callback: Receives ``(status, payload_or_cause)``.
        sync: Run blocking instead of on the event loop.

    """
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "mkdirs needs a path", sync=sync, callback=callback)
    return perform(mkdirs_steps(path, mode, exist_ok=exist_ok), sync=sync, callback=callback)


def rimraf(path: str | None, *, callback: Callback | None = None, sync: bool = False) -> Any:
    """Delete the directory *path* and everything beneath it."""
    if path is None:
        return reject(ErrorKind.FILE_NOT_FOUND, "rimraf needs a path", sync=sync, callback=callback)
    return perform(rimraf_steps(path), sync=sync, callback=callback)
