"""Change notification — a thin pass-through to the OS watch facility.

The heavy lifting (inotify, FSEvents, ReadDirectoryChangesW, or polling
as a last resort) is done by ``watchdog``.  This module only adapts it to
the handle's needs:

- One ``WatchSubscription`` per handle, with an explicit ``cancel()``.
- Directories are watched directly.  Native facilities watch
  directories, not files, so a plain file is watched through its parent
  directory and events about its siblings are dropped.
- Each event is reported as ``on_event(event_type, name)``: watchdog's
  event type string (``"created"``, ``"modified"``, ``"deleted"``,
  ``"moved"``, ...) and the entry name relative to the watched path.
- Events arrive on watchdog's observer thread.  When the subscription
  was made from inside a running event loop, delivery is marshalled
  back onto that loop, keeping the single-threaded model intact.

What happens to the path when a watch ends is a separate, explicit
choice: ``UnwatchPolicy``.
"""

import asyncio
import os
import threading
from collections.abc import Callable
from enum import StrEnum

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

EventListener = Callable[[str, str], None]


class UnwatchPolicy(StrEnum):
    """What ``File.unwatch`` does to the path after cancelling.

    - KEEP   — leave the path alone.
    - DELETE — destroy the path (file or whole tree).
    """

    KEEP = "keep"
    DELETE = "delete"


class _Relay(FileSystemEventHandler):
    """Forward every watchdog event to its subscription."""

    def __init__(self, subscription: "WatchSubscription") -> None:
        super().__init__()
        self._subscription = subscription

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._subscription.deliver(event)


class WatchSubscription:
    """A live change-notification subscription for one path."""

    def __init__(
        self,
        path: str,
        on_event: EventListener,
        *,
        recursive: bool = False,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Prepare a subscription; nothing is watched until ``start()``.

        Args:
            path: The file or directory to watch.
            on_event: Receives ``(event_type, name)`` for every change.
            recursive: Also watch subdirectories (directories only).
            loop: Event loop to deliver events on, if any.

        """
        self._path = path
        self._on_event = on_event
        self._recursive = recursive
        self._loop = loop
        self._is_dir = False
        self._observer: BaseObserver | None = None

    @property
    def path(self) -> str:
        """Return the watched path."""
        return self._path

    @property
    def active(self) -> bool:
        """Return True between ``start()`` and ``cancel()``."""
        return self._observer is not None

    def start(self) -> None:
        """Install the native watch.

        Raises:
            OSError: If the OS refuses the watch (missing path, limits).

        """
        if self._observer is not None:
            return
        self._is_dir = os.path.isdir(self._path)
        target = self._path if self._is_dir else os.path.dirname(self._path)
        observer = Observer()
        observer.schedule(_Relay(self), target, recursive=self._recursive and self._is_dir)
        observer.start()
        self._observer = observer

    def cancel(self) -> None:
        """Tear the native watch down.  Cancelling twice is a no-op."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        if threading.current_thread() is not observer:
            observer.join()

    def deliver(self, event: FileSystemEvent) -> None:
        """Pass one watchdog event on to the listener, if it concerns us."""
        if self._observer is None:
            return
        source = os.fsdecode(event.src_path)
        if self._is_dir:
            name = os.path.basename(source) if source == self._path else os.path.relpath(source, self._path)
        else:
            destination = os.fsdecode(getattr(event, "dest_path", "") or "")
            if self._path not in (source, destination):
                return
            name = os.path.basename(self._path)
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._on_event, event.event_type, name)
        else:
            self._on_event(event.event_type, name)
