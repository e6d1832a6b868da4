"""Tests for change notification.

Watches are delegated to watchdog; these tests only check the adaptation
layer: subscription lifecycle, event filtering for plain files, delivery
onto the event loop, and the unwatch policy.
"""

import asyncio
import threading
from pathlib import Path

import pytest

from py_file.handle import File
from py_file.logging import Logger
from py_file.result import Status, last_error
from py_file.watch import UnwatchPolicy, WatchSubscription

TIMEOUT = 5.0


class _Events:
    """Collect (event_type, name) pairs from any thread."""

    def __init__(self) -> None:
        self.seen: list[tuple[str, str]] = []
        self.changed = threading.Event()

    def __call__(self, event_type: str, name: str) -> None:
        self.seen.append((event_type, name))
        self.changed.set()

    def names(self) -> set[str]:
        return {name for _, name in self.seen}


class TestWatchSubscription:
    """Verify the watchdog adapter."""

    def test_directory_events(self, tmp_path: Path) -> None:
        """Creating an entry in a watched directory should be reported by name."""
        events = _Events()
        subscription = WatchSubscription(str(tmp_path), events)
        subscription.start()
        try:
            assert subscription.active
            (tmp_path / "new.txt").write_text("x")
            assert events.changed.wait(TIMEOUT)
        finally:
            subscription.cancel()
        assert "new.txt" in events.names()

    def test_file_events_are_filtered(self, tmp_path: Path) -> None:
        """A watched file should only see its own events."""
        target = tmp_path / "watched.txt"
        target.write_text("a")
        events = _Events()
        subscription = WatchSubscription(str(target), events)
        subscription.start()
        try:
            (tmp_path / "sibling.txt").write_text("b")
            target.write_text("changed")
            assert events.changed.wait(TIMEOUT)
        finally:
            subscription.cancel()
        assert events.names() == {"watched.txt"}

    def test_cancel_is_idempotent(self, tmp_path: Path) -> None:
        """Cancelling twice should be harmless."""
        subscription = WatchSubscription(str(tmp_path), _Events())
        subscription.start()
        subscription.cancel()
        subscription.cancel()
        assert not subscription.active

    def test_no_events_after_cancel(self, tmp_path: Path) -> None:
        """A cancelled subscription should stay silent."""
        events = _Events()
        subscription = WatchSubscription(str(tmp_path), events)
        subscription.start()
        subscription.cancel()
        (tmp_path / "late.txt").write_text("x")
        assert not events.changed.wait(0.3)


class TestFileWatch:
    """Verify watching through the handle."""

    def test_watch_missing_path(self, tmp_path: Path) -> None:
        """Watching a missing path should fail the existence check."""
        handle = File(tmp_path / "missing")
        assert handle.watch(_Events()) is Status.ERROR
        assert isinstance(last_error(), FileNotFoundError)
        assert not handle.is_watched()

    def test_watch_and_unwatch(self, tmp_path: Path, logger: Logger) -> None:
        """watch should return a live subscription that unwatch cancels."""
        handle = File(tmp_path, logger=logger)
        subscription = handle.watch(_Events())
        assert isinstance(subscription, WatchSubscription)
        assert handle.is_watched()
        handle.unwatch()
        assert not handle.is_watched()
        assert not subscription.active
        assert tmp_path.exists()
        assert [e.message for e in logger.entries] == ["watch started", "watch stopped"]

    def test_second_watch_replaces_first(self, tmp_path: Path) -> None:
        """Only one subscription should be live per handle."""
        handle = File(tmp_path)
        first = handle.watch(_Events())
        second = handle.watch(_Events())
        try:
            assert not first.active
            assert second.active
        finally:
            handle.unwatch()

    def test_unwatch_without_watch(self, tmp_path: Path) -> None:
        """unwatch on an unwatched handle should do nothing."""
        handle = File(tmp_path, delete_on_unwatch=True)
        handle.unwatch()
        assert tmp_path.exists()

    def test_delete_on_unwatch(self, tmp_path: Path) -> None:
        """Under the DELETE policy, unwatch should destroy the path."""
        target = tmp_path / "tree"
        (target / "sub").mkdir(parents=True)
        handle = File(target, delete_on_unwatch=True)
        assert handle.unwatch_policy is UnwatchPolicy.DELETE
        handle.watch(_Events())
        handle.unwatch()
        assert not target.exists()

    def test_policy_can_be_switched(self, tmp_path: Path) -> None:
        """delete_on_unwatch should toggle the policy."""
        handle = File(tmp_path, delete_on_unwatch=UnwatchPolicy.DELETE)
        handle.delete_on_unwatch(False)
        assert handle.unwatch_policy is UnwatchPolicy.KEEP
        handle.delete_on_unwatch()
        assert handle.unwatch_policy is UnwatchPolicy.DELETE

    @pytest.mark.asyncio
    async def test_events_delivered_on_loop(self, tmp_path: Path) -> None:
        """Inside a loop, the listener should run on the loop's thread."""
        loop = asyncio.get_running_loop()
        delivered = asyncio.Event()
        threads: list[threading.Thread] = []

        def on_event(_event_type: str, _name: str) -> None:
            threads.append(threading.current_thread())
            delivered.set()

        handle = File(tmp_path)
        status, subscription = await handle.watch(on_event, sync=False)
        assert status is Status.SUCCESS
        try:
            await loop.run_in_executor(None, (tmp_path / "new.txt").write_text, "x")
            await asyncio.wait_for(delivered.wait(), TIMEOUT)
        finally:
            handle.unwatch()
        assert subscription is not None
        assert threads[0] is threading.main_thread()
