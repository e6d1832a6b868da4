"""Completion strategies — one operation body, two ways to run it.

Every operation in the library is written once, as either:

- a **plain callable** taking no arguments (a single native call), or
- a **generator of steps**: each ``yield`` hands the driver a
  zero-argument native call and receives its result back.  A step that
  fails is thrown back into the generator at the ``yield``, so an
  operation handles an expected failure with an ordinary ``try``.

Two drivers run those bodies:

- the **blocking** driver calls each step inline, and
- the **async** driver awaits each step in a worker thread through
  ``asyncio.to_thread``, one at a time, on the running event loop.

``perform`` picks the driver and reports the outcome through the result
convention (``py_file.result``):

==========  ========  ==============================================
``sync``    callback  Outcome
==========  ========  ==============================================
True        given     ``callback(status, value)``; returns ``None``
True        ``None``  returns the payload, or ``Status.ERROR`` and
                      records the cause in the last-error slot
False       either    returns an ``asyncio.Task`` resolving to
                      ``(status, value)``; the callback, if given,
                      runs on the loop once the task finishes
==========  ========  ==============================================

Because composites are generators of raw native steps, a composite never
calls another callback-less operation, and so never clobbers the
last-error slot halfway through.
"""

import asyncio
import subprocess
from collections.abc import Callable, Generator
from typing import Any

from py_file.errors import ErrorKind, FileError
from py_file.result import Callback, Status, record_error

Step = Callable[[], Any]
Steps = Generator[Step, Any, Any]
Operation = Callable[[], Any] | Steps

# Failures an operation reports instead of raising.  Anything else is a
# bug and propagates.
CAUGHT_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    ValueError,
    subprocess.SubprocessError,
    FileError,
)

# Strong references to in-flight tasks; the loop itself only keeps weak ones.
_pending: set[asyncio.Task[tuple[Status, Any]]] = set()


def drive(operation: Operation) -> Any:
    """Run *operation* to completion, calling each step inline.

    Returns:
        The operation's payload.

    Raises:
        Whatever the operation lets escape.

    """
    if not isinstance(operation, Generator):
        return operation()
    try:
        step = next(operation)
        while True:
            try:
                outcome = step()
            except CAUGHT_ERRORS as exc:
                step = operation.throw(exc)
            else:
                step = operation.send(outcome)
    except StopIteration as stop:
        return stop.value


async def drive_async(operation: Operation) -> Any:
    """Run *operation* to completion, awaiting each step in a worker thread.

    Steps are strictly serialized: the next one is not dispatched until
    the previous one has finished.
    """
    if not isinstance(operation, Generator):
        return await asyncio.to_thread(operation)
    try:
        step = next(operation)
        while True:
            try:
                outcome = await asyncio.to_thread(step)
            except CAUGHT_ERRORS as exc:
                step = operation.throw(exc)
            else:
                step = operation.send(outcome)
    except StopIteration as stop:
        return stop.value


async def _complete(operation: Operation, callback: Callback | None) -> tuple[Status, Any]:
    """Drive *operation* asynchronously and deliver the outcome."""
    try:
        payload = await drive_async(operation)
    except CAUGHT_ERRORS as exc:
        outcome: tuple[Status, Any] = (Status.ERROR, exc)
    else:
        outcome = (Status.SUCCESS, payload)
    if callback is not None:
        callback(*outcome)
    return outcome


def perform(
    operation: Operation,
    *,
    sync: bool,
    callback: Callback | None = None,
) -> Any:
    """Run *operation* in the requested mode and report its outcome.

    Args:
        operation: A zero-argument callable or a generator of steps.
        sync: Run blocking (True) or on the event loop (False).
        callback: Receives ``(status, payload_or_cause)``.

    Returns:
        See the module docstring for the per-mode return value.

    Raises:
        RuntimeError: If ``sync`` is False and no event loop is running.

    """
    if not sync:
        loop = asyncio.get_running_loop()
        task = loop.create_task(_complete(operation, callback))
        _pending.add(task)
        task.add_done_callback(_pending.discard)
        return task

    try:
        payload = drive(operation)
    except CAUGHT_ERRORS as exc:
        if callback is None:
            record_error(exc)
            return Status.ERROR
        callback(Status.ERROR, exc)
        return None
    if callback is None:
        return Status.SUCCESS if payload is None else payload
    callback(Status.SUCCESS, payload)
    return None


def fail(error: BaseException) -> Callable[[], Any]:
    """Return an operation that fails with *error* before any native call."""

    def raise_error() -> Any:
        raise error

    return raise_error


def reject(
    kind: ErrorKind,
    message: str,
    *,
    sync: bool,
    callback: Callback | None = None,
) -> Any:
    """Report a failed precondition through the result convention."""
    return perform(fail(FileError(kind, message)), sync=sync, callback=callback)


def resolve_sync(sync: bool | None, callback: Callback | None) -> bool:
    """Pick the mode for handle methods: blocking unless a callback is given."""
    if sync is None:
        return callback is None
    return sync
