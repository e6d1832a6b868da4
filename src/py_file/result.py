"""The result convention — how every operation reports success or failure.

Each operation ends in exactly one of two outcomes:

- ``(Status.SUCCESS, payload)`` — the payload is whatever the operation
  produces (a stat record, a descriptor, a byte count, ``None``, ...).
- ``(Status.ERROR, cause)`` — the cause is the exception that stopped it.

How that pair reaches the caller depends on the execution mode (see
``py_file.dispatch``).  The one mode without a channel for the cause —
blocking with no callback — returns ``Status.ERROR`` and parks the cause
in a single process-wide slot, read back with ``last_error()``.

The slot is the only global mutable state in the package.
It is not synchronized: it is only correct under the single-threaded
model the library assumes, and only until the next failing call.
"""

from collections.abc import Callable
from enum import IntEnum
from typing import Any


class Status(IntEnum):
    """Binary outcome of an operation.

    ``ERROR`` is ``0``, so it compares equal to ``0`` and ``False``.
    Compare payloads against it with ``is``.
    """

    ERROR = 0
    SUCCESS = 1


class EntityKind(IntEnum):
    """Select which native call a dual-purpose primitive performs."""

    FILE = 3
    DIR = 4


Callback = Callable[[Status, Any], None]

_last_error: BaseException | None = None


def last_error() -> BaseException | None:
    """Return the cause recorded by the most recent callback-less failure."""
    return _last_error


def record_error(cause: BaseException) -> None:
    """Store *cause* in the process-wide last-error slot."""
    global _last_error  # noqa: PLW0603
    _last_error = cause


def clear_last_error() -> None:
    """Empty the last-error slot."""
    global _last_error  # noqa: PLW0603
    _last_error = None
