"""py_file — a File handle over native filesystem primitives.

Every operation runs blocking or on the event loop, reporting through
one result convention (``Status`` plus payload or cause).  Re-exports
public symbols so callers can write::

    from py_file import File, FileInputStream, Status
"""

from py_file.config import FileConfig
from py_file.env import Environment
from py_file.errors import ErrorKind, FileError
from py_file.filters import EntryPredicate, FilenameFilter
from py_file.flags import DEFAULT_DIR_MODE, DEFAULT_FILE_MODE, OpenFlag, Permission
from py_file.handle import File
from py_file.logging import LogEntry, Logger, LogLevel, default_logger
from py_file.ops.exec import ExecResult
from py_file.result import EntityKind, Status, clear_last_error, last_error
from py_file.stream import FileInputStream, StreamState
from py_file.watch import UnwatchPolicy, WatchSubscription

__all__ = [
    "DEFAULT_DIR_MODE",
    "DEFAULT_FILE_MODE",
    "EntityKind",
    "EntryPredicate",
    "Environment",
    "ErrorKind",
    "ExecResult",
    "File",
    "FileConfig",
    "FileError",
    "FileInputStream",
    "FilenameFilter",
    "LogEntry",
    "LogLevel",
    "Logger",
    "OpenFlag",
    "Permission",
    "Status",
    "StreamState",
    "UnwatchPolicy",
    "WatchSubscription",
    "clear_last_error",
    "default_logger",
    "last_error",
]
