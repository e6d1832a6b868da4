"""Operation set — dual-mode primitives, recursive composites, and exec.

Re-exports public symbols so callers can write::

    from py_file.ops import mkdirs, rimraf, stat
"""

from py_file.ops.composite import mkdirs, mkdirs_steps, rimraf, rimraf_steps, split_paths
from py_file.ops.exec import ExecResult, exec_file, run_executable
from py_file.ops.primitives import (
    access,
    append_file,
    chmod,
    close_fd,
    create_temp_dir,
    data_sync,
    fsync,
    futimes,
    mkdir,
    open_fd,
    read_fd,
    read_file_or_dir,
    realpath,
    remove_file_or_dir,
    rename,
    stat,
    symlink,
    sync,
    truncate,
    utimes,
    write_fd,
    write_file,
)

__all__ = [
    "ExecResult",
    "access",
    "append_file",
    "chmod",
    "close_fd",
    "create_temp_dir",
    "data_sync",
    "exec_file",
    "fsync",
    "futimes",
    "mkdir",
    "mkdirs",
    "mkdirs_steps",
    "open_fd",
    "read_fd",
    "read_file_or_dir",
    "realpath",
    "remove_file_or_dir",
    "rename",
    "rimraf",
    "rimraf_steps",
    "run_executable",
    "split_paths",
    "stat",
    "symlink",
    "sync",
    "truncate",
    "utimes",
    "write_fd",
    "write_file",
]
