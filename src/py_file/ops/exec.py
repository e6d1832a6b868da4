"""Process execution — run a file as a program and collect its output.

This is a leaf operation: the library does not manage the child beyond
waiting for it.  A non-zero exit status counts as a failure and is
reported as ``subprocess.CalledProcessError`` (with the captured output
attached), like any other native error.
"""

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from py_file.dispatch import perform, reject
from py_file.env import Environment
from py_file.errors import ErrorKind
from py_file.result import Callback


@dataclass(frozen=True)
class ExecResult:
    """Captured output of a finished child process.

    Attributes:
        stdout: Standard output, decoded with the requested encoding.
        stderr: Standard error, decoded the same way.
        returncode: The child's exit status (always 0 on success).

    """

    stdout: str
    stderr: str
    returncode: int = 0


def run_executable(
    path: str,
    args: Sequence[str] = (),
    *,
    env: Environment | None = None,
    cwd: str | None = None,
    encoding: str = "utf-8",
) -> ExecResult:
    """Run *path* with *args* and wait for it to exit.

    Raises:
        OSError: If the file cannot be executed at all.
        subprocess.CalledProcessError: If it exits with a non-zero status.

    """
    proc = subprocess.run(  # noqa: S603
        [path, *args],
        capture_output=True,
        text=True,
        encoding=encoding,
        errors="replace",
        env=env.to_dict() if env is not None else None,
        cwd=cwd,
        check=True,
    )
    return ExecResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)


def exec_file(
    path: str | None,
    args: Sequence[str] = (),
    *,
    env: Environment | None = None,
    cwd: str | None = None,
    encoding: str = "utf-8",
    callback: Callback | None = None,
    sync: bool = False,
) -> Any:
    """Execute the file at *path*; the payload is an ``ExecResult``."""
    if path is None:
        return reject(ErrorKind.SOURCE_NOT_FOUND, "exec_file needs a path", sync=sync, callback=callback)
    return perform(
        lambda: run_executable(path, args, env=env, cwd=cwd, encoding=encoding),
        sync=sync,
        callback=callback,
    )
