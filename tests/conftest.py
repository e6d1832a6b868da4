"""Shared fixtures for the py_file test suite."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from py_file.logging import Logger
from py_file.result import clear_last_error


@pytest.fixture(autouse=True)
def _empty_last_error() -> Iterator[None]:
    """Start and finish every test with an empty last-error slot."""
    clear_last_error()
    yield
    clear_last_error()


@pytest.fixture
def logger() -> Logger:
    """Return a private audit log, so tests never see each other's entries."""
    return Logger()


@pytest.fixture
def hello(tmp_path: Path) -> Path:
    """Create ``x/f.txt`` holding ``hello`` under a temporary directory."""
    directory = tmp_path / "x"
    directory.mkdir()
    path = directory / "f.txt"
    path.write_bytes(b"hello")
    return path
