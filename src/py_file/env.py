"""Environment block — ``KEY=VALUE`` strings read by config and passed to children.

Two consumers:

- ``FileConfig.from_environment`` looks up ``PY_FILE_*`` overrides.
- ``exec_file`` / ``File.exec`` hand an ``Environment`` to the child
  process as its complete environment.

An ``Environment`` is always a private copy.  ``from_os()`` snapshots
``os.environ`` at call time, and nothing written to the instance leaks
back into the running process.  Values stay strings; ``get_int`` parses
at the point of use.
"""

import os


class Environment:
    """Private, mutable copy of an environment block."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Start from *initial* (copied) or from nothing."""
        self._vars: dict[str, str] = {} if not initial else dict(initial)

    @classmethod
    def from_os(cls) -> "Environment":
        """Snapshot this process's ``os.environ``."""
        return cls(dict(os.environ))

    def get(self, key: str, default: str | None = None) -> str | None:
        """Look up *key*; fall back to *default*."""
        return self._vars.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        """Look up *key* as an integer literal.

        Literals are parsed with base 0, so octal modes such as
        ``"0o755"`` work alongside ``"0x1ed"`` and ``"493"``.  Unset or
        blank variables yield *default*.

        Raises:
            ValueError: The variable is set to something that is not an
                integer literal.

        """
        raw = (self._vars.get(key) or "").strip()
        if not raw:
            return default
        try:
            return int(raw, 0)
        except ValueError:
            msg = f"{key} must be an integer, got {self._vars[key]!r}"
            raise ValueError(msg) from None

    def set(self, key: str, value: str) -> None:
        """Bind *key* to *value*, replacing any earlier value."""
        self._vars[key] = value

    def delete(self, key: str) -> None:
        """Unbind *key*; a missing key raises ``KeyError``."""
        del self._vars[key]

    def with_overrides(self, overrides: dict[str, str]) -> "Environment":
        """Return a copy with *overrides* layered on top."""
        return Environment({**self._vars, **overrides})

    def items(self) -> list[tuple[str, str]]:
        """List every (name, value) pair."""
        return list(self._vars.items())

    def to_dict(self) -> dict[str, str]:
        """Export as a fresh dict (the shape ``subprocess`` expects)."""
        return dict(self._vars)

    def copy(self) -> "Environment":
        """Return a separate copy; writes to either side stay private."""
        return Environment(self._vars)

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is bound."""
        return key in self._vars

    def __len__(self) -> int:
        """Return how many variables are bound."""
        return len(self._vars)
