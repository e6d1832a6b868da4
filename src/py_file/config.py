"""Library configuration — defaults every handle falls back to.

A ``FileConfig`` is a frozen bundle of the values that would otherwise
be scattered as magic numbers: the modes new entries are created with,
the open flags ``File.open`` uses, the chunk size the input stream reads
with, and the text encoding.

Values come from three layers, last one wins:

1. The dataclass defaults below.
2. ``PY_FILE_*`` environment variables (``from_environment``).
3. Explicit ``dataclasses.replace`` by the caller.
"""

from dataclasses import dataclass

from py_file.env import Environment
from py_file.flags import DEFAULT_DIR_MODE, DEFAULT_FILE_MODE, OpenFlag

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_ENCODING = "utf-8"

_ENV_DIR_MODE = "PY_FILE_DIR_MODE"
_ENV_FILE_MODE = "PY_FILE_FILE_MODE"
_ENV_OPEN_FLAGS = "PY_FILE_OPEN_FLAGS"
_ENV_CHUNK_SIZE = "PY_FILE_CHUNK_SIZE"
_ENV_ENCODING = "PY_FILE_ENCODING"

_MAX_MODE = 0o7777


@dataclass(frozen=True)
class FileConfig:
    """Defaults shared by handles, composites and streams.

    Attributes:
        dir_mode: Mode bits for directories the library creates.
        file_mode: Mode bits for files the library creates.
        open_flags: Flags ``File.open`` uses when none are given.
        chunk_size: Bytes per native read when filling a stream buffer.
        encoding: Text encoding for string payloads.

    """

    dir_mode: int = DEFAULT_DIR_MODE
    file_mode: int = DEFAULT_FILE_MODE
    open_flags: OpenFlag = OpenFlag.READ_WRITE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        """Validate ranges once, at construction."""
        for name, mode in (("dir_mode", self.dir_mode), ("file_mode", self.file_mode)):
            if not 0 <= mode <= _MAX_MODE:
                msg = f"{name} must be within 0o0..0o7777, got {mode:#o}"
                raise ValueError(msg)
        if self.chunk_size <= 0:
            msg = f"chunk_size must be positive, got {self.chunk_size}"
            raise ValueError(msg)
        object.__setattr__(self, "open_flags", OpenFlag(self.open_flags))

    @classmethod
    def from_environment(cls, env: Environment | None = None) -> "FileConfig":
        """Build a config from ``PY_FILE_*`` variables.

        Args:
            env: Variables to read (defaults to a snapshot of ``os.environ``).

        Raises:
            ValueError: If a variable holds an invalid value.

        """
        env = env if env is not None else Environment.from_os()
        return cls(
            dir_mode=env.get_int(_ENV_DIR_MODE, DEFAULT_DIR_MODE),
            file_mode=env.get_int(_ENV_FILE_MODE, DEFAULT_FILE_MODE),
            open_flags=OpenFlag(env.get(_ENV_OPEN_FLAGS) or OpenFlag.READ_WRITE),
            chunk_size=env.get_int(_ENV_CHUNK_SIZE, DEFAULT_CHUNK_SIZE),
            encoding=env.get(_ENV_ENCODING) or DEFAULT_ENCODING,
        )
