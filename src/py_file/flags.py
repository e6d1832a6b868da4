"""Open flags and permission bits — the vocabulary passed to the OS.

Open flags are the familiar short strings (``"r"``, ``"w+"``, ``"ax"``,
...).  Each one is translated to the ``os.O_*`` bitmask the native
``open`` call expects:

========  ==========================================  ===================
Flag      Meaning                                     Bits
========  ==========================================  ===================
``r``     read                                        RDONLY
``r+``    read and write                              RDWR
``rs``    read, synchronous I/O                       RDONLY|SYNC
``rs+``   read and write, synchronous I/O             RDWR|SYNC
``w``     write, create or truncate                   WRONLY|CREAT|TRUNC
``wx``    like ``w`` but fail if the path exists      ... |EXCL
``w+``    read and write, create or truncate          RDWR|CREAT|TRUNC
``wx+``   like ``w+`` but fail if the path exists     ... |EXCL
``a``     append, create if missing                   WRONLY|CREAT|APPEND
``ax``    like ``a`` but fail if the path exists      ... |EXCL
``a+``    read and append, create if missing          RDWR|CREAT|APPEND
``ax+``   like ``a+`` but fail if the path exists     ... |EXCL
========  ==========================================  ===================

Permission bits are never interpreted here.  ``Permission`` only names
the standard POSIX bits so callers can build modes readably; whatever
integer the caller passes is forwarded unchanged.
"""

import os
import stat
from enum import IntFlag, StrEnum

DEFAULT_DIR_MODE = 0o777
DEFAULT_FILE_MODE = 0o666

# Not every platform has these; a missing bit simply contributes nothing.
_O_SYNC = getattr(os, "O_SYNC", 0)
_O_BINARY = getattr(os, "O_BINARY", 0)


class OpenFlag(StrEnum):
    """Enumerate the accepted open-flag strings."""

    READ = "r"
    READ_WRITE = "r+"
    READ_SYNC = "rs"
    READ_WRITE_SYNC = "rs+"
    WRITE = "w"
    WRITE_EXCLUSIVE = "wx"
    WRITE_CREATE = "w+"
    WRITE_CREATE_EXCLUSIVE = "wx+"
    APPEND = "a"
    APPEND_EXCLUSIVE = "ax"
    APPEND_READ = "a+"
    APPEND_READ_EXCLUSIVE = "ax+"

    @property
    def os_flags(self) -> int:
        """Return the ``os.O_*`` bitmask for this flag."""
        return _OS_FLAGS[self] | _O_BINARY

    @property
    def requires_existing(self) -> bool:
        """Return True when the path must already be a plain file.

        Read flags never create anything, and plain append flags extend
        an existing file.  Write flags and the exclusive append flags
        create the file themselves.
        """
        return self in _REQUIRES_EXISTING


_OS_FLAGS: dict[OpenFlag, int] = {
    OpenFlag.READ: os.O_RDONLY,
    OpenFlag.READ_WRITE: os.O_RDWR,
    OpenFlag.READ_SYNC: os.O_RDONLY | _O_SYNC,
    OpenFlag.READ_WRITE_SYNC: os.O_RDWR | _O_SYNC,
    OpenFlag.WRITE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    OpenFlag.WRITE_EXCLUSIVE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC | os.O_EXCL,
    OpenFlag.WRITE_CREATE: os.O_RDWR | os.O_CREAT | os.O_TRUNC,
    OpenFlag.WRITE_CREATE_EXCLUSIVE: os.O_RDWR | os.O_CREAT | os.O_TRUNC | os.O_EXCL,
    OpenFlag.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    OpenFlag.APPEND_EXCLUSIVE: os.O_WRONLY | os.O_CREAT | os.O_APPEND | os.O_EXCL,
    OpenFlag.APPEND_READ: os.O_RDWR | os.O_CREAT | os.O_APPEND,
    OpenFlag.APPEND_READ_EXCLUSIVE: os.O_RDWR | os.O_CREAT | os.O_APPEND | os.O_EXCL,
}

_REQUIRES_EXISTING: frozenset[OpenFlag] = frozenset(
    {
        OpenFlag.READ,
        OpenFlag.READ_WRITE,
        OpenFlag.READ_SYNC,
        OpenFlag.READ_WRITE_SYNC,
        OpenFlag.APPEND,
        OpenFlag.APPEND_READ,
    }
)


class Permission(IntFlag):
    """Name the standard POSIX mode bits.

    - Type field: ``S_IFMT`` and the per-type values.
    - Special bits: set-uid, set-gid, sticky.
    - Owner / group / other, each with read, write, execute and a mask.
    """

    S_IFMT = 0o170000
    S_IFSOCK = 0o140000
    S_IFLNK = 0o120000
    S_IFREG = 0o100000
    S_IFBLK = 0o060000
    S_IFDIR = 0o040000
    S_IFCHR = 0o020000
    S_IFIFO = 0o010000
    S_ISUID = 0o4000
    S_ISGID = 0o2000
    S_ISVTX = 0o1000
    S_IRWXU = 0o700
    S_IRUSR = 0o400
    S_IWUSR = 0o200
    S_IXUSR = 0o100
    S_IRWXG = 0o070
    S_IRGRP = 0o040
    S_IWGRP = 0o020
    S_IXGRP = 0o010
    S_IRWXO = 0o007
    S_IROTH = 0o004
    S_IWOTH = 0o002
    S_IXOTH = 0o001


READ_BITS = Permission.S_IRUSR | Permission.S_IRGRP | Permission.S_IROTH
WRITE_BITS = Permission.S_IWUSR | Permission.S_IWGRP | Permission.S_IWOTH
EXECUTE_BITS = Permission.S_IXUSR | Permission.S_IXGRP | Permission.S_IXOTH


def permission_bits(mode: int) -> int:
    """Return only the permission part of a full ``st_mode`` value."""
    return stat.S_IMODE(mode)
