"""Error hierarchy for pacrat operations."""


class PacratError(RuntimeError):
    """Base exception for pacrat failures. Always fatal to the run."""


class UsageError(PacratError):
    """Raised for invalid options before the package database is touched."""


class DatabaseError(PacratError):
    """Raised when the pacman local database cannot be opened or read."""


class HashError(PacratError):
    """Raised when a file digest cannot be computed."""


class ArchiveError(PacratError):
    """Raised when copying a file into the snapshot store fails."""


__all__ = ['PacratError', 'UsageError', 'DatabaseError', 'HashError', 'ArchiveError']
