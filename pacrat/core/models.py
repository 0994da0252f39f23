from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple


@dataclass(frozen=True)
class Package:
    name: str
    version: str
    description: str = ""
    provides: Tuple[str, ...] = ()
    db_path: Optional[Path] = None


@dataclass(frozen=True)
class TrackedFile:
    """A %BACKUP% entry: pacman-relative path plus the digest pacman recorded"""

    relative_path: str
    recorded_hash: str


class FileSnapshot:
    """A file on disk whose digest is computed on first use and then cached"""

    def __init__(self, path: Path, hasher: Callable[[str], str], hash: Optional[str] = None):
        self.path = path
        self._hasher = hasher
        self._hash = hash

    @property
    def hash(self) -> str:
        if self._hash is None:
            self._hash = self._hasher(self.path)
        return self._hash

    def __repr__(self):
        return f"FileSnapshot(path={str(self.path)!r}, hash={self._hash!r})"


@dataclass
class BackupRecord:
    package_name: str
    relative_path: str
    system: FileSnapshot
    recorded_hash: str
    local: Optional[FileSnapshot] = None

    @property
    def is_locally_tracked(self) -> bool:
        return self.local is not None

    @property
    def has_diverged(self) -> bool:
        """True when an archived copy exists and differs from the live file"""
        return self.local is not None and self.local.hash != self.system.hash
