from pathlib import Path
from typing import Callable, Optional

from .models import FileSnapshot
from ..utils.logging_config import get_logger

logger = get_logger('correlator')


class SnapshotCorrelator:
    """Finds previously archived copies in the per-package snapshot store.

    The store mirrors each tracked file's path beneath a directory named
    after its package, so ``foo``'s ``etc/foo.conf`` lives at
    ``<store>/foo/etc/foo.conf``.
    """

    def __init__(self, hasher: Callable[[str], str], store_root: str = "."):
        self.hasher = hasher
        self.store_root = Path(store_root)

    def snapshot_path(self, package_name: str, relative_path: str) -> Path:
        return self.store_root / package_name / relative_path.lstrip('/')

    def correlate(self, package_name: str, relative_path: str) -> Optional[FileSnapshot]:
        """Return the hashed local copy of a tracked file, or None if there is none"""
        path = self.snapshot_path(package_name, relative_path)
        if not path.is_file():
            return None

        logger.debug(f"found local copy: {path}")
        return FileSnapshot(path, self.hasher, hash=self.hasher(path))
