import os
import shutil
import stat
from pathlib import Path
from typing import Callable

from ..core.models import BackupRecord
from ..errors import ArchiveError, HashError
from ..utils.logging_config import get_logger, verbose

logger = get_logger('local_target')

# The package directory has no counterpart on the live filesystem
PACKAGE_DIR_MODE = 0o777


class LocalTargetConnector:
    """Archives backup files into the per-package snapshot store"""

    def __init__(self, hasher: Callable[[str], str], root: str = "/", store_root: str = "."):
        self.hasher = hasher
        self.root = Path(root)
        self.store_root = Path(store_root)

    def destination(self, record: BackupRecord) -> Path:
        return self.store_root / record.package_name / record.relative_path.lstrip('/')

    def archive(self, record: BackupRecord) -> Path:
        """
        Copy a record's system file into the snapshot store

        Missing directories are created with the permission bits of the
        matching directory under the filesystem root. An existing snapshot
        is replaced.

        Returns:
            Path of the archived copy
        """
        target = self.destination(record)
        verbose(logger, f"archiving {record.system.path} -> {target}")

        self._make_parents(record)
        self._copy(Path(record.system.path), target)
        return target

    def _make_parents(self, record: BackupRecord):
        try:
            self.store_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArchiveError(f"failed to create snapshot store {self.store_root}: {e}") from e

        current = self.store_root / record.package_name
        self.mkpath(current, PACKAGE_DIR_MODE)

        relative_dirs = Path(record.relative_path.lstrip('/')).parent.parts
        source = self.root
        for part in relative_dirs:
            current = current / part
            source = source / part
            if current.is_dir():
                continue
            try:
                mode = stat.S_IMODE(source.stat().st_mode)
            except OSError as e:
                raise ArchiveError(f"failed to stat {source}: {e}") from e
            self.mkpath(current, mode)

    @staticmethod
    def mkpath(path: Path, mode: int):
        """Create a single directory with exactly the given mode, if it is missing"""
        if path.is_dir():
            return
        if os.path.lexists(path):
            raise ArchiveError(f"{path} exists and is not a directory")

        try:
            os.mkdir(path, mode)
            # mkdir applies the umask
            os.chmod(path, mode)
        except OSError as e:
            raise ArchiveError(f"failed to create directory {path}: {e}") from e
        logger.debug(f"created directory {path} ({mode:o})")

    def _copy(self, source: Path, target: Path):
        if target.is_dir():
            raise ArchiveError(f"{target} exists and is a directory")

        temp_file = target.parent / f".{target.name}.tmp"
        try:
            shutil.copy2(source, temp_file)

            if self.hasher(temp_file) != self.hasher(source):
                raise ArchiveError(f"integrity check failed for {source}")

            temp_file.replace(target)
        except (OSError, HashError) as e:
            temp_file.unlink(missing_ok=True)
            raise ArchiveError(f"failed to copy {source} to {target}: {e}") from e
        except ArchiveError:
            temp_file.unlink(missing_ok=True)
            raise

        logger.debug(f"successfully copied: {source} -> {target}")
