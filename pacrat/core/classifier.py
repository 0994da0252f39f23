import enum
import os
from pathlib import Path
from typing import Callable, Iterable, List

from .correlator import SnapshotCorrelator
from .database import PackageDatabase
from .models import BackupRecord, FileSnapshot, Package, TrackedFile
from ..utils.logging_config import get_logger

logger = get_logger('classifier')


class PacFile(enum.Flag):
    """Sibling files pacman leaves next to a backup file"""

    NONE = 0
    PACNEW = 1
    PACSAVE = 2
    PACORIG = 4


PACFILE_SUFFIXES = (
    (PacFile.PACNEW, '.pacnew'),
    (PacFile.PACSAVE, '.pacsave'),
    (PacFile.PACORIG, '.pacorig'),
)


def check_pacfiles(path: Path) -> PacFile:
    """Return which readable .pacnew/.pacsave/.pacorig siblings exist for path"""
    found = PacFile.NONE
    for flag, suffix in PACFILE_SUFFIXES:
        if os.access(f"{path}{suffix}", os.R_OK):
            found |= flag
    return found


class BackupClassifier:
    """Decides which of a package's backup files are worth reporting or archiving"""

    def __init__(self, database: PackageDatabase, hasher: Callable[[str], str],
                 correlator: SnapshotCorrelator, root: str = "/"):
        self.database = database
        self.hasher = hasher
        self.correlator = correlator
        self.root = Path(root)

    def resolve(self, tracked: TrackedFile) -> Path:
        return self.root / tracked.relative_path.lstrip('/')

    def classify(self, package: Package, include_unmodified: bool = False) -> List[BackupRecord]:
        """Build a record for every modified (or, optionally, every) backup file.

        Unreadable files are skipped with a warning. A HashError from the
        hasher is not caught here and ends the run.
        """
        package_name = self.database.package_name(package)
        records = []

        for tracked in self.database.backup_entries(package):
            path = self.resolve(tracked)

            if not os.access(path, os.R_OK):
                logger.warning(f"can't access {path}")
                continue

            self._report_pacfiles(path)

            digest = self.hasher(path)
            if not include_unmodified and digest == tracked.recorded_hash:
                continue

            logger.debug(f"found backup: {path}")
            records.append(BackupRecord(
                package_name=package_name,
                relative_path=tracked.relative_path,
                system=FileSnapshot(path, self.hasher, hash=digest),
                recorded_hash=tracked.recorded_hash,
                local=self.correlator.correlate(package_name, tracked.relative_path),
            ))

        return records

    def classify_all(self, packages: Iterable[Package], include_unmodified: bool = False) -> List[BackupRecord]:
        records = []
        for package in packages:
            records.extend(self.classify(package, include_unmodified))
        return records

    @staticmethod
    def _report_pacfiles(path: Path):
        pacfiles = check_pacfiles(path)
        if pacfiles & PacFile.PACNEW:
            logger.warning(f"pacnew file detected {path}")
        if pacfiles & PacFile.PACSAVE:
            logger.warning(f"pacsave file detected {path}")
        if pacfiles & PacFile.PACORIG:
            logger.warning(f"pacorig file detected {path}")
