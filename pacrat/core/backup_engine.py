from pathlib import Path
from typing import List, Optional

from .classifier import BackupClassifier
from .config import Operation, RunConfiguration
from .correlator import SnapshotCorrelator
from .database import PackageDatabase
from .models import BackupRecord, Package
from ..connectors.local_target import LocalTargetConnector
from ..utils.crypto import FileHasher
from ..utils.logging_config import get_logger, verbose
from ..utils.output import OutputStyle, print_status

logger = get_logger('backup_engine')


class BackupEngine:
    """Runs the list or pull operation against an open package database"""

    def __init__(self, config: RunConfiguration, database: PackageDatabase,
                 hasher=None, stream=None):
        self.config = config
        self.database = database
        self.hasher = hasher or FileHasher.calculate_file_hash
        self.stream = stream
        self.style = OutputStyle.for_color(config.color)

        self.correlator = SnapshotCorrelator(self.hasher, store_root=config.store_root)
        self.classifier = BackupClassifier(database, self.hasher, self.correlator, root=config.root)
        self.target = LocalTargetConnector(self.hasher, root=config.root, store_root=config.store_root)

    def select_packages(self) -> List[Package]:
        if self.config.targets:
            return self.database.search(self.config.targets)
        return self.database.packages()

    def collect_backups(self) -> List[BackupRecord]:
        records = []
        for package in self.select_packages():
            verbose(logger, f"checking {package.name}")
            records.extend(self.classifier.classify(package, self.config.include_all))
        return records

    def list_backups(self) -> List[BackupRecord]:
        records = self.collect_backups()
        for record in records:
            print_status(record, self.style, self.stream)
        return records

    def pull_backups(self) -> List[Path]:
        archived = []
        for record in self.collect_backups():
            archived.append(self.target.archive(record))
        logger.debug(f"archived {len(archived)} file(s)")
        return archived

    def run(self) -> Optional[list]:
        if self.config.operation is Operation.LIST:
            return self.list_backups()
        if self.config.operation is Operation.PULL:
            return self.pull_backups()
        logger.debug("no operation requested")
        return None
