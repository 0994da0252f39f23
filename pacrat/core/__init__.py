# pacrat/core/__init__.py
"""
Backup discovery, classification and the run engine
"""

from .backup_engine import BackupEngine
from .classifier import BackupClassifier
from .config import ConfigManager, Operation, RunConfiguration
from .correlator import SnapshotCorrelator
from .database import PackageDatabase

__all__ = ['BackupEngine', 'BackupClassifier', 'ConfigManager', 'Operation',
           'RunConfiguration', 'SnapshotCorrelator', 'PackageDatabase']
