"""
Shared test fixtures: a throwaway filesystem root, pacman local database and
snapshot store.
"""

import hashlib
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

# Make the repository root importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from pacrat.core.database import PackageDatabase  # noqa: E402
from pacrat.utils.crypto import FileHasher  # noqa: E402


def md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


class FakePacman:
    """Builds a pacman-style root and local database under a temp directory"""

    def __init__(self, base: Path):
        self.root = base / 'root'
        self.db_path = base / 'db'
        self.store = base / 'store'
        self.root.mkdir()
        (self.db_path / 'local').mkdir(parents=True)
        (self.db_path / 'local' / 'ALPM_DB_VERSION').write_text('9\n')
        self.store.mkdir()

    def write_file(self, relative_path: str, content: bytes, mode: Optional[int] = None) -> Path:
        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        if mode is not None:
            path.chmod(mode)
        return path

    def add_package(self, name: str, backups: Dict[str, str], version: str = '1.0-1',
                    description: str = '', provides: Iterable[str] = ()) -> Path:
        """Register a package whose %BACKUP% section maps paths to digests"""
        entry = self.db_path / 'local' / f'{name}-{version}'
        entry.mkdir()

        desc = [f'%NAME%\n{name}\n', f'%VERSION%\n{version}\n']
        if description:
            desc.append(f'%DESC%\n{description}\n')
        provides = list(provides)
        if provides:
            desc.append('%PROVIDES%\n' + ''.join(f'{p}\n' for p in provides))
        (entry / 'desc').write_text('\n'.join(desc) + '\n')

        files = ['%FILES%\n' + ''.join(f'{path}\n' for path in backups) + '\n']
        if backups:
            files.append('%BACKUP%\n' + ''.join(f'{path}\t{digest}\n' for path, digest in backups.items()) + '\n')
        (entry / 'files').write_text(''.join(files))
        return entry

    def open_database(self) -> PackageDatabase:
        return PackageDatabase(str(self.db_path)).open()


@pytest.fixture
def pacman(tmp_path):
    return FakePacman(tmp_path)


@pytest.fixture
def hasher():
    return FileHasher.calculate_file_hash


@pytest.fixture
def database(pacman):
    db = pacman.open_database()
    yield db
    db.close()


@pytest.fixture
def pacrat_caplog(caplog):
    """caplog that also sees records from the non-propagating pacrat logger"""
    logger = logging.getLogger('pacrat')
    propagate = logger.propagate
    logger.propagate = False
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger='pacrat')
    yield caplog
    logger.removeHandler(caplog.handler)
    logger.propagate = propagate
