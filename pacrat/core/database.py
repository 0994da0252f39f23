"""
Read-only access to the pacman local package database.

Each installed package has a directory ``<dbpath>/local/<name>-<version>/``
holding a ``desc`` and a ``files`` file. Both are made of ``%SECTION%``
headers followed by one value per line and a blank line.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..errors import DatabaseError
from .models import Package, TrackedFile
from ..utils.logging_config import get_logger

logger = get_logger('database')

DEFAULT_DB_PATH = "/var/lib/pacman"


def parse_sections(text: str) -> Dict[str, List[str]]:
    """Split a desc/files document into {SECTION: [values]}"""
    sections: Dict[str, List[str]] = {}
    current = None
    for line in text.splitlines():
        if line.startswith('%') and line.endswith('%') and len(line) > 2:
            current = sections.setdefault(line[1:-1], [])
        elif not line:
            current = None
        elif current is not None:
            current.append(line)
    return sections


class PackageDatabase:
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.local_path = self.db_path / 'local'
        self._packages: Optional[List[Package]] = None
        self._is_open = False

    def open(self) -> 'PackageDatabase':
        if not self.local_path.is_dir():
            raise DatabaseError(f"failed to initialize package database at {self.db_path}")
        logger.debug(f"opened package database {self.local_path}")
        self._is_open = True
        return self

    def close(self):
        self._packages = None
        self._is_open = False

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _check_open(self):
        if not self._is_open:
            raise DatabaseError("package database is not open")

    def packages(self) -> List[Package]:
        """All installed packages, sorted by name"""
        self._check_open()
        if self._packages is None:
            self._packages = sorted(self._load_packages(), key=lambda p: p.name)
        return list(self._packages)

    def _load_packages(self) -> Iterable[Package]:
        try:
            entries = list(self.local_path.iterdir())
        except OSError as e:
            raise DatabaseError(f"failed to read package database: {e}") from e

        for entry in entries:
            if not entry.is_dir():
                continue
            desc = entry / 'desc'
            try:
                sections = parse_sections(desc.read_text(encoding='utf-8'))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"could not read {desc}: {e}")
                continue

            name = sections.get('NAME', [None])[0]
            if not name:
                logger.warning(f"package entry without a name: {entry}")
                continue

            yield Package(
                name=name,
                version=sections.get('VERSION', [''])[0],
                description=' '.join(sections.get('DESC', [])),
                provides=tuple(sections.get('PROVIDES', [])),
                db_path=entry,
            )

    def search(self, patterns: Iterable[str]) -> List[Package]:
        """Packages matching every pattern, by name, description or provides"""
        results = self.packages()
        for pattern in patterns:
            matcher = self._compile(pattern)
            results = [pkg for pkg in results if self._matches(pkg, matcher)]
        return results

    @staticmethod
    def _compile(pattern: str):
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error:
            logger.debug(f"'{pattern}' is not a valid regex, matching as plain text")
            return lambda value: pattern in value
        return lambda value: regex.search(value) is not None

    @staticmethod
    def _matches(package: Package, matcher) -> bool:
        if matcher(package.name) or matcher(package.description):
            return True
        return any(matcher(provide) for provide in package.provides)

    def backup_entries(self, package: Package) -> List[TrackedFile]:
        """The package's %BACKUP% entries in the order pacman recorded them"""
        self._check_open()
        files = package.db_path / 'files' if package.db_path else None
        if files is None or not files.is_file():
            return []

        try:
            sections = parse_sections(files.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError) as e:
            raise DatabaseError(f"failed to read {files}: {e}") from e

        entries = []
        for line in sections.get('BACKUP', []):
            path, sep, digest = line.partition('\t')
            if not sep or not path:
                logger.debug(f"skipping malformed backup entry in {files}: {line!r}")
                continue
            entries.append(TrackedFile(relative_path=path, recorded_hash=digest))
        return entries

    @staticmethod
    def package_name(package: Package) -> str:
        return package.name
