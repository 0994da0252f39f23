import pytest

from pacrat.core.database import PackageDatabase, parse_sections
from pacrat.core.models import TrackedFile
from pacrat.errors import DatabaseError


def test_parse_sections():
    text = "%NAME%\nsudo\n\n%PROVIDES%\nsudo-a\nsudo-b\n\n%EMPTY%\n\n"
    assert parse_sections(text) == {
        'NAME': ['sudo'],
        'PROVIDES': ['sudo-a', 'sudo-b'],
        'EMPTY': [],
    }


def test_open_missing_database_fails(tmp_path):
    with pytest.raises(DatabaseError, match='failed to initialize'):
        PackageDatabase(str(tmp_path / 'nowhere')).open()


def test_use_after_close_fails(pacman):
    database = pacman.open_database()
    database.close()
    with pytest.raises(DatabaseError):
        database.packages()


def test_packages_are_sorted_by_name(pacman, database):
    pacman.add_package('zsh', {})
    pacman.add_package('bash', {}, version='5.2-1', description='The GNU Bourne Again shell')

    packages = database.packages()

    assert [p.name for p in packages] == ['bash', 'zsh']
    assert packages[0].version == '5.2-1'
    assert packages[0].description == 'The GNU Bourne Again shell'


def test_entry_without_desc_is_skipped(pacman, database, pacrat_caplog):
    pacman.add_package('good', {})
    (pacman.db_path / 'local' / 'broken-1.0-1').mkdir()

    assert [p.name for p in database.packages()] == ['good']
    assert any('could not read' in message for message in pacrat_caplog.messages)


def test_backup_entries_in_recorded_order(pacman, database):
    pacman.add_package('pacman', {
        'etc/pacman.conf': 'a' * 32,
        'etc/makepkg.conf': 'b' * 32,
    })

    (pkg,) = database.packages()

    assert database.backup_entries(pkg) == [
        TrackedFile('etc/pacman.conf', 'a' * 32),
        TrackedFile('etc/makepkg.conf', 'b' * 32),
    ]
    assert database.package_name(pkg) == 'pacman'


def test_package_without_files_has_no_backups(pacman, database):
    entry = pacman.add_package('meta', {})
    (entry / 'files').unlink()

    (pkg,) = database.packages()
    assert database.backup_entries(pkg) == []


def test_malformed_backup_lines_are_skipped(pacman, database):
    entry = pacman.add_package('foo', {})
    (entry / 'files').write_text("%BACKUP%\netc/foo.conf\nfoo\netc/bar.conf\tcafe\n\n")

    (pkg,) = database.packages()
    assert database.backup_entries(pkg) == [TrackedFile('etc/bar.conf', 'cafe')]


class TestSearch:
    @pytest.fixture(autouse=True)
    def packages(self, pacman):
        pacman.add_package('sudo', {}, description='Give certain users the ability to run some commands as root')
        pacman.add_package('opendoas', {}, description='Run commands as super user', provides=['doas'])
        pacman.add_package('openssh', {}, description='SSH protocol implementation')

    def names(self, database, patterns):
        return [p.name for p in database.search(patterns)]

    def test_matches_name(self, database):
        assert self.names(database, ['sudo']) == ['sudo']

    def test_regex_is_case_insensitive(self, database):
        assert self.names(database, ['^OPEN']) == ['opendoas', 'openssh']

    def test_matches_description(self, database):
        assert self.names(database, ['protocol']) == ['openssh']

    def test_matches_provides(self, database):
        assert self.names(database, ['^doas$']) == ['opendoas']

    def test_all_patterns_must_match(self, database):
        assert self.names(database, ['open', 'commands']) == ['opendoas']

    def test_invalid_regex_falls_back_to_substring(self, pacman, database):
        pacman.add_package('sudo-rs', {}, description='Memory safe replacement (sudo compatible)')
        assert self.names(database, ['(sudo']) == ['sudo-rs']

    def test_no_match(self, database):
        assert self.names(database, ['emacs']) == []
