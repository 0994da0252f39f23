import json

from pacrat.core.config import AppSettings, ConfigManager, RunConfiguration


def test_missing_file_uses_defaults(tmp_path):
    settings = ConfigManager(str(tmp_path / 'settings.json')).settings
    assert settings == AppSettings()
    assert not (tmp_path / 'settings.json').exists()


def test_loads_known_keys_and_ignores_unknown(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'db_path': '/srv/pacman', 'max_log_files': 3, 'theme': 'dark'}))

    settings = ConfigManager(str(path)).settings

    assert settings.db_path == '/srv/pacman'
    assert settings.max_log_files == 3
    assert not hasattr(settings, 'theme')


def test_invalid_json_falls_back_to_defaults(tmp_path, pacrat_caplog):
    path = tmp_path / 'settings.json'
    path.write_text('{not json')

    assert ConfigManager(str(path)).settings == AppSettings()
    assert any('error loading config file' in m for m in pacrat_caplog.messages)


def test_environment_variable_selects_file(tmp_path, monkeypatch):
    path = tmp_path / 'custom.json'
    path.write_text(json.dumps({'root': '/mnt'}))
    monkeypatch.setenv('PACRAT_CONFIG', str(path))

    assert ConfigManager().settings.root == '/mnt'


def test_overrides_win_over_settings():
    settings = AppSettings(root='/mnt', db_path='/mnt/var/lib/pacman', store_root='/srv/snapshots')

    config = settings.apply_to(RunConfiguration(), {'root': '/', 'db_path': None})

    assert config.root == '/'
    assert config.db_path == '/mnt/var/lib/pacman'
    assert config.store_root == '/srv/snapshots'
