import enum
import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

from .database import DEFAULT_DB_PATH
from ..utils.logging_config import DEFAULT_SEVERITIES, Severity, get_logger

logger = get_logger('config')

DEFAULT_ROOT = "/"
CONFIG_ENV_VAR = "PACRAT_CONFIG"


class Operation(enum.Enum):
    LIST = 'list'
    PULL = 'pull'


@dataclass(frozen=True)
class RunConfiguration:
    """Options for a single run, built once from the command line"""

    operation: Optional[Operation] = None
    include_all: bool = False
    targets: Tuple[str, ...] = ()
    color: bool = False
    severities: FrozenSet[Severity] = DEFAULT_SEVERITIES
    root: str = DEFAULT_ROOT
    db_path: str = DEFAULT_DB_PATH
    store_root: str = "."


@dataclass
class AppSettings:
    """Persistent settings read from the user's settings file"""

    # Package manager
    root: str = DEFAULT_ROOT
    db_path: str = DEFAULT_DB_PATH

    # Snapshot store, relative paths resolve against the working directory
    store_root: str = "."

    # Logging
    log_dir: Optional[str] = None
    max_log_files: int = 10

    def apply_to(self, config: RunConfiguration, overrides: Optional[Dict[str, Any]] = None) -> RunConfiguration:
        """Fill a run configuration from settings, letting explicit overrides win"""
        values = {
            'root': self.root,
            'db_path': self.db_path,
            'store_root': self.store_root,
        }
        values.update({key: value for key, value in (overrides or {}).items() if value is not None})
        return replace(config, **values)


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.join(os.path.expanduser('~'), '.config')
    return Path(config_home) / 'pacrat' / 'settings.json'


class ConfigManager:
    """Loads application settings, falling back to defaults"""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = Path(config_file).expanduser() if config_file else default_config_path()
        self.settings = self.load_settings()

    def load_settings(self) -> AppSettings:
        """Load settings from file or use defaults"""
        if not self.config_file.exists():
            return AppSettings()

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings must be a JSON object")

            known = {f.name for f in fields(AppSettings)}
            unknown = sorted(set(data) - known)
            if unknown:
                logger.debug(f"ignoring unknown settings: {', '.join(unknown)}")

            settings = AppSettings(**{key: value for key, value in data.items() if key in known})
        except (OSError, json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning(f"error loading config file {self.config_file}: {e}. Using defaults.")
            return AppSettings()

        return settings

