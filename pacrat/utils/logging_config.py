import enum
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from .output import OutputStyle

VERBOSE = 15
logging.addLevelName(VERBOSE, 'VERBOSE')

LOGGER_NAME = 'pacrat'


class Severity(enum.Enum):
    """Closed set of message severities the console sink can gate on"""

    INFO = logging.INFO
    ERROR = logging.ERROR
    WARN = logging.WARNING
    DEBUG = logging.DEBUG
    VERBOSE = VERBOSE

    @classmethod
    def from_levelno(cls, levelno: int) -> 'Severity':
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= VERBOSE:
            return cls.VERBOSE
        return cls.DEBUG


DEFAULT_SEVERITIES: FrozenSet[Severity] = frozenset({Severity.ERROR, Severity.WARN, Severity.INFO})


class SeverityFilter(logging.Filter):
    """Pass only records whose severity is enabled"""

    def __init__(self, enabled: Iterable[Severity]):
        super().__init__()
        self.enabled = frozenset(enabled)

    def filter(self, record: logging.LogRecord) -> bool:
        return Severity.from_levelno(record.levelno) in self.enabled


class PrefixFormatter(logging.Formatter):
    """Render '<prefix> <message>' with a per-severity prefix"""

    def __init__(self, style: OutputStyle):
        super().__init__('%(message)s')
        self.prefixes = {
            Severity.INFO: style.info,
            Severity.VERBOSE: style.info,
            Severity.ERROR: style.error,
            Severity.WARN: style.warn,
            Severity.DEBUG: 'debug:',
        }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.prefixes[Severity.from_levelno(record.levelno)]
        return f"{prefix} {super().format(record)}"


class PacratLogger:
    def __init__(self, style: Optional[OutputStyle] = None,
                 severities: Iterable[Severity] = DEFAULT_SEVERITIES,
                 log_dir: Optional[str] = None, max_log_files: int = 10,
                 stream=None):
        self.style = style or OutputStyle.plain()
        self.severities = frozenset(severities)
        self.log_dir = Path(log_dir) if log_dir else None
        self.max_log_files = max_log_files
        self.stream = stream
        self._handlers = []

    def setup_logging(self) -> logging.Logger:
        """Attach the console handler, and a file handler when a log dir is set"""
        logger = logging.getLogger(LOGGER_NAME)
        self.teardown()
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        console_handler = logging.StreamHandler(self.stream or sys.stderr)
        console_handler.setFormatter(PrefixFormatter(self.style))
        console_handler.addFilter(SeverityFilter(self.severities))
        console_handler.setLevel(logging.DEBUG)
        self._add_handler(logger, console_handler)

        if self.log_dir is not None:
            try:
                self._add_file_handler(logger)
            except OSError as e:
                logger.warning(f"could not open log file in {self.log_dir}: {e}")
            else:
                self.cleanup_old_logs()

        return logger

    def _add_file_handler(self, logger: logging.Logger):
        self.log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = self.log_dir / f"pacrat_{timestamp}.log"

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        self._add_handler(logger, file_handler)

    def _add_handler(self, logger: logging.Logger, handler: logging.Handler):
        logger.addHandler(handler)
        self._handlers.append(handler)

    def teardown(self):
        """Detach and close every handler this instance installed"""
        logger = logging.getLogger(LOGGER_NAME)
        for handler in self._handlers:
            logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        logger.propagate = True

    def cleanup_old_logs(self):
        """Remove old log files, keeping only the most recent ones"""
        log_files = list(self.log_dir.glob("pacrat_*.log"))
        if len(log_files) > self.max_log_files:
            log_files.sort(key=lambda x: x.stat().st_mtime, reverse=True)
            for old_log in log_files[self.max_log_files:]:
                try:
                    old_log.unlink()
                except OSError as e:
                    get_logger('logging').warning(f"could not remove old log {old_log}: {e}")


def get_logger(name: str) -> logging.Logger:
    """Convenience function to get a module logger"""
    return logging.getLogger(f'{LOGGER_NAME}.{name}')


def verbose(logger: logging.Logger, message: str):
    logger.log(VERBOSE, message)
