"""
Command line entry point for pacrat.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from . import __version__
from .core.backup_engine import BackupEngine
from .core.config import ConfigManager, Operation, RunConfiguration
from .core.database import PackageDatabase
from .errors import PacratError, UsageError
from .utils.logging_config import DEFAULT_SEVERITIES, PacratLogger, Severity, get_logger
from .utils.output import OutputStyle

logger = get_logger('cli')

VERSION_BANNER = f"""
 pacrat {__version__}
     \\   (\\,/)
      \\  oo   '''//,        _
       ,/_;~,       \\,     / '
       "'   \\    (    \\    !
             ',|  \\    |__.'
             '~  '~----''

             Pacrat....
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pacrat',
        description="Track and archive modified pacman backup files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    operations = parser.add_argument_group('operations')
    exclusive = operations.add_mutually_exclusive_group()
    exclusive.add_argument('-l', '--list', dest='operation', action='store_const', const=Operation.LIST,
                           help="list modified backup files and their snapshot status")
    exclusive.add_argument('-p', '--pull', dest='operation', action='store_const', const=Operation.PULL,
                           help="archive modified backup files into ./<package>/")

    parser.add_argument('-a', '--all', dest='include_all', action='store_true',
                        help="include unmodified backup files")
    parser.add_argument('-c', '--color', nargs='?', const='auto', default='never', metavar='WHEN',
                        help="use colored output. WHEN is `never', `always', or `auto'")
    parser.add_argument('--debug', action='store_true', help="show debug output")
    parser.add_argument('-v', '--verbose', action='store_true', help="output more")
    parser.add_argument('-V', '--version', action='version', version=VERSION_BANNER)

    paths = parser.add_argument_group('paths')
    paths.add_argument('--root', help="filesystem root backup paths are relative to")
    paths.add_argument('--dbpath', dest='db_path', help="pacman database directory")
    paths.add_argument('--store', dest='store_root', help="snapshot store directory (default: cwd)")
    paths.add_argument('--config', help="settings file to load")

    parser.add_argument('targets', nargs='*', metavar='PACKAGE',
                        help="only consider packages matching these patterns")
    return parser


def resolve_color(value: str, isatty: bool) -> bool:
    if value == 'auto':
        return isatty
    if value == 'always':
        return True
    if value == 'never':
        return False
    raise UsageError("invalid argument to --color")


def unique_targets(targets: Sequence[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for target in targets:
        if target not in seen:
            seen.append(target)
    return tuple(seen)


def parse_options(argv: Optional[Sequence[str]] = None,
                  isatty: Optional[bool] = None) -> Tuple[RunConfiguration, argparse.Namespace]:
    """Parse arguments into a run configuration.

    argparse exits on --help, --version and conflicting operations. A bad
    --color value raises UsageError.
    """
    args = build_parser().parse_args(argv)
    if isatty is None:
        isatty = sys.stdout.isatty()

    severities = set(DEFAULT_SEVERITIES)
    if args.verbose:
        severities.add(Severity.VERBOSE)
    if args.debug:
        severities.add(Severity.DEBUG)

    config = RunConfiguration(
        operation=args.operation,
        include_all=args.include_all,
        targets=unique_targets(args.targets),
        color=resolve_color(args.color, isatty),
        severities=frozenset(severities),
    )
    return config, args


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        config, args = parse_options(argv)
    except UsageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    style = OutputStyle.for_color(config.color)
    pacrat_logger = PacratLogger(style, config.severities)
    pacrat_logger.setup_logging()
    for target in config.targets:
        logger.debug(f"adding target: {target}")

    try:
        settings = ConfigManager(args.config).settings
        if settings.log_dir:
            pacrat_logger.log_dir = Path(settings.log_dir).expanduser()
            pacrat_logger.max_log_files = settings.max_log_files
            pacrat_logger.setup_logging()

        config = settings.apply_to(config, {
            'root': args.root,
            'db_path': args.db_path,
            'store_root': args.store_root,
        })

        logger.debug("initializing package database")
        with PackageDatabase(config.db_path) as database:
            BackupEngine(config, database).run()
    except PacratError as e:
        logger.error(str(e))
        return 1
    finally:
        pacrat_logger.teardown()

    return 0


if __name__ == '__main__':
    sys.exit(main())
