"""
Human-oriented console output for list mode.
"""

import sys
from dataclasses import dataclass

NC = "\033[0m"
BOLD = "\033[1m"
BOLDRED = "\033[1;31m"
BOLDYELLOW = "\033[1;33m"
BOLDBLUE = "\033[1;34m"


@dataclass(frozen=True)
class OutputStyle:
    """Prefix and highlight strings, resolved once from the color setting"""

    error: str
    warn: str
    info: str
    pkg: str
    nc: str

    @classmethod
    def plain(cls) -> 'OutputStyle':
        return cls(error="error:", warn="warning:", info="::", pkg="", nc="")

    @classmethod
    def colored(cls) -> 'OutputStyle':
        return cls(
            error=f"{BOLDRED}::{NC}",
            warn=f"{BOLDYELLOW}::{NC}",
            info=f"{BOLDBLUE}::{NC}",
            pkg=BOLD,
            nc=NC,
        )

    @classmethod
    def for_color(cls, color: bool) -> 'OutputStyle':
        return cls.colored() if color else cls.plain()


def print_status(record, style: OutputStyle, stream=None):
    """Print one backup record and how it relates to its local snapshot"""
    out = stream or sys.stdout
    print(f"{style.pkg}{record.package_name}{style.nc} {record.system.path}", file=out)
    if record.local is None:
        print("  file not locally tracked", file=out)
    elif record.has_diverged:
        print(f"  {style.warn} hashes don't match!", file=out)
        print(f"     {record.system.hash}\n     {record.local.hash}", file=out)
