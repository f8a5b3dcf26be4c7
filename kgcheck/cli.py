"""
CLI — Command interface

    kgcheck [--root DIR] [--verbose] <command> ...

Commands register themselves (see commands/__init__.py). Every handler
returns the process exit code.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .presentation.symbols import get_symbols
from .services.corpus import Corpus
from . import __version__


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Diagnostics go to stderr; DEBUG with --verbose or KGCHECK_DEBUG."""
    debug = verbose or os.environ.get("KGCHECK_DEBUG", "").lower() in ("1", "true", "yes")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


class KgCheckCLI:
    """Resources shared by commands for one invocation."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.config_manager = ConfigManager(self.root)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)

    def corpus(self, workers: Optional[int] = None) -> Corpus:
        return Corpus(self.root, self.config, workers=workers)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kgcheck",
        description="kgcheck -- Consistency checks for hand-authored knowledge graphs",
    )

    parser.add_argument(
        '--root', '-r',
        default=os.environ.get("KGCHECK_ROOT", "."),
        help='Corpus root directory (default: KGCHECK_ROOT or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log diagnostics to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'kgcheck {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all
    register_all(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    cli = KgCheckCLI(Path(args.root))

    from .commands import dispatch
    try:
        return dispatch(args.command, cli, args)
    except KeyError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
