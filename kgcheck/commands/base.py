"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through properties.
"""

import sys
from typing import TYPE_CHECKING, Any, Optional

from ..output import OutputSpec, render_json
from ..presentation.symbols import safe_print

if TYPE_CHECKING:
    from ..cli import KgCheckCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'KgCheckCLI'):
        self._cli = cli

    @property
    def root(self):
        """Corpus root directory."""
        return self._cli.root

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    def corpus(self, workers: Optional[int] = None):
        """Corpus for this run (`workers` overrides run.workers)."""
        return self._cli.corpus(workers)

    def output_format(self, requested: Optional[str]) -> str:
        return requested or self.config.display.format

    def emit_json(self, data: Any, title: Optional[str] = None) -> None:
        safe_print(render_json(OutputSpec(data=data, title=title)))

    def fail(self, message: str) -> int:
        """Report a fatal error on stderr; exit code 1."""
        safe_print(f"{self.symbols.check_fail} Error: {message}", file=sys.stderr)
        return 1
