"""
ConsistencyCommand — Entity consistency for one entity type

    kgcheck consistency Symbol
    kgcheck consistency MathematicalConcept Gradient

Validates the files of one type (symbols/ for Symbol, entities/ otherwise),
optionally only those whose file name contains NAME. Each file must declare
an entity of that type.

Always exits 0 unless the schema cannot be read.
"""

from typing import Optional

from ..core.schema import SchemaLoadError
from ..output import FORMATS
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate
from ..tracking.results import ValidationSummary
from .base import BaseCommand
from .validate import format_result


class ConsistencyCommand(BaseCommand):

    def run(self, entity_type: str, name: Optional[str] = None, fmt: Optional[str] = None) -> int:
        try:
            summary = self.corpus().consistency(entity_type, name)
        except SchemaLoadError as e:
            return self.fail(str(e))

        if self.output_format(fmt) == "json":
            data = summary.to_dict()
            data["entity_type"] = entity_type
            data["name"] = name
            self.emit_json(data, title="consistency")
        else:
            self.render(summary, entity_type, name)
        return 0

    def render(self, summary: ValidationSummary, entity_type: str, name: Optional[str]) -> None:
        symbols = self.symbols
        template = OutputTemplate(symbols=symbols)
        template.header("KGCHECK CONSISTENCY", f"{entity_type} {name}" if name else entity_type)

        if not summary.results:
            suffix = f" for {name}" if name else ""
            template.section("RESULTS", f"No {entity_type} files found{suffix}")
        else:
            lines = []
            for result in summary.results:
                lines.extend(format_result(result, symbols, show_warnings=False))
            template.section("RESULTS", "\n".join(lines))

        template.section("", summary.describe())
        safe_print(template.render())


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'consistency'


def register_parser(subparsers):
    p = subparsers.add_parser('consistency', help='Check consistency of one entity type')
    p.add_argument('entity_type', metavar='TYPE',
                   help='Entity type (e.g. Symbol, MathematicalConcept, NumericalMethod)')
    p.add_argument('name', nargs='?', default=None,
                   help='Only files whose name contains NAME')
    p.add_argument('--format', choices=FORMATS, default=None,
                   help='Output format (default: display.format)')
    return p


def handle(cli, args):
    return ConsistencyCommand(cli).run(args.entity_type, name=args.name, fmt=args.format)
