"""
ValidateCommand — Schema and syntax validation of corpus files

    kgcheck validate entities/adam.cypher one file
    kgcheck validate symbols --jobs 4     a directory, four worker threads
    kgcheck validate --all                every file under entities/, symbols/, relationships/

Exit code: 0 when every file is valid, 1 otherwise (including no path
argument, a path that does not exist, or an unreadable schema).
"""

from typing import List, Optional

from ..core.schema import SchemaLoadError
from ..output import FORMATS
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate
from ..tracking.results import ValidationResult, ValidationSummary
from .base import BaseCommand


def format_result(result: ValidationResult, symbols, show_warnings: bool = True) -> List[str]:
    """Verdict line for one file followed by its errors and warnings."""
    if result.is_template:
        lines = [f"{symbols.template} {result.file_name}: TEMPLATE"]
    elif result.valid:
        lines = [f"{symbols.check_pass} {result.file_name}: VALID"]
    else:
        lines = [f"{symbols.check_fail} {result.file_name}: INVALID"]

    lines.extend(f"    - {error}" for error in result.errors)
    if show_warnings:
        lines.extend(f"    {symbols.check_warn} {warning}" for warning in result.warnings if not result.is_template)
    return lines


class ValidateCommand(BaseCommand):

    def run(
        self,
        path: Optional[str] = None,
        jobs: Optional[int] = None,
        fmt: Optional[str] = None,
        all_files: bool = False,
    ) -> int:
        if path is None and not all_files:
            return self.fail("No path given; pass a file or directory, or --all for the whole corpus")
        if path is not None and all_files:
            return self.fail("Pass either a path or --all, not both")

        corpus = self.corpus(jobs)
        try:
            summary = corpus.validate(path)
        except SchemaLoadError as e:
            return self.fail(str(e))
        except FileNotFoundError as e:
            return self.fail(str(e))

        if self.output_format(fmt) == "json":
            self.emit_json(summary, title="validate")
        else:
            self.render(summary, path or str(corpus.root))

        return 0 if summary.all_valid else 1

    def render(self, summary: ValidationSummary, target: str) -> None:
        symbols = self.symbols
        template = OutputTemplate(symbols=symbols)
        template.header("KGCHECK VALIDATE", target)
        template.legend({
            symbols.check_pass: "valid",
            symbols.check_fail: "invalid",
            symbols.template: "template",
            symbols.check_warn: "warning",
        })

        if not summary.results:
            template.section("RESULTS", "No files to validate")
        else:
            lines: List[str] = []
            for result in summary.results:
                lines.extend(format_result(result, symbols))
            template.section("RESULTS", "\n".join(lines))

        verdict = symbols.check_pass if summary.all_valid else symbols.check_fail
        template.section("", f"{verdict} {summary.describe()}")
        safe_print(template.render())


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'validate'


def register_parser(subparsers):
    p = subparsers.add_parser('validate', help='Validate files against the schema')
    p.add_argument('path', nargs='?', default=None,
                   help='File or directory to validate')
    p.add_argument('--all', '-a', dest='all_files', action='store_true',
                   help='Validate every file of the corpus')
    p.add_argument('--jobs', '-j', type=int, default=None,
                   help='Worker threads (default: run.workers)')
    p.add_argument('--format', choices=FORMATS, default=None,
                   help='Output format (default: display.format)')
    return p


def handle(cli, args):
    return ValidateCommand(cli).run(path=args.path, jobs=args.jobs, fmt=args.format, all_files=args.all_files)
