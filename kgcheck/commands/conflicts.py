"""
ConflictsCommand — Corpus-wide conflict report

    kgcheck conflicts
    kgcheck conflicts --symbols-only
    kgcheck conflicts --references        also report undeclared endpoints

Findings are grouped by kind, each with its evidence and a resolution hint.
Always exits 0; the schema is used when readable but not required.
"""

from typing import Optional

from ..output import FORMATS
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate
from ..services.corpus import ConflictReport
from ..tracking.conflicts import group_by_kind
from .base import BaseCommand


class ConflictsCommand(BaseCommand):

    def run(self, symbols_only: bool = False, references: Optional[bool] = None, fmt: Optional[str] = None) -> int:
        report = self.corpus().detect_conflicts(symbols_only=symbols_only, references=references)

        if self.output_format(fmt) == "json":
            self.emit_json(report, title="conflicts")
        else:
            self.render(report, symbols_only)
        return 0

    def render(self, report: ConflictReport, symbols_only: bool) -> None:
        symbols = self.symbols
        stats = report.model.stats()

        template = OutputTemplate(symbols=symbols)
        template.header("KGCHECK CONFLICTS", "symbols only" if symbols_only else None)
        template.scope(
            f"Analyzed {stats['symbols']} symbols, {stats['entities']} entities, "
            f"{stats['relationships']} relationships in {stats['files']} files"
        )

        if report.unreadable:
            template.section("UNREADABLE", template.format_list(report.unreadable))

        if not report.findings:
            template.section("", f"{symbols.check_pass} No conflicts detected")
        else:
            template.section("", f"Detected {len(report.findings)} potential conflicts")
            for kind, findings in group_by_kind(report.findings).items():
                lines = []
                for finding in findings:
                    lines.append(f"{symbols.conflict} {finding.summary}")
                    lines.extend(f"    {symbols.bullet} {detail}" for detail in finding.details())
                    lines.append(f"    Resolution: {finding.resolution}")
                template.section(f"{kind} ({len(findings)})", "\n".join(lines))

        template.footer(f"{len(report.findings)} conflicts | {stats['templates']} templates skipped")
        safe_print(template.render())


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'conflicts'


def register_parser(subparsers):
    p = subparsers.add_parser('conflicts', help='Detect conflicts across the corpus')
    p.add_argument('--symbols-only', action='store_true',
                   help='Only run symbol rules')
    p.add_argument('--references', action='store_true', default=None,
                   help='Also report relationship endpoints not declared anywhere')
    p.add_argument('--format', choices=FORMATS, default=None,
                   help='Output format (default: display.format)')
    return p


def handle(cli, args):
    return ConflictsCommand(cli).run(
        symbols_only=args.symbols_only,
        references=args.references,
        fmt=args.format,
    )
