"""
OutputTemplate — Consistent report structure

Builder for text reports with header, sections and footer.

Usage:
    from kgcheck.presentation.template import OutputTemplate

    template = OutputTemplate()
    template.header("KGCHECK CONFLICTS", "3 findings")
    template.legend({"✓": "valid", "✗": "invalid"})
    template.section("DuplicateName (1)", body)
    template.footer("12 files | 3 conflicts")
    print(template.render())
"""

import shutil
from dataclasses import dataclass, field
from typing import List, Dict, Optional

from .symbols import SymbolSet, get_symbols


HEADER_CHAR = "="
SECTION_CHAR = "-"
DEFAULT_WIDTH = 80


@dataclass
class TemplateSection:
    """A titled section of output."""
    title: str
    content: str


@dataclass
class TemplateLegend:
    """Legend mapping symbols to meanings."""
    items: Dict[str, str] = field(default_factory=dict)

    def render(self) -> str:
        if not self.items:
            return ""
        parts = [f"{symbol} {meaning}" for symbol, meaning in self.items.items()]
        return "Legend: " + "  ".join(parts)


class OutputTemplate:
    """
    Builder for structured CLI output.

    - HEADER: title, legend, scope
    - SECTIONS: titled content blocks
    - FOOTER: summary line
    """

    def __init__(self, symbols: Optional[SymbolSet] = None, width: Optional[int] = None, full: bool = False):
        """
        Args:
            symbols: SymbolSet for visual elements (auto-detect if None)
            width: Rule width (terminal width capped at 80 if None)
            full: If True, don't truncate content
        """
        self.symbols = symbols or get_symbols()
        self.width = width or min(shutil.get_terminal_size((DEFAULT_WIDTH, 24)).columns, DEFAULT_WIDTH)
        self.full = full

        self._title: Optional[str] = None
        self._subtitle: Optional[str] = None
        self._legend: Optional[TemplateLegend] = None
        self._scope: Optional[str] = None
        self._sections: List[TemplateSection] = []
        self._summary: Optional[str] = None

    # =========================================================================
    # Builder Methods
    # =========================================================================

    def header(self, title: str, subtitle: Optional[str] = None) -> "OutputTemplate":
        self._title = title
        self._subtitle = subtitle
        return self

    def legend(self, items: Dict[str, str]) -> "OutputTemplate":
        self._legend = TemplateLegend(items=items)
        return self

    def scope(self, text: str) -> "OutputTemplate":
        """Scope line under the header (e.g. the path being validated)."""
        self._scope = text
        return self

    def section(self, title: str, content: str) -> "OutputTemplate":
        self._sections.append(TemplateSection(title=title, content=content))
        return self

    def footer(self, summary: Optional[str] = None) -> "OutputTemplate":
        self._summary = summary
        return self

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self) -> str:
        lines: List[str] = []
        if self._title:
            lines.extend(self._render_header())
        for section in self._sections:
            lines.extend(self._render_section(section))
        lines.extend(self._render_footer())
        return "\n".join(lines)

    def _render_header(self) -> List[str]:
        border = HEADER_CHAR * self.width
        title_line = f"{self._title} - {self._subtitle}" if self._subtitle else self._title
        lines = [border, title_line, border]

        if self._legend:
            legend_text = self._legend.render()
            if legend_text:
                lines.append(legend_text)
        if self._scope:
            lines.append(self._scope)

        lines.append("")
        return lines

    def _render_section(self, section: TemplateSection) -> List[str]:
        if not section.title and not section.content:
            return [""]

        lines: List[str] = []
        if section.title:
            lines.append(section.title)
            lines.append(SECTION_CHAR * len(section.title))
        if section.content:
            lines.append(section.content)
        lines.append("")
        return lines

    def _render_footer(self) -> List[str]:
        lines = [SECTION_CHAR * self.width]
        if self._summary:
            lines.append(f"Summary: {self._summary}")
        lines.append(HEADER_CHAR * self.width)
        return lines

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def truncate(self, text: str, length: Optional[int] = None) -> str:
        if not text:
            return ""
        if self.full:
            return text

        max_len = length or (self.width - 4)
        if len(text) <= max_len:
            return text

        ellipsis = self.symbols.ellipsis
        return text[:max_len - len(ellipsis)] + ellipsis

    def format_list(self, items: List[str], bullet: Optional[str] = None, indent: int = 0) -> str:
        if not items:
            return ""
        bullet = bullet or self.symbols.bullet
        pad = " " * indent
        return "\n".join(f"{pad}{bullet} {item}" for item in items)
