"""
Symbols — Visual vocabulary for validation reports

Unicode when the terminal supports it, ASCII otherwise.
Configurable via display.symbols setting or KGCHECK_ASCII_ONLY / KGCHECK_UNICODE.

Also provides safe_print(): reports echo corpus content (LaTeX, names) that
may hold any Unicode, so printing never fails on a narrow encoding.
"""

import os
import sys
from dataclasses import astuple, dataclass
from typing import Optional


@dataclass(frozen=True)
class SymbolSet:
    """Symbols for one rendering mode."""
    check_pass: str
    check_warn: str
    check_fail: str
    template: str
    conflict: str
    bullet: str
    ellipsis: str


UNICODE = SymbolSet(
    check_pass='✓',
    check_warn='⚠',
    check_fail='✗',
    template='○',
    conflict='⚡',
    bullet='•',
    ellipsis='…',
)

ASCII = SymbolSet(
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[X]',
    template='[T]',
    conflict='[!!]',
    bullet='*',
    ellipsis='...',
)

# Report symbols degrade to their ASCII counterparts
UNICODE_TO_ASCII = dict(zip(astuple(UNICODE), astuple(ASCII)))


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    On UnicodeEncodeError, report symbols become their ASCII form and any
    other unencodable character becomes '?'.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            text = text.replace(unicode_char, ascii_equiv)
        encoding = getattr(file, 'encoding', None) or 'ascii'
        print(text.encode(encoding, errors='replace').decode(encoding), end=end, file=file)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def supports_unicode() -> bool:
    """Explicit environment switches first, then the stdout encoding."""
    if _env_flag('KGCHECK_ASCII_ONLY'):
        return False
    if _env_flag('KGCHECK_UNICODE'):
        return True
    encoding = getattr(sys.stdout, 'encoding', None) or ''
    return encoding.lower().replace('-', '').startswith('utf')


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
