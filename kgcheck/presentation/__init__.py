"""
Presentation — Symbols and report layout for the terminal
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print, supports_unicode
from .template import OutputTemplate

__all__ = ["SymbolSet", "UNICODE", "ASCII", "get_symbols", "safe_print", "supports_unicode", "OutputTemplate"]
