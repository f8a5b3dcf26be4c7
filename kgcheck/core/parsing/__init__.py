"""
Parsing — Declarative statement extraction

    tokenize()          text → tokens (comments dropped outside strings)
    parse_statements()  text → ParseResult (never raises)
"""

from .ast import (
    NodePattern, EntityStatement, MatchStatement, RelationshipStatement,
    Unrecognized, Statement, ParseResult,
)
from .lexer import Token, TokenKind, tokenize, strip_comments
from .parser import StatementParser, ParseError, parse_statements, describe

__all__ = [
    "NodePattern", "EntityStatement", "MatchStatement", "RelationshipStatement",
    "Unrecognized", "Statement", "ParseResult",
    "Token", "TokenKind", "tokenize", "strip_comments",
    "StatementParser", "ParseError", "parse_statements", "describe",
]
