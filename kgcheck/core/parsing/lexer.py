"""
Lexer — Tokenizes declarative Cypher text

Comments are dropped here rather than stripped with a regex beforehand, so
`//` inside a string literal (URLs, DOIs) is kept intact.

String escapes:
    \\  \"  \'   are unescaped
    anything else (\alpha, \nabla, \theta) is kept verbatim so LaTeX survives
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List


class TokenKind(Enum):
    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    PARAM = "param"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    SEMI = ";"
    DOT = "."
    DASH = "-"
    ARROW_RIGHT = "->"
    ARROW_LEFT = "<-"
    OTHER = "other"
    ERROR = "error"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int
    pos: int
    end: int

    def is_keyword(self, word: str) -> bool:
        """Keywords are case-sensitive (CREATE, MATCH)."""
        return self.kind == TokenKind.IDENT and self.value == word

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.value!r}, line={self.line})"


PUNCTUATION = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMI,
    ".": TokenKind.DOT,
    "-": TokenKind.DASH,
}

_TOKEN_SPEC = [
    ("LINE_COMMENT", r"//[^\n]*"),
    ("BLOCK_COMMENT", r"/\*[\s\S]*?(?:\*/|\Z)"),
    ("DSTRING", r'"(?:[^"\\]|\\[\s\S])*"'),
    ("SSTRING", r"'(?:[^'\\]|\\[\s\S])*'"),
    ("BACKTICK", r"`[^`]*`"),
    ("NUMBER", r"\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"),
    ("IDENT", r"[^\W\d]\w*"),
    ("PARAM", r"\$\w+"),
    ("ARROW_RIGHT", r"->"),
    ("ARROW_LEFT", r"<-"),
    ("WHITESPACE", r"\s+"),
    ("PUNCT", r"[(){}\[\]:,;.\-]"),
    ("UNTERMINATED", r"[\"'`][\s\S]*"),
    ("OTHER", r"."),
]

_MASTER = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))
_ESCAPE = re.compile(r"\\([\\'\"])")


def unescape(body: str) -> str:
    """Resolve quote and backslash escapes only."""
    return _ESCAPE.sub(r"\1", body)


def iter_tokens(text: str) -> Iterator[Token]:
    """
    Yield tokens for `text`, ending with a single EOF token.

    Never raises: an unterminated string becomes one ERROR token covering
    the rest of the input.
    """
    line = 1
    for match in _MASTER.finditer(text):
        group = match.lastgroup
        lexeme = match.group()
        start_line = line
        line += lexeme.count("\n")

        if group in ("LINE_COMMENT", "BLOCK_COMMENT", "WHITESPACE"):
            continue
        if group in ("DSTRING", "SSTRING"):
            yield Token(TokenKind.STRING, unescape(lexeme[1:-1]), start_line, match.start(), match.end())
        elif group == "BACKTICK":
            yield Token(TokenKind.IDENT, lexeme[1:-1], start_line, match.start(), match.end())
        elif group == "NUMBER":
            yield Token(TokenKind.NUMBER, lexeme, start_line, match.start(), match.end())
        elif group == "IDENT":
            yield Token(TokenKind.IDENT, lexeme, start_line, match.start(), match.end())
        elif group == "PARAM":
            yield Token(TokenKind.PARAM, lexeme, start_line, match.start(), match.end())
        elif group == "ARROW_RIGHT":
            yield Token(TokenKind.ARROW_RIGHT, lexeme, start_line, match.start(), match.end())
        elif group == "ARROW_LEFT":
            yield Token(TokenKind.ARROW_LEFT, lexeme, start_line, match.start(), match.end())
        elif group == "PUNCT":
            yield Token(PUNCTUATION[lexeme], lexeme, start_line, match.start(), match.end())
        elif group == "UNTERMINATED":
            yield Token(TokenKind.ERROR, lexeme, start_line, match.start(), match.end())
        else:
            yield Token(TokenKind.OTHER, lexeme, start_line, match.start(), match.end())

    yield Token(TokenKind.EOF, "", line, len(text), len(text))


def tokenize(text: str) -> List[Token]:
    """Tokenize text into a list (always terminated by EOF)."""
    return list(iter_tokens(text))


def strip_comments(text: str) -> str:
    """
    Remove // and /* */ comments outside string literals.

    Used by template detection so commented-out placeholders in a real
    file's header do not turn it into a template.
    """
    parts = []
    last = 0
    for match in _MASTER.finditer(text):
        if match.lastgroup in ("LINE_COMMENT", "BLOCK_COMMENT"):
            parts.append(text[last:match.start()])
            last = match.end()
    parts.append(text[last:])
    return "".join(parts)
