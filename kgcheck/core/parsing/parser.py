"""
StatementParser — Recursive-descent parser for CREATE / MATCH clauses

Recognizes the statement shapes used by hand-authored graph files:

    CREATE (c:MathematicalConcept {name: "GradientDescent", year: 1847})

    MATCH (a:Algorithm {name: "Adam"})
    MATCH (b:MathematicalConcept {name: "GradientDescent"})
    CREATE (a)-[:BASED_ON {since: 2014}]->(b)

Tolerated variations: single or double quotes, arbitrary whitespace and
newlines between clauses, nested lists/maps in values, comma-separated
patterns, inline-labelled endpoints, reverse arrows.

Everything else (RETURN, WHERE, MERGE, malformed patterns) becomes an
Unrecognized node. The parser never raises on bad input. A pattern
followed by WITH, WHERE or RETURN is kept; only the trailing clause is
Unrecognized.

Variables are scoped to a `;`-terminated statement, so they carry across
WITH and WHERE.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..values import (
    PropertyValue, StringValue, NumberValue, BooleanValue, NullValue,
    BareValue, ListValue, MapValue,
)
from .ast import (
    NodePattern, EntityStatement, MatchStatement, RelationshipStatement,
    Unrecognized, Statement, ParseResult,
)
from .lexer import Token, TokenKind, tokenize


CLAUSE_KEYWORDS = ("CREATE", "MATCH")
SNIPPET_LENGTH = 80

# (label, properties, direction, line); direction is "right", "left" or None
_RelPattern = Tuple[str, Dict[str, PropertyValue], Optional[str], int]


class ParseError(Exception):
    """Raised inside the parser when a clause does not match; never escapes parse()."""

    def __init__(self, message: str, token: Token):
        super().__init__(message)
        self.token = token


class StatementParser:
    """Parses one file's text into a ParseResult."""

    def __init__(self, text: str):
        self.text = text
        self.tokens: List[Token] = tokenize(text)
        self.index = 0
        self._bindings: Dict[str, NodePattern] = {}
        # Notes on a clause that parsed (duplicate map keys)
        self._notes: List[Unrecognized] = []

    # =========================================================================
    # Token helpers
    # =========================================================================

    def peek(self, offset: int = 0) -> Token:
        idx = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != TokenKind.EOF:
            self.index += 1
        return token

    def accept(self, kind: TokenKind) -> Optional[Token]:
        if self.peek().kind == kind:
            return self.advance()
        return None

    def expect(self, kind: TokenKind, what: Optional[str] = None) -> Token:
        token = self.peek()
        if token.kind != kind:
            found = token.value or token.kind.value
            raise ParseError(f"expected {what or repr(kind.value)} but found {found!r}", token)
        return self.advance()

    def _at_boundary(self) -> bool:
        token = self.peek()
        return (
            token.kind in (TokenKind.EOF, TokenKind.SEMI)
            or any(token.is_keyword(k) for k in CLAUSE_KEYWORDS)
        )

    def _sync(self) -> None:
        """Skip to the next clause keyword, ';' or EOF."""
        while not self._at_boundary():
            self.advance()

    def _snippet(self, start: int, end: int) -> str:
        if end <= start:
            return ""
        first = self.tokens[start]
        last = self.tokens[end - 1]
        raw = " ".join(self.text[first.pos:last.end].split())
        if len(raw) > SNIPPET_LENGTH:
            return raw[:SNIPPET_LENGTH - 3] + "..."
        return raw

    # =========================================================================
    # Entry point
    # =========================================================================

    def parse(self) -> ParseResult:
        result = ParseResult()

        while self.peek().kind != TokenKind.EOF:
            token = self.peek()

            if token.kind == TokenKind.SEMI:
                self.advance()
                self._bindings.clear()
                continue

            start = self.index
            if any(token.is_keyword(k) for k in CLAUSE_KEYWORDS):
                try:
                    statements = self._clause()
                except ParseError as e:
                    self._notes.clear()
                    self.index = start + 1
                    self._sync()
                    result.statements.append(Unrecognized(
                        text=self._snippet(start, self.index),
                        reason=str(e),
                        line=token.line,
                    ))
                    continue

                result.statements.extend(statements)
                result.statements.extend(self._notes)
                self._notes.clear()
                if self._at_boundary():
                    continue
                # Trailing WITH / WHERE / RETURN
                start = self.index
                token = self.peek()

            self.advance()
            self._sync()
            reason = (
                f"unsupported clause {token.value!r}" if token.kind == TokenKind.IDENT
                else "text outside a CREATE or MATCH clause"
            )
            result.statements.append(Unrecognized(
                text=self._snippet(start, self.index),
                reason=reason,
                line=token.line,
            ))

        return result

    # =========================================================================
    # Clauses
    # =========================================================================

    def _clause(self) -> List[Statement]:
        keyword = self.advance()
        paths = [self._path()]
        while self.accept(TokenKind.COMMA):
            paths.append(self._path())

        if keyword.value == "MATCH":
            return self._match(paths, keyword.line)
        return self._create(paths)

    def _match(self, paths, line: int) -> List[Statement]:
        labelled = []
        for nodes, _rels in paths:
            for node in nodes:
                if node.is_reference:
                    continue
                labelled.append(node)
                if node.variable:
                    self._bindings[node.variable] = node
        return [MatchStatement(nodes=labelled, line=line)] if labelled else []

    def _create(self, paths) -> List[Statement]:
        for _nodes, rels in paths:
            for label, _props, direction, _line in rels:
                if direction is None:
                    raise ParseError(f"relationship :{label} needs a direction in CREATE", self.peek())

        statements: List[Statement] = []
        for nodes, rels in paths:
            for node in nodes:
                if node.is_reference:
                    continue
                statements.append(EntityStatement(node=node, line=node.line))
                if node.variable:
                    self._bindings[node.variable] = node

            for i, (label, props, direction, line) in enumerate(rels):
                left, right = nodes[i], nodes[i + 1]
                if direction == "left":
                    left, right = right, left
                source, source_unbound = self._resolve(left)
                target, target_unbound = self._resolve(right)
                statements.append(RelationshipStatement(
                    label=label,
                    source=source,
                    target=target,
                    properties=props,
                    line=line,
                    source_variable=left.variable,
                    target_variable=right.variable,
                    unbound_source=source_unbound,
                    unbound_target=target_unbound,
                ))
        return statements

    def _resolve(self, node: NodePattern) -> Tuple[NodePattern, bool]:
        """Resolve an endpoint to its labelled pattern; flag unbound variables."""
        if not node.is_reference:
            return node, False
        if node.variable and node.variable in self._bindings:
            return self._bindings[node.variable], False
        return node, True

    # =========================================================================
    # Patterns
    # =========================================================================

    def _path(self) -> Tuple[List[NodePattern], List[_RelPattern]]:
        nodes = [self._node()]
        rels: List[_RelPattern] = []
        while self.peek().kind in (TokenKind.DASH, TokenKind.ARROW_LEFT):
            rels.append(self._relationship())
            nodes.append(self._node())
        return nodes, rels

    def _node(self) -> NodePattern:
        open_paren = self.expect(TokenKind.LPAREN, "'('")
        variable = None
        label = None
        properties: Dict[str, PropertyValue] = {}

        if self.peek().kind == TokenKind.IDENT:
            variable = self.advance().value
        if self.accept(TokenKind.COLON):
            label = self.expect(TokenKind.IDENT, "a label").value
            # Extra labels (:A:B) are accepted; the first one is the type
            while self.accept(TokenKind.COLON):
                self.expect(TokenKind.IDENT, "a label")
        if self.peek().kind == TokenKind.LBRACE:
            properties = self._map()
        self.expect(TokenKind.RPAREN, "')'")

        return NodePattern(variable=variable, label=label, properties=properties, line=open_paren.line)

    def _relationship(self) -> _RelPattern:
        first = self.advance()
        pointing_left = first.kind == TokenKind.ARROW_LEFT

        self.expect(TokenKind.LBRACKET, "'['")
        self.accept(TokenKind.IDENT)
        self.expect(TokenKind.COLON, "':' before relationship type")
        label = self.expect(TokenKind.IDENT, "a relationship type").value
        properties: Dict[str, PropertyValue] = {}
        if self.peek().kind == TokenKind.LBRACE:
            properties = self._map()
        self.expect(TokenKind.RBRACKET, "']'")

        if pointing_left:
            self.expect(TokenKind.DASH, "'-'")
            direction = "left"
        elif self.accept(TokenKind.ARROW_RIGHT):
            direction = "right"
        else:
            self.expect(TokenKind.DASH, "'->'")
            direction = None
        return label, properties, direction, first.line

    # =========================================================================
    # Values
    # =========================================================================

    def _map(self) -> Dict[str, PropertyValue]:
        self.expect(TokenKind.LBRACE, "'{'")
        entries: Dict[str, PropertyValue] = {}
        if self.accept(TokenKind.RBRACE):
            return entries

        while True:
            key_token = self.peek()
            if key_token.kind not in (TokenKind.IDENT, TokenKind.STRING):
                raise ParseError(f"expected a property name but found {key_token.value!r}", key_token)
            key_start = self.index
            self.advance()
            self.expect(TokenKind.COLON, "':' after property name")
            value = self._value()

            key = key_token.value
            if key in entries:
                self._notes.append(Unrecognized(
                    text=self._snippet(key_start, self.index),
                    reason=f"duplicate property {key!r}, first value kept",
                    line=key_token.line,
                ))
            else:
                entries[key] = value

            if self.accept(TokenKind.COMMA):
                if self.accept(TokenKind.RBRACE):
                    break
                continue
            self.expect(TokenKind.RBRACE, "',' or '}'")
            break

        return entries

    def _value(self) -> PropertyValue:
        token = self.peek()

        if token.kind == TokenKind.STRING:
            self.advance()
            return StringValue(token.value)
        if token.kind == TokenKind.NUMBER:
            self.advance()
            return NumberValue.from_lexeme(token.value)
        if token.kind == TokenKind.DASH and self.peek(1).kind == TokenKind.NUMBER:
            self.advance()
            return NumberValue.from_lexeme("-" + self.advance().value)
        if token.kind == TokenKind.PARAM:
            self.advance()
            return BareValue(token.value)
        if token.kind == TokenKind.LBRACKET:
            return self._list()
        if token.kind == TokenKind.LBRACE:
            return MapValue(tuple(self._map().items()))
        if token.kind == TokenKind.IDENT:
            return self._word()

        raise ParseError(f"expected a value but found {token.value or token.kind.value!r}", token)

    def _list(self) -> ListValue:
        self.expect(TokenKind.LBRACKET, "'['")
        items: List[PropertyValue] = []
        if self.accept(TokenKind.RBRACKET):
            return ListValue(())
        while True:
            items.append(self._value())
            if self.accept(TokenKind.COMMA):
                if self.accept(TokenKind.RBRACKET):
                    break
                continue
            self.expect(TokenKind.RBRACKET, "',' or ']'")
            break
        return ListValue(tuple(items))

    def _word(self) -> PropertyValue:
        token = self.advance()
        lowered = token.value.lower()
        if lowered in ("true", "false"):
            return BooleanValue(lowered == "true")
        if lowered == "null":
            return NullValue()

        end = token
        if self.peek().kind == TokenKind.LPAREN:
            end = self._skip_balanced()
        else:
            while self.peek().kind == TokenKind.DOT and self.peek(1).kind == TokenKind.IDENT:
                self.advance()
                end = self.advance()
        return BareValue(self.text[token.pos:end.end])

    def _skip_balanced(self) -> Token:
        """Consume a parenthesised argument list; return its closing token."""
        depth = 0
        while True:
            token = self.advance()
            if token.kind == TokenKind.EOF:
                raise ParseError("unbalanced parentheses in value", token)
            if token.kind == TokenKind.LPAREN:
                depth += 1
            elif token.kind == TokenKind.RPAREN:
                depth -= 1
                if depth == 0:
                    return token


def parse_statements(text: str) -> ParseResult:
    """Parse declarative text into statements (never raises)."""
    return StatementParser(text).parse()


_WS = re.compile(r"\s+")


def describe(statement: Statement) -> str:
    """One-line human description of a statement (for warnings and debug logs)."""
    if isinstance(statement, EntityStatement):
        return f"CREATE :{statement.label} {statement.node.name or ''}".strip()
    if isinstance(statement, MatchStatement):
        return "MATCH " + ", ".join(f":{n.label}" for n in statement.nodes)
    if isinstance(statement, RelationshipStatement):
        return f"CREATE -[:{statement.label}]->"
    return _WS.sub(" ", statement.text)
