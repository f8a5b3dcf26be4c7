"""
Statement AST — What the parser recognized in a declarative file

    NodePattern            (var:Label {props})  or a bare reference (var)
    EntityStatement        CREATE of a labelled node
    MatchStatement         MATCH of one or more labelled nodes
    RelationshipStatement  CREATE (a)-[:LABEL {props}]->(b) with resolved endpoints
    Unrecognized           anything the parser skipped, with a reason
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from ..values import PropertyValue


@dataclass(frozen=True)
class NodePattern:
    """A node pattern: `(var:Label {props})`; label is None for `(var)`."""
    variable: Optional[str]
    label: Optional[str]
    properties: Dict[str, PropertyValue] = field(default_factory=dict)
    line: int = 0

    @property
    def is_reference(self) -> bool:
        return self.label is None

    @property
    def name(self) -> Optional[str]:
        value = self.properties.get("name")
        return value.text if value is not None else None


@dataclass(frozen=True)
class EntityStatement:
    node: NodePattern
    line: int

    @property
    def label(self) -> str:
        return self.node.label


@dataclass(frozen=True)
class MatchStatement:
    nodes: List[NodePattern]
    line: int


@dataclass(frozen=True)
class RelationshipStatement:
    """
    A created relationship.

    source/target are the patterns the endpoint variables resolved to
    (from a MATCH, an earlier CREATE or inline). When a variable was not
    bound in the current statement the endpoint is the bare reference and
    `unbound_source` / `unbound_target` is set.
    """
    label: str
    source: NodePattern
    target: NodePattern
    properties: Dict[str, PropertyValue]
    line: int
    source_variable: Optional[str] = None
    target_variable: Optional[str] = None
    unbound_source: bool = False
    unbound_target: bool = False


@dataclass(frozen=True)
class Unrecognized:
    text: str
    reason: str
    line: int


Statement = Union[EntityStatement, MatchStatement, RelationshipStatement, Unrecognized]


@dataclass
class ParseResult:
    """Statements in source order plus typed views."""
    statements: List[Statement] = field(default_factory=list)

    @property
    def entities(self) -> List[EntityStatement]:
        return [s for s in self.statements if isinstance(s, EntityStatement)]

    @property
    def matches(self) -> List[MatchStatement]:
        return [s for s in self.statements if isinstance(s, MatchStatement)]

    @property
    def relationships(self) -> List[RelationshipStatement]:
        return [s for s in self.statements if isinstance(s, RelationshipStatement)]

    @property
    def unrecognized(self) -> List[Unrecognized]:
        return [s for s in self.statements if isinstance(s, Unrecognized)]
