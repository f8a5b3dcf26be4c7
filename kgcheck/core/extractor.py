"""
StatementExtractor — One file's text to entity and relationship records

    text → template check → parse_statements() → records

A template file yields an Extraction with is_template set and no records.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .model import EntityRecord, RelationshipRecord
from .parsing import NodePattern, ParseResult, Unrecognized, describe, parse_statements
from .schema import SchemaContext
from .templates import find_placeholder


logger = logging.getLogger(__name__)


@dataclass
class Extraction:
    source_file: str
    parse: ParseResult = field(default_factory=ParseResult)
    entities: List[EntityRecord] = field(default_factory=list)
    relationships: List[RelationshipRecord] = field(default_factory=list)
    is_template: bool = False
    placeholder: Optional[str] = None

    @property
    def unrecognized(self) -> List[Unrecognized]:
        return self.parse.unrecognized


class StatementExtractor:
    """Extracts records from file text using the schema's unique keys for naming."""

    def __init__(self, schema: Optional[SchemaContext] = None, placeholders: Optional[Iterable[str]] = None):
        self.schema = schema or SchemaContext()
        self.placeholders = tuple(placeholders) if placeholders is not None else None

    def node_name(self, node: NodePattern) -> Optional[str]:
        """`name` property, else the value of the type's unique key."""
        value = node.properties.get("name")
        if value is None and node.label:
            key = self.schema.unique_key(node.label)
            if key:
                value = node.properties.get(key)
        return value.text if value is not None else None

    def extract(self, text: str, source_file: str) -> Extraction:
        placeholder = find_placeholder(text, self.placeholders)
        if placeholder:
            logger.debug("%s is a template (%s)", source_file, placeholder)
            return Extraction(source_file=source_file, is_template=True, placeholder=placeholder)

        parsed = parse_statements(text)
        extraction = Extraction(source_file=source_file, parse=parsed)

        for statement in parsed.entities:
            node = statement.node
            extraction.entities.append(EntityRecord(
                entity_type=node.label,
                name=self.node_name(node),
                source_file=source_file,
                line=statement.line,
                properties=dict(node.properties),
            ))

        for statement in parsed.relationships:
            source, target = statement.source, statement.target
            extraction.relationships.append(RelationshipRecord(
                label=statement.label,
                source_type=source.label,
                source_name=self.node_name(source),
                target_type=target.label,
                target_name=self.node_name(target),
                source_file=source_file,
                line=statement.line,
                properties=dict(statement.properties),
                source_match=dict(source.properties),
                target_match=dict(target.properties),
            ))

        for fragment in parsed.unrecognized:
            logger.debug("%s:%d unrecognized: %s (%s)", source_file, fragment.line, describe(fragment), fragment.reason)

        return extraction
