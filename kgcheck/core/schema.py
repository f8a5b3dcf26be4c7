"""
Schema — Entity and relationship type tables

Entity types come from uniqueness constraints plus an annotated comment
block per type:

    CREATE CONSTRAINT concept_name IF NOT EXISTS
    FOR (c:MathematicalConcept) REQUIRE c.name IS UNIQUE;

    // Properties for MathematicalConcept:
    // Required: name, description
    // Optional: year, aliases

Relationship types come from an annotated comment block only:

    // Relationship Type: BASED_ON
    // From: Algorithm, NumericalMethod
    // To: MathematicalConcept
    // Properties: since, notes

The loaded SchemaContext is immutable and passed to every validator.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple, Union


logger = logging.getLogger(__name__)


_CONSTRAINT = re.compile(
    r"CREATE\s+CONSTRAINT\b[^;]*?\bFOR\s*\(\s*(\w+)\s*:\s*(\w+)\s*\)"
    r"[^;]*?\bREQUIRE\s+\1\.(\w+)\s+IS\s+UNIQUE"
)
_PROPERTY_BLOCK = re.compile(
    r"//[ \t]*Properties for (\w+):\s*"
    r"//[ \t]*Required:[ \t]*([\w, \t]*)"
    r"(?:\s*//[ \t]*Optional:[ \t]*([\w, \t]*))?"
)
_RELATIONSHIP_BLOCK = re.compile(
    r"//[ \t]*Relationship Type:[ \t]*(\w+)\s*"
    r"//[ \t]*From:[ \t]*([\w, \t]+)\s*"
    r"//[ \t]*To:[ \t]*([\w, \t]+)"
    r"(?:\s*//[ \t]*Properties:[ \t]*([\w, \t]*))?"
)


class SchemaLoadError(Exception):
    """A schema file could not be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot read schema file {path}: {reason}")
        self.path = path
        self.reason = reason


def split_names(text: Optional[str]) -> List[str]:
    """'a, b ,c' → ['a', 'b', 'c']"""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


@dataclass(frozen=True)
class EntityTypeSchema:
    name: str
    unique_key: str
    required: Tuple[str, ...] = ()
    optional: FrozenSet[str] = frozenset()

    @property
    def allowed(self) -> FrozenSet[str]:
        return frozenset(self.required) | self.optional

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "unique_key": self.unique_key,
            "required": list(self.required),
            "optional": sorted(self.optional),
        }


@dataclass(frozen=True)
class RelationshipTypeSchema:
    label: str
    sources: FrozenSet[str] = frozenset()
    targets: FrozenSet[str] = frozenset()
    properties: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict:
        return {
            "label": self.label,
            "sources": sorted(self.sources),
            "targets": sorted(self.targets),
            "properties": sorted(self.properties),
        }


@dataclass(frozen=True)
class SchemaContext:
    """Read-only entity and relationship tables."""
    entity_types: Mapping[str, EntityTypeSchema] = field(default_factory=lambda: MappingProxyType({}))
    relationship_types: Mapping[str, RelationshipTypeSchema] = field(default_factory=lambda: MappingProxyType({}))

    def entity(self, name: str) -> Optional[EntityTypeSchema]:
        return self.entity_types.get(name)

    def relationship(self, label: str) -> Optional[RelationshipTypeSchema]:
        return self.relationship_types.get(label)

    def unique_key(self, type_name: str) -> Optional[str]:
        schema = self.entity_types.get(type_name)
        return schema.unique_key if schema else None

    @property
    def is_empty(self) -> bool:
        return not self.entity_types and not self.relationship_types


def parse_entity_schema(text: str) -> Dict[str, EntityTypeSchema]:
    """Extract entity types from constraint declarations and property blocks."""
    keys: Dict[str, str] = {}
    for match in _CONSTRAINT.finditer(text):
        type_name, key = match.group(2), match.group(3)
        if type_name in keys and keys[type_name] != key:
            logger.warning("Entity type %s declares several unique keys; using %s", type_name, keys[type_name])
            continue
        keys.setdefault(type_name, key)

    types = {name: EntityTypeSchema(name=name, unique_key=key) for name, key in keys.items()}

    for match in _PROPERTY_BLOCK.finditer(text):
        type_name = match.group(1)
        if type_name not in types:
            logger.debug("Property block for unregistered type %s ignored", type_name)
            continue

        required = tuple(dict.fromkeys(split_names(match.group(2))))
        optional = set(split_names(match.group(3)))
        overlap = optional.intersection(required)
        if overlap:
            logger.warning(
                "Properties %s of %s are both required and optional; treating as required",
                ", ".join(sorted(overlap)), type_name,
            )
            optional -= overlap

        types[type_name] = EntityTypeSchema(
            name=type_name,
            unique_key=types[type_name].unique_key,
            required=required,
            optional=frozenset(optional),
        )

    return types


def parse_relationship_schema(text: str) -> Dict[str, RelationshipTypeSchema]:
    """Extract relationship types from annotated comment blocks."""
    types: Dict[str, RelationshipTypeSchema] = {}
    for match in _RELATIONSHIP_BLOCK.finditer(text):
        label = match.group(1)
        if label in types:
            logger.warning("Relationship type %s declared more than once; last declaration wins", label)
        types[label] = RelationshipTypeSchema(
            label=label,
            sources=frozenset(split_names(match.group(2))),
            targets=frozenset(split_names(match.group(3))),
            properties=frozenset(split_names(match.group(4))),
        )
    return types


def build_schema(entity_text: str, relationship_text: str) -> SchemaContext:
    """Build a SchemaContext from the two schema texts."""
    entities = parse_entity_schema(entity_text)
    relationships = parse_relationship_schema(relationship_text)
    logger.debug("Loaded %d entity types, %d relationship types", len(entities), len(relationships))
    return SchemaContext(
        entity_types=MappingProxyType(entities),
        relationship_types=MappingProxyType(relationships),
    )


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaLoadError(path, str(e)) from e


def load_schema(entity_path: Union[str, Path], relationship_path: Union[str, Path]) -> SchemaContext:
    """
    Load both schema files.

    Raises:
        SchemaLoadError: if either file cannot be read. A readable file with
        no declarations yields empty tables.
    """
    entity_text = _read(Path(entity_path))
    relationship_text = _read(Path(relationship_path))
    return build_schema(entity_text, relationship_text)
