"""
Graph Model — Corpus-wide index of extracted entities and relationships

Built once per run from per-file extractions, read-only afterwards:

    entities_by_type        type → [EntityRecord]
    entities_by_key         (type, name) → [EntityRecord]
    symbols_by_name         name → [EntityRecord]
    symbols_by_context      context → [EntityRecord]
    symbols_by_latex        latex → [EntityRecord]
    relationships_by_pair   (name, name) sorted → [RelationshipRecord]
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .values import PropertyValue, text_of, to_python_dict


logger = logging.getLogger(__name__)

SYMBOL_TYPE = "Symbol"
CONFLICT_LABEL = "CONFLICTS_WITH"


@dataclass(frozen=True)
class EntityRecord:
    """A declared node. Symbols are entities of type `Symbol`."""
    entity_type: str
    name: Optional[str]
    source_file: str
    line: int = 0
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    has_documented_conflict: bool = False

    @property
    def is_symbol(self) -> bool:
        return self.entity_type == SYMBOL_TYPE

    def prop(self, key: str) -> str:
        """Text of a property ('' when absent)."""
        return text_of(self.properties.get(key))

    @property
    def context(self) -> str:
        return self.prop("context")

    @property
    def latex(self) -> str:
        return self.prop("latex")

    @property
    def meaning(self) -> str:
        return self.prop("meaning")

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.entity_type,
            "name": self.name,
            "file": self.source_file,
            "line": self.line,
            "properties": to_python_dict(self.properties),
        }
        if self.is_symbol:
            data["has_documented_conflict"] = self.has_documented_conflict
        return data


@dataclass(frozen=True)
class RelationshipRecord:
    """A declared relationship with its endpoints resolved to (type, name)."""
    label: str
    source_type: Optional[str]
    source_name: Optional[str]
    target_type: Optional[str]
    target_name: Optional[str]
    source_file: str
    line: int = 0
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    source_match: Mapping[str, PropertyValue] = field(default_factory=dict)
    target_match: Mapping[str, PropertyValue] = field(default_factory=dict)

    @property
    def pair(self) -> Tuple[str, str]:
        """Unordered endpoint pair used for grouping."""
        a, b = self.source_name or "", self.target_name or ""
        return (a, b) if a <= b else (b, a)

    def endpoints(self) -> List[Tuple[Optional[str], Optional[str], Mapping[str, PropertyValue]]]:
        return [
            (self.source_type, self.source_name, self.source_match),
            (self.target_type, self.target_name, self.target_match),
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "source": {"type": self.source_type, "name": self.source_name},
            "target": {"type": self.target_type, "name": self.target_name},
            "file": self.source_file,
            "line": self.line,
            "properties": to_python_dict(self.properties),
        }


@dataclass
class GraphModel:
    entities: List[EntityRecord] = field(default_factory=list)
    relationships: List[RelationshipRecord] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    template_files: List[str] = field(default_factory=list)

    entities_by_type: Dict[str, List[EntityRecord]] = field(default_factory=dict)
    entities_by_key: Dict[Tuple[str, str], List[EntityRecord]] = field(default_factory=dict)
    symbols_by_name: Dict[str, List[EntityRecord]] = field(default_factory=dict)
    symbols_by_context: Dict[str, List[EntityRecord]] = field(default_factory=dict)
    symbols_by_latex: Dict[str, List[EntityRecord]] = field(default_factory=dict)
    relationships_by_pair: Dict[Tuple[str, str], List[RelationshipRecord]] = field(default_factory=dict)

    @property
    def symbols(self) -> List[EntityRecord]:
        return self.entities_by_type.get(SYMBOL_TYPE, [])

    def has_entity(self, entity_type: Optional[str], name: Optional[str]) -> bool:
        if name is None:
            return False
        if entity_type is None:
            return any(key[1] == name for key in self.entities_by_key)
        return (entity_type, name) in self.entities_by_key

    def stats(self) -> Dict[str, int]:
        return {
            "files": len(self.files),
            "templates": len(self.template_files),
            "entities": len(self.entities),
            "symbols": len(self.symbols),
            "relationships": len(self.relationships),
        }


def _matches(pattern: Mapping[str, PropertyValue], symbol: EntityRecord) -> bool:
    """Every property given in a MATCH pattern agrees with the symbol."""
    for key, value in pattern.items():
        if key not in symbol.properties or symbol.prop(key) != value.text:
            return False
    return True


class GraphModelBuilder:
    """
    Folds extractions into a GraphModel.

    documentation_scope:
        "symbol"  a symbol is documented when it is an endpoint of any
                  CONFLICTS_WITH relationship in the corpus
        "file"    a symbol is documented when its own file declares any
                  CONFLICTS_WITH relationship
    """

    def __init__(self, documentation_scope: str = "symbol"):
        self.documentation_scope = documentation_scope
        self._entities: List[EntityRecord] = []
        self._relationships: List[RelationshipRecord] = []
        self._files: List[str] = []
        self._templates: List[str] = []

    def add(self, extraction) -> None:
        self._files.append(extraction.source_file)
        if extraction.is_template:
            self._templates.append(extraction.source_file)
            logger.debug("Template %s contributes nothing to the model", extraction.source_file)
            return
        self._entities.extend(extraction.entities)
        self._relationships.extend(extraction.relationships)

    def add_all(self, extractions: Iterable) -> "GraphModelBuilder":
        for extraction in extractions:
            self.add(extraction)
        return self

    def build(self) -> GraphModel:
        entities = self._mark_documented(self._entities, self._relationships)

        # Sorted so grouping and output do not depend on file order
        entities.sort(key=lambda e: (e.entity_type, e.name or "", e.source_file, e.line))
        relationships = sorted(
            self._relationships,
            key=lambda r: (r.pair, r.label, r.source_file, r.line),
        )

        model = GraphModel(
            entities=entities,
            relationships=relationships,
            files=sorted(self._files),
            template_files=sorted(self._templates),
        )

        by_type = defaultdict(list)
        by_key = defaultdict(list)
        by_name = defaultdict(list)
        by_context = defaultdict(list)
        by_latex = defaultdict(list)
        for entity in entities:
            by_type[entity.entity_type].append(entity)
            if entity.name is not None:
                by_key[(entity.entity_type, entity.name)].append(entity)
            if entity.is_symbol:
                if entity.name:
                    by_name[entity.name].append(entity)
                if entity.context:
                    by_context[entity.context].append(entity)
                if entity.latex:
                    by_latex[entity.latex].append(entity)

        by_pair = defaultdict(list)
        for rel in relationships:
            by_pair[rel.pair].append(rel)

        model.entities_by_type = dict(by_type)
        model.entities_by_key = dict(by_key)
        model.symbols_by_name = dict(by_name)
        model.symbols_by_context = dict(by_context)
        model.symbols_by_latex = dict(by_latex)
        model.relationships_by_pair = dict(by_pair)

        logger.debug("Graph model built: %s", model.stats())
        return model

    def _mark_documented(
        self,
        entities: List[EntityRecord],
        relationships: List[RelationshipRecord],
    ) -> List[EntityRecord]:
        conflicts = [r for r in relationships if r.label == CONFLICT_LABEL]
        if not conflicts:
            return list(entities)

        if self.documentation_scope == "file":
            files = {r.source_file for r in conflicts}
            return [
                replace(e, has_documented_conflict=True) if e.is_symbol and e.source_file in files else e
                for e in entities
            ]

        endpoints = []
        for rel in conflicts:
            for entity_type, name, pattern in rel.endpoints():
                if name is not None and entity_type in (None, SYMBOL_TYPE):
                    endpoints.append((name, pattern))

        marked = []
        for entity in entities:
            documented = entity.is_symbol and any(
                name == entity.name and _matches(pattern, entity)
                for name, pattern in endpoints
            )
            marked.append(replace(entity, has_documented_conflict=True) if documented else entity)
        return marked


def build_model(extractions: Iterable, documentation_scope: str = "symbol") -> GraphModel:
    return GraphModelBuilder(documentation_scope).add_all(extractions).build()
