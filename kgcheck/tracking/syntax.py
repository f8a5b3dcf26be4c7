"""
SyntaxValidator — Structural checks of one file against the schema

Checks:
- entity labels in CREATE and MATCH are declared types
- relationship labels are declared types
- resolved endpoint types are allowed for the relationship
- relationship properties are declared for the relationship
- endpoint variables are bound in the same statement

Unrecognized statements and "did you mean" hints are warnings.
"""

from ..core.extractor import Extraction
from ..core.parsing import NodePattern, RelationshipStatement
from ..core.schema import SchemaContext
from .results import Issues
from .suggest import did_you_mean


class SyntaxValidator:

    def __init__(self, schema: SchemaContext):
        self.schema = schema

    def validate(self, extraction: Extraction) -> Issues:
        issues = Issues()
        if extraction.is_template:
            return issues

        for statement in extraction.parse.statements:
            if isinstance(statement, RelationshipStatement):
                self._check_relationship(statement, issues)

        for statement in extraction.parse.matches:
            for node in statement.nodes:
                if node.label not in self.schema.entity_types:
                    issues.error(f"Invalid entity type in MATCH: {node.label}")
                    self._suggest_entity(node, issues)

        for statement in extraction.parse.entities:
            if statement.label not in self.schema.entity_types:
                issues.error(f"Invalid entity type: {statement.label}")
                self._suggest_entity(statement.node, issues)

        for fragment in extraction.unrecognized:
            issues.warn(f"Unrecognized statement at line {fragment.line}: {fragment.text} ({fragment.reason})")

        return issues

    def _suggest_entity(self, node: NodePattern, issues: Issues) -> None:
        hint = did_you_mean("entity type", node.label, self.schema.entity_types)
        if hint:
            issues.warn(hint)

    def _check_relationship(self, rel: RelationshipStatement, issues: Issues) -> None:
        if rel.unbound_source:
            issues.error(f"Source variable mismatch: {rel.source_variable} is not bound in this statement")
        if rel.unbound_target:
            issues.error(f"Target variable mismatch: {rel.target_variable} is not bound in this statement")

        rel_schema = self.schema.relationship(rel.label)
        if rel_schema is None:
            issues.error(f"Invalid relationship type: {rel.label}")
            hint = did_you_mean("relationship type", rel.label, self.schema.relationship_types)
            if hint:
                issues.warn(hint)
            return

        source_type = rel.source.label
        target_type = rel.target.label
        if source_type is not None and source_type not in rel_schema.sources:
            issues.error(f"Invalid source type {source_type} for relationship {rel.label}")
        if target_type is not None and target_type not in rel_schema.targets:
            issues.error(f"Invalid target type {target_type} for relationship {rel.label}")

        for key in rel.properties:
            if key not in rel_schema.properties:
                issues.error(f"Unknown property '{key}' for relationship {rel.label}")
