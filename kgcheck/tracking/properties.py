"""
PropertyValidator — Property bag checks for declared entities

Three layers, all reported as errors:
- schema: missing required / unknown properties for the entity type
- value shape: year, doi, url, latex
- conventions: PascalCase concept names, 'Author1234' paper ids, symbol rules
"""

import re
from typing import List

from ..core.model import EntityRecord
from ..core.schema import SchemaContext
from .results import Issues


YEAR_PATTERN = re.compile(r"^\d{4}$")
DOI_PATTERN = re.compile(r"^10\.\d{4,9}/[-._;()/:A-Za-z0-9]+$")
URL_PATTERN = re.compile(r"^https?://\S+$")
PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")
PAPER_ID = re.compile(r"^[A-Z][a-z]+\d{4}[a-z]?$")

PASCAL_CASE_TYPES = ("MathematicalConcept", "NumericalMethod", "Algorithm")
DIMENSIONALITIES = ("Scalar", "Vector", "Matrix", "Tensor")


class PropertyValidator:

    def __init__(self, schema: SchemaContext):
        self.schema = schema

    def validate(self, entity: EntityRecord) -> Issues:
        issues = Issues()
        self._check_schema(entity, issues)
        self._check_values(entity, issues)
        self._check_naming(entity, issues)
        if entity.is_symbol:
            self._check_symbol(entity, issues)
        return issues

    def validate_all(self, entities: List[EntityRecord]) -> Issues:
        issues = Issues()
        for entity in entities:
            issues.extend(self.validate(entity))
        return issues

    def _check_schema(self, entity: EntityRecord, issues: Issues) -> None:
        type_schema = self.schema.entity(entity.entity_type)
        if type_schema is None:
            return

        for required in type_schema.required:
            if required not in entity.properties:
                issues.error(f"Missing required property '{required}' for {entity.entity_type}")

        allowed = type_schema.allowed
        for key in entity.properties:
            if key not in allowed:
                issues.error(f"Unknown property '{key}' for {entity.entity_type}")

    def _check_values(self, entity: EntityRecord, issues: Issues) -> None:
        for key, value in entity.properties.items():
            if value.kind == "null":
                continue
            text = value.text

            if key == "year":
                if not YEAR_PATTERN.match(text):
                    issues.error(f"Year should be a 4-digit number: {text}")
            elif key == "doi":
                if text and not DOI_PATTERN.match(text):
                    issues.error(f"DOI format is incorrect: {text}")
            elif key == "url":
                if text and not URL_PATTERN.match(text):
                    issues.error(f"URL format is incorrect: {text}")
            elif key == "latex" and entity.is_symbol:
                # Commands must lead the rendering
                if "\\" in text and not text.startswith("\\"):
                    issues.error(f"LaTeX may be malformed: {text}")

    def _check_naming(self, entity: EntityRecord, issues: Issues) -> None:
        if entity.entity_type in PASCAL_CASE_TYPES:
            name = entity.prop("name")
            if name and not PASCAL_CASE.match(name):
                issues.error(f"{entity.entity_type} name should be in PascalCase: {name}")
        elif entity.entity_type == "Paper":
            paper_id = entity.prop("id")
            if paper_id and not PAPER_ID.match(paper_id):
                issues.error(f"Paper ID should follow format 'Author1234': {paper_id}")

    def _check_symbol(self, entity: EntityRecord, issues: Issues) -> None:
        name = entity.prop("name")
        if entity.latex and not name:
            issues.error("Symbol has LaTeX representation but no name property")
        if name and not entity.context:
            issues.error("Symbol has name but no context property")

        if "dimensionality" in entity.properties:
            dimensionality = entity.prop("dimensionality")
            if dimensionality not in DIMENSIONALITIES:
                issues.error(f"Invalid dimensionality: {dimensionality}")
