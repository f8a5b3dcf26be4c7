"""
Core — Extraction engine

    schema      SchemaContext from the schema files
    parsing     lexer + statement parser
    extractor   file text → Extraction
    model       Extractions → GraphModel
"""

from .extractor import Extraction, StatementExtractor
from .model import EntityRecord, RelationshipRecord, GraphModel, GraphModelBuilder, build_model
from .schema import (
    SchemaContext, SchemaLoadError, EntityTypeSchema, RelationshipTypeSchema,
    build_schema, load_schema,
)
from .templates import DEFAULT_PLACEHOLDERS, is_template

__all__ = [
    "Extraction", "StatementExtractor",
    "EntityRecord", "RelationshipRecord", "GraphModel", "GraphModelBuilder", "build_model",
    "SchemaContext", "SchemaLoadError", "EntityTypeSchema", "RelationshipTypeSchema",
    "build_schema", "load_schema",
    "DEFAULT_PLACEHOLDERS", "is_template",
]
