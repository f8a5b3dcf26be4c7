"""
kgcheck — Consistency checks for hand-authored knowledge graphs

Validates a corpus of declarative Cypher files (entities, symbols,
relationships) against its schema and detects conflicts across files.

Usage:
    kgcheck validate
    kgcheck validate entities/gradient-descent.cypher
    kgcheck consistency Symbol
    kgcheck conflicts --symbols-only
    kgcheck config --set run.workers 4
"""

__version__ = "0.1.0"

# Core layer (extraction)
from .core.schema import SchemaContext, SchemaLoadError, load_schema, build_schema
from .core.extractor import StatementExtractor, Extraction
from .core.model import GraphModel, GraphModelBuilder, EntityRecord, RelationshipRecord

# Tracking layer (checks)
from .tracking.results import ValidationResult, ValidationSummary
from .tracking.validator import FileValidator, EntityConsistencyChecker
from .tracking.conflicts import ConflictDetector, ConflictFinding

# Services layer
from .services.corpus import Corpus, ConflictReport

# Config
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'SchemaContext', 'SchemaLoadError', 'load_schema', 'build_schema',
    'StatementExtractor', 'Extraction',
    'GraphModel', 'GraphModelBuilder', 'EntityRecord', 'RelationshipRecord',
    # Tracking
    'ValidationResult', 'ValidationSummary',
    'FileValidator', 'EntityConsistencyChecker',
    'ConflictDetector', 'ConflictFinding',
    # Services
    'Corpus', 'ConflictReport',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
