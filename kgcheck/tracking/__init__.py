"""
Tracking — Checks over extracted statements

    SyntaxValidator      structure against the schema
    PropertyValidator    property bags, value shapes, naming conventions
    ConflictDetector     corpus-wide conflict rules
    FileValidator        per-file pipeline → ValidationResult
"""

from .conflicts import ConflictDetector, ConflictFinding, RULES, group_by_kind
from .properties import PropertyValidator
from .results import Issues, ValidationResult, ValidationSummary
from .syntax import SyntaxValidator
from .validator import EntityConsistencyChecker, FileValidator

__all__ = [
    "ConflictDetector", "ConflictFinding", "RULES", "group_by_kind",
    "PropertyValidator",
    "Issues", "ValidationResult", "ValidationSummary",
    "SyntaxValidator",
    "EntityConsistencyChecker", "FileValidator",
]
