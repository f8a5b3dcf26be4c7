"""
Validation results — Per-file verdicts
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List


@dataclass
class Issues:
    """Errors and warnings collected by one checker."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def extend(self, other: "Issues") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


@dataclass
class ValidationResult:
    """Verdict for one file. Valid means no errors; warnings never invalidate."""
    source_file: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    is_template: bool = False

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def file_name(self) -> str:
        return Path(self.source_file).name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.source_file,
            "valid": self.valid,
            "is_template": self.is_template,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class ValidationSummary:
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def valid(self) -> int:
        return sum(1 for r in self.results if r.valid)

    @property
    def invalid(self) -> int:
        return sum(1 for r in self.results if not r.valid)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def all_valid(self) -> bool:
        return self.invalid == 0

    def describe(self) -> str:
        return f"Validation Summary: {self.valid} valid, {self.invalid} invalid out of {self.total} files"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "invalid": self.invalid,
            "total": self.total,
            "results": [r.to_dict() for r in self.results],
        }
