"""
Validators — Per-file pipelines

FileValidator:
    read → template check → extract → SyntaxValidator → PropertyValidator

EntityConsistencyChecker:
    the files of one entity type (symbols/ for Symbol, entities/ otherwise),
    optionally filtered by file name, each validated and required to
    declare an entity of that type
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..core.extractor import Extraction, StatementExtractor
from ..core.model import SYMBOL_TYPE
from ..core.schema import SchemaContext
from ..core.sources import DEFAULT_EXTENSION, discover, read_source
from ..core.templates import TEMPLATE_WARNING
from .properties import PropertyValidator
from .results import ValidationResult, ValidationSummary
from .syntax import SyntaxValidator


logger = logging.getLogger(__name__)


class FileValidator:
    """Schema and syntax validation of single files."""

    def __init__(self, schema: SchemaContext, placeholders: Optional[Iterable[str]] = None):
        self.schema = schema
        self.extractor = StatementExtractor(schema, placeholders)
        self.syntax = SyntaxValidator(schema)
        self.properties = PropertyValidator(schema)

    def validate(self, path: Union[str, Path]) -> ValidationResult:
        return self.validate_with_extraction(path)[0]

    def validate_with_extraction(self, path: Union[str, Path]) -> Tuple[ValidationResult, Optional[Extraction]]:
        source_file = str(path)
        text, reason = read_source(path)
        if text is None:
            return ValidationResult(source_file=source_file, errors=[f"Error reading file: {reason}"]), None
        extraction = self.extractor.extract(text, source_file)
        return self.check(extraction), extraction

    def validate_text(self, text: str, source_file: str = "<text>") -> ValidationResult:
        return self.check(self.extractor.extract(text, source_file))

    def check(self, extraction: Extraction) -> ValidationResult:
        result = ValidationResult(source_file=extraction.source_file)
        if extraction.is_template:
            result.is_template = True
            result.warnings.append(TEMPLATE_WARNING)
            return result

        syntax = self.syntax.validate(extraction)
        props = self.properties.validate_all(extraction.entities)
        result.errors.extend(syntax.errors + props.errors)
        result.warnings.extend(syntax.warnings + props.warnings)

        logger.debug("%s: %d errors, %d warnings", extraction.source_file, len(result.errors), len(result.warnings))
        return result


class EntityConsistencyChecker:
    """Validates the files declaring one entity type."""

    def __init__(
        self,
        validator: FileValidator,
        entities_dir: Union[str, Path],
        symbols_dir: Union[str, Path],
        extension: str = DEFAULT_EXTENSION,
    ):
        self.validator = validator
        self.entities_dir = Path(entities_dir)
        self.symbols_dir = Path(symbols_dir)
        self.extension = extension

    def files_for(self, entity_type: str, name_filter: Optional[str] = None) -> List[Path]:
        directory = self.symbols_dir if entity_type == SYMBOL_TYPE else self.entities_dir
        files = discover(directory, self.extension)
        if name_filter:
            files = [f for f in files if name_filter in f.stem]
        return files

    def check_file(self, path: Path, entity_type: str) -> ValidationResult:
        result, extraction = self.validator.validate_with_extraction(path)
        if extraction is None or extraction.is_template:
            return result
        if not any(e.entity_type == entity_type for e in extraction.entities):
            result.errors.insert(0, f"No {entity_type} entity found in file")
        return result

    def check(self, entity_type: str, name_filter: Optional[str] = None) -> ValidationSummary:
        files = self.files_for(entity_type, name_filter)
        logger.debug("Checking %d %s files", len(files), entity_type)
        return ValidationSummary(results=[self.check_file(f, entity_type) for f in files])
