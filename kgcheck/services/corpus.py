"""
Corpus — File discovery, fan-out and model assembly for one run

    Corpus(root, config)
      .schema()              SchemaContext (SchemaLoadError if unreadable)
      .validate(path)        ValidationSummary for a file or directory
      .consistency(type)     ValidationSummary for one entity type
      .build_model()         GraphModel over entities/, symbols/, relationships/
      .detect_conflicts()    ConflictReport

Per-file work runs on a ThreadPoolExecutor when run.workers > 1; results
always come back in file order. Conflict detection starts after every
extraction has been aggregated.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TypeVar

from ..config import Config
from ..core.extractor import Extraction, StatementExtractor
from ..core.model import GraphModel, GraphModelBuilder
from ..core.schema import SchemaContext, SchemaLoadError, load_schema
from ..core.sources import discover, read_source
from ..tracking.conflicts import ConflictDetector, ConflictFinding
from ..tracking.results import ValidationSummary
from ..tracking.validator import EntityConsistencyChecker, FileValidator


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class ConflictReport:
    model: GraphModel
    findings: List[ConflictFinding] = field(default_factory=list)
    unreadable: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "stats": self.model.stats(),
            "unreadable": list(self.unreadable),
            "conflicts": [f.to_dict() for f in self.findings],
        }


class Corpus:
    """A knowledge-graph corpus rooted at a directory."""

    def __init__(self, root: Path, config: Optional[Config] = None, workers: Optional[int] = None):
        self.root = Path(root)
        self.config = config or Config()
        self.workers = workers or self.config.run.workers
        self._schema: Optional[SchemaContext] = None
        self._unreadable: List[str] = []

    # =========================================================================
    # Layout
    # =========================================================================

    @property
    def entities_dir(self) -> Path:
        return self.root / self.config.layout.entities

    @property
    def symbols_dir(self) -> Path:
        return self.root / self.config.layout.symbols

    @property
    def relationships_dir(self) -> Path:
        return self.root / self.config.layout.relationships

    @property
    def entity_schema_path(self) -> Path:
        return self.root / self.config.layout.schema / self.config.layout.entity_schema

    @property
    def relationship_schema_path(self) -> Path:
        return self.root / self.config.layout.schema / self.config.layout.relationship_schema

    @property
    def extension(self) -> str:
        return self.config.layout.extension

    def corpus_files(self) -> List[Path]:
        """All declaration files, by directory then name."""
        files: List[Path] = []
        for directory in (self.entities_dir, self.symbols_dir, self.relationships_dir):
            found = discover(directory, self.extension)
            logger.debug("%s: %d files", directory, len(found))
            files.extend(found)
        return files

    def resolve(self, path: Optional[str]) -> Path:
        """A user-supplied path, relative to the working directory, else to the root."""
        if path is None:
            return self.root
        candidate = Path(path)
        if candidate.exists() or candidate.is_absolute():
            return candidate
        return self.root / candidate

    # =========================================================================
    # Schema
    # =========================================================================

    def schema(self) -> SchemaContext:
        """Load the schema once per run. Raises SchemaLoadError."""
        if self._schema is None:
            self._schema = load_schema(self.entity_schema_path, self.relationship_schema_path)
        return self._schema

    def schema_or_empty(self) -> SchemaContext:
        """Schema when readable; conflict detection does not need one."""
        try:
            return self.schema()
        except SchemaLoadError as e:
            logger.info("%s; continuing without schema", e)
            return SchemaContext()

    # =========================================================================
    # Fan-out
    # =========================================================================

    def _map(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Apply fn to items, in a thread pool when workers > 1; order is preserved."""
        if self.workers <= 1 or len(items) <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="kgcheck") as executor:
            return list(executor.map(fn, items))

    # =========================================================================
    # Operations
    # =========================================================================

    def file_validator(self) -> FileValidator:
        return FileValidator(self.schema(), self.config.templates.placeholders)

    def validate(self, path: Optional[str] = None) -> ValidationSummary:
        """
        Validate a file, a directory, or (no path) every corpus file.

        Raises:
            FileNotFoundError: the path does not exist
            SchemaLoadError: the schema cannot be read
        """
        validator = self.file_validator()
        if path is None:
            files = self.corpus_files()
        else:
            target = self.resolve(path)
            if not target.exists():
                raise FileNotFoundError(f"Path not found: {target}")
            files = discover(target, self.extension)

        logger.debug("Validating %d files with %d workers", len(files), self.workers)
        return ValidationSummary(results=self._map(validator.validate, files))

    def consistency(self, entity_type: str, name_filter: Optional[str] = None) -> ValidationSummary:
        """Raises SchemaLoadError."""
        checker = EntityConsistencyChecker(
            self.file_validator(),
            self.entities_dir,
            self.symbols_dir,
            self.extension,
        )
        files = checker.files_for(entity_type, name_filter)
        return ValidationSummary(results=self._map(lambda f: checker.check_file(f, entity_type), files))

    def extract_all(self, schema: Optional[SchemaContext] = None) -> List[Extraction]:
        extractor = StatementExtractor(schema or self.schema_or_empty(), self.config.templates.placeholders)

        def extract(path: Path) -> Optional[Extraction]:
            text, _reason = read_source(path)
            if text is None:
                return None
            return extractor.extract(text, str(path))

        files = self.corpus_files()
        extractions = self._map(extract, files)
        self._unreadable = [str(f) for f, e in zip(files, extractions) if e is None]
        return [e for e in extractions if e is not None]

    def build_model(self) -> GraphModel:
        builder = GraphModelBuilder(self.config.conflicts.documentation_scope)
        return builder.add_all(self.extract_all()).build()

    def detect_conflicts(self, symbols_only: bool = False, references: Optional[bool] = None) -> ConflictReport:
        check_references = self.config.conflicts.check_references if references is None else references
        detector = ConflictDetector(
            exclusive_pairs=self.config.conflicts.pairs,
            check_references=check_references,
        )

        model = self.build_model()
        scopes = ["symbols"] if symbols_only else None
        findings = detector.detect(model, scopes=scopes)
        logger.debug("%d conflicts over %s", len(findings), model.stats())
        return ConflictReport(model=model, findings=findings, unreadable=list(self._unreadable))
