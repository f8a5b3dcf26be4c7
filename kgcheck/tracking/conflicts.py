"""
ConflictDetector — Cross-entity consistency rules over the whole corpus

Rules (scope in brackets):
    DuplicateName               [entities]       same (type, name) declared twice
    UndocumentedSymbolConflict  [symbols]        symbol name used in several contexts
                                                 with no CONFLICTS_WITH link
    InconsistentMeaning         [symbols]        one name + context, several meanings
    InconsistentNaming          [symbols]        one LaTeX rendering, several names
    ConflictingRelationships    [relationships]  mutually exclusive labels between
                                                 the same endpoints
    UnresolvedEndpoint          [relationships]  endpoint not declared anywhere (opt-in)

Each rule is a pure function of the GraphModel. Rules are independent;
findings are concatenated in registry order, never deduplicated.
Groups and evidence are sorted, so output does not depend on file order.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import xxhash

from ..core.model import GraphModel


DEFAULT_EXCLUSIVE_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("IMPLEMENTS", "BASED_ON"),
    ("CONFLICTS_WITH", "SYNONYM_OF"),
)

SCOPES = ("entities", "symbols", "relationships")


def _basename(path: str) -> str:
    return Path(path).name


# =============================================================================
# Findings
# =============================================================================

@dataclass
class ConflictFinding:
    """Base class; subclasses set `kind` and carry their evidence."""
    kind = "Conflict"

    @property
    def key(self) -> Tuple:
        """Grouping key identifying this finding within its kind."""
        raise NotImplementedError

    @property
    def fingerprint(self) -> str:
        raw = self.kind + "|" + "|".join(str(part) for part in self.key)
        return xxhash.xxh64(raw.encode()).hexdigest()[:12]

    @property
    def resolution(self) -> str:
        raise NotImplementedError

    @property
    def summary(self) -> str:
        raise NotImplementedError

    def details(self) -> List[str]:
        return []

    def evidence(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        data = {"kind": self.kind, "fingerprint": self.fingerprint}
        data.update(self.evidence())
        data["resolution"] = self.resolution
        return data


@dataclass
class DuplicateName(ConflictFinding):
    entity_type: str
    name: str
    files: List[str] = field(default_factory=list)
    kind = "DuplicateName"

    @property
    def count(self) -> int:
        return len(self.files)

    @property
    def key(self) -> Tuple:
        return (self.entity_type, self.name)

    @property
    def resolution(self) -> str:
        return f"Ensure unique names for {self.entity_type} entities or create EXTENDS/VARIANT_OF relationships"

    @property
    def summary(self) -> str:
        return f"Duplicate name '{self.name}' for entity type {self.entity_type}"

    def details(self) -> List[str]:
        return [_basename(f) for f in self.files]

    def evidence(self) -> Dict[str, Any]:
        return {"entity_type": self.entity_type, "name": self.name, "count": self.count, "files": self.files}


@dataclass
class UndocumentedSymbolConflict(ConflictFinding):
    name: str
    contexts: List[str] = field(default_factory=list)
    symbols: List[Tuple[str, str]] = field(default_factory=list)  # (file, context)
    kind = "UndocumentedSymbolConflict"

    @property
    def key(self) -> Tuple:
        return (self.name,)

    @property
    def resolution(self) -> str:
        return "Create CONFLICTS_WITH relationships between these symbols"

    @property
    def summary(self) -> str:
        return f"Symbol '{self.name}' used in different contexts without CONFLICTS_WITH relationship"

    def details(self) -> List[str]:
        lines = [f"Contexts: {', '.join(self.contexts)}"]
        lines.extend(f'{_basename(f)}: context = "{c}"' for f, c in self.symbols)
        return lines

    def evidence(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "contexts": self.contexts,
            "symbols": [{"file": f, "context": c} for f, c in self.symbols],
        }


@dataclass
class InconsistentMeaning(ConflictFinding):
    name: str
    context: str
    symbols: List[Tuple[str, str]] = field(default_factory=list)  # (file, meaning)
    kind = "InconsistentMeaning"

    @property
    def meanings(self) -> List[str]:
        return sorted({m for _, m in self.symbols if m})

    @property
    def key(self) -> Tuple:
        return (self.name, self.context)

    @property
    def resolution(self) -> str:
        return "Consolidate symbols with consistent meanings or use more specific contexts"

    @property
    def summary(self) -> str:
        return f'Symbol \'{self.name}\' has inconsistent meanings in context "{self.context}"'

    def details(self) -> List[str]:
        return [f'{_basename(f)}: meaning = "{m}"' for f, m in self.symbols]

    def evidence(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "context": self.context,
            "meanings": self.meanings,
            "symbols": [{"file": f, "meaning": m} for f, m in self.symbols],
        }


@dataclass
class InconsistentNaming(ConflictFinding):
    latex: str
    symbols: List[Tuple[str, str, str]] = field(default_factory=list)  # (file, name, context)
    kind = "InconsistentNaming"

    @property
    def names(self) -> List[str]:
        return sorted({n for _, n, _ in self.symbols})

    @property
    def key(self) -> Tuple:
        return (self.latex,)

    @property
    def resolution(self) -> str:
        return "Consider using SYNONYM_OF relationships or standardizing naming"

    @property
    def summary(self) -> str:
        return f"LaTeX '{self.latex}' has inconsistent names"

    def details(self) -> List[str]:
        return [f'{_basename(f)}: name = "{n}", context = "{c}"' for f, n, c in self.symbols]

    def evidence(self) -> Dict[str, Any]:
        return {
            "latex": self.latex,
            "names": self.names,
            "symbols": [{"file": f, "name": n, "context": c} for f, n, c in self.symbols],
        }


@dataclass
class ConflictingRelationships(ConflictFinding):
    endpoints: Tuple[str, str]
    labels: Tuple[str, str]
    relationships: List[Tuple[str, str]] = field(default_factory=list)  # (label, file)
    kind = "ConflictingRelationships"

    @property
    def key(self) -> Tuple:
        return self.endpoints + self.labels

    @property
    def resolution(self) -> str:
        a, b = self.labels
        return f"Resolve conflicting relationships; {a} and {b} are typically incompatible"

    @property
    def summary(self) -> str:
        return f"Conflicting relationships between {self.endpoints[0]} and {self.endpoints[1]}"

    def details(self) -> List[str]:
        return [f"{label} in {_basename(f)}" for label, f in self.relationships]

    def evidence(self) -> Dict[str, Any]:
        return {
            "endpoints": list(self.endpoints),
            "labels": list(self.labels),
            "relationships": [{"label": label, "file": f} for label, f in self.relationships],
        }


@dataclass
class UnresolvedEndpoint(ConflictFinding):
    label: str
    role: str  # "source" | "target"
    entity_type: Optional[str]
    name: str
    source_file: str
    line: int = 0
    kind = "UnresolvedEndpoint"

    @property
    def key(self) -> Tuple:
        return (self.source_file, self.line, self.label, self.role, self.entity_type or "", self.name)

    @property
    def resolution(self) -> str:
        return f"Declare {self.entity_type or 'the entity'} '{self.name}' or correct the relationship endpoint"

    @property
    def summary(self) -> str:
        described = f"{self.entity_type} '{self.name}'" if self.entity_type else f"'{self.name}'"
        return f"{self.label} {self.role} {described} is not declared in the corpus"

    def details(self) -> List[str]:
        return [f"{_basename(self.source_file)}:{self.line}"]

    def evidence(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "role": self.role,
            "entity_type": self.entity_type,
            "name": self.name,
            "file": self.source_file,
            "line": self.line,
        }


# =============================================================================
# Rule registry
# =============================================================================

@dataclass(frozen=True)
class DetectorOptions:
    exclusive_pairs: Tuple[Tuple[str, str], ...] = DEFAULT_EXCLUSIVE_PAIRS


RuleFunc = Callable[[GraphModel, DetectorOptions], List[ConflictFinding]]


@dataclass(frozen=True)
class Rule:
    name: str
    scope: str
    func: RuleFunc
    default: bool = True


RULES: Dict[str, Rule] = {}


def rule(name: str, scope: str, default: bool = True):
    """Register a conflict rule."""
    def decorator(func: RuleFunc) -> RuleFunc:
        RULES[name] = Rule(name=name, scope=scope, func=func, default=default)
        return func
    return decorator


@rule("DuplicateName", scope="entities")
def duplicate_names(model: GraphModel, options: DetectorOptions) -> List[ConflictFinding]:
    findings = []
    for (entity_type, name), records in sorted(model.entities_by_key.items()):
        # Symbol identity is name + context
        if entity_type == "Symbol" or len(records) < 2:
            continue
        findings.append(DuplicateName(
            entity_type=entity_type,
            name=name,
            files=sorted(r.source_file for r in records),
        ))
    return findings


@rule("UndocumentedSymbolConflict", scope="symbols")
def undocumented_symbol_conflicts(model: GraphModel, options: DetectorOptions) -> List[ConflictFinding]:
    findings = []
    for name, symbols in sorted(model.symbols_by_name.items()):
        contexts = sorted({s.context for s in symbols if s.context})
        if len(contexts) < 2:
            continue
        if any(s.has_documented_conflict for s in symbols):
            continue
        findings.append(UndocumentedSymbolConflict(
            name=name,
            contexts=contexts,
            symbols=sorted((s.source_file, s.context) for s in symbols),
        ))
    return findings


@rule("InconsistentMeaning", scope="symbols")
def inconsistent_meanings(model: GraphModel, options: DetectorOptions) -> List[ConflictFinding]:
    findings = []
    for name, symbols in sorted(model.symbols_by_name.items()):
        by_context: Dict[str, list] = {}
        for symbol in symbols:
            if symbol.context:
                by_context.setdefault(symbol.context, []).append(symbol)

        for context, members in sorted(by_context.items()):
            meanings = {s.meaning for s in members if s.meaning}
            if len(meanings) < 2:
                continue
            findings.append(InconsistentMeaning(
                name=name,
                context=context,
                symbols=sorted((s.source_file, s.meaning) for s in members),
            ))
    return findings


@rule("InconsistentNaming", scope="symbols")
def inconsistent_naming(model: GraphModel, options: DetectorOptions) -> List[ConflictFinding]:
    findings = []
    for latex, symbols in sorted(model.symbols_by_latex.items()):
        named = [s for s in symbols if s.name]
        if len({s.name for s in named}) < 2:
            continue
        findings.append(InconsistentNaming(
            latex=latex,
            symbols=sorted((s.source_file, s.name, s.context) for s in named),
        ))
    return findings


@rule("ConflictingRelationships", scope="relationships")
def conflicting_relationships(model: GraphModel, options: DetectorOptions) -> List[ConflictFinding]:
    findings = []
    for pair, relationships in sorted(model.relationships_by_pair.items()):
        if not pair[0] or not pair[1]:
            continue
        labels = {r.label for r in relationships}
        for a, b in options.exclusive_pairs:
            if a in labels and b in labels:
                findings.append(ConflictingRelationships(
                    endpoints=pair,
                    labels=(a, b),
                    relationships=sorted((r.label, r.source_file) for r in relationships if r.label in (a, b)),
                ))
    return findings


@rule("UnresolvedEndpoint", scope="relationships", default=False)
def unresolved_endpoints(model: GraphModel, options: DetectorOptions) -> List[ConflictFinding]:
    findings = []
    for rel in model.relationships:
        for role, entity_type, name in (
            ("source", rel.source_type, rel.source_name),
            ("target", rel.target_type, rel.target_name),
        ):
            if name is None or model.has_entity(entity_type, name):
                continue
            findings.append(UnresolvedEndpoint(
                label=rel.label,
                role=role,
                entity_type=entity_type,
                name=name,
                source_file=rel.source_file,
                line=rel.line,
            ))
    findings.sort(key=lambda f: f.key)
    return findings


# =============================================================================
# Detector
# =============================================================================

class ConflictDetector:
    """
    Runs the registered rules over a GraphModel.

    Usage:
        detector = ConflictDetector(check_references=True)
        findings = detector.detect(model)
        findings = detector.detect(model, scopes=["symbols"])
    """

    def __init__(
        self,
        exclusive_pairs: Optional[Iterable[Sequence[str]]] = None,
        check_references: bool = False,
    ):
        pairs = DEFAULT_EXCLUSIVE_PAIRS if exclusive_pairs is None else exclusive_pairs
        self.options = DetectorOptions(exclusive_pairs=tuple(tuple(p) for p in pairs))
        self.check_references = check_references

    def rules(self, scopes: Optional[Iterable[str]] = None) -> List[Rule]:
        wanted = set(scopes) if scopes is not None else set(SCOPES)
        selected = []
        for registered in RULES.values():
            if registered.scope not in wanted:
                continue
            if not registered.default and not (registered.name == "UnresolvedEndpoint" and self.check_references):
                continue
            selected.append(registered)
        return selected

    def detect(self, model: GraphModel, scopes: Optional[Iterable[str]] = None) -> List[ConflictFinding]:
        findings: List[ConflictFinding] = []
        for registered in self.rules(scopes):
            findings.extend(registered.func(model, self.options))
        return findings


def group_by_kind(findings: Iterable[ConflictFinding]) -> Dict[str, List[ConflictFinding]]:
    """Findings grouped by kind, kinds in first-seen order."""
    grouped: Dict[str, List[ConflictFinding]] = {}
    for finding in findings:
        grouped.setdefault(finding.kind, []).append(finding)
    return grouped
