"""
Test Data Factory — Realistic knowledge-graph corpora for kgcheck tests

Writes schema files and entity / symbol / relationship .cypher files into
pytest's tmp_path, so tests run the real extraction and validation stack.

Usage:
    @pytest.fixture
    def kg_env(tmp_path):
        factory = KgTestFactory(tmp_path)
        factory.create_sample_corpus()
        return factory

    def test_something(kg_env):
        corpus = kg_env.create_corpus()
        summary = corpus.validate()
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from unittest.mock import Mock

from kgcheck.config import Config, ConfigManager
from kgcheck.presentation.symbols import get_symbols
from kgcheck.services.corpus import Corpus


ENTITY_SCHEMA = """\
// Entity Types
CREATE CONSTRAINT concept_name IF NOT EXISTS
FOR (n:MathematicalConcept) REQUIRE n.name IS UNIQUE;

CREATE CONSTRAINT method_name IF NOT EXISTS
FOR (n:NumericalMethod) REQUIRE n.name IS UNIQUE;

CREATE CONSTRAINT algorithm_name IF NOT EXISTS
FOR (n:Algorithm) REQUIRE n.name IS UNIQUE;

CREATE CONSTRAINT paper_id IF NOT EXISTS
FOR (p:Paper) REQUIRE p.id IS UNIQUE;

CREATE CONSTRAINT symbol_id IF NOT EXISTS
FOR (s:Symbol) REQUIRE s.id IS UNIQUE;

// Properties for MathematicalConcept:
// Required: name, description
// Optional: year, aliases, url

// Properties for NumericalMethod:
// Required: name, description
// Optional: year, complexity, url

// Properties for Algorithm:
// Required: name, description
// Optional: year, pseudocode, url

// Properties for Paper:
// Required: id, title, year
// Optional: doi, url, authors

// Properties for Symbol:
// Required: name, context
// Optional: id, latex, meaning, dimensionality
"""

RELATIONSHIP_SCHEMA = """\
// Relationship Type: BASED_ON
// From: Algorithm, NumericalMethod
// To: MathematicalConcept, Algorithm, NumericalMethod
// Properties: since, notes

// Relationship Type: IMPLEMENTS
// From: Algorithm
// To: NumericalMethod, MathematicalConcept
// Properties: notes

// Relationship Type: INTRODUCES
// From: Paper
// To: MathematicalConcept, Algorithm, NumericalMethod
// Properties: section

// Relationship Type: USES_SYMBOL
// From: MathematicalConcept, Algorithm, NumericalMethod
// To: Symbol
// Properties: role

// Relationship Type: CONFLICTS_WITH
// From: Symbol
// To: Symbol
// Properties: reason

// Relationship Type: SYNONYM_OF
// From: Symbol, MathematicalConcept
// To: Symbol, MathematicalConcept
// Properties:
"""


def cypher_value(value: Any) -> str:
    """Render a Python value as a Cypher literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(cypher_value(v) for v in value) + "]"
    if isinstance(value, dict):
        return cypher_map(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def cypher_map(properties: Dict[str, Any]) -> str:
    if not properties:
        return "{}"
    return "{" + ", ".join(f"{k}: {cypher_value(v)}" for k, v in properties.items()) + "}"


class KgTestFactory:
    """
    Factory for isolated test corpora.

    Layout under tmp_path:
        entities/ symbols/ relationships/ schema/
    plus a user config dir (.home/) so tests never read ~/.kgcheck.
    """

    def __init__(self, tmp_path: Path):
        self.root = tmp_path
        self.entities_dir = tmp_path / "entities"
        self.symbols_dir = tmp_path / "symbols"
        self.relationships_dir = tmp_path / "relationships"
        self.schema_dir = tmp_path / "schema"
        self.user_dir = tmp_path / ".home"
        for directory in (self.entities_dir, self.symbols_dir, self.relationships_dir, self.schema_dir):
            directory.mkdir(parents=True, exist_ok=True)

        self.config = Config()
        self.symbols = get_symbols("ascii")

    # =========================================================================
    # File Creation Methods
    # =========================================================================

    def write(self, directory: Path, filename: str, text: str) -> Path:
        path = directory / filename
        path.write_text(text, encoding="utf-8")
        return path

    def write_schema(self, entity_text: str = ENTITY_SCHEMA, relationship_text: str = RELATIONSHIP_SCHEMA) -> None:
        self.write(self.schema_dir, "entity-types.cypher", entity_text)
        self.write(self.schema_dir, "relationship-types.cypher", relationship_text)

    def add_entity(self, filename: str, entity_type: str, var: str = "e", **properties) -> Path:
        """
        Write one entity declaration.

        Example:
            factory.add_entity("gd.cypher", "MathematicalConcept",
                               name="GradientDescent", description="First-order method")
        """
        text = f"CREATE ({var}:{entity_type} {cypher_map(properties)});\n"
        return self.write(self.entities_dir, filename, text)

    def add_symbol(
        self,
        filename: str,
        name: Optional[str],
        context: Optional[str],
        latex: Optional[str] = None,
        meaning: Optional[str] = None,
        **extra,
    ) -> Path:
        properties: Dict[str, Any] = {}
        if name is not None:
            properties["name"] = name
        if context is not None:
            properties["context"] = context
        if latex is not None:
            properties["latex"] = latex
        if meaning is not None:
            properties["meaning"] = meaning
        properties.update(extra)
        text = f"CREATE (s:Symbol {cypher_map(properties)});\n"
        return self.write(self.symbols_dir, filename, text)

    def add_relationship(
        self,
        filename: str,
        label: str,
        source: Tuple[str, Dict[str, Any]],
        target: Tuple[str, Dict[str, Any]],
        directory: Optional[Path] = None,
        **properties,
    ) -> Path:
        """
        Write a MATCH / MATCH / CREATE relationship declaration.

        Args:
            source: (type, match properties), e.g. ("Algorithm", {"name": "Adam"})
            target: (type, match properties)
        """
        source_type, source_props = source
        target_type, target_props = target
        props = f" {cypher_map(properties)}" if properties else ""
        text = (
            f"MATCH (a:{source_type} {cypher_map(source_props)})\n"
            f"MATCH (b:{target_type} {cypher_map(target_props)})\n"
            f"CREATE (a)-[:{label}{props}]->(b);\n"
        )
        return self.write(directory or self.relationships_dir, filename, text)

    # =========================================================================
    # Sample Data
    # =========================================================================

    def create_sample_corpus(self) -> None:
        """
        A small, fully valid corpus:
        - 2 concepts, 1 algorithm, 1 paper
        - 2 symbols
        - 3 relationships
        """
        self.write_schema()
        self.add_entity("gradient-descent.cypher", "MathematicalConcept",
                        name="GradientDescent", description="Iterative first-order optimization", year=1847)
        self.add_entity("momentum.cypher", "MathematicalConcept",
                        name="Momentum", description="Velocity accumulation")
        self.add_entity("adam.cypher", "Algorithm",
                        name="Adam", description="Adaptive moment estimation", year=2014)
        self.add_entity("kingma2014.cypher", "Paper",
                        id="Kingma2014", title="Adam: A Method for Stochastic Optimization", year=2014,
                        doi="10.48550/arXiv.1412.6980", url="https://arxiv.org/abs/1412.6980")
        self.add_symbol("alpha-learning-rate.cypher", "alpha", "optimization",
                        latex="\\alpha", meaning="learning rate", dimensionality="Scalar")
        self.add_symbol("theta-parameters.cypher", "theta", "optimization",
                        latex="\\theta", meaning="model parameters", dimensionality="Vector")
        self.add_relationship("adam-based-on-gd.cypher", "BASED_ON",
                              ("Algorithm", {"name": "Adam"}),
                              ("MathematicalConcept", {"name": "GradientDescent"}),
                              since=2014)
        self.add_relationship("kingma-introduces-adam.cypher", "INTRODUCES",
                              ("Paper", {"id": "Kingma2014"}),
                              ("Algorithm", {"name": "Adam"}))
        self.add_relationship("adam-uses-alpha.cypher", "USES_SYMBOL",
                              ("Algorithm", {"name": "Adam"}),
                              ("Symbol", {"name": "alpha", "context": "optimization"}),
                              role="step size")

    # =========================================================================
    # Run Objects
    # =========================================================================

    def create_corpus(self, workers: Optional[int] = None) -> Corpus:
        return Corpus(self.root, self.config, workers=workers)

    def create_config_manager(self) -> ConfigManager:
        return ConfigManager(self.root, user_dir=self.user_dir)

    def create_cli_mock(self) -> Mock:
        """CLI stand-in exposing what BaseCommand reads."""
        cli = Mock()
        cli.root = self.root
        cli.config = self.config
        cli.config_manager = self.create_config_manager()
        cli.symbols = self.symbols
        cli.corpus = lambda workers=None: Corpus(self.root, self.config, workers=workers)
        return cli

    def create_command(self, command_class):
        return command_class(self.create_cli_mock())
