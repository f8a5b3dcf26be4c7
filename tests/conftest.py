"""
Shared pytest fixtures for the kgcheck test suite.

Provides fixtures built on KgTestFactory, which writes real corpus files
into tmp_path.

Usage in tests:
    def test_something(kg_factory):
        kg_factory.write_schema()
        kg_factory.add_symbol("v.cypher", "v", "fluid dynamics")
        corpus = kg_factory.create_corpus()

    def test_with_data(kg_env):
        # kg_env comes with a valid sample corpus
        summary = kg_env.create_corpus().validate()
"""

import pytest

from kgcheck.config import ConfigManager
from tests.factories import KgTestFactory


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Environment switches and ~/.kgcheck never leak into tests."""
    for name in ("KGCHECK_ROOT", "KGCHECK_DEBUG", "KGCHECK_FORMAT", "KGCHECK_WORKERS",
                 "KGCHECK_ASCII_ONLY", "KGCHECK_UNICODE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", tmp_path / ".home")


@pytest.fixture
def kg_factory(tmp_path):
    """
    An empty corpus (directories only, no schema).

    Use this when you need fine-grained control over test data.
    """
    return KgTestFactory(tmp_path)


@pytest.fixture
def kg_env(tmp_path):
    """
    A KgTestFactory with the valid sample corpus.

    Pre-populated with:
    - schema files
    - 4 entities (2 concepts, 1 algorithm, 1 paper)
    - 2 symbols
    - 3 relationships
    """
    factory = KgTestFactory(tmp_path)
    factory.create_sample_corpus()
    return factory


@pytest.fixture
def mock_cli(kg_env):
    """CLI stand-in over the sample corpus."""
    return kg_env.create_cli_mock()
