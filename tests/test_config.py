"""
Tests for Config — Layered settings

These tests validate:
- Section defaults and validation
- Hierarchy (env > project > user > defaults)
- Malformed or invalid files fall back with a warning
- set/get through dotted keys, including validation and revert
"""

import yaml

from kgcheck.config import (
    Config, ConfigManager, ConflictConfig, DisplayConfig, LayoutConfig, RunConfig,
    TemplateConfig, get_config,
)


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data))


# =============================================================================
# Section Tests
# =============================================================================

class TestSections:
    """Defaults and validate() of each section."""

    def test_defaults_are_valid(self):
        config = Config()
        assert config.validate() is None
        assert config.layout.extension == ".cypher"
        assert config.run.workers == 1
        assert config.conflicts.pairs == [("IMPLEMENTS", "BASED_ON"), ("CONFLICTS_WITH", "SYNONYM_OF")]
        assert "[ENTITY_NAME]" in config.templates.placeholders

    def test_layout_extension(self):
        assert "must start with" in LayoutConfig(extension="cypher").validate()

    def test_layout_empty_directory(self):
        assert LayoutConfig(symbols="").validate() == "Layout setting 'symbols' cannot be empty"

    def test_empty_placeholder(self):
        assert TemplateConfig(placeholders=["[X]", " "]).validate() is not None

    def test_documentation_scope(self):
        assert ConflictConfig(documentation_scope="file").validate() is None
        assert "Unknown documentation scope" in ConflictConfig(documentation_scope="corpus").validate()

    def test_malformed_pair(self):
        assert ConflictConfig(exclusive_pairs=[["IMPLEMENTS"]]).validate() is not None

    def test_workers(self):
        assert RunConfig(workers=0).validate() == "Workers must be at least 1, got 0"

    def test_display(self):
        assert DisplayConfig(symbols="emoji").validate() is not None
        assert DisplayConfig(format="xml").validate() is not None

    def test_dict_round_trip(self):
        config = Config()
        config.run.workers = 3
        config.conflicts.documentation_scope = "file"
        assert Config.from_dict(config.to_dict()) == config

    def test_from_partial_dict(self):
        config = Config.from_dict({"run": {"workers": 2}})
        assert config.run.workers == 2
        assert config.layout.entities == "entities"


# =============================================================================
# Hierarchy Tests
# =============================================================================

class TestConfigManager:
    """Loading from user, project and environment layers."""

    def test_no_files_gives_defaults(self, kg_factory):
        assert kg_factory.create_config_manager().load() == Config()

    def test_project_overrides_user(self, kg_factory):
        manager = kg_factory.create_config_manager()
        write_yaml(manager.user_config_path, {"run": {"workers": 2}, "display": {"symbols": "ascii"}})
        write_yaml(manager.project_config_path, {"run": {"workers": 4}})

        config = manager.load()
        assert config.run.workers == 4
        assert config.display.symbols == "ascii"

    def test_environment_overrides_files(self, kg_factory, monkeypatch):
        manager = kg_factory.create_config_manager()
        write_yaml(manager.project_config_path, {"run": {"workers": 4}, "display": {"format": "text"}})
        monkeypatch.setenv("KGCHECK_WORKERS", "6")
        monkeypatch.setenv("KGCHECK_FORMAT", "json")

        config = manager.load()
        assert config.run.workers == 6
        assert config.display.format == "json"

    def test_malformed_yaml_ignored(self, kg_factory, caplog):
        manager = kg_factory.create_config_manager()
        manager.project_config_path.parent.mkdir(parents=True)
        manager.project_config_path.write_text("run: [unclosed")

        assert manager.load() == Config()
        assert "Ignoring malformed config" in caplog.text

    def test_non_mapping_ignored(self, kg_factory, caplog):
        manager = kg_factory.create_config_manager()
        manager.project_config_path.parent.mkdir(parents=True)
        manager.project_config_path.write_text("- a\n- b\n")

        assert manager.load() == Config()
        assert "expected a mapping" in caplog.text

    def test_non_mapping_section_ignored(self, kg_factory, caplog):
        manager = kg_factory.create_config_manager()
        write_yaml(manager.project_config_path, {"layout": "entities", "run": {"workers": 3}})

        config = manager.load()
        assert config.layout == LayoutConfig()
        assert config.run.workers == 3
        assert "Ignoring section 'layout'" in caplog.text

    def test_non_mapping_section_keeps_lower_layer(self, kg_factory):
        manager = kg_factory.create_config_manager()
        write_yaml(manager.user_config_path, {"display": {"symbols": "ascii"}})
        write_yaml(manager.project_config_path, {"display": ["unicode"]})
        assert manager.load().display.symbols == "ascii"

    def test_null_section_with_environment_override(self, kg_factory, monkeypatch):
        manager = kg_factory.create_config_manager()
        manager.project_config_path.parent.mkdir(parents=True)
        manager.project_config_path.write_text("display:\nrun:\n")
        monkeypatch.setenv("KGCHECK_FORMAT", "json")
        monkeypatch.setenv("KGCHECK_WORKERS", "2")

        config = manager.load()
        assert config.display.format == "json"
        assert config.run.workers == 2

    def test_invalid_values_fall_back(self, kg_factory, caplog):
        manager = kg_factory.create_config_manager()
        write_yaml(manager.project_config_path, {"run": {"workers": 0}})

        assert manager.load().run.workers == 1
        assert "Invalid configuration" in caplog.text

    def test_unparseable_env_falls_back(self, kg_factory, monkeypatch):
        monkeypatch.setenv("KGCHECK_WORKERS", "many")
        assert kg_factory.create_config_manager().load().run.workers == 1

    def test_load_is_cached(self, kg_factory):
        manager = kg_factory.create_config_manager()
        assert manager.load() is manager.load()

    def test_get_config(self, kg_factory):
        write_yaml(kg_factory.root / ".kgcheck" / "config.yaml", {"conflicts": {"check_references": True}})
        assert get_config(kg_factory.root).conflicts.check_references is True


# =============================================================================
# Set / Get Tests
# =============================================================================

class TestSetGet:
    """Dotted-key updates with validation."""

    def test_set_and_persist(self, kg_factory):
        manager = kg_factory.create_config_manager()
        assert manager.set("run.workers", "3") is None
        assert manager.project_config_path.exists()

        reloaded = kg_factory.create_config_manager()
        assert reloaded.get("run.workers") == "3"

    def test_set_user_scope(self, kg_factory):
        manager = kg_factory.create_config_manager()
        assert manager.set("display.symbols", "ascii", scope="user") is None
        assert manager.user_config_path.exists()
        assert not manager.project_config_path.exists()

    def test_exclusive_pairs(self, kg_factory):
        manager = kg_factory.create_config_manager()
        assert manager.set("conflicts.exclusive_pairs", "A:B, C:D") is None
        assert manager.load().conflicts.pairs == [("A", "B"), ("C", "D")]
        assert manager.get("conflicts.exclusive_pairs") == "A:B, C:D"

    def test_boolean_setting(self, kg_factory):
        manager = kg_factory.create_config_manager()
        manager.set("conflicts.check_references", "yes")
        assert manager.get("conflicts.check_references") == "true"

    def test_bad_key_format(self, kg_factory):
        error = kg_factory.create_config_manager().set("workers", "3")
        assert error.startswith("Invalid key format")

    def test_unknown_section_and_setting(self, kg_factory):
        manager = kg_factory.create_config_manager()
        assert manager.set("llm.provider", "x").startswith("Unknown section")
        assert manager.set("run.threads", "2").startswith("Unknown run setting")

    def test_unparseable_value(self, kg_factory):
        error = kg_factory.create_config_manager().set("run.workers", "lots")
        assert error == "Invalid value for run.workers: lots"

    def test_invalid_value_reverted(self, kg_factory):
        manager = kg_factory.create_config_manager()
        error = manager.set("display.format", "xml")
        assert error.startswith("Unknown format 'xml'")
        assert manager.get("display.format") == "text"
        assert not manager.project_config_path.exists()

    def test_get_unknown(self, kg_factory):
        manager = kg_factory.create_config_manager()
        assert manager.get("run") is None
        assert manager.get("run.threads") is None

    def test_display(self, kg_factory):
        text = kg_factory.create_config_manager().display()
        assert "Run:" in text
        assert "  workers: 1" in text
        assert "(not present)" in text
