"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.kgcheck/config.yaml under the corpus root)
  3. User config (~/.kgcheck/config.yaml)
  4. Defaults

Malformed config files are skipped with a logged warning.
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

from .core.templates import DEFAULT_PLACEHOLDERS
from .presentation.symbols import get_symbols


logger = logging.getLogger(__name__)

DEFAULT_EXCLUSIVE_PAIRS = [["IMPLEMENTS", "BASED_ON"], ["CONFLICTS_WITH", "SYNONYM_OF"]]


def _as_bool(value: str) -> bool:
    return str(value).lower() in ('true', '1', 'yes')


@dataclass
class LayoutConfig:
    """Where the corpus lives, relative to the root."""
    entities: str = "entities"
    symbols: str = "symbols"
    relationships: str = "relationships"
    schema: str = "schema"
    entity_schema: str = "entity-types.cypher"
    relationship_schema: str = "relationship-types.cypher"
    extension: str = ".cypher"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.extension.startswith("."):
            return f"Extension must start with '.': {self.extension}"
        for name in ("entities", "symbols", "relationships", "schema", "entity_schema", "relationship_schema"):
            if not getattr(self, name):
                return f"Layout setting '{name}' cannot be empty"
        return None


@dataclass
class TemplateConfig:
    """Placeholder tokens marking template files."""
    placeholders: List[str] = field(default_factory=lambda: list(DEFAULT_PLACEHOLDERS))

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if any(not p.strip() for p in self.placeholders):
            return "Placeholder tokens cannot be empty"
        return None


@dataclass
class ConflictConfig:
    """Conflict detection preferences."""
    exclusive_pairs: List[List[str]] = field(default_factory=lambda: [list(p) for p in DEFAULT_EXCLUSIVE_PAIRS])
    documentation_scope: str = "symbol"  # "symbol" | "file"
    check_references: bool = False

    @property
    def pairs(self) -> List[Tuple[str, str]]:
        return [(a, b) for a, b in self.exclusive_pairs]

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_scopes = ("symbol", "file")
        if self.documentation_scope not in valid_scopes:
            return f"Unknown documentation scope '{self.documentation_scope}'. Valid: {', '.join(valid_scopes)}"
        for pair in self.exclusive_pairs:
            if len(pair) != 2 or not all(pair):
                return f"Exclusive pair must name two relationship types: {pair}"
        return None


@dataclass
class RunConfig:
    """Execution preferences."""
    workers: int = 1

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.workers < 1:
            return f"Workers must be at least 1, got {self.workers}"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "text"   # "text" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"

        valid_formats = ("text", "json")
        if self.format not in valid_formats:
            return f"Unknown format '{self.format}'. Valid: {', '.join(valid_formats)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    conflicts: ConflictConfig = field(default_factory=ConflictConfig)
    run: RunConfig = field(default_factory=RunConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def sections(self) -> Dict[str, Any]:
        return {
            "layout": self.layout,
            "templates": self.templates,
            "conflicts": self.conflicts,
            "run": self.run,
            "display": self.display,
        }

    def validate(self) -> Optional[str]:
        """First error across all sections, or None."""
        for section in self.sections().values():
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "layout": {
                "entities": self.layout.entities,
                "symbols": self.layout.symbols,
                "relationships": self.layout.relationships,
                "schema": self.layout.schema,
                "entity_schema": self.layout.entity_schema,
                "relationship_schema": self.layout.relationship_schema,
                "extension": self.layout.extension,
            },
            "templates": {
                "placeholders": list(self.templates.placeholders),
            },
            "conflicts": {
                "exclusive_pairs": [list(p) for p in self.conflicts.exclusive_pairs],
                "documentation_scope": self.conflicts.documentation_scope,
                "check_references": self.conflicts.check_references,
            },
            "run": {
                "workers": self.run.workers,
            },
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        layout_data = data.get("layout") or {}
        template_data = data.get("templates") or {}
        conflict_data = data.get("conflicts") or {}
        run_data = data.get("run") or {}
        display_data = data.get("display") or {}

        defaults = LayoutConfig()
        return cls(
            layout=LayoutConfig(
                entities=layout_data.get("entities", defaults.entities),
                symbols=layout_data.get("symbols", defaults.symbols),
                relationships=layout_data.get("relationships", defaults.relationships),
                schema=layout_data.get("schema", defaults.schema),
                entity_schema=layout_data.get("entity_schema", defaults.entity_schema),
                relationship_schema=layout_data.get("relationship_schema", defaults.relationship_schema),
                extension=layout_data.get("extension", defaults.extension),
            ),
            templates=TemplateConfig(
                placeholders=list(template_data.get("placeholders", DEFAULT_PLACEHOLDERS)),
            ),
            conflicts=ConflictConfig(
                exclusive_pairs=[list(p) for p in conflict_data.get("exclusive_pairs", DEFAULT_EXCLUSIVE_PAIRS)],
                documentation_scope=conflict_data.get("documentation_scope", "symbol"),
                check_references=bool(conflict_data.get("check_references", False)),
            ),
            run=RunConfig(
                workers=int(run_data.get("workers", 1)),
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "text"),
            ),
        )


def _parse_pairs(value: str) -> List[List[str]]:
    """'IMPLEMENTS:BASED_ON, A:B' → [['IMPLEMENTS', 'BASED_ON'], ['A', 'B']]"""
    pairs = []
    for item in value.split(","):
        item = item.strip()
        if item:
            pairs.append([part.strip() for part in item.split(":")])
    return pairs


# section → setting → (parser, formatter)
SETTINGS = {
    "layout": {
        name: (str, str)
        for name in ("entities", "symbols", "relationships", "schema",
                     "entity_schema", "relationship_schema", "extension")
    },
    "templates": {
        "placeholders": (
            lambda v: [p.strip() for p in v.split(",") if p.strip()],
            lambda v: ", ".join(v),
        ),
    },
    "conflicts": {
        "exclusive_pairs": (_parse_pairs, lambda v: ", ".join(":".join(p) for p in v)),
        "documentation_scope": (str, str),
        "check_references": (_as_bool, lambda v: str(v).lower()),
    },
    "run": {
        "workers": (int, str),
    },
    "display": {
        "symbols": (str, str),
        "format": (str, str),
    },
}


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (KGCHECK_FORMAT, KGCHECK_WORKERS)
      2. Project config (.kgcheck/config.yaml)
      3. User config (~/.kgcheck/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".kgcheck"
    USER_CONFIG_FILE = "config.yaml"
    PROJECT_CONFIG_DIR = ".kgcheck"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.user_dir = Path(user_dir) if user_dir else self.USER_CONFIG_DIR
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.user_dir / self.USER_CONFIG_FILE

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            return {}

        sections = {}
        for section, values in data.items():
            if values is None:
                continue
            if not isinstance(values, dict):
                logger.warning("Ignoring section '%s' in config %s: expected a mapping", section, path)
                continue
            sections[section] = values
        return sections

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("KGCHECK_FORMAT"):
            config_data.setdefault("display", {})["format"] = os.environ["KGCHECK_FORMAT"]
        if os.environ.get("KGCHECK_WORKERS"):
            config_data.setdefault("run", {})["workers"] = os.environ["KGCHECK_WORKERS"]

        try:
            config = Config.from_dict(config_data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Invalid configuration values, using defaults: %s", e)
            config = Config()

        error = config.validate()
        if error:
            logger.warning("Invalid configuration, using defaults: %s", error)
            config = Config()

        self._config = config
        return self._config

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "run.workers")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'run.workers')"

        section, setting = parts
        if section not in SETTINGS:
            return f"Unknown section: {section}. Valid: {', '.join(SETTINGS)}"
        if setting not in SETTINGS[section]:
            return f"Unknown {section} setting: {setting}. Valid: {', '.join(SETTINGS[section])}"

        parse, _ = SETTINGS[section][setting]
        try:
            parsed = parse(value)
        except ValueError:
            return f"Invalid value for {key}: {value}"

        target = config.sections()[section]
        previous = getattr(target, setting)
        setattr(target, setting, parsed)
        error = target.validate()
        if error:
            setattr(target, setting, previous)
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        if section not in SETTINGS or setting not in SETTINGS[section]:
            return None

        _, fmt = SETTINGS[section][setting]
        return fmt(getattr(config.sections()[section], setting))

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        self.load()
        symbols = get_symbols()

        lines = ["Configuration:"]
        for section, settings in SETTINGS.items():
            lines.append("")
            lines.append(f"{section.capitalize()}:")
            for setting in settings:
                lines.append(f"  {setting}: {self.get(f'{section}.{setting}')}")

        def status(path: Path) -> str:
            return f"{symbols.check_pass} {path}" if path.exists() else f"{symbols.bullet} {path} (not present)"

        lines.extend([
            "",
            "Config files:",
            f"  User: {status(self.user_config_path)}",
            f"  Project: {status(self.project_config_path)}",
        ])

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
