"""
Configuration module for Remix.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from remix.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# File names searched by find_config, in order
CONFIG_FILENAMES = ("remix.config.json", "remix.config.yaml", "remix.config.yml")

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    value = section_defaults.get(key, fallback)
    # Lists are copied so instances never share mutable defaults
    return list(value) if isinstance(value, list) else value


@dataclass
class IgnoreConfig:
    """Which ignore layers are active and the user's own ignore patterns."""

    use_version_control_ignore: bool = field(
        default_factory=lambda: _get_default("ignore", "use_version_control_ignore", True)
    )
    use_default_patterns: bool = field(
        default_factory=lambda: _get_default("ignore", "use_default_patterns", True)
    )
    use_local_ignore_file: bool = field(
        default_factory=lambda: _get_default("ignore", "use_local_ignore_file", True)
    )
    custom_patterns: list[str] = field(
        default_factory=lambda: _get_default("ignore", "custom_patterns", [])
    )


@dataclass
class SecurityConfig:
    """Configuration for sensitive content detection."""

    enable_security_check: bool = field(
        default_factory=lambda: _get_default("security", "enable_security_check", True)
    )


@dataclass
class OutputConfig:
    """Options consumed while producing file content for the formatter."""

    remove_comments: bool = field(
        default_factory=lambda: _get_default("output", "remove_comments", False)
    )
    instruction_file_path: Optional[str] = field(
        default_factory=lambda: _get_default("output", "instruction_file_path", None)
    )


@dataclass
class ProcessingConfig:
    """Configuration for the per-file worker pool."""

    max_workers: int = field(default_factory=lambda: _get_default("processing", "max_workers", 8))


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def apply(self) -> None:
        """Configure the root logger with this level and format."""
        logging.basicConfig(level=self.level.upper(), format=self.format, force=True)


_SECTIONS: dict[str, type] = {
    "ignore": IgnoreConfig,
    "security": SecurityConfig,
    "output": OutputConfig,
    "processing": ProcessingConfig,
    "logging": LoggingConfig,
}


@dataclass
class RemixConfig:
    """Main configuration class for Remix."""

    include: list[str] = field(default_factory=lambda: _get_default("packing", "include", []))
    max_file_size: int = field(
        default_factory=lambda: _get_default("packing", "max_file_size", 100_000)
    )
    compress: bool = field(default_factory=lambda: _get_default("packing", "compress", False))
    instruction: Optional[str] = field(
        default_factory=lambda: _get_default("packing", "instruction", None)
    )
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "RemixConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            RemixConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ConfigError: If the file format is unsupported or malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif path.suffix == ".json":
                data = json.loads(content) if content.strip() else {}
            else:
                raise ConfigError(f"Unsupported config file format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to parse config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config format in {path}: expected mapping")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "RemixConfig":
        """Create RemixConfig from a dictionary."""
        config = cls()
        top_level = {f.name for f in fields(cls)} - set(_SECTIONS)

        for key, value in data.items():
            try:
                if key in _SECTIONS:
                    section = _SECTIONS[key](**(value or {}))
                    for name, item in vars(section).items():
                        _check_list_field(f"{key}.{name}", item)
                    setattr(config, key, section)
                elif key in top_level:
                    _check_list_field(key, value)
                    setattr(config, key, value)
                else:
                    raise ConfigError(f"Unknown configuration key: {key}")
            except TypeError as e:
                raise ConfigError(f"Invalid '{key}' section: {e}") from e

        return config

    def apply_env_overrides(self) -> "RemixConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: REMIX_<SECTION>_<KEY>
        (top-level keys drop the section).
        Examples:
            - REMIX_MAX_FILE_SIZE
            - REMIX_IGNORE_USE_VERSION_CONTROL_IGNORE
            - REMIX_SECURITY_ENABLE_SECURITY_CHECK
            - REMIX_PROCESSING_MAX_WORKERS
            - REMIX_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Packing
            "REMIX_INCLUDE": (None, "include", _parse_list),
            "REMIX_MAX_FILE_SIZE": (None, "max_file_size", int),
            "REMIX_COMPRESS": (None, "compress", _parse_bool),
            "REMIX_INSTRUCTION": (None, "instruction", str),
            # Ignore layers
            "REMIX_IGNORE_USE_VERSION_CONTROL_IGNORE": (
                "ignore", "use_version_control_ignore", _parse_bool
            ),
            "REMIX_IGNORE_USE_DEFAULT_PATTERNS": ("ignore", "use_default_patterns", _parse_bool),
            "REMIX_IGNORE_USE_LOCAL_IGNORE_FILE": ("ignore", "use_local_ignore_file", _parse_bool),
            "REMIX_IGNORE_CUSTOM_PATTERNS": ("ignore", "custom_patterns", _parse_list),
            # Security
            "REMIX_SECURITY_ENABLE_SECURITY_CHECK": (
                "security", "enable_security_check", _parse_bool
            ),
            # Output
            "REMIX_OUTPUT_REMOVE_COMMENTS": ("output", "remove_comments", _parse_bool),
            "REMIX_OUTPUT_INSTRUCTION_FILE_PATH": ("output", "instruction_file_path", str),
            # Processing
            "REMIX_PROCESSING_MAX_WORKERS": ("processing", "max_workers", int),
            # Logging
            "REMIX_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            try:
                converted = converter(value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {env_var}: {value!r}") from e
            target = self if section is None else getattr(self, section)
            setattr(target, key, converted)

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ConfigError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ConfigError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


# Fields holding pattern lists; a bare string would be read character by character
_LIST_FIELDS = frozenset({"include", "ignore.custom_patterns"})


def _check_list_field(name: str, value: Any) -> None:
    if name not in _LIST_FIELDS:
        return
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"Invalid '{name}': expected a list of strings, got {value!r}")


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string into a list of non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def find_config(directory: Path | str) -> Path | None:
    """Return the first known config file in ``directory``, if any."""
    directory = Path(directory)
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> RemixConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        RemixConfig instance
    """
    if config_path:
        logger.info(f"Loading configuration file: {config_path}")
        config = RemixConfig.from_file(config_path)
    else:
        config = RemixConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
