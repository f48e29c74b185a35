"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
import re
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union


_MODULE_NAME = re.compile(r"^[A-Z][A-Za-z0-9_]*$")


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Settings consumed by the generation pipeline."""

    # Artifact naming: {module_prefix}Types.res, {module_prefix}Schema.res, ...
    module_prefix: str = "Api"

    # Optional artifacts (type declarations are always produced)
    generate_schema: bool = True
    generate_client: bool = True

    # Read by the writer only
    output_dir: str = "src/api"

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigError for values the generators cannot use."""
        if not isinstance(self.module_prefix, str) or not _MODULE_NAME.match(self.module_prefix):
            raise ConfigError(
                f"Invalid module_prefix: {self.module_prefix!r} "
                "(must start with an uppercase letter and contain only letters, digits and _)"
            )
        for flag in ("generate_schema", "generate_client"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigError(f"{flag} must be a boolean, got {getattr(self, flag)!r}")
        if not isinstance(self.output_dir, str) or not self.output_dir:
            raise ConfigError(f"Invalid output_dir: {self.output_dir!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigManager:
    """Manages configuration loading and merging."""

    def get_config(self, custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Explicit overrides, applied last
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        merged: Dict[str, Any] = GeneratorConfig().to_dict()

        if config_file:
            merged.update(self._load_config_file(config_file))

        if custom_config:
            merged.update(custom_config)

        return self._dict_to_config(merged)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}
        unknown = sorted(set(config_dict) - known_fields)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        return GeneratorConfig(**config_dict)


def load_config(custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Explicit overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return ConfigManager().get_config(custom_config, config_file)
