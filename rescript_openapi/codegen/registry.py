"""
Generator registry for the artifact renderers.

Maps artifact kinds ("types", "schema", "client") and their aliases to
generator classes.
"""

from typing import Dict, Type, Optional, Any, List, Union
from pathlib import Path
from .core.generator import CodeGenerator
from .core.config import GeneratorConfig, load_config
from .core.naming import NameSanitizer


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class ArtifactRegistry:
    """Registry for managing available artifact generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        kind: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator for an artifact kind.

        Args:
            kind: Primary artifact kind (e.g., 'types', 'client')
            generator_class: Generator class implementing CodeGenerator
            aliases: Alternative names for this kind
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If generator class is invalid or an alias conflicts
        """
        if not isinstance(generator_class, type) or not issubclass(generator_class, CodeGenerator):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        kind_key = kind.lower()

        if kind_key in self._generators and not replace:
            return

        self._generators[kind_key] = generator_class

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == kind_key:
                continue

            if not replace:
                if alias_key in self._generators:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing artifact kind"
                    )
                if self._aliases.get(alias_key, kind_key) != kind_key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = kind_key

    def unregister(self, kind: str):
        """Unregister a generator and its aliases."""
        kind_key = kind.lower()
        self._generators.pop(kind_key, None)

        for alias in [a for a, target in self._aliases.items() if target == kind_key]:
            del self._aliases[alias]

    def resolve_kind(self, kind: str) -> str:
        """
        Resolve a kind or alias to its primary kind.

        Raises:
            RegistryError: If the kind is not registered
        """
        kind_key = kind.lower()

        if kind_key in self._generators:
            return kind_key

        if kind_key in self._aliases:
            return self._aliases[kind_key]

        raise RegistryError(
            f"No generator registered for artifact: {kind}. "
            f"Available: {', '.join(self.list_kinds())}"
        )

    def get_generator_class(self, kind: str) -> Type[CodeGenerator]:
        """Get generator class for an artifact kind or alias."""
        return self._generators[self.resolve_kind(kind)]

    def create_generator(
        self,
        kind: str,
        config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
        sanitizer: Optional[NameSanitizer] = None,
    ) -> CodeGenerator:
        """
        Create generator instance for an artifact kind.

        Args:
            kind: Artifact kind or alias
            config: Configuration as GeneratorConfig, dict, or file path
            sanitizer: Sanitizer shared by the generators of one run

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If the kind is unknown or the config type is invalid
        """
        generator_class = self.get_generator_class(kind)

        if isinstance(config, GeneratorConfig):
            final_config = config
        elif isinstance(config, (str, Path)):
            final_config = load_config(config_file=config)
        elif isinstance(config, dict):
            final_config = load_config(custom_config=config)
        elif config is None:
            final_config = load_config()
        else:
            raise RegistryError(f"Invalid config type: {type(config)}")

        return generator_class(final_config, sanitizer)

    def list_kinds(self) -> List[str]:
        """Get list of registered primary artifact kinds."""
        return sorted(self._generators.keys())

    def is_supported(self, kind: str) -> bool:
        """Check if an artifact kind or alias is registered."""
        kind_key = kind.lower()
        return kind_key in self._generators or kind_key in self._aliases


# Global registry instance - created once
_global_registry: Optional[ArtifactRegistry] = None


def get_registry() -> ArtifactRegistry:
    """Get the global artifact registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = ArtifactRegistry()
        _auto_register_generators(_global_registry)
    return _global_registry


def _auto_register_generators(registry: ArtifactRegistry):
    """Register the ReScript artifact generators."""
    from .languages.rescript import ClientGenerator, SchemaGenerator, TypesGenerator

    registry.register("types", TypesGenerator, aliases=["typedefs"])
    registry.register("schema", SchemaGenerator, aliases=["validators"])
    registry.register("client", ClientGenerator, aliases=["fetch"])


def get_generator(
    kind: str,
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    sanitizer: Optional[NameSanitizer] = None,
) -> CodeGenerator:
    """Get generator instance from global registry."""
    return get_registry().create_generator(kind, config, sanitizer)


def list_artifact_kinds() -> List[str]:
    """List all artifact kinds from global registry."""
    return get_registry().list_kinds()
