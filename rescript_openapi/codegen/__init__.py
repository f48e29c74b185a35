"""
rescript-openapi code generation module.

Lowers an OpenAPI document into the IR and renders the ReScript
artifacts selected by the configuration.
"""

from typing import Any, Dict, List, Optional, Union

from ..logging_config import get_logger
from .registry import ArtifactRegistry, RegistryError, get_generator, get_registry
from .core.generator import Artifact, CodeGenerator, GenerationResult, GeneratorError, generate_code
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .core.lowering import LoweringError, lower
from .core.naming import create_rescript_sanitizer
from .core.templates import TemplateError
from .writer import write_artifacts

logger = get_logger(__name__)


def selected_kinds(config: GeneratorConfig) -> List[str]:
    """Artifact kinds to render, in output order."""
    kinds = ["types"]
    if config.generate_schema:
        kinds.append("schema")
    if config.generate_client:
        kinds.append("client")
    return kinds


def generate_artifacts(
    document: Any, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None
) -> List[Artifact]:
    """
    Lower a document and render every selected artifact.

    Args:
        document: Decoded OpenAPI 3.x document
        config: GeneratorConfig or a dict of overrides

    Returns:
        Artifacts in output order

    Raises:
        LoweringError: If the document cannot be lowered
        ConfigError: If the configuration is invalid
    """
    if not isinstance(config, GeneratorConfig):
        config = load_config(custom_config=config)

    # One sanitizer per run, shared by the lowerer and every renderer
    sanitizer = create_rescript_sanitizer()
    spec = lower(document, sanitizer)

    artifacts = []
    for kind in selected_kinds(config):
        generator = get_generator(kind, config, sanitizer)
        artifact = generate_code(generator, spec)
        logger.info("Rendered %s (%d bytes)", artifact.name, len(artifact.content))
        artifacts.append(artifact)

    return artifacts


def generate(
    document: Any, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None
) -> GenerationResult:
    """
    Generate ReScript artifacts from a decoded OpenAPI document.

    Args:
        document: Decoded OpenAPI 3.x document
        config: GeneratorConfig or a dict of overrides

    Returns:
        GenerationResult with the artifacts, or the error that stopped the run
    """
    try:
        artifacts = generate_artifacts(document, config)
    except (GeneratorError, ConfigError, TemplateError, RegistryError) as e:
        logger.debug("Generation failed: %s", e)
        return GenerationResult.error(str(e), e)

    return GenerationResult(
        artifacts=artifacts,
        metadata={"artifact_count": len(artifacts)},
    )


__all__ = [
    "Artifact",
    "ArtifactRegistry",
    "CodeGenerator",
    "ConfigError",
    "ConfigManager",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "LoweringError",
    "RegistryError",
    "TemplateError",
    "generate",
    "generate_artifacts",
    "get_generator",
    "get_registry",
    "load_config",
    "lower",
    "selected_kinds",
    "write_artifacts",
]
