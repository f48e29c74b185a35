"""
rescript-openapi: generate ReScript code from OpenAPI 3.x documents.

Produces type declarations, rescript-schema validators and a fetch
client that stay consistent with each other.
"""

__version__ = "0.1.0"

from .codegen import (
    GenerationResult,
    GeneratorConfig,
    generate,
    generate_artifacts,
    load_config,
    lower,
    write_artifacts,
)
from .utils import DocumentLoaderError, load_document

__all__ = [
    "__version__",
    "DocumentLoaderError",
    "GenerationResult",
    "GeneratorConfig",
    "generate",
    "generate_artifacts",
    "load_config",
    "load_document",
    "lower",
    "write_artifacts",
]
