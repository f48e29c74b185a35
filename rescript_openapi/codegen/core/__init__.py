"""
Core code generation components.

Provides the IR, the lowering pass and the base classes used by every
artifact renderer.
"""

from .generator import Artifact, CodeGenerator, GeneratorError, GenerationResult, generate_code
from .ir import ApiSpec, Endpoint, RecordDef, VariantDef, AliasDef
from .lowering import LoweringError, lower
from .naming import NameSanitizer, NameScope, NamingCase, create_rescript_sanitizer
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "Artifact",
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Intermediate representation
    "ApiSpec",
    "Endpoint",
    "RecordDef",
    "VariantDef",
    "AliasDef",
    # Lowering
    "LoweringError",
    "lower",
    # Naming utilities
    "NameSanitizer",
    "NameScope",
    "NamingCase",
    "create_rescript_sanitizer",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
