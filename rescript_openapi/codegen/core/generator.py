"""
Base generator interface for all artifact renderers.

Defines the contract that every renderer implements: take the finished
IR and return the text of one artifact.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Any, Optional
from pathlib import Path

from .config import GeneratorConfig
from .ir import ApiSpec
from .naming import NameSanitizer, create_rescript_sanitizer
from .templates import TemplateEngine, create_template_engine


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass(frozen=True)
class Artifact:
    """One generated file."""

    kind: str
    name: str
    content: str


class CodeGenerator(ABC):
    """Abstract base class for all artifact renderers."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 sanitizer: Optional[NameSanitizer] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self.sanitizer = sanitizer or create_rescript_sanitizer()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def artifact_kind(self) -> str:
        """Registry key of the artifact (e.g., 'types', 'client')."""
        pass

    @property
    @abstractmethod
    def module_suffix(self) -> str:
        """Suffix appended to the module prefix (e.g., 'Types')."""
        pass

    @property
    def file_extension(self) -> str:
        """Return the file extension for generated files."""
        return ".res"

    @property
    def module_name(self) -> str:
        """ReScript module name of the artifact, e.g. ``ApiTypes``."""
        return self.module_name_for(self.module_suffix)

    def module_name_for(self, suffix: str) -> str:
        """Module name of a sibling artifact."""
        return f"{self.config.module_prefix}{suffix}"

    @property
    def artifact_name(self) -> str:
        """File name of the artifact, e.g. ``ApiTypes.res``."""
        return f"{self.module_name}{self.file_extension}"

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, spec: ApiSpec) -> str:
        """
        Render the artifact.

        Args:
            spec: Fully lowered IR

        Returns:
            Generated code as a string
        """
        pass

    def header_context(self, spec: ApiSpec) -> Dict[str, Any]:
        """Template variables shared by every artifact header."""
        return {
            "title": spec.title,
            "version": spec.version,
            "description": spec.description,
            "module_name": self.module_name,
        }

    def format_code(self, code: str) -> str:
        """
        Normalize whitespace of generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending in exactly one newline
        """
        lines = code.split("\n")
        formatted_lines: List[str] = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:  # Collapse runs of blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, artifacts: List[Artifact] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            artifacts: Generated artifacts, in generation order
            metadata: Additional metadata about generation
        """
        self.artifacts = artifacts or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    def get(self, kind: str) -> Optional[Artifact]:
        """Artifact of one kind, if it was generated."""
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None

    @property
    def names(self) -> List[str]:
        return [artifact.name for artifact in self.artifacts]


def generate_code(generator: CodeGenerator, spec: ApiSpec) -> Artifact:
    """
    Render one artifact with a generator.

    Args:
        generator: Code generator instance
        spec: Lowered IR

    Returns:
        Artifact with formatted content
    """
    code = generator.generate(spec)
    return Artifact(
        kind=generator.artifact_kind,
        name=generator.artifact_name,
        content=generator.format_code(code),
    )
