"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for ReScript code generation.
"""

import json
from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    DictLoader,
    StrictUndefined,
    TemplateError as JinjaTemplateError,
    select_autoescape,
)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if self.template_dir and self.template_dir.exists():
            loader = FileSystemLoader(str(self.template_dir))
        else:
            # Use in-memory templates
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

        # Add custom filters for code generation
        self._env.filters["doc_comment"] = doc_comment
        self._env.filters["line_comment"] = line_comment
        self._env.filters["rs_string"] = rescript_string
        self._env.filters["indent_lines"] = indent_lines

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e


# Template filters for code generation


def rescript_string(value: Any) -> str:
    """Quote a value as a ReScript string literal."""
    return json.dumps(str(value), ensure_ascii=False)


def indent_lines(value: str, spaces: int = 2) -> str:
    """Indent all non-blank lines in a string."""
    indent = " " * spaces
    lines = str(value).split("\n")
    return "\n".join(indent + line if line.strip() else line for line in lines)


def doc_comment(value: str, spaces: int = 0) -> str:
    """Render text as a ReScript doc comment, ``/** ... */``."""
    text = str(value).strip().replace("*/", "*\\/")
    lines = [line.rstrip() for line in text.split("\n")]
    if len(lines) == 1:
        comment = f"/** {lines[0]} */"
    else:
        body = "\n".join(f" * {line}" if line else " *" for line in lines)
        comment = f"/**\n{body}\n */"
    return indent_lines(comment, spaces) if spaces else comment


def line_comment(value: str, style: str = "//") -> str:
    """Add comment markers to each line."""
    lines = str(value).strip().split("\n")
    return "\n".join(f"{style} {line}".rstrip() for line in lines)


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, optionally bound to a template directory."""
    return TemplateEngine(template_dir)
