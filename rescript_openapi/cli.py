"""
Command-line interface for rescript-openapi.

Subcommands:
  generate  lower a document and write the ReScript artifacts
  validate  report content that would be degraded or dropped
  info      summarize a document
"""

import argparse
import logging
import sys
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .codegen import (
    ConfigError,
    GeneratorConfig,
    GeneratorError,
    RegistryError,
    TemplateError,
    generate_artifacts,
    load_config,
    write_artifacts,
)
from .diagnostics import Severity, validate
from .logging_config import get_logger, setup_logging
from .utils import DocumentLoaderError, load_document

logger = get_logger(__name__)

# Initialize rich console
console = Console()

# Errors reported as a one-line message with exit code 1
EXPECTED_ERRORS = (
    FileNotFoundError,
    DocumentLoaderError,
    ConfigError,
    GeneratorError,
    TemplateError,
    RegistryError,
)


def _add_input_args(parser: argparse.ArgumentParser):
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "--input", "-i", metavar="FILE", help="OpenAPI document (.json, .yaml or .yml)"
    )
    input_group.add_argument("--url", help="URL to fetch the OpenAPI document from")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rescript-openapi",
        description="Generate ReScript types, rescript-schema validators and a fetch client "
        "from an OpenAPI 3.x document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rescript-openapi generate -i openapi.yaml -o src/api
  rescript-openapi generate -i openapi.json -m Petstore --no-client
  rescript-openapi validate -i openapi.yaml
  rescript-openapi info --url https://example.com/openapi.json
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", metavar="FILE", help="Also write debug logs to FILE")

    subparsers = parser.add_subparsers(dest="command")

    generate_parser = subparsers.add_parser(
        "generate", help="Generate ReScript code from an OpenAPI document"
    )
    _add_input_args(generate_parser)
    generate_parser.add_argument(
        "--output", "-o", metavar="DIR", help="Output directory (default: src/api)"
    )
    generate_parser.add_argument(
        "--module", "-m", metavar="PREFIX", help="Module name prefix (default: Api)"
    )
    generate_parser.add_argument(
        "--no-schema", action="store_true", help="Don't generate rescript-schema validators"
    )
    generate_parser.add_argument(
        "--no-client", action="store_true", help="Don't generate the fetch client"
    )
    generate_parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    generate_parser.add_argument(
        "--stdout", action="store_true", help="Print the artifacts instead of writing files"
    )
    generate_parser.set_defaults(func=_handle_generate)

    validate_parser = subparsers.add_parser(
        "validate", help="Check an OpenAPI document for unsupported content"
    )
    _add_input_args(validate_parser)
    validate_parser.set_defaults(func=_handle_validate)

    info_parser = subparsers.add_parser("info", help="Show information about an OpenAPI document")
    _add_input_args(info_parser)
    info_parser.set_defaults(func=_handle_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``rescript-openapi`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except EXPECTED_ERRORS as e:
        logger.debug("Command '%s' failed", args.command, exc_info=True)
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1


def _load(args: argparse.Namespace) -> Any:
    source, document = load_document(file_path=args.input, url=args.url)
    logger.info("Loaded %s", source)
    return document


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the config file and the command-line overrides."""
    overrides: Dict[str, Any] = {}
    if args.output:
        overrides["output_dir"] = args.output
    if args.module:
        overrides["module_prefix"] = args.module
    if args.no_schema:
        overrides["generate_schema"] = False
    if args.no_client:
        overrides["generate_client"] = False

    return load_config(custom_config=overrides, config_file=args.config)


def _handle_generate(args: argparse.Namespace) -> int:
    document = _load(args)
    config = _build_config(args)
    artifacts = generate_artifacts(document, config)

    if args.stdout:
        for artifact in artifacts:
            sys.stdout.write(f"// ===== {artifact.name} =====\n")
            sys.stdout.write(artifact.content)
            sys.stdout.write("\n")
        return 0

    try:
        paths = write_artifacts(artifacts, config.output_dir)
    except OSError as e:
        console.print(f"[red]✗ Failed to write to {escape(config.output_dir)}:[/red] {escape(str(e))}")
        return 1

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold cyan")
    table.add_column("Artifact", style="bold")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    for artifact, path in zip(artifacts, paths):
        table.add_row(artifact.kind, escape(str(path)), f"{len(artifact.content)} B")

    console.print(f"[green]✓[/green] Generated ReScript code in [cyan]{escape(config.output_dir)}[/cyan]")
    console.print(table)
    return 0


def _handle_validate(args: argparse.Namespace) -> int:
    document = _load(args)
    diagnostics = validate(document)

    if not diagnostics:
        console.print("[green]✓[/green] OpenAPI document is valid")
        return 0

    for diagnostic in diagnostics:
        style = "red" if diagnostic.severity == Severity.ERROR else "yellow"
        console.print(f"[{style}]⚠[/{style}] {escape(str(diagnostic))}")
    return 1


def _handle_info(args: argparse.Namespace) -> int:
    document = _load(args)
    if not isinstance(document, Mapping):
        raise DocumentLoaderError("OpenAPI document must be an object")

    info = document.get("info") if isinstance(document.get("info"), Mapping) else {}
    paths = document.get("paths") if isinstance(document.get("paths"), Mapping) else {}
    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else None

    table = Table(title="OpenAPI document", box=box.ROUNDED, title_style="bold cyan", show_header=False)
    table.add_column("Property", style="bold")
    table.add_column("Value", style="green")
    table.add_row("Title", escape(str(info.get("title", ""))))
    table.add_row("Version", escape(str(info.get("version", ""))))
    if info.get("description"):
        table.add_row("Description", escape(str(info["description"])))
    table.add_row("Paths", str(len(paths)))
    table.add_row("Schemas", str(len(schemas) if isinstance(schemas, Mapping) else 0))

    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
