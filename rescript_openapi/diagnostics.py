"""Checks a decoded OpenAPI document for content the generator degrades or drops."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from .codegen.core.lowering import HTTP_METHODS, JSON_CONTENT_TYPE

_EXACT_STATUS = re.compile(r"^[1-5][0-9]{2}$")


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    path: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.severity.value}: {self.message}"
        if self.path:
            text += f" (at {self.path})"
        return text


def _is_json(media_type: Any) -> bool:
    return str(media_type).split(";", 1)[0].strip().lower() == JSON_CONTENT_TYPE


def _check_info(document: Mapping, diagnostics: List[Diagnostic]):
    info = document.get("info")
    if not isinstance(info, Mapping):
        diagnostics.append(Diagnostic(Severity.ERROR, "Missing 'info' object", "info"))
        return

    title = info.get("title")
    if not isinstance(title, str) or not title.strip():
        diagnostics.append(Diagnostic(Severity.ERROR, _info_message("title", title), "info.title"))

    # Numeric versions are accepted and stringified by the lowerer
    version = info.get("version")
    if (
        isinstance(version, bool)
        or not isinstance(version, (str, int, float))
        or not str(version).strip()
    ):
        diagnostics.append(
            Diagnostic(Severity.ERROR, _info_message("version", version), "info.version")
        )


def _info_message(key: str, value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return f"Missing 'info.{key}'"
    return f"'info.{key}' must be a string, got {type(value).__name__}"


def _check_content(content: Any, what: str, path: str, diagnostics: List[Diagnostic]):
    if not isinstance(content, Mapping) or not content:
        return
    if not any(_is_json(media_type) for media_type in content):
        media_types = ", ".join(str(media_type) for media_type in content)
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f"{what} has no {JSON_CONTENT_TYPE} content ({media_types}) - will be dropped",
            path,
        ))


def _check_operation(path: str, method: str, operation: Mapping, diagnostics: List[Diagnostic]):
    location = f"paths.{path}.{method}"

    if not operation.get("operationId"):
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f"Missing operationId for {method} {path} - will generate from path",
            location,
        ))

    body = operation.get("requestBody")
    if isinstance(body, Mapping):
        _check_content(
            body.get("content"), "Request body", f"{location}.requestBody", diagnostics
        )

    responses = operation.get("responses")
    if not isinstance(responses, Mapping):
        return

    for status, response in responses.items():
        status = str(status)
        response_path = f"{location}.responses.{status}"
        if not _EXACT_STATUS.match(status):
            diagnostics.append(Diagnostic(
                Severity.WARNING,
                f"Response '{status}' is not an exact status code - will be dropped",
                response_path,
            ))
        elif isinstance(response, Mapping):
            _check_content(
                response.get("content"), f"Response {status}", response_path, diagnostics
            )


def _check_schema(name: str, schema: Any, diagnostics: List[Diagnostic]):
    if not isinstance(schema, Mapping):
        return

    location = f"components.schemas.{name}"
    if "oneOf" in schema:
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f"Schema '{name}' uses oneOf - will generate as variant type",
            location,
        ))
    elif "anyOf" in schema:
        diagnostics.append(Diagnostic(
            Severity.WARNING,
            f"Schema '{name}' uses anyOf - support is experimental",
            location,
        ))


def validate(document: Any) -> List[Diagnostic]:
    """
    Report problems in a decoded OpenAPI document.

    Errors stop generation; warnings describe content that is generated
    in a degraded form or dropped.
    """
    if not isinstance(document, Mapping):
        return [Diagnostic(Severity.ERROR, "OpenAPI document must be an object")]

    diagnostics: List[Diagnostic] = []
    _check_info(document, diagnostics)

    paths = document.get("paths")
    if isinstance(paths, Mapping):
        for path, path_item in paths.items():
            if not isinstance(path_item, Mapping):
                continue
            for method, operation in path_item.items():
                if str(method).lower() in HTTP_METHODS and isinstance(operation, Mapping):
                    _check_operation(str(path), str(method).lower(), operation, diagnostics)

    components = document.get("components")
    schemas = components.get("schemas") if isinstance(components, Mapping) else None
    if isinstance(schemas, Mapping):
        for name, schema in schemas.items():
            _check_schema(str(name), schema, diagnostics)

    return diagnostics
