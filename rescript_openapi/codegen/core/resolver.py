"""
Type resolution from OpenAPI schema nodes to IR type expressions.

Resolution is total: every node maps to some :data:`RsType`, and shapes
the resolver does not model fall through to the opaque JSON type.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .ir import (
    BOOL,
    FLOAT,
    INT,
    JSON,
    STRING,
    ArrayType,
    NamedType,
    RsType,
    StringEnumType,
)
from .naming import NameSanitizer, NamingCase

SCHEMA_REF_PREFIX = "#/components/schemas/"


def schema_kind(node: Mapping) -> Optional[str]:
    """
    Classify the shape of a schema node.

    Returns the declared ``type`` when it is a plain string, infers
    ``object`` from ``properties`` and ``array`` from ``items`` when the
    type is omitted, and ``None`` otherwise.
    """
    declared = node.get("type")
    if isinstance(declared, str):
        return declared
    if declared is None:
        if isinstance(node.get("properties"), Mapping):
            return "object"
        if "items" in node:
            return "array"
    return None


def string_enum_values(node: Mapping) -> list:
    """String members of a node's ``enum``, in declaration order."""
    values = node.get("enum")
    if not isinstance(values, list):
        return []
    return [value for value in values if isinstance(value, str)]


def reference_name(ref: str) -> Optional[str]:
    """Component schema name of a local reference, if it is one."""
    if ref.startswith(SCHEMA_REF_PREFIX):
        name = ref[len(SCHEMA_REF_PREFIX):]
        return name or None
    return None


class TypeResolver:
    """Maps schema nodes to :data:`RsType` expressions."""

    def __init__(self, sanitizer: NameSanitizer, known_schemas: Optional[Iterable[str]] = None):
        """
        Args:
            sanitizer: Sanitizer used to derive type names from schema keys
            known_schemas: Component schema keys references may point to;
                ``None`` accepts every local schema reference
        """
        self.sanitizer = sanitizer
        self.known_schemas = None if known_schemas is None else frozenset(known_schemas)

    def type_name(self, schema_name: str) -> str:
        """PascalCase type name for a component schema key."""
        return self.sanitizer.sanitize_name(schema_name, NamingCase.PASCAL_CASE)

    def resolve(self, node: Any) -> RsType:
        """Resolve one schema node."""
        if not isinstance(node, Mapping):
            return JSON

        ref = node.get("$ref")
        if isinstance(ref, str):
            return self._resolve_reference(ref)

        kind = schema_kind(node)

        if kind == "object":
            # Inline objects are only promoted to records at the top level
            return JSON
        elif kind == "string":
            values = string_enum_values(node)
            if values:
                return StringEnumType(tuple(values))
            return STRING
        elif kind == "integer":
            return INT
        elif kind == "number":
            return FLOAT
        elif kind == "boolean":
            return BOOL
        elif kind == "array":
            items = node.get("items")
            if items is None:
                return ArrayType(JSON)
            return ArrayType(self.resolve(items))
        else:
            return self._fallback(node)

    def _resolve_reference(self, ref: str) -> RsType:
        name = reference_name(ref)
        if name is None:
            return JSON
        if self.known_schemas is not None and name not in self.known_schemas:
            return JSON
        return NamedType(self.type_name(name))

    def _fallback(self, node: Mapping) -> RsType:
        """Free-form, composite and unrecognized shapes."""
        return JSON
