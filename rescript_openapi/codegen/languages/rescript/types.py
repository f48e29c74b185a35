"""
ReScript-specific type system for code generation.

One fixed text template per IR type expression, for the type syntax,
the rescript-schema combinator and the client's string encoding.
"""

from typing import Callable, Dict, Optional

from ...core.ir import (
    AliasDef,
    ArrayType,
    DictType,
    JsonType,
    NamedType,
    OptionType,
    RsType,
    Scalar,
    ScalarKind,
    StringEnumType,
    TupleType,
    TypeDef,
    VariantDef,
)
from ...core.naming import NameSanitizer, NamingCase
from ...core.templates import rescript_string

SCALAR_TYPES: Dict[ScalarKind, str] = {
    ScalarKind.STRING: "string",
    ScalarKind.INT: "int",
    ScalarKind.FLOAT: "float",
    ScalarKind.BOOL: "bool",
    ScalarKind.UNIT: "unit",
}

SCALAR_SCHEMAS: Dict[ScalarKind, str] = {
    ScalarKind.STRING: "S.string",
    ScalarKind.INT: "S.int",
    ScalarKind.FLOAT: "S.float",
    ScalarKind.BOOL: "S.bool",
    ScalarKind.UNIT: "S.unit",
}

SCHEMA_SUFFIX = "Schema"

# Callback that spells a validator reference; receives the TypeDef name
SchemaReference = Callable[[str], str]


class RescriptTypeMapper:
    """
    Maps IR type expressions to ReScript text.

    All three renderers go through one mapper so a named type is spelled
    the same way in the type declarations, the validators and the client.
    """

    def __init__(
        self,
        sanitizer: NameSanitizer,
        types: Optional[Dict[str, TypeDef]] = None,
        types_module: Optional[str] = None,
        schema_module: Optional[str] = None,
    ):
        """
        Args:
            sanitizer: Sanitizer shared with the renderer
            types: Type definitions by name, used to pick string encodings
            types_module: Qualify named types with this module
            schema_module: Qualify validator references with this module
        """
        self.sanitizer = sanitizer
        self.types = types or {}
        self.types_module = types_module
        self.schema_module = schema_module

    # Identifiers

    def type_identifier(self, name: str) -> str:
        """Declared ReScript type name of a TypeDef (``Pet`` -> ``pet``)."""
        return self.sanitizer.sanitize_type_name(name)

    def schema_identifier(self, name: str) -> str:
        """Validator binding of a TypeDef (``Pet`` -> ``petSchema``)."""
        return self.sanitizer.convert_case(name, NamingCase.CAMEL_CASE) + SCHEMA_SUFFIX

    def _qualify(self, module: Optional[str], identifier: str) -> str:
        return f"{module}.{identifier}" if module else identifier

    # Type syntax

    def to_rescript(self, ty: RsType) -> str:
        if isinstance(ty, Scalar):
            return SCALAR_TYPES[ty.kind]
        elif isinstance(ty, OptionType):
            return f"option<{self.to_rescript(ty.inner)}>"
        elif isinstance(ty, ArrayType):
            return f"array<{self.to_rescript(ty.inner)}>"
        elif isinstance(ty, DictType):
            return f"Dict.t<{self.to_rescript(ty.inner)}>"
        elif isinstance(ty, JsonType):
            return "JSON.t"
        elif isinstance(ty, NamedType):
            return self._qualify(self.types_module, self.type_identifier(ty.name))
        elif isinstance(ty, TupleType):
            return "(" + ", ".join(self.to_rescript(item) for item in ty.items) + ")"
        elif isinstance(ty, StringEnumType):
            return "[" + " | ".join(f"#{rescript_string(v)}" for v in ty.values) + "]"
        raise TypeError(f"Unknown type expression: {ty!r}")

    # rescript-schema combinators

    def to_schema(self, ty: RsType, reference: Optional[SchemaReference] = None) -> str:
        """
        Combinator expression validating ``ty``.

        ``reference`` overrides how named types are spelled; by default
        they call the conventional validator binding.
        """
        if isinstance(ty, Scalar):
            return SCALAR_SCHEMAS[ty.kind]
        elif isinstance(ty, OptionType):
            return f"S.option({self.to_schema(ty.inner, reference)})"
        elif isinstance(ty, ArrayType):
            return f"S.array({self.to_schema(ty.inner, reference)})"
        elif isinstance(ty, DictType):
            return f"S.dict({self.to_schema(ty.inner, reference)})"
        elif isinstance(ty, JsonType):
            return "S.json"
        elif isinstance(ty, NamedType):
            if reference is not None:
                return reference(ty.name)
            return self._qualify(self.schema_module, self.schema_identifier(ty.name))
        elif isinstance(ty, TupleType):
            items = ", ".join(
                f"s.item({index}, {self.to_schema(item, reference)})"
                for index, item in enumerate(ty.items)
            )
            return f"S.tuple(s => ({items}))"
        elif isinstance(ty, StringEnumType):
            literals = ", ".join(f"S.literal(#{rescript_string(v)})" for v in ty.values)
            return f"S.union([{literals}])"
        raise TypeError(f"Unknown type expression: {ty!r}")

    # Client string encoding

    def to_string_expr(self, ty: RsType, expr: str) -> str:
        """ReScript expression turning ``expr`` of type ``ty`` into a string."""
        if isinstance(ty, Scalar):
            if ty.kind == ScalarKind.STRING:
                return expr
            elif ty.kind == ScalarKind.INT:
                return f"Int.toString({expr})"
            elif ty.kind == ScalarKind.FLOAT:
                return f"Float.toString({expr})"
            elif ty.kind == ScalarKind.BOOL:
                return f"Bool.toString({expr})"
            return '""'
        elif isinstance(ty, StringEnumType):
            return f"({expr} :> string)"
        elif isinstance(ty, ArrayType):
            item = self.to_string_expr(ty.inner, "item")
            if item == "item":
                return f'{expr}->Array.join(",")'
            return f'{expr}->Array.map(item => {item})->Array.join(",")'
        elif isinstance(ty, NamedType):
            type_def = self.types.get(ty.name)
            if isinstance(type_def, VariantDef) and type_def.is_string_enum:
                return f"({expr} :> string)"
            if isinstance(type_def, AliasDef) and isinstance(type_def.target, (Scalar, StringEnumType)):
                return self.to_string_expr(type_def.target, expr)
            return self._json_string(expr)
        elif isinstance(ty, (OptionType, DictType, JsonType, TupleType)):
            return self._json_string(expr)
        raise TypeError(f"Unknown type expression: {ty!r}")

    def _json_string(self, expr: str) -> str:
        return f'JSON.stringifyAny({expr})->Option.getOr("")'
