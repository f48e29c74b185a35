"""
Intermediate representation for ReScript code generation.

The IR is already resolved to ReScript constructs: type expressions are
a closed set of :data:`RsType` nodes, named declarations are records,
variants or aliases, and endpoints carry fully resolved parameters and
responses. Every node is immutable; cross references go by name only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple, Union


class ScalarKind(Enum):
    """Primitive value types."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    UNIT = "unit"


@dataclass(frozen=True)
class Scalar:
    kind: ScalarKind


@dataclass(frozen=True)
class OptionType:
    inner: "RsType"


@dataclass(frozen=True)
class ArrayType:
    inner: "RsType"


@dataclass(frozen=True)
class DictType:
    """String-keyed map."""

    inner: "RsType"


@dataclass(frozen=True)
class JsonType:
    """Opaque JSON, used whenever a shape cannot be modeled precisely."""


@dataclass(frozen=True)
class NamedType:
    """Reference to a :data:`TypeDef` by its (PascalCase) name."""

    name: str


@dataclass(frozen=True)
class TupleType:
    items: Tuple["RsType", ...]


@dataclass(frozen=True)
class StringEnumType:
    """Inline closed set of string literals (a polymorphic variant)."""

    values: Tuple[str, ...]


RsType = Union[
    Scalar,
    OptionType,
    ArrayType,
    DictType,
    JsonType,
    NamedType,
    TupleType,
    StringEnumType,
]

STRING = Scalar(ScalarKind.STRING)
INT = Scalar(ScalarKind.INT)
FLOAT = Scalar(ScalarKind.FLOAT)
BOOL = Scalar(ScalarKind.BOOL)
UNIT = Scalar(ScalarKind.UNIT)
JSON = JsonType()


def iter_named(ty: RsType) -> Iterator[str]:
    """Yield every type name referenced inside a type expression."""
    if isinstance(ty, NamedType):
        yield ty.name
    elif isinstance(ty, (OptionType, ArrayType, DictType)):
        yield from iter_named(ty.inner)
    elif isinstance(ty, TupleType):
        for item in ty.items:
            yield from iter_named(item)


@dataclass(frozen=True)
class Field:
    """A single field in a record."""

    name: str
    original_name: str  # Wire key used for serialization
    type: RsType
    optional: bool = False
    doc: Optional[str] = None

    def __post_init__(self):
        if self.optional != isinstance(self.type, OptionType):
            raise ValueError(
                f"Field '{self.original_name}': optional={self.optional} "
                f"does not match type {self.type}"
            )


@dataclass(frozen=True)
class VariantCase:
    """One tag of a variant, either bare or carrying one payload."""

    name: str
    payload: Optional[RsType] = None
    literal: Optional[str] = None  # Wire string for enum-derived cases


@dataclass(frozen=True)
class RecordDef:
    name: str
    doc: Optional[str] = None
    fields: Tuple[Field, ...] = ()


@dataclass(frozen=True)
class VariantDef:
    name: str
    doc: Optional[str] = None
    cases: Tuple[VariantCase, ...] = ()

    @property
    def is_string_enum(self) -> bool:
        """True when every case is a bare tag with a wire literal."""
        return bool(self.cases) and all(
            case.payload is None and case.literal is not None for case in self.cases
        )


@dataclass(frozen=True)
class AliasDef:
    name: str
    doc: Optional[str] = None
    target: RsType = JSON


TypeDef = Union[RecordDef, VariantDef, AliasDef]


def type_references(type_def: TypeDef) -> Iterator[str]:
    """Yield every type name a declaration refers to."""
    if isinstance(type_def, RecordDef):
        for record_field in type_def.fields:
            yield from iter_named(record_field.type)
    elif isinstance(type_def, VariantDef):
        for case in type_def.cases:
            if case.payload is not None:
                yield from iter_named(case.payload)
    elif isinstance(type_def, AliasDef):
        yield from iter_named(type_def.target)
    else:
        raise TypeError(f"Unknown type definition: {type_def!r}")


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class ParameterLocation(Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


@dataclass(frozen=True)
class Parameter:
    name: str
    original_name: str
    location: ParameterLocation
    type: RsType
    required: bool = False
    doc: Optional[str] = None


@dataclass(frozen=True)
class RequestBody:
    type: RsType
    required: bool = False
    content_type: str = "application/json"


@dataclass(frozen=True)
class Response:
    status: int
    type: Optional[RsType] = None
    doc: Optional[str] = None


@dataclass(frozen=True)
class Endpoint:
    operation_id: str
    method: HttpMethod
    path: str
    doc: Optional[str] = None
    parameters: Tuple[Parameter, ...] = ()
    request_body: Optional[RequestBody] = None
    responses: Tuple[Response, ...] = ()

    def parameters_in(self, location: ParameterLocation) -> Tuple[Parameter, ...]:
        """Parameters declared at one location, in declaration order."""
        return tuple(param for param in self.parameters if param.location == location)


@dataclass(frozen=True)
class ApiSpec:
    """Root of the IR."""

    title: str
    version: str
    description: Optional[str] = None
    types: Tuple[TypeDef, ...] = ()
    endpoints: Tuple[Endpoint, ...] = ()
    _index: Dict[str, TypeDef] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_index", {t.name: t for t in self.types})

    def get_type(self, name: str) -> Optional[TypeDef]:
        """Look up a type definition by name."""
        return self._index.get(name)

    def type_names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self.types)

    def iter_references(self) -> Iterator[str]:
        """Yield every named reference anywhere in the IR."""
        for type_def in self.types:
            yield from type_references(type_def)
        for endpoint in self.endpoints:
            for param in endpoint.parameters:
                yield from iter_named(param.type)
            if endpoint.request_body is not None:
                yield from iter_named(endpoint.request_body.type)
            for response in endpoint.responses:
                if response.type is not None:
                    yield from iter_named(response.type)
