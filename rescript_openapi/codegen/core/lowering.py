"""
Lowering of decoded OpenAPI documents into the IR.

Two passes: named component schemas become records, variants or
aliases; then every path and verb becomes an endpoint. Shapes that
cannot be modeled degrade to the opaque JSON type, unsupported content
is dropped, and only missing document metadata or clashing type names
abort the run.
"""

import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

from ...logging_config import get_logger
from .generator import GeneratorError
from .ir import (
    JSON,
    STRING,
    AliasDef,
    ApiSpec,
    Endpoint,
    Field,
    HttpMethod,
    OptionType,
    Parameter,
    ParameterLocation,
    RecordDef,
    RequestBody,
    Response,
    TypeDef,
    VariantCase,
    VariantDef,
)
from .naming import NameSanitizer, NameScope, NamingCase, create_rescript_sanitizer
from .resolver import TypeResolver, schema_kind, string_enum_values

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"

HTTP_METHODS: Dict[str, HttpMethod] = {method.value.lower(): method for method in HttpMethod}

PARAMETER_LOCATIONS: Dict[str, ParameterLocation] = {
    location.value: location for location in ParameterLocation
}

# Top-level bindings of the generated client module
CLIENT_RESERVED_BINDINGS = frozenset({"buildQuery", "makeConfig"})

# Local bindings of every generated client function; labels must avoid them
CLIENT_RESERVED_LABELS = CLIENT_RESERVED_BINDINGS | frozenset({
    "body", "config", "cookies", "headers", "payload", "query", "response",
    "result", "url",
})

_STATUS_CODE = re.compile(r"^[1-5][0-9]{2}$")


class LoweringError(GeneratorError):
    """The document cannot be lowered at all."""

    pass


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _doc(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class SchemaLowerer:
    """Builds an :class:`ApiSpec` from one decoded document."""

    def __init__(self, document: Mapping, sanitizer: Optional[NameSanitizer] = None):
        self.document = document
        self.sanitizer = sanitizer or create_rescript_sanitizer()
        self.components = _mapping(document.get("components"))
        self.schemas: Dict[str, Any] = {
            str(name): schema for name, schema in _mapping(self.components.get("schemas")).items()
        }
        self.resolver = TypeResolver(self.sanitizer, known_schemas=self.schemas.keys())

    def lower(self) -> ApiSpec:
        title, version, description = self._lower_info()
        types = self._lower_types()
        endpoints = self._lower_endpoints()

        logger.debug(
            "Lowered '%s' %s: %d types, %d endpoints", title, version, len(types), len(endpoints)
        )
        return ApiSpec(
            title=title,
            version=version,
            description=description,
            types=types,
            endpoints=endpoints,
        )

    # Document metadata

    def _lower_info(self) -> Tuple[str, str, Optional[str]]:
        info = self.document.get("info")
        if not isinstance(info, Mapping):
            raise LoweringError("Document has no 'info' object")

        title = info.get("title")
        if not isinstance(title, str) or not title.strip():
            raise LoweringError("'info.title' is missing or is not a string")

        version = info.get("version")
        if isinstance(version, bool) or not isinstance(version, (str, int, float)):
            raise LoweringError("'info.version' is missing or is not a string")
        version = str(version).strip()
        if not version:
            raise LoweringError("'info.version' is empty")

        return title.strip(), version, _doc(info.get("description"))

    # Pass 1: named types

    def _lower_types(self) -> Tuple[TypeDef, ...]:
        lowered: Dict[str, TypeDef] = {}
        sources: Dict[str, str] = {}

        for schema_name, schema in self.schemas.items():
            try:
                type_def = self._lower_schema(schema_name, schema)
            except (LoweringError, ValueError) as e:
                raise LoweringError(f"Failed to lower schema '{schema_name}': {e}") from e

            # Compare the declared ReScript identifiers, not the IR names
            identifier = self.sanitizer.sanitize_type_name(type_def.name)
            previous = sources.get(identifier)
            if previous is not None:
                raise LoweringError(
                    f"Failed to lower schema '{schema_name}': type name '{identifier}' "
                    f"is already taken by schema '{previous}'"
                )
            sources[identifier] = schema_name
            lowered[type_def.name] = type_def

        return tuple(lowered[name] for name in sorted(lowered))

    def _lower_schema(self, schema_name: str, schema: Any) -> TypeDef:
        type_name = self.resolver.type_name(schema_name)

        if not isinstance(schema, Mapping):
            logger.debug("Schema '%s' is not an object; using JSON", schema_name)
            return AliasDef(name=type_name, target=JSON)

        doc = _doc(schema.get("description"))

        if isinstance(schema.get("$ref"), str):
            return AliasDef(name=type_name, doc=doc, target=self.resolver.resolve(schema))

        kind = schema_kind(schema)
        properties = schema.get("properties")

        if kind == "object" and isinstance(properties, Mapping) and properties:
            return self._lower_record(type_name, doc, schema, properties)

        if kind == "string":
            values = string_enum_values(schema)
            if values:
                return self._lower_enum(type_name, doc, values)

        one_of = schema.get("oneOf")
        if isinstance(one_of, list) and one_of:
            return self._lower_one_of(type_name, doc, one_of)

        return AliasDef(name=type_name, doc=doc, target=self.resolver.resolve(schema))

    def _lower_record(
        self, type_name: str, doc: Optional[str], schema: Mapping, properties: Mapping
    ) -> RecordDef:
        required = schema.get("required")
        required_names = {str(name) for name in required} if isinstance(required, list) else set()

        scope = NameScope(self.sanitizer)
        fields: List[Field] = []

        for prop_name, prop_schema in properties.items():
            prop_name = str(prop_name)
            resolved = self.resolver.resolve(prop_schema)
            is_required = prop_name in required_names

            fields.append(
                Field(
                    name=scope.claim(prop_name),
                    original_name=prop_name,
                    type=resolved if is_required else OptionType(resolved),
                    optional=not is_required,
                    doc=self._property_doc(prop_schema),
                )
            )

        return RecordDef(name=type_name, doc=doc, fields=tuple(fields))

    def _lower_enum(self, type_name: str, doc: Optional[str], values: List[str]) -> VariantDef:
        scope = NameScope(self.sanitizer)
        cases = tuple(
            VariantCase(name=scope.claim(value, NamingCase.PASCAL_CASE), literal=value)
            for value in values
        )
        return VariantDef(name=type_name, doc=doc, cases=cases)

    def _lower_one_of(self, type_name: str, doc: Optional[str], branches: list) -> VariantDef:
        cases = []
        for index, branch in enumerate(branches, start=1):
            # A branch that is not a schema object still gets its tag
            payload = self.resolver.resolve(branch) if isinstance(branch, Mapping) else None
            cases.append(VariantCase(name=f"Case{index}", payload=payload))
        return VariantDef(name=type_name, doc=doc, cases=tuple(cases))

    def _property_doc(self, prop_schema: Any) -> Optional[str]:
        if isinstance(prop_schema, Mapping) and "$ref" not in prop_schema:
            return _doc(prop_schema.get("description"))
        return None

    # Pass 2: endpoints

    def _lower_endpoints(self) -> Tuple[Endpoint, ...]:
        endpoints: List[Endpoint] = []
        operation_ids = NameScope(self.sanitizer, reserved=CLIENT_RESERVED_BINDINGS)

        for path, path_item in _mapping(self.document.get("paths")).items():
            path = str(path)
            if not isinstance(path_item, Mapping):
                logger.debug("Skipping path '%s': not an object", path)
                continue

            shared_parameters = path_item.get("parameters")

            for method_key, operation in path_item.items():
                method = HTTP_METHODS.get(str(method_key).lower())
                if method is None or not isinstance(operation, Mapping):
                    continue

                try:
                    endpoint = self._lower_operation(
                        path, method, operation, shared_parameters, operation_ids
                    )
                except (LoweringError, ValueError) as e:
                    raise LoweringError(
                        f"Failed to lower operation {method.value} {path}: {e}"
                    ) from e
                endpoints.append(endpoint)

        return tuple(endpoints)

    def _lower_operation(
        self,
        path: str,
        method: HttpMethod,
        operation: Mapping,
        shared_parameters: Any,
        operation_ids: NameScope,
    ) -> Endpoint:
        explicit_id = operation.get("operationId")
        if isinstance(explicit_id, str) and explicit_id.strip():
            raw_id = explicit_id
        else:
            raw_id = f"{method.value.lower()}_{path.replace('/', '_')}"

        operation_id = operation_ids.claim(raw_id)
        if operation_id != self.sanitizer.sanitize_name(raw_id):
            logger.warning(
                "Operation id '%s' of %s %s is taken; renamed to '%s'",
                raw_id, method.value, path, operation_id,
            )

        return Endpoint(
            operation_id=operation_id,
            method=method,
            path=path,
            doc=_doc(operation.get("description")) or _doc(operation.get("summary")),
            parameters=self._lower_parameters(shared_parameters, operation.get("parameters")),
            request_body=self._lower_request_body(operation.get("requestBody")),
            responses=self._lower_responses(operation.get("responses")),
        )

    def _lower_parameters(self, *sources: Any) -> Tuple[Parameter, ...]:
        # Later sources override earlier ones with the same name and location
        merged: Dict[Tuple[str, str], Mapping] = {}
        for source in sources:
            if not isinstance(source, list):
                continue
            for raw in source:
                param = self._deref(raw, "parameters")
                if param is None:
                    continue
                name = param.get("name")
                if not isinstance(name, str) or not name:
                    logger.debug("Skipping parameter without a name")
                    continue
                merged[(name, str(param.get("in")))] = param

        scope = NameScope(self.sanitizer, reserved=CLIENT_RESERVED_LABELS)
        parameters: List[Parameter] = []

        for (name, location_name), param in merged.items():
            location = PARAMETER_LOCATIONS.get(location_name)
            if location is None:
                logger.debug("Skipping parameter '%s' with location '%s'", name, location_name)
                continue

            schema = param.get("schema")
            parameters.append(
                Parameter(
                    name=scope.claim(name),
                    original_name=name,
                    location=location,
                    type=self.resolver.resolve(schema) if schema is not None else STRING,
                    required=location == ParameterLocation.PATH or param.get("required") is True,
                    doc=_doc(param.get("description")),
                )
            )

        return tuple(parameters)

    def _lower_request_body(self, raw: Any) -> Optional[RequestBody]:
        body = self._deref(raw, "requestBodies")
        if body is None:
            return None

        media = self._json_media(body.get("content"))
        if media is None:
            logger.debug("Dropping request body without %s content", JSON_CONTENT_TYPE)
            return None

        schema = media.get("schema")
        return RequestBody(
            type=self.resolver.resolve(schema) if schema is not None else JSON,
            required=body.get("required") is True,
            content_type=JSON_CONTENT_TYPE,
        )

    def _lower_responses(self, raw: Any) -> Tuple[Response, ...]:
        responses: List[Response] = []
        seen = set()

        for status_key, raw_response in _mapping(raw).items():
            status_text = str(status_key)
            if not _STATUS_CODE.match(status_text):
                logger.debug("Dropping response '%s': not an exact status code", status_text)
                continue

            status = int(status_text)
            response = self._deref(raw_response, "responses")
            if status in seen or response is None:
                continue
            seen.add(status)

            media = self._json_media(response.get("content"))
            schema = media.get("schema") if media is not None else None
            responses.append(
                Response(
                    status=status,
                    type=self.resolver.resolve(schema) if schema is not None else None,
                    doc=_doc(response.get("description")),
                )
            )

        return tuple(responses)

    # Helpers

    def _json_media(self, content: Any) -> Optional[Mapping]:
        """The JSON media type object of a content map, if there is one."""
        for media_type, media in _mapping(content).items():
            base = str(media_type).split(";", 1)[0].strip().lower()
            if base == JSON_CONTENT_TYPE:
                return _mapping(media)
        return None

    def _deref(self, node: Any, section: str) -> Optional[Mapping]:
        """Follow local ``#/components/<section>/`` references."""
        prefix = f"#/components/{section}/"
        seen = set()

        while isinstance(node, Mapping) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if not ref.startswith(prefix) or ref in seen:
                logger.debug("Cannot follow reference '%s'", ref)
                return None
            seen.add(ref)
            node = _mapping(self.components.get(section)).get(ref[len(prefix):])

        return node if isinstance(node, Mapping) else None


def lower(document: Any, sanitizer: Optional[NameSanitizer] = None) -> ApiSpec:
    """
    Lower a decoded OpenAPI document into the IR.

    Args:
        document: Decoded OpenAPI 3.x document
        sanitizer: Name sanitizer to use (a fresh ReScript sanitizer by default)

    Returns:
        The IR root

    Raises:
        LoweringError: If the document metadata is missing or type names clash
    """
    if not isinstance(document, Mapping):
        raise LoweringError("OpenAPI document must be an object")
    return SchemaLowerer(document, sanitizer).lower()
