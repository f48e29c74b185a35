"""
ReScript fetch client generator.

Renders one async function per endpoint. Each function encodes its
labeled arguments into the URL, query string, headers and cookies,
serializes the body, and maps every declared status code to a
constructor of a per-endpoint response variant.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.ir import (
    ApiSpec,
    ArrayType,
    Endpoint,
    Parameter,
    ParameterLocation,
    RequestBody,
    Response,
)
from ...core.naming import NameSanitizer
from ...core.templates import indent_lines, rescript_string
from .types import RescriptTypeMapper

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

DECODE_FAILURE = "| exception S.Error(error) => Error(DecodeError(error->S.Error.message))"

# Response bodies that are not JSON reject Transport.json
JSON_FAILURE = (
    "| exception Exn.Error(error) => "
    "Error(DecodeError(error->Exn.message->Option.getOr(\"Response body is not JSON\")))"
)


def template_literal(text: str) -> str:
    """Escape literal text for a ReScript backtick string."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


class ClientGenerator(CodeGenerator):
    """Generator for the ``{prefix}Client.res`` artifact."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 sanitizer: Optional[NameSanitizer] = None):
        super().__init__(config, sanitizer)
        self.type_mapper: Optional[RescriptTypeMapper] = None

    @property
    def artifact_kind(self) -> str:
        return "client"

    @property
    def module_suffix(self) -> str:
        return "Client"

    @property
    def with_validators(self) -> bool:
        return self.config.generate_schema

    def get_template_directory(self) -> Optional[Path]:
        """Return the ReScript templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def generate(self, spec: ApiSpec) -> str:
        self.type_mapper = RescriptTypeMapper(
            self.sanitizer,
            types={type_def.name: type_def for type_def in spec.types},
            types_module=self.module_name_for("Types"),
            schema_module=self.module_name_for("Schema"),
        )

        context = self.header_context(spec)
        context["with_validators"] = self.with_validators
        context["endpoints"] = [self._endpoint_data(endpoint) for endpoint in spec.endpoints]
        return self.render_template("client.res.j2", context)

    def _endpoint_data(self, endpoint: Endpoint) -> Dict[str, Any]:
        response_type = f"{endpoint.operation_id}Response" if endpoint.responses else None

        statements: List[str] = []
        statements.extend(self._query_statements(endpoint))
        statements.append("let headers = Dict.copy(config.headers)")
        if endpoint.request_body is not None:
            statements.append('headers->Dict.set("Content-Type", "application/json")')
        statements.extend(self._header_statements(endpoint))
        statements.extend(self._cookie_statements(endpoint))
        statements.append(self._payload_statement(endpoint.request_body))
        statements.append(f"let url = {self._url_expression(endpoint)}")

        return {
            "name": endpoint.operation_id,
            "doc": endpoint.doc,
            "method": endpoint.method.value,
            "signature": self._signature(endpoint),
            "statements": statements,
            "response_type": response_type,
            "response_cases": [self._response_case(response) for response in endpoint.responses],
            "result_type": response_type or "unit",
            "arms": [self._response_arm(response) for response in endpoint.responses],
        }

    # Signature

    def _signature(self, endpoint: Endpoint) -> str:
        arguments = ["config: config"]
        for param in endpoint.parameters:
            arguments.append(self._labeled(param.name, param.type, param.required))
        if endpoint.request_body is not None:
            body = endpoint.request_body
            arguments.append(self._labeled("body", body.type, body.required))
        arguments.append("()")
        return ", ".join(arguments)

    def _labeled(self, label: str, ty, required: bool) -> str:
        annotation = self.type_mapper.to_rescript(ty)
        return f"~{label}: {annotation}" if required else f"~{label}: {annotation}=?"

    # Request encoding

    def _when_present(self, param: Parameter, statement: str) -> str:
        """Guard a statement on an optional argument."""
        if param.required:
            return statement
        return f"switch {param.name} {{\n| Some({param.name}) => {statement}\n| None => ()\n}}"

    def _query_statements(self, endpoint: Endpoint) -> List[str]:
        params = endpoint.parameters_in(ParameterLocation.QUERY)
        if not params:
            return []

        statements = ["let query = []"]
        for param in params:
            key = rescript_string(param.original_name)
            if isinstance(param.type, ArrayType):
                value = self.type_mapper.to_string_expr(param.type.inner, "item")
                push = f"{param.name}->Array.forEach(item => query->Array.push(({key}, {value})))"
            else:
                value = self.type_mapper.to_string_expr(param.type, param.name)
                push = f"query->Array.push(({key}, {value}))"
            statements.append(self._when_present(param, push))
        return statements

    def _header_statements(self, endpoint: Endpoint) -> List[str]:
        statements = []
        for param in endpoint.parameters_in(ParameterLocation.HEADER):
            value = self.type_mapper.to_string_expr(param.type, param.name)
            statement = f"headers->Dict.set({rescript_string(param.original_name)}, {value})"
            statements.append(self._when_present(param, statement))
        return statements

    def _cookie_statements(self, endpoint: Endpoint) -> List[str]:
        params = endpoint.parameters_in(ParameterLocation.COOKIE)
        if not params:
            return []

        statements = ["let cookies = []"]
        for param in params:
            value = self.type_mapper.to_string_expr(param.type, param.name)
            prefix = rescript_string(f"{param.original_name}=")
            push = f"cookies->Array.push({prefix} ++ Transport.encodeURIComponent({value}))"
            statements.append(self._when_present(param, push))
        statements.append(
            'if cookies->Array.length > 0 {\n'
            '  headers->Dict.set("Cookie", cookies->Array.join("; "))\n'
            '}'
        )
        return statements

    def _payload_statement(self, body: Optional[RequestBody]) -> str:
        if body is None:
            return "let payload: option<string> = None"

        if self.with_validators:
            schema = self.type_mapper.to_schema(body.type)
            encode = f"body->S.reverseConvertToJsonOrThrow({schema})->JSON.stringify"
            if body.required:
                return f"let payload = Some({encode})"
            return f"let payload = body->Option.map(body => {encode})"

        if body.required:
            return "let payload = JSON.stringifyAny(body)"
        return "let payload = body->Option.flatMap(body => JSON.stringifyAny(body))"

    def _url_expression(self, endpoint: Endpoint) -> str:
        path_params = {
            param.original_name: param
            for param in endpoint.parameters_in(ParameterLocation.PATH)
        }

        parts = ["${config.baseUrl}"]
        position = 0
        for match in _PLACEHOLDER.finditer(endpoint.path):
            param = path_params.get(match.group(1))
            if param is None:
                continue
            parts.append(template_literal(endpoint.path[position:match.start()]))
            value = self.type_mapper.to_string_expr(param.type, param.name)
            parts.append(f"${{Transport.encodeURIComponent({value})}}")
            position = match.end()
        parts.append(template_literal(endpoint.path[position:]))

        url = "`" + "".join(parts) + "`"
        if endpoint.parameters_in(ParameterLocation.QUERY):
            url += " ++ buildQuery(query)"
        return url

    # Responses

    def _constructor(self, response: Response) -> str:
        return f"Status{response.status}"

    def _response_case(self, response: Response) -> str:
        if response.type is None:
            return self._constructor(response)
        return f"{self._constructor(response)}({self.type_mapper.to_rescript(response.type)})"

    def _response_arm(self, response: Response) -> str:
        constructor = self._constructor(response)
        if response.type is None:
            return f"| {response.status} => Ok({constructor})"

        if self.with_validators:
            schema = self.type_mapper.to_schema(response.type)
            decode = "\n".join([
                f"switch json->S.parseOrThrow({schema}) {{",
                f"| value => Ok({constructor}(value))",
                DECODE_FAILURE,
                "}",
            ])
        else:
            decode = f"Ok({constructor}(json->Obj.magic))"

        return "\n".join([
            f"| {response.status} =>",
            "  switch await Transport.json(response) {",
            "  | json =>",
            indent_lines(decode, 4),
            f"  {JSON_FAILURE}",
            "  }",
        ])
