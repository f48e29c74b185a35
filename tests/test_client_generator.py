import pytest

from rescript_openapi.codegen.core.config import GeneratorConfig
from rescript_openapi.codegen.core.generator import generate_code
from rescript_openapi.codegen.core.ir import (
    BOOL,
    STRING,
    ApiSpec,
    ArrayType,
    Endpoint,
    HttpMethod,
    Parameter,
    ParameterLocation,
    RequestBody,
)
from rescript_openapi.codegen.core.lowering import lower
from rescript_openapi.codegen.languages.rescript import ClientGenerator
from rescript_openapi.codegen.languages.rescript.client_generator import template_literal


def _render(document, **config):
    generator = ClientGenerator(GeneratorConfig(**config))
    return generate_code(generator, lower(document)).content


@pytest.fixture
def client_code(petstore):
    return _render(petstore)


@pytest.fixture
def plain_client_code(petstore):
    return _render(petstore, generate_schema=False)


def _function(code, name):
    start = code.index(f"let {name} = async (")
    end = code.index("\n}\n", start)
    return code[start:end + 3]


def _single_endpoint(endpoint):
    return ApiSpec(title="T", version="1", endpoints=(endpoint,))


class TestClientPrelude:
    def test_artifact_name(self):
        assert ClientGenerator().artifact_name == "ApiClient.res"

    def test_header(self, client_code):
        assert client_code.startswith("// ApiClient.res\n")

    def test_opens_schema_with_validators(self, client_code, plain_client_code):
        assert "open RescriptSchema\n" in client_code
        assert "open RescriptSchema" not in plain_client_code

    def test_shared_declarations(self, client_code):
        assert "type error =\n  | UnexpectedStatus({status: int, body: string})\n  | DecodeError(string)" in client_code
        assert "type config = {\n  baseUrl: string,\n  headers: Dict.t<string>,\n}" in client_code
        assert "let makeConfig = (~baseUrl: string, ~headers: Dict.t<string>=Dict.make(), ()) =>" in client_code
        assert "module Transport = {" in client_code
        assert "let buildQuery = (pairs: array<(string, string)>) =>" in client_code


class TestSignatures:
    def test_optional_labels(self, client_code):
        assert (
            "let listPets = async (config: config, ~xRequestId: string=?, ~limit: int=?, "
            "~tags: array<string>=?, ~status: ApiTypes.status=?, ()) => {"
        ) in client_code

    def test_required_body(self, client_code):
        assert (
            "let createPet = async (config: config, ~xRequestId: string=?, ~body: ApiTypes.pet, ()) => {"
        ) in client_code

    def test_path_param_always_required(self, client_code):
        assert "let getPetsPetId = async (config: config, ~petId: int, ~session: string=?, ()) => {" in client_code

    def test_doc_comments(self, client_code):
        assert "/** List all pets */\nlet listPets = async (" in client_code
        assert "/** Fetch one pet */\nlet getPetsPetId = async (" in client_code

    def test_module_prefix_qualifies_types(self, petstore):
        code = _render(petstore, module_prefix="Petstore")
        assert code.startswith("// PetstoreClient.res\n")
        assert "~body: PetstoreTypes.pet, ()" in code
        assert "S.array(PetstoreSchema.petSchema)" in code


class TestRequestEncoding:
    def test_query_parameters(self, client_code):
        body = _function(client_code, "listPets")
        assert "  let query = []\n" in body
        assert (
            "  switch limit {\n"
            '  | Some(limit) => query->Array.push(("limit", Int.toString(limit)))\n'
            "  | None => ()\n"
            "  }\n"
        ) in body
        assert '| Some(tags) => tags->Array.forEach(item => query->Array.push(("tags", item)))' in body
        assert '| Some(status) => query->Array.push(("status", (status :> string)))' in body
        assert "  let url = `${config.baseUrl}/pets` ++ buildQuery(query)\n" in body

    def test_header_parameters(self, client_code):
        body = _function(client_code, "listPets")
        assert "  let headers = Dict.copy(config.headers)\n" in body
        assert '| Some(xRequestId) => headers->Dict.set("X-Request-Id", xRequestId)' in body

    def test_path_and_cookie_parameters(self, client_code):
        body = _function(client_code, "getPetsPetId")
        assert "let url = `${config.baseUrl}/pets/${Transport.encodeURIComponent(Int.toString(petId))}`\n" in body
        assert "  let cookies = []\n" in body
        assert '| Some(session) => cookies->Array.push("session=" ++ Transport.encodeURIComponent(session))' in body
        assert '    headers->Dict.set("Cookie", cookies->Array.join("; "))' in body
        assert "buildQuery" not in body

    def test_no_body(self, client_code):
        body = _function(client_code, "listPets")
        assert "  let payload: option<string> = None\n" in body
        assert "Content-Type" not in body

    def test_body_encoded_with_validator(self, client_code):
        body = _function(client_code, "createPet")
        assert '  headers->Dict.set("Content-Type", "application/json")\n' in body
        assert (
            "  let payload = Some(body->S.reverseConvertToJsonOrThrow(ApiSchema.petSchema)->JSON.stringify)\n"
        ) in body

    def test_body_without_validators(self, plain_client_code):
        body = _function(plain_client_code, "createPet")
        assert "  let payload = JSON.stringifyAny(body)\n" in body

    def test_non_json_body_dropped(self, client_code):
        body = _function(client_code, "uploadPhoto")
        assert "~body" not in body
        assert "let payload: option<string> = None" in body

    def test_fetch_call(self, client_code):
        body = _function(client_code, "deletePet")
        assert '{"method": "DELETE", "headers": headers, "body": payload},' in body

    def test_optional_body(self):
        endpoint = Endpoint(
            operation_id="update",
            method=HttpMethod.PATCH,
            path="/things",
            request_body=RequestBody(type=STRING, required=False),
        )
        code = ClientGenerator().generate(_single_endpoint(endpoint))
        assert "~body: string=?" in code
        assert "let payload = body->Option.map(body => body->S.reverseConvertToJsonOrThrow(S.string)->JSON.stringify)" in code

        plain = ClientGenerator(GeneratorConfig(generate_schema=False)).generate(_single_endpoint(endpoint))
        assert "let payload = body->Option.flatMap(body => JSON.stringifyAny(body))" in plain

    def test_required_query_array_of_bools(self):
        endpoint = Endpoint(
            operation_id="search",
            method=HttpMethod.GET,
            path="/search",
            parameters=(
                Parameter("flags", "flags", ParameterLocation.QUERY, ArrayType(BOOL), required=True),
            ),
        )
        code = ClientGenerator().generate(_single_endpoint(endpoint))
        assert 'flags->Array.forEach(item => query->Array.push(("flags", Bool.toString(item))))' in code
        assert "switch flags" not in code

    def test_literal_path_text_is_escaped(self):
        endpoint = Endpoint(operation_id="odd", method=HttpMethod.GET, path="/price/$`x`")
        code = ClientGenerator().generate(_single_endpoint(endpoint))
        assert "let url = `${config.baseUrl}/price/\\$\\`x\\``" in code


class TestResponses:
    def test_response_variant(self, client_code):
        assert "type listPetsResponse =\n  | Status200(array<ApiTypes.pet>)\n" in client_code
        assert "type createPetResponse =\n  | Status201(ApiTypes.pet)\n  | Status400(ApiTypes.error)\n" in client_code
        assert "type getPetsPetIdResponse =\n  | Status200(ApiTypes.pet)\n  | Status404\n" in client_code
        assert "type deletePetResponse =\n  | Status204\n" in client_code

    def test_result_annotation(self, client_code):
        body = _function(client_code, "listPets")
        assert "let result: result<listPetsResponse, error> = switch Transport.status(response) {" in body

    def test_decoded_arm(self, client_code):
        body = _function(client_code, "listPets")
        assert (
            "  | 200 =>\n"
            "    switch await Transport.json(response) {\n"
            "    | json =>\n"
            "      switch json->S.parseOrThrow(S.array(ApiSchema.petSchema)) {\n"
            "      | value => Ok(Status200(value))\n"
            "      | exception S.Error(error) => Error(DecodeError(error->S.Error.message))\n"
            "      }\n"
            "    | exception Exn.Error(error) => "
            "Error(DecodeError(error->Exn.message->Option.getOr(\"Response body is not JSON\")))\n"
            "    }\n"
        ) in body

    def test_unparsable_body_is_a_decode_error(self, client_code, plain_client_code):
        for code in (client_code, plain_client_code):
            body = _function(code, "createPet")
            assert "let json = await" not in body
            assert body.count("switch await Transport.json(response) {") == 2
            assert body.count("| exception Exn.Error(error) => Error(DecodeError(") == 2

    def test_bodyless_arm(self, client_code):
        assert "  | 404 => Ok(Status404)\n" in _function(client_code, "getPetsPetId")
        assert "  | 204 => Ok(Status204)\n" in _function(client_code, "deletePet")

    def test_unexpected_status_arm(self, client_code):
        body = _function(client_code, "deletePet")
        assert "  | status => Error(UnexpectedStatus({status, body: await Transport.text(response)}))\n" in body
        assert body.endswith("  }\n  result\n}\n")

    def test_arm_without_validators(self, plain_client_code):
        body = _function(plain_client_code, "listPets")
        assert "    | json =>\n      Ok(Status200(json->Obj.magic))\n" in body
        assert "ApiSchema" not in plain_client_code

    def test_no_responses(self):
        endpoint = Endpoint(operation_id="ping", method=HttpMethod.HEAD, path="/ping")
        code = ClientGenerator().generate(_single_endpoint(endpoint))
        assert "type pingResponse" not in code
        assert "let result: result<unit, error> = switch Transport.status(response) {" in code


class TestTemplateLiteral:
    def test_plain_text(self):
        assert template_literal("/pets") == "/pets"

    def test_escapes(self):
        assert template_literal("a`b$c\\") == "a\\`b\\$c\\\\"


class TestKeywordLabels:
    def test_keyword_parameter(self, make_document):
        document = make_document(paths={
            "/things": {
                "get": {
                    "operationId": "listThings",
                    "parameters": [{"name": "type", "in": "query", "schema": {"type": "string"}}],
                    "responses": {"204": {"description": "none"}},
                }
            }
        })
        code = _render(document)
        assert "let listThings = async (config: config, ~type_: string=?, ()) => {" in code
        assert '| Some(type_) => query->Array.push(("type", type_))' in code
