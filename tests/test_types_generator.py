import pytest

from rescript_openapi.codegen.core.config import GeneratorConfig
from rescript_openapi.codegen.core.generator import generate_code
from rescript_openapi.codegen.core.ir import (
    ApiSpec,
    DictType,
    FLOAT,
    STRING,
    AliasDef,
    StringEnumType,
    TupleType,
)
from rescript_openapi.codegen.core.lowering import lower
from rescript_openapi.codegen.languages.rescript import TypesGenerator


@pytest.fixture
def types_code(petstore):
    return generate_code(TypesGenerator(), lower(petstore)).content


class TestTypesGenerator:
    def test_artifact_name(self):
        assert TypesGenerator().artifact_name == "ApiTypes.res"
        assert TypesGenerator(GeneratorConfig(module_prefix="Shop")).artifact_name == "ShopTypes.res"

    def test_header(self, types_code):
        assert types_code.startswith("// ApiTypes.res\n// Generated by rescript-openapi from Petstore (1.0.0)")
        assert "// A sample pet store" in types_code

    def test_recursive_group(self, types_code):
        assert "type rec error = {" in types_code
        assert types_code.count("type rec ") == 1
        assert "\nand pet = {" in types_code
        assert "\nand node = {" in types_code

    def test_record_fields(self, types_code):
        assert "  name: string,\n" in types_code
        assert "  tag: option<string>,\n" in types_code
        assert "  status: option<status>,\n" in types_code
        assert "  owner: option<owner>,\n" in types_code

    def test_collision_field_keeps_wire_name(self, types_code):
        assert '  @as("type") type_: option<string>,\n' in types_code

    def test_docs(self, types_code):
        assert "/** A pet for sale */\nand pet = {" in types_code
        assert "  /** The pet's name */\n  name: string," in types_code

    def test_enum_variant(self, types_code):
        assert (
            "and status =\n"
            '  | @as("available") Available\n'
            '  | @as("pending") Pending\n'
            '  | @as("sold") Sold\n'
        ) in types_code

    def test_one_of_variant(self, types_code):
        assert "and shape =\n  | Case1(pet)\n  | Case2(string)\n" in types_code

    def test_aliases(self, types_code):
        assert "and tags = array<string>\n" in types_code
        assert "and metadata = JSON.t\n" in types_code

    def test_every_type_expression(self):
        spec = ApiSpec(
            title="T",
            version="1",
            types=(
                AliasDef("Pair", target=TupleType((STRING, FLOAT))),
                AliasDef("Scores", target=DictType(FLOAT)),
                AliasDef("Mode", target=StringEnumType(("on", "off"))),
            ),
        )
        code = TypesGenerator().generate(spec)
        assert "type rec pair = (string, float)" in code
        assert "and scores = Dict.t<float>" in code
        assert 'and mode = [#"on" | #"off"]' in code

    def test_builtin_names_are_not_shadowed(self):
        spec = ApiSpec(title="T", version="1", types=(AliasDef("String", target=STRING),))
        assert "type rec string_ = string" in TypesGenerator().generate(spec)

    def test_empty_spec_has_only_header(self):
        code = generate_code(TypesGenerator(), ApiSpec(title="T", version="1")).content
        assert "type" not in code.replace("Types.res", "")
        assert code.endswith("\n") and not code.endswith("\n\n")
