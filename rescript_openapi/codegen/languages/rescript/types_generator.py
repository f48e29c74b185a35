"""
ReScript type declaration generator.

Renders every TypeDef of the IR as one recursive declaration group,
so declarations may refer to each other in any order.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.ir import AliasDef, ApiSpec, RecordDef, TypeDef, VariantDef
from ...core.naming import NameSanitizer
from ...core.templates import rescript_string
from .types import RescriptTypeMapper


def as_annotation(wire_name: str) -> str:
    """``@as("wire") `` prefix, with its trailing space."""
    return f"@as({rescript_string(wire_name)}) "


class TypesGenerator(CodeGenerator):
    """Generator for the ``{prefix}Types.res`` artifact."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 sanitizer: Optional[NameSanitizer] = None):
        super().__init__(config, sanitizer)
        self.type_mapper = RescriptTypeMapper(self.sanitizer)

    @property
    def artifact_kind(self) -> str:
        return "types"

    @property
    def module_suffix(self) -> str:
        return "Types"

    def get_template_directory(self) -> Optional[Path]:
        """Return the ReScript templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def generate(self, spec: ApiSpec) -> str:
        declarations = [
            self._declaration_data(type_def, "type rec" if index == 0 else "and")
            for index, type_def in enumerate(spec.types)
        ]

        context = self.header_context(spec)
        context["declarations"] = declarations
        return self.render_template("types.res.j2", context)

    def _declaration_data(self, type_def: TypeDef, keyword: str) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "keyword": keyword,
            "identifier": self.type_mapper.type_identifier(type_def.name),
            "doc": type_def.doc,
        }

        if isinstance(type_def, RecordDef):
            data["kind"] = "record"
            data["fields"] = self._field_data(type_def)
        elif isinstance(type_def, VariantDef):
            data["kind"] = "variant"
            data["cases"] = self._case_data(type_def)
        elif isinstance(type_def, AliasDef):
            data["kind"] = "alias"
            data["target"] = self.type_mapper.to_rescript(type_def.target)
        else:
            raise TypeError(f"Unknown type definition: {type_def!r}")

        return data

    def _field_data(self, record: RecordDef) -> List[Dict[str, Any]]:
        fields = []
        for field in record.fields:
            fields.append({
                "name": field.name,
                "type": self.type_mapper.to_rescript(field.type),
                "annotation": as_annotation(field.original_name)
                if field.name != field.original_name else "",
                "doc": field.doc,
            })
        return fields

    def _case_data(self, variant: VariantDef) -> List[Dict[str, Any]]:
        cases = []
        for case in variant.cases:
            payload = ""
            if case.payload is not None:
                payload = f"({self.type_mapper.to_rescript(case.payload)})"
            cases.append({
                "name": case.name,
                "payload": payload,
                "annotation": as_annotation(case.literal) if case.literal is not None else "",
            })
        return cases
