"""
rescript-schema validator generator.

Renders one ``<name>Schema`` binding per TypeDef. Bindings are emitted
in dependency order so every reference is bound before use; inside a
reference cycle the not-yet-bound validator is expanded in place.
"""

from pathlib import Path
from typing import List, Optional, Set

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.ir import AliasDef, ApiSpec, RecordDef, TypeDef, VariantDef, type_references
from ...core.naming import NameSanitizer
from ...core.templates import indent_lines, rescript_string
from .types import RescriptTypeMapper


class SchemaGenerator(CodeGenerator):
    """Generator for the ``{prefix}Schema.res`` artifact."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 sanitizer: Optional[NameSanitizer] = None):
        super().__init__(config, sanitizer)
        self.type_mapper = RescriptTypeMapper(self.sanitizer)

        # State tracking, reset per run
        self._spec: Optional[ApiSpec] = None
        self._emitted: Set[str] = set()
        self._used: Set[str] = set()

    @property
    def artifact_kind(self) -> str:
        return "schema"

    @property
    def module_suffix(self) -> str:
        return "Schema"

    def get_template_directory(self) -> Optional[Path]:
        """Return the ReScript templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def generate(self, spec: ApiSpec) -> str:
        self._spec = spec
        self._emitted = set()
        self._used = set()

        validators = []
        for name in self._get_generation_order(spec):
            type_def = spec.get_type(name)
            validators.append({
                "identifier": self.type_mapper.schema_identifier(name),
                "type": self.type_mapper.type_identifier(name),
                "doc": type_def.doc,
                "expression": self._definition(type_def, frozenset()),
            })
            self._emitted.add(name)

        context = self.header_context(spec)
        context["types_module"] = self.module_name_for("Types")
        context["validators"] = validators
        return self.render_template("schema.res.j2", context)

    def _get_generation_order(self, spec: ApiSpec) -> List[str]:
        """
        Determine order for emitting validators.
        Validators are emitted after the validators they reference.
        """
        visited = set()
        visiting = set()
        ordered = []

        def visit_type(name: str):
            if name in visited or spec.get_type(name) is None:
                return

            if name in visiting:
                # Reference cycle - resolved by in-place expansion
                return

            visiting.add(name)
            for dependency in type_references(spec.get_type(name)):
                visit_type(dependency)

            visiting.remove(name)
            visited.add(name)
            ordered.append(name)

        for name in spec.type_names():
            visit_type(name)

        return ordered

    # Expressions

    def _definition(self, type_def: TypeDef, bound: frozenset) -> str:
        """Validator expression of a TypeDef, wrapped in S.recursive when self-referencing."""
        bound = bound | {type_def.name}
        identifier = self.type_mapper.schema_identifier(type_def.name)

        expression = self._body(type_def, bound)

        is_recursive = type_def.name in self._used
        self._used.discard(type_def.name)
        if is_recursive:
            return f"S.recursive({identifier} => {expression})"
        return expression

    def _reference(self, bound: frozenset):
        def reference(name: str) -> str:
            if name in bound:
                self._used.add(name)
                return self.type_mapper.schema_identifier(name)

            type_def = self._spec.get_type(name)
            if name in self._emitted or type_def is None:
                return self.type_mapper.schema_identifier(name)

            # Forward reference inside a cycle: expand in place
            return self._definition(type_def, bound)

        return reference

    def _body(self, type_def: TypeDef, bound: frozenset) -> str:
        reference = self._reference(bound)
        type_name = self.type_mapper.type_identifier(type_def.name)

        if isinstance(type_def, RecordDef):
            fields = "\n".join(
                f"{field.name}: s.field({rescript_string(field.original_name)}, "
                f"{self.type_mapper.to_schema(field.type, reference)}),"
                for field in type_def.fields
            )
            return f"S.object((s): {type_name} => {{\n{indent_lines(fields)}\n}})"

        elif isinstance(type_def, VariantDef):
            members = []
            for case in type_def.cases:
                if case.payload is None:
                    members.append(f"S.literal(({case.name}: {type_name}))")
                else:
                    payload = self.type_mapper.to_schema(case.payload, reference)
                    members.append(
                        f"{payload}->S.shape((value): {type_name} => {case.name}(value))"
                    )
            return "S.union([\n" + indent_lines(",\n".join(members)) + ",\n])"

        elif isinstance(type_def, AliasDef):
            return self.type_mapper.to_schema(type_def.target, reference)

        raise TypeError(f"Unknown type definition: {type_def!r}")
