import pytest

from rescript_openapi.codegen.core.templates import (
    TemplateEngine,
    TemplateError,
    doc_comment,
    indent_lines,
    line_comment,
    rescript_string,
)


class TestFilters:
    def test_rescript_string_escapes(self):
        assert rescript_string('say "hi"') == '"say \\"hi\\""'
        assert rescript_string("ünï") == '"ünï"'

    def test_single_line_doc_comment(self):
        assert doc_comment("A pet") == "/** A pet */"

    def test_multi_line_doc_comment(self):
        assert doc_comment("First\n\nSecond", 2) == "  /**\n   * First\n   *\n   * Second\n   */"

    def test_doc_comment_cannot_close_early(self):
        assert "*/ evil" not in doc_comment("*/ evil")

    def test_indent_lines_skips_blank_lines(self):
        assert indent_lines("a\n\nb", 4) == "    a\n\n    b"

    def test_line_comment(self):
        assert line_comment("one\ntwo") == "// one\n// two"


class TestTemplateEngine:
    def test_directory_templates(self, tmp_path):
        (tmp_path / "t.j2").write_text("{{ name | rs_string }}")
        engine = TemplateEngine(tmp_path)
        assert engine.render_template("t.j2", {"name": "x"}) == '"x"'

    def test_undefined_variable_is_an_error(self, tmp_path):
        (tmp_path / "t.j2").write_text("{{ missing }}")
        with pytest.raises(TemplateError):
            TemplateEngine(tmp_path).render_template("t.j2", {})

    def test_missing_template(self):
        with pytest.raises(TemplateError):
            TemplateEngine().render_template("nope.j2", {})
