from rescript_openapi.codegen.core.generator import Artifact
from rescript_openapi.codegen.writer import write_artifacts


class TestWriteArtifacts:
    def test_creates_directory(self, tmp_path):
        output_dir = tmp_path / "src" / "api"
        artifacts = [
            Artifact("types", "ApiTypes.res", "type rec pet = string\n"),
            Artifact("client", "ApiClient.res", "// ünïcode\n"),
        ]

        paths = write_artifacts(artifacts, output_dir)

        assert paths == [output_dir / "ApiTypes.res", output_dir / "ApiClient.res"]
        assert paths[0].read_text(encoding="utf-8") == "type rec pet = string\n"
        assert paths[1].read_text(encoding="utf-8") == "// ünïcode\n"

    def test_overwrites(self, tmp_path):
        (tmp_path / "ApiTypes.res").write_text("old")
        write_artifacts([Artifact("types", "ApiTypes.res", "new\n")], str(tmp_path))
        assert (tmp_path / "ApiTypes.res").read_text() == "new\n"
