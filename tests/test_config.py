import json

import pytest

from rescript_openapi.codegen.core.config import (
    ConfigError,
    GeneratorConfig,
    load_config,
)


class TestGeneratorConfig:
    def test_defaults(self):
        config = GeneratorConfig()
        assert config.module_prefix == "Api"
        assert config.generate_schema is True
        assert config.generate_client is True
        assert config.output_dir == "src/api"

    @pytest.mark.parametrize("prefix", ["", "api", "My-Api", "1Api"])
    def test_invalid_prefix(self, prefix):
        with pytest.raises(ConfigError, match="module_prefix"):
            GeneratorConfig(module_prefix=prefix)

    def test_flags_must_be_booleans(self):
        with pytest.raises(ConfigError, match="generate_schema"):
            GeneratorConfig(generate_schema="no")

    def test_empty_output_dir(self):
        with pytest.raises(ConfigError, match="output_dir"):
            GeneratorConfig(output_dir="")


class TestLoadConfig:
    def test_overrides(self):
        config = load_config(custom_config={"module_prefix": "Shop", "generate_client": False})
        assert config.module_prefix == "Shop"
        assert config.generate_client is False
        assert config.generate_schema is True

    def test_file_then_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"module_prefix": "Shop", "output_dir": "gen"}))

        config = load_config(custom_config={"output_dir": "out"}, config_file=path)
        assert config.module_prefix == "Shop"
        assert config.output_dir == "out"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_file=tmp_path / "missing.json")

    def test_not_json_extension(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("module_prefix: Shop\n")
        with pytest.raises(ConfigError, match="must be JSON"):
            load_config(config_file=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(config_file=path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(config_file=path)

    def test_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            load_config(custom_config={"colour": "blue"})
