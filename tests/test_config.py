"""Tests for configuration loading, saving and validation."""

import json

import pytest

from hookgen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
)
from hookgen.codegen.languages.typescript import TypeScriptSynthesizer


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()
        assert config == GeneratorConfig()
        assert config.http_client == "getInstance()"
        assert config.page_fields == ["pageNo"]

    def test_overrides_and_custom_keys(self):
        config = load_config({"http_client": "api()", "team": "web"})
        assert config.http_client == "api()"
        assert config.custom == {"team": "web"}

    def test_file_then_overrides(self, tmp_path):
        path = tmp_path / "hookgen.json"
        path.write_text(json.dumps({"list_wrapper": "Paged", "page_fields": "page"}), encoding="utf-8")
        config = load_config({"list_wrapper": "Listed"}, config_file=path)
        assert config.list_wrapper == "Listed"
        assert config.page_fields == ["page"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(config_file=tmp_path / "missing.json")

    def test_non_json_suffix(self, tmp_path):
        path = tmp_path / "hookgen.yaml"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file=path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "hookgen.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file=path)

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "hookgen.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file=path)


class TestConfigManager:
    def test_save_and_reload(self, tmp_path):
        manager = ConfigManager()
        original = GeneratorConfig(value_wrapper="One", custom={"team": "web"})
        path = tmp_path / "saved.json"
        manager.save_config(original, path)

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["team"] == "web"
        assert "custom" not in saved
        assert manager.get_config(config_file=path) == original

    def test_validate_defaults(self):
        assert ConfigManager().validate_config(GeneratorConfig()) == []

    def test_validate_problems(self):
        config = GeneratorConfig(
            error_notifier="notify user",
            page_fields=[],
            total_count_field="count",
            filtered_count_field="count",
            indent_size=-1,
        )
        warnings = ConfigManager().validate_config(config)
        assert len(warnings) == 4
        assert warnings[0] == "Invalid identifier for error_notifier: 'notify user'"


class TestConfigEffects:
    def test_indent_size(self):
        code = TypeScriptSynthesizer(GeneratorConfig(indent_size=4)).from_example({"id": 1}, "X")
        assert "    id: number;" in code

    def test_unknown_and_timestamp_types(self):
        config = GeneratorConfig(unknown_type="unknown", timestamp_type="Date")
        synthesizer = TypeScriptSynthesizer(config)
        code = synthesizer.from_example({"tags": [], "at": "2024-01-15T10:30:00Z"}, "X")
        assert "  tags: unknown[];" in code
        assert "  at: Date;" in code

    def test_custom_collaborators(self, fake_synthesizer):
        from hookgen.codegen.pipeline import HookGenerator
        from hookgen.codegen.models import GenerateRequest

        config = GeneratorConfig(
            http_client="client",
            error_notifier="toastError",
            invalidate_hook="useRefreshAll",
        )
        response = HookGenerator(config, synthesizer=fake_synthesizer).generate(
            GenerateRequest("saveUser", "PUT", "/users/{id}", "mutation", params='{"name": "a"}')
        )
        assert "await client.put(`/users/${id}`, { name });" in response.api
        assert "const invalidateQueries = useRefreshAll();" in response.hook
        assert "toastError(error);" in response.hook
