"""Tests for settings and configuration file loading."""

import json

import pytest
from pydantic import ValidationError

from js2ts.config import Settings, get_settings, load_config
from js2ts.config.settings import find_config_file
from js2ts.core.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("JS2TS_STRICT", "JS2TS_PREFER_INTERFACES", "JS2TS_TARGET_TS_VERSION", "JS2TS_AI_MODE"):
        monkeypatch.delenv(name, raising=False)


def write_config(directory, data, name=".js2tsrc.json"):
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_defaults(self):
        settings = Settings()

        assert settings.strict is True
        assert settings.prefer_interfaces is True
        assert settings.target_ts_version == "5.0"
        assert settings.ai_mode is False
        assert settings.ai is None
        assert settings.ai_provider is None
        assert "**/node_modules/**" in settings.exclude_patterns

    @pytest.mark.parametrize("version", ["5", "5.0.1", "five.zero", "5.x"])
    def test_invalid_target_version(self, version):
        with pytest.raises(ValidationError):
            Settings(target_ts_version=version)

    def test_ai_mode_fills_ai_defaults(self):
        settings = Settings(ai_mode=True)

        assert settings.ai is not None
        assert settings.ai_provider == "openai"
        assert settings.ai.model == "gpt-4"
        assert settings.ai.max_tokens == 1000

    def test_invalid_provider(self):
        with pytest.raises(ValidationError):
            Settings(ai={"provider": "mystery"})

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("JS2TS_PREFER_INTERFACES", "false")

        assert Settings().prefer_interfaces is False

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()

        assert get_settings() is get_settings()


class TestLoadConfig:
    def test_camel_case_keys(self, tmp_path):
        path = write_config(
            tmp_path,
            {"strict": False, "preferInterfaces": False, "targetTSVersion": "4.9", "excludePatterns": ["dist/**"]},
        )

        settings = load_config(path)

        assert settings.strict is False
        assert settings.prefer_interfaces is False
        assert settings.target_ts_version == "4.9"
        assert settings.exclude_patterns == ["dist/**"]

    def test_schema_default_section(self, tmp_path):
        path = write_config(tmp_path, {"type": "object", "default": {"targetTSVersion": "5.4"}})

        assert load_config(path).target_ts_version == "5.4"

    def test_ai_config(self, tmp_path):
        path = write_config(
            tmp_path,
            {"aiMode": True, "aiConfig": {"provider": "anthropic", "apiKey": "secret", "maxTokens": 50}},
        )

        settings = load_config(path)

        assert settings.ai_provider == "anthropic"
        assert settings.ai.api_key.get_secret_value() == "secret"
        assert settings.ai.max_tokens == 50

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "absent.json")

        assert exc_info.value.file_path == str(tmp_path / "absent.json")
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "js2ts.config.json"
        path.write_text('{\n  "strict": tru\n}', encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert exc_info.value.line == 2
        assert exc_info.value.column is not None

    def test_non_object_content(self, tmp_path):
        path = write_config(tmp_path, ["strict"])

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        path = write_config(tmp_path, {"targetTSVersion": "latest"})

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)

        assert isinstance(exc_info.value.cause, ValidationError)
        assert "caused by" in str(exc_info.value)

    def test_discovers_config_in_search_dir(self, tmp_path):
        write_config(tmp_path, {"strict": False}, name="js2ts.config.json")

        assert find_config_file(tmp_path) == tmp_path / "js2ts.config.json"
        assert load_config(search_dir=tmp_path).strict is False

    def test_rc_file_takes_precedence(self, tmp_path):
        write_config(tmp_path, {"targetTSVersion": "4.0"}, name="js2ts.config.json")
        write_config(tmp_path, {"targetTSVersion": "5.2"})

        assert load_config(search_dir=tmp_path).target_ts_version == "5.2"

    def test_no_config_file_gives_defaults(self, tmp_path):
        assert find_config_file(tmp_path) is None
        assert load_config(search_dir=tmp_path) == Settings()
