from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from js2ts.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".js2tsrc.json", "js2ts.config.json")

# Config files use the camelCase keys of the JSON schema.
_SETTINGS_KEYS = {
    "strict": "strict",
    "preferInterfaces": "prefer_interfaces",
    "targetTSVersion": "target_ts_version",
    "aiMode": "ai_mode",
    "aiConfig": "ai",
    "excludePatterns": "exclude_patterns",
}
_AI_KEYS = {
    "provider": "provider",
    "apiKey": "api_key",
    "model": "model",
    "maxTokens": "max_tokens",
}


class AISettings(BaseSettings):
    """AI-assisted inference. Supports: OpenAI (default), Anthropic, local."""

    model_config = SettingsConfigDict(
        env_prefix="JS2TS_AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: Literal["openai", "anthropic", "local"] = Field(default="openai")
    api_key: SecretStr | None = Field(default=None)
    model: str = Field(default="gpt-4")
    max_tokens: int = Field(default=1000, gt=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JS2TS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    strict: bool = Field(default=True)
    prefer_interfaces: bool = Field(default=True)
    target_ts_version: str = Field(default="5.0")
    ai_mode: bool = Field(default=False)
    ai: AISettings | None = Field(default=None)
    exclude_patterns: list[str] = Field(
        default=["**/*.test.js", "**/*.spec.js", "**/node_modules/**"]
    )

    @field_validator("target_ts_version")
    @classmethod
    def validate_target_ts_version(cls, v: str) -> str:
        parts = v.split(".")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ValueError(f'target_ts_version must be in format "X.Y" (e.g., "5.0"): {v}')
        return v

    @model_validator(mode="after")
    def fill_ai_defaults(self) -> Settings:
        if self.ai_mode and self.ai is None:
            self.ai = AISettings()
        return self

    @property
    def ai_provider(self) -> str | None:
        return self.ai.provider if self.ai else None


def _translate_keys(raw: dict[str, Any]) -> dict[str, Any]:
    data = {_SETTINGS_KEYS.get(key, key): value for key, value in raw.items()}
    ai = data.get("ai")
    if isinstance(ai, dict):
        data["ai"] = {_AI_KEYS.get(key, key): value for key, value in ai.items()}
    return data


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {path}", file_path=str(path), cause=e
        ) from e
    except json.JSONDecodeError as e:
        error = ConfigurationError(
            f"Invalid JSON in configuration file: {path}", file_path=str(path), cause=e
        )
        error.line = e.lineno
        error.column = e.colno
        raise error from e

    if not isinstance(content, dict):
        raise ConfigurationError(
            f"Configuration file must contain a JSON object: {path}", file_path=str(path)
        )

    # Schema-style files keep the values under "default".
    if isinstance(content.get("default"), dict):
        return content["default"]
    return content


def find_config_file(search_dir: Path | None = None) -> Path | None:
    directory = search_dir or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path | None = None, search_dir: Path | None = None) -> Settings:
    """Load settings from a config file merged over the defaults.

    With no explicit `path`, the first of `CONFIG_FILE_NAMES` found in
    `search_dir` (default: the working directory) is used; when none exists
    the defaults are returned.

    Raises:
        ConfigurationError: If the file is missing, is not valid JSON or
            fails validation.
    """
    config_path = Path(path) if path is not None else find_config_file(search_dir)
    raw: dict[str, Any] = {}
    if config_path is not None:
        logger.debug(f"Loading configuration from {config_path}")
        raw = _read_config_file(config_path)

    try:
        return Settings(**_translate_keys(raw))
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            file_path=str(config_path) if config_path else None,
            cause=e,
        ) from e


@lru_cache
def get_settings() -> Settings:
    return Settings()
