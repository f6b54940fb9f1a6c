"""Configuration management using pydantic-settings."""

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "claude-api": "claude-sonnet-4-20250514",
    "ollama": "gemma3:4b",
}
DEFAULT_TIMEOUT = 60.0
DEFAULT_MIN_TEXT_LENGTH = 50
DEFAULT_EXTRACTED_TEXT_LIMIT = 2000
CONFIG_PATH = Path("~/.config/offerlens/config.toml").expanduser()


class StructuringProvider(str, Enum):
    """Available structuring service providers."""

    OPENAI = "openai"
    CLAUDE_API = "claude-api"
    OLLAMA = "ollama"


class StructuringConfig(BaseSettings):
    """Structuring service configuration."""

    model_config = SettingsConfigDict(env_prefix="OFFERLENS_STRUCTURING_")

    provider: StructuringProvider = StructuringProvider.OPENAI
    model: str | None = None
    api_key: str | None = None
    base_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    temperature: float = 0.1
    max_tokens: int = 2000
    max_text_chars: int = 100_000

    @field_validator("timeout")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("temperature")
    @classmethod
    def bounded_temperature(cls, v: float) -> float:
        if not 0 <= v <= 2:
            raise ValueError("temperature must be between 0 and 2")
        return v

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider.value]


class PipelineConfig(BaseSettings):
    """Extraction pipeline thresholds."""

    model_config = SettingsConfigDict(env_prefix="OFFERLENS_PIPELINE_")

    min_text_length: int = DEFAULT_MIN_TEXT_LENGTH
    extracted_text_limit: int = DEFAULT_EXTRACTED_TEXT_LIMIT
    text_quality_bonus: bool = True

    @field_validator("min_text_length", "extracted_text_limit")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OFFERLENS_")

    structuring: StructuringConfig = StructuringConfig()
    pipeline: PipelineConfig = PipelineConfig()


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from TOML file, falling back to defaults."""
    path = config_path or CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

        structuring = StructuringConfig(**data.get("structuring", {}))
        pipeline = PipelineConfig(**data.get("pipeline", {}))
        return Settings(structuring=structuring, pipeline=pipeline)

    return Settings()
