"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from offerlens.config import (
    PipelineConfig,
    Settings,
    StructuringConfig,
    StructuringProvider,
    load_settings,
)


class TestStructuringConfig:
    """Tests for StructuringConfig."""

    def test_defaults(self) -> None:
        config = StructuringConfig()
        assert config.provider is StructuringProvider.OPENAI
        assert config.resolved_model == "gpt-4o-mini"
        assert config.temperature == 0.1
        assert config.timeout == 60.0

    def test_explicit_model_wins(self) -> None:
        config = StructuringConfig(provider="ollama", model="qwen2.5:7b")
        assert config.resolved_model == "qwen2.5:7b"

    def test_provider_default_model(self) -> None:
        assert StructuringConfig(provider="claude-api").resolved_model == "claude-sonnet-4-20250514"

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OFFERLENS_STRUCTURING_PROVIDER", "ollama")
        monkeypatch.setenv("OFFERLENS_STRUCTURING_TIMEOUT", "15")

        config = StructuringConfig()

        assert config.provider is StructuringProvider.OLLAMA
        assert config.timeout == 15.0

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            StructuringConfig(timeout=0)

    def test_rejects_out_of_range_temperature(self) -> None:
        with pytest.raises(ValidationError):
            StructuringConfig(temperature=3)

    def test_rejects_unknown_provider(self) -> None:
        with pytest.raises(ValidationError):
            StructuringConfig(provider="gpt-local")


class TestPipelineConfig:
    """Tests for PipelineConfig."""

    def test_defaults(self) -> None:
        config = PipelineConfig()
        assert config.min_text_length == 50
        assert config.extracted_text_limit == 2000
        assert config.text_quality_bonus is True

    def test_rejects_negative_threshold(self) -> None:
        with pytest.raises(ValidationError):
            PipelineConfig(min_text_length=-1)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.toml")
        assert isinstance(settings, Settings)
        assert settings.pipeline.min_text_length == 50

    def test_reads_toml_sections(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.toml"
        config_path.write_text(
            "[structuring]\n"
            'provider = "ollama"\n'
            'base_url = "http://gpu-box:11434"\n'
            "timeout = 30\n"
            "\n"
            "[pipeline]\n"
            "min_text_length = 80\n"
            "text_quality_bonus = false\n"
        )

        settings = load_settings(config_path)

        assert settings.structuring.provider is StructuringProvider.OLLAMA
        assert settings.structuring.base_url == "http://gpu-box:11434"
        assert settings.structuring.timeout == 30.0
        assert settings.pipeline.min_text_length == 80
        assert settings.pipeline.text_quality_bonus is False
        assert settings.pipeline.extracted_text_limit == 2000
