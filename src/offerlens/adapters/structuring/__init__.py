"""Structuring service adapters."""

from ...config import StructuringConfig, StructuringProvider
from ...ports.structuring import StructuringPort
from .claude_api import ClaudeAPIAdapter
from .ollama import OllamaAdapter
from .openai_api import OpenAIAdapter

__all__ = ["ClaudeAPIAdapter", "OllamaAdapter", "OpenAIAdapter", "create_structuring_adapter"]


def create_structuring_adapter(config: StructuringConfig) -> StructuringPort:
    """Create structuring adapter based on configuration."""
    if config.provider == StructuringProvider.OPENAI:
        return OpenAIAdapter(
            model=config.resolved_model,
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            max_text_chars=config.max_text_chars,
        )
    elif config.provider == StructuringProvider.CLAUDE_API:
        return ClaudeAPIAdapter(
            model=config.resolved_model,
            api_key=config.api_key,
            timeout=config.timeout,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            max_text_chars=config.max_text_chars,
        )
    elif config.provider == StructuringProvider.OLLAMA:
        return OllamaAdapter(
            model=config.resolved_model,
            base_url=config.base_url or "http://localhost:11434",
            timeout=config.timeout,
            temperature=config.temperature,
            max_text_chars=config.max_text_chars,
        )
    else:
        raise ValueError(f"Unknown structuring provider: {config.provider}")
