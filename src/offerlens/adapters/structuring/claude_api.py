"""Structuring adapter using Claude API."""

import logging

import anthropic

from ...domain.errors import StructuringFailed
from ...domain.models import StructuredOffer
from ...ports.structuring import StructuringPort
from .prompts import MAX_TEXT_CHARS, SYSTEM_PROMPT, build_user_message
from .validation import parse_offer_response

logger = logging.getLogger(__name__)


class ClaudeAPIAdapter(StructuringPort):
    """Structuring implementation using Claude API (pay-as-you-go)."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        timeout: float = 60.0,
        temperature: float = 0.1,
        max_tokens: int = 2000,
        max_text_chars: int = MAX_TEXT_CHARS,
    ) -> None:
        self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_text_chars = max_text_chars

    def structure(self, text: str, file_name: str) -> StructuredOffer:
        logger.info(f"Structuring {file_name} with Claude API ({len(text)} characters)")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=[
                    {
                        "role": "user",
                        "content": build_user_message(text, file_name, self.max_text_chars),
                    },
                ],
            )
            content = "".join(
                block.text for block in response.content if getattr(block, "type", "") == "text"
            )
        except (anthropic.APIError, TypeError) as e:
            # TypeError: missing credentials or an unsupported request argument
            raise StructuringFailed(f"Claude API request failed: {e}") from e

        return parse_offer_response(content)
