"""Structuring adapter using the OpenAI chat completions API."""

import logging

import openai

from ...domain.errors import StructuringFailed
from ...domain.models import StructuredOffer
from ...ports.structuring import StructuringPort
from .prompts import MAX_TEXT_CHARS, SYSTEM_PROMPT, build_user_message
from .validation import parse_offer_response

logger = logging.getLogger(__name__)


class OpenAIAdapter(StructuringPort):
    """Structuring implementation using OpenAI (or a compatible endpoint)."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        temperature: float = 0.1,
        max_tokens: int = 2000,
        max_text_chars: int = MAX_TEXT_CHARS,
    ) -> None:
        try:
            self.client = openai.OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
            )
        except openai.OpenAIError as e:
            raise ValueError(f"OpenAI client configuration failed: {e}") from e
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_text_chars = max_text_chars

    def structure(self, text: str, file_name: str) -> StructuredOffer:
        logger.info(f"Structuring {file_name} with OpenAI ({self.model}, {len(text)} characters)")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": build_user_message(text, file_name, self.max_text_chars),
                    },
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            raise StructuringFailed(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise StructuringFailed("OpenAI returned no choices")

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(f"OpenAI usage: {usage}")

        return parse_offer_response(response.choices[0].message.content)
