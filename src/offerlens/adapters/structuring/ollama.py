"""Structuring adapter using Ollama."""

import logging
from urllib.parse import urlparse

import httpx

from ...domain.errors import StructuringFailed
from ...domain.models import StructuredOffer
from ...ports.structuring import StructuringPort
from .prompts import MAX_TEXT_CHARS, SYSTEM_PROMPT, build_user_message
from .validation import parse_offer_response

logger = logging.getLogger(__name__)


class OllamaAdapter(StructuringPort):
    """Structuring implementation using a local Ollama server."""

    def __init__(
        self,
        model: str = "gemma3:4b",
        base_url: str = "http://localhost:11434",
        timeout: float = 120.0,
        temperature: float = 0.1,
        max_text_chars: int = MAX_TEXT_CHARS,
        client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"Invalid ollama base_url scheme: {parsed.scheme}")
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_text_chars = max_text_chars
        self.client = client or httpx.Client(timeout=timeout)

    def structure(self, text: str, file_name: str) -> StructuredOffer:
        logger.info(f"Structuring {file_name} with Ollama ({self.model})")

        try:
            response = self.client.post(
                f"{self.base_url}/api/chat",
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {
                            "role": "user",
                            "content": build_user_message(text, file_name, self.max_text_chars),
                        },
                    ],
                    "stream": False,
                    "format": "json",
                    "options": {"temperature": self.temperature},
                },
            )
            response.raise_for_status()
            content = response.json()["message"]["content"]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            raise StructuringFailed(f"Ollama request failed: {e}") from e

        return parse_offer_response(content)
