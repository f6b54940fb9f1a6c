"""Decoder port - interface for document text extraction."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import DocumentFormat


class DecoderPort(ABC):
    """Interface for turning document bytes into plain text."""

    format: "DocumentFormat"

    @abstractmethod
    def decode(self, content: bytes) -> str:
        """Extract text from document bytes.

        Raises whatever the underlying library raises; the pipeline
        reports it as DecodeFailed.
        """
        pass
