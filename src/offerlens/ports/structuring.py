"""Structuring port - interface for schema extraction from document text."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import StructuredOffer


class StructuringPort(ABC):
    """Interface for model-backed commercial offer extraction."""

    @abstractmethod
    def structure(self, text: str, file_name: str) -> "StructuredOffer":
        """Extract a structured offer from normalized text.

        Raises StructuringFailed when the service errors, times out or
        returns data that cannot be validated.
        """
        pass
