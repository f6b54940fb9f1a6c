"""Ports - interfaces for external dependencies."""

from .decoder import DecoderPort
from .structuring import StructuringPort

__all__ = ["DecoderPort", "StructuringPort"]
