"""Domain layer - core business logic."""

from .errors import DecodeFailed, ExtractionError, StructuringFailed, UnsupportedFormat
from .models import (
    Currency,
    DocumentFormat,
    ExtractionResult,
    ExtractionSource,
    LineItem,
    RawDocument,
    StructuredOffer,
)

__all__ = [
    "Currency",
    "DecodeFailed",
    "DocumentFormat",
    "ExtractionError",
    "ExtractionResult",
    "ExtractionSource",
    "LineItem",
    "RawDocument",
    "StructuredOffer",
    "StructuringFailed",
    "UnsupportedFormat",
]
