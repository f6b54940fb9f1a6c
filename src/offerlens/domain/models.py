"""Domain models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

MIN_QUANTITY = 0.01
DEFAULT_UNIT = "шт"


class DocumentFormat(str, Enum):
    """Container formats the pipeline can decode."""

    PDF = "pdf"
    DOCX = "docx"


class Currency(str, Enum):
    """Currencies an offer may be quoted in."""

    KZT = "KZT"
    RUB = "RUB"
    USD = "USD"
    EUR = "EUR"

    @classmethod
    def parse(cls, token: object) -> "Currency":
        """Map a code or localized token to a currency, defaulting to KZT."""
        if isinstance(token, Currency):
            return token
        if not isinstance(token, str):
            return cls.KZT
        value = token.strip().lower()
        if not value:
            return cls.KZT
        for prefix, currency in _CURRENCY_PREFIXES:
            if value.startswith(prefix):
                return currency
        return cls.KZT


_CURRENCY_PREFIXES = (
    ("kzt", Currency.KZT),
    ("тенге", Currency.KZT),
    ("тг", Currency.KZT),
    ("₸", Currency.KZT),
    ("rub", Currency.RUB),
    ("руб", Currency.RUB),
    ("₽", Currency.RUB),
    ("usd", Currency.USD),
    ("долл", Currency.USD),
    ("$", Currency.USD),
    ("eur", Currency.EUR),
    ("евро", Currency.EUR),
    ("€", Currency.EUR),
)


class ExtractionSource(str, Enum):
    """Terminal state that produced an extraction result."""

    STRUCTURED = "structured"
    FALLBACK = "fallback"
    SHORT_TEXT = "short_text"


@dataclass(frozen=True)
class RawDocument:
    """Supplier document as received."""

    content: bytes
    file_name: str
    format: DocumentFormat


@dataclass(frozen=True)
class ExtractedText:
    """Normalized document text.

    ``raw`` keeps the decoder's line breaks for line-oriented heuristics.
    """

    text: str
    raw: str = ""

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass
class LineItem:
    """One priced entry of an offer."""

    name: str
    quantity: float
    unit: str = DEFAULT_UNIT
    description: str | None = None
    unit_price: float | None = None
    total_price: float | None = None

    @property
    def is_valid(self) -> bool:
        return bool(self.name and self.name.strip()) and self.quantity > 0


@dataclass
class StructuredOffer:
    """Commercial offer extracted from a document."""

    currency: Currency = Currency.KZT
    total_price: float | None = None
    company: str | None = None
    delivery_term: str | None = None
    payment_term: str | None = None
    valid_until: str | None = None
    positions: list[LineItem] = field(default_factory=list)


@dataclass(frozen=True)
class StructuredDraft:
    """Offer produced by the structuring service."""

    offer: StructuredOffer
    baseline: int
    forces_review: ClassVar[bool] = False
    source: ClassVar[ExtractionSource] = ExtractionSource.STRUCTURED


@dataclass(frozen=True)
class FallbackDraft:
    """Offer produced by the regex fallback; never trusted without review."""

    offer: StructuredOffer
    baseline: int
    forces_review: ClassVar[bool] = True
    source: ClassVar[ExtractionSource] = ExtractionSource.FALLBACK


@dataclass(frozen=True)
class ShortTextDraft:
    """Document too sparse to structure."""

    text_length: int
    forces_review: ClassVar[bool] = True
    source: ClassVar[ExtractionSource] = ExtractionSource.SHORT_TEXT


@dataclass
class ExtractionResult:
    """Result of extracting a commercial offer from one document."""

    offer: StructuredOffer
    confidence: int
    needs_manual_review: bool
    extracted_text: str
    source_file_name: str
    source: ExtractionSource

    @property
    def positions(self) -> list[LineItem]:
        return self.offer.positions

    def as_record(self) -> dict[str, Any]:
        """Render the camelCase record handed to downstream consumers."""
        offer = self.offer
        return {
            "totalPrice": offer.total_price,
            "currency": offer.currency.value,
            "company": offer.company,
            "deliveryTerm": offer.delivery_term,
            "paymentTerm": offer.payment_term,
            "validUntil": offer.valid_until,
            "positions": [
                {
                    "name": item.name,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit": item.unit,
                    "unitPrice": item.unit_price,
                    "totalPrice": item.total_price,
                }
                for item in offer.positions
            ],
            "confidence": self.confidence,
            "needsManualReview": self.needs_manual_review,
            "extractedText": self.extracted_text,
            "fileName": self.source_file_name,
            "source": self.source.value,
        }
