"""Structuring response validation and prompt injection mitigation."""

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...domain.errors import StructuringFailed
from ...domain.models import Currency, LineItem, StructuredOffer
from ...domain.normalize import clean_positions, normalize_unit, parse_amount

logger = logging.getLogger(__name__)

# Unique delimiters for document text boundaries
DOC_BEGIN = "<<<DOCUMENT_TEXT_BEGIN>>>"
DOC_END = "<<<DOCUMENT_TEXT_END>>>"

# Pattern for suspicious content: path traversal, code-like, control chars
_SUSPICIOUS_PATTERN = re.compile(r'\.\./|[{}<>`]|[\x00-\x1f]')

_CODE_FENCE = re.compile(r"```(?:json)?\s*")

_NULL_STRINGS = {"null", "none", "n/a", "unknown", "не указано", "нет"}


def looks_suspicious(text: str) -> bool:
    """Check if text looks like injection attempt."""
    if not text:
        return False
    return bool(_SUSPICIOUS_PATTERN.search(text))


def sanitize_field(text: object, fallback: str | None = None) -> str | None:
    """Return text if safe, otherwise fallback."""
    if not isinstance(text, str):
        return fallback
    text = text.strip()
    if not text or text.lower() in _NULL_STRINGS:
        return fallback
    if looks_suspicious(text):
        logger.warning(f"Suspicious field rejected: {text[:50]}")
        return fallback
    return text


class PositionPayload(BaseModel):
    """One position as returned by the structuring service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    description: str | None = None
    quantity: float | None = None
    unit: str = "шт"
    unit_price: float | None = Field(default=None, alias="unitPrice")
    total_price: float | None = Field(default=None, alias="totalPrice")

    @field_validator("quantity", "unit_price", "total_price", mode="before")
    @classmethod
    def coerce_number(cls, v: object) -> float | None:
        return parse_amount(v)

    @field_validator("name", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> str | None:
        return sanitize_field(v)

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v: object) -> str:
        return normalize_unit(v)

    def to_item(self) -> LineItem | None:
        if not self.name or self.quantity is None or self.quantity <= 0:
            return None
        unit_price = self.unit_price or None
        total_price = self.total_price or None
        if total_price is None and unit_price is not None:
            total_price = unit_price * self.quantity
        elif unit_price is None and total_price is not None:
            unit_price = round(total_price / self.quantity, 2)
        return LineItem(
            name=self.name,
            description=self.description,
            quantity=self.quantity,
            unit=self.unit,
            unit_price=unit_price,
            total_price=total_price,
        )


class OfferPayload(BaseModel):
    """Commercial offer JSON as returned by the structuring service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_price: float | None = Field(default=None, alias="totalPrice")
    currency: Currency = Currency.KZT
    company: str | None = None
    delivery_term: str | None = Field(default=None, alias="deliveryTerm")
    payment_term: str | None = Field(default=None, alias="paymentTerm")
    valid_until: str | None = Field(default=None, alias="validUntil")
    positions: list[Any] = Field(default_factory=list)

    @field_validator("total_price", mode="before")
    @classmethod
    def coerce_total(cls, v: object) -> float | None:
        amount = parse_amount(v)
        return amount if amount and amount > 0 else None

    @field_validator("currency", mode="before")
    @classmethod
    def coerce_currency(cls, v: object) -> Currency:
        return Currency.parse(v)

    @field_validator("company", "delivery_term", "payment_term", "valid_until", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> str | None:
        return sanitize_field(v)

    @field_validator("positions", mode="before")
    @classmethod
    def coerce_positions(cls, v: object) -> object:
        if v is None:
            return []
        return v

    def to_offer(self) -> StructuredOffer:
        items = []
        for raw in self.positions:
            try:
                item = PositionPayload.model_validate(raw).to_item()
            except ValidationError as e:
                logger.debug(f"Dropping invalid position {raw!r}: {e}")
                continue
            if item is not None:
                items.append(item)

        return StructuredOffer(
            currency=self.currency,
            total_price=self.total_price,
            company=self.company,
            delivery_term=self.delivery_term,
            payment_term=self.payment_term,
            valid_until=self.valid_until,
            positions=clean_positions(items),
        )


def parse_offer_response(text: str | None) -> StructuredOffer:
    """Parse and validate a structuring response into a typed offer.

    Raises StructuringFailed for empty, non-JSON or structurally invalid
    responses.
    """
    if not text or not text.strip():
        raise StructuringFailed("Empty response from structuring service")

    content = text.strip()
    if "```" in content:
        content = _CODE_FENCE.sub("", content).replace("```", "").strip()

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON response: {content[:200]}")
        raise StructuringFailed(f"Invalid JSON response: {e}") from e

    if not isinstance(data, dict):
        raise StructuringFailed(f"Expected JSON object, got {type(data).__name__}")

    try:
        payload = OfferPayload.model_validate(data)
    except ValidationError as e:
        raise StructuringFailed(f"Invalid offer structure: {e}") from e

    return payload.to_offer()
