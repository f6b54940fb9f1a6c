"""Confidence scoring and the manual review decision."""

import logging

from .models import (
    DocumentFormat,
    ExtractedText,
    ExtractionResult,
    FallbackDraft,
    ShortTextDraft,
    StructuredDraft,
    StructuredOffer,
)
from .normalize import clean_positions

logger = logging.getLogger(__name__)

SHORT_TEXT_CONFIDENCE = 20
REVIEW_THRESHOLD = 60

# (min normalized length, bonus); first match wins
QUALITY_BONUS = {
    DocumentFormat.PDF: ((400, 30), (200, 20), (100, 15)),
    DocumentFormat.DOCX: ((500, 30), (200, 20), (100, 15)),
}

Draft = StructuredDraft | FallbackDraft | ShortTextDraft


def clamp(value: int) -> int:
    return max(0, min(100, value))


def structured_baseline(offer: StructuredOffer) -> int:
    """Baseline confidence for an offer returned by the structuring service."""
    has_total = offer.total_price is not None
    has_positions = bool(offer.positions)
    if has_total and has_positions:
        return 95
    if has_total or has_positions:
        return 80
    if offer.company:
        return 70
    return 85


def quality_bonus(text_length: int, document_format: DocumentFormat) -> int:
    for min_length, bonus in QUALITY_BONUS.get(document_format, ()):
        if text_length > min_length:
            return bonus
    return 0


def short_text_note(text_length: int, file_name: str) -> str:
    return (
        f"Документ содержит мало текста ({text_length} символов). "
        f"Возможно, это изображение или поврежденный файл. Файл: {file_name}"
    )


def classify(
    draft: Draft,
    text: ExtractedText,
    file_name: str,
    document_format: DocumentFormat,
    extracted_text_limit: int = 2000,
    text_quality_bonus: bool = True,
) -> ExtractionResult:
    """Apply final confidence adjustments and decide on manual review.

    Adjustments, each clamped to [0, 100]:
        -30 when neither a total price nor positions were found
        -10 when the supplier company is unknown
        +15 when at least one position was found
        + a bonus for long, cleanly extracted text (optional)

    Review is required below the threshold, when the offer carries no price
    information at all, or when the draft type forces it.
    """
    if isinstance(draft, ShortTextDraft):
        return ExtractionResult(
            offer=StructuredOffer(),
            confidence=SHORT_TEXT_CONFIDENCE,
            needs_manual_review=True,
            extracted_text=short_text_note(draft.text_length, file_name),
            source_file_name=file_name,
            source=draft.source,
        )

    offer = draft.offer
    offer.positions = clean_positions(offer.positions)
    has_total = offer.total_price is not None
    has_positions = bool(offer.positions)

    confidence = clamp(draft.baseline)
    if not has_total and not has_positions:
        confidence = clamp(confidence - 30)
    if not offer.company:
        confidence = clamp(confidence - 10)
    if has_positions:
        confidence = clamp(confidence + 15)
    if text_quality_bonus:
        confidence = clamp(confidence + quality_bonus(text.length, document_format))

    needs_review = (
        confidence < REVIEW_THRESHOLD
        or (not has_total and not has_positions)
        or draft.forces_review
    )
    logger.debug(
        f"Classified {draft.source.value} draft: baseline={draft.baseline} "
        f"confidence={confidence} review={needs_review}"
    )

    return ExtractionResult(
        offer=offer,
        confidence=confidence,
        needs_manual_review=needs_review,
        extracted_text=text.text[:extracted_text_limit],
        source_file_name=file_name,
        source=draft.source,
    )
