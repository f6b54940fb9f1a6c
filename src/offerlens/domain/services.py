"""Domain services - orchestrate business logic."""

import logging
from collections.abc import Mapping
from enum import Enum

from ..ports.decoder import DecoderPort
from ..ports.structuring import StructuringPort
from .confidence import Draft, classify, structured_baseline
from .errors import DecodeFailed, StructuringFailed, UnsupportedFormat
from .fallback import extract_fallback
from .models import (
    DocumentFormat,
    ExtractedText,
    ExtractionResult,
    RawDocument,
    ShortTextDraft,
    StructuredDraft,
)
from .text import normalize_whitespace

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    """Pipeline stages, in order of traversal."""

    DECODING = "decoding"
    NORMALIZED = "normalized"
    SHORT_TEXT_TERMINAL = "short_text_terminal"
    STRUCTURING = "structuring"
    STRUCTURED = "structured"
    FALLBACK = "fallback"
    FALLBACK_STRUCTURED = "fallback_structured"
    CLASSIFIED = "classified"
    DONE = "done"


class ExtractionService:
    """Turns supplier documents into commercial offer records.

    Holds no per-call state: one instance may serve concurrent calls as long
    as the injected adapters are thread-safe.
    """

    def __init__(
        self,
        decoders: Mapping[DocumentFormat, DecoderPort],
        structuring: StructuringPort,
        min_text_length: int = 50,
        extracted_text_limit: int = 2000,
        text_quality_bonus: bool = True,
    ) -> None:
        self.decoders = dict(decoders)
        self.structuring = structuring
        self.min_text_length = min_text_length
        self.extracted_text_limit = extracted_text_limit
        self.text_quality_bonus = text_quality_bonus

    def extract(
        self,
        content: bytes,
        file_name: str,
        declared_format: DocumentFormat | str,
    ) -> ExtractionResult:
        """Extract a commercial offer from document bytes.

        Pipeline:
            1. Decode bytes with the decoder for the declared format
            2. Normalize whitespace
            3. Short-circuit documents with too little text
            4. Structuring service, regex fallback on failure
            5. Score confidence and decide on manual review

        Raises UnsupportedFormat or DecodeFailed; every other outcome is a
        result, possibly flagged for manual review.
        """
        document_format = self._resolve_format(declared_format)
        return self.extract_document(RawDocument(content, file_name, document_format))

    def extract_document(self, document: RawDocument) -> ExtractionResult:
        file_name = document.file_name
        logger.info(f"Extracting offer: {file_name} ({len(document.content)} bytes)")

        self._enter(Stage.DECODING, file_name)
        text = self._decode(document)

        self._enter(Stage.NORMALIZED, file_name)
        logger.info(f"Extracted {text.length} characters from {file_name}")

        draft: Draft
        if text.length < self.min_text_length:
            self._enter(Stage.SHORT_TEXT_TERMINAL, file_name)
            logger.warning(
                f"Too little text in {file_name} ({text.length} characters), "
                "probably an image-only or damaged document"
            )
            draft = ShortTextDraft(text_length=text.length)
        else:
            draft = self._structure(text, file_name)

        result = classify(
            draft,
            text,
            file_name,
            document.format,
            extracted_text_limit=self.extracted_text_limit,
            text_quality_bonus=self.text_quality_bonus,
        )
        self._enter(Stage.CLASSIFIED, file_name)

        logger.info(
            f"Extracted {file_name}: source={result.source.value} "
            f"confidence={result.confidence} review={result.needs_manual_review} "
            f"positions={len(result.positions)} total={result.offer.total_price} "
            f"{result.offer.currency.value}"
        )
        self._enter(Stage.DONE, file_name)
        return result

    def _resolve_format(self, declared_format: DocumentFormat | str) -> DocumentFormat:
        try:
            if isinstance(declared_format, str):
                declared_format = declared_format.lower()
            document_format = DocumentFormat(declared_format)
        except ValueError:
            raise UnsupportedFormat(declared_format) from None
        if document_format not in self.decoders:
            raise UnsupportedFormat(declared_format)
        return document_format

    def _decode(self, document: RawDocument) -> ExtractedText:
        decoder = self.decoders.get(document.format)
        if decoder is None:
            raise UnsupportedFormat(document.format)

        try:
            raw = decoder.decode(document.content)
        except Exception as e:
            logger.exception(f"Decoding failed: {document.file_name}")
            raise DecodeFailed(document.file_name, str(e) or type(e).__name__) from e

        return ExtractedText(text=normalize_whitespace(raw), raw=raw)

    def _structure(self, text: ExtractedText, file_name: str) -> Draft:
        self._enter(Stage.STRUCTURING, file_name)
        try:
            offer = self.structuring.structure(text.text, file_name)
        except StructuringFailed as e:
            logger.warning(f"Structuring failed for {file_name}, using fallback: {e}")
            self._enter(Stage.FALLBACK, file_name)
            draft = extract_fallback(text)
            self._enter(Stage.FALLBACK_STRUCTURED, file_name)
            return draft

        self._enter(Stage.STRUCTURED, file_name)
        return StructuredDraft(offer=offer, baseline=structured_baseline(offer))

    def _enter(self, stage: Stage, file_name: str) -> None:
        logger.debug(f"{file_name}: {stage.value}")
