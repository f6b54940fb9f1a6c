"""Document decoder adapters."""

from ...domain.models import DocumentFormat
from ...ports.decoder import DecoderPort
from .docx_adapter import DocxAdapter
from .pdfplumber_adapter import PdfPlumberAdapter

__all__ = ["DocxAdapter", "PdfPlumberAdapter", "default_decoders"]


def default_decoders() -> dict[DocumentFormat, DecoderPort]:
    """One decoder per supported format."""
    decoders: list[DecoderPort] = [PdfPlumberAdapter(), DocxAdapter()]
    return {decoder.format: decoder for decoder in decoders}
