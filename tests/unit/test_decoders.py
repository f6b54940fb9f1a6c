"""Unit tests for document decoders."""

import io
from unittest.mock import MagicMock, patch

import docx
import pytest
from docx.document import Document as WordDocument

from offerlens.adapters.decoders import DocxAdapter, PdfPlumberAdapter, default_decoders
from offerlens.adapters.decoders.pdfplumber_adapter import TextRun, layout_runs
from offerlens.domain.errors import DecodeFailed
from offerlens.domain.models import DocumentFormat
from offerlens.domain.services import ExtractionService


def _word(text: str, x: float, y: float) -> dict:
    return {"text": text, "x0": x, "top": y}


def _fake_pdf(*pages: list[dict]) -> MagicMock:
    pdf = MagicMock()
    pdf.__enter__.return_value = pdf
    pdf.pages = []
    for words in pages:
        page = MagicMock()
        page.extract_words.return_value = words
        pdf.pages.append(page)
    return pdf


def _docx_bytes(document: WordDocument) -> bytes:
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestLayoutRuns:
    """Tests for layout_runs."""

    def test_orders_by_line_then_x(self) -> None:
        runs = [
            TextRun("KZT", 90, 30),
            TextRun("мир", 50, 10.4),
            TextRun("Итого", 10, 30.2),
            TextRun("Привет", 10, 10),
            TextRun("150000", 50, 29.5),
        ]
        assert layout_runs(runs) == "Привет мир\nИтого 150000 KZT"

    def test_jitter_within_tolerance(self) -> None:
        runs = [TextRun("b", 20, 12.9), TextRun("a", 10, 10)]
        assert layout_runs(runs, line_tolerance=3) == "a b"

    def test_separate_lines_beyond_tolerance(self) -> None:
        runs = [TextRun("b", 10, 14), TextRun("a", 20, 10)]
        assert layout_runs(runs, line_tolerance=3) == "a\nb"

    def test_empty(self) -> None:
        assert layout_runs([]) == ""

    def test_order_independent(self) -> None:
        runs = [TextRun("a", 10, 10), TextRun("b", 20, 10.5), TextRun("c", 10, 20)]
        assert layout_runs(runs) == layout_runs(list(reversed(runs)))


class TestPdfPlumberAdapter:
    """Tests for PdfPlumberAdapter."""

    def test_format(self) -> None:
        assert PdfPlumberAdapter().format is DocumentFormat.PDF

    def test_decode_pages(self) -> None:
        fake = _fake_pdf(
            [_word("ТОО", 10, 10), _word("Ромашка", 40, 10)],
            [_word("Итого:", 10, 10), _word("150000", 60, 10.5), _word("KZT", 110, 10)],
        )
        with patch("pdfplumber.open", return_value=fake):
            text = PdfPlumberAdapter().decode(b"%PDF-1.4")

        assert text == "ТОО Ромашка\nИтого: 150000 KZT"

    def test_decode_repairs_fragmented_glyphs(self) -> None:
        words = [_word(ch, 10 + 10 * i, 10) for i, ch in enumerate("1500")]
        words += [_word(ch, 60 + 10 * i, 10) for i, ch in enumerate("KZT")]
        with patch("pdfplumber.open", return_value=_fake_pdf(words)):
            text = PdfPlumberAdapter().decode(b"%PDF-1.4")

        assert text == "1500 KZT"

    def test_invalid_bytes_fail_decoding(self) -> None:
        service = ExtractionService(
            decoders={DocumentFormat.PDF: PdfPlumberAdapter()},
            structuring=MagicMock(),
        )
        with pytest.raises(DecodeFailed):
            service.extract(b"this is not a pdf", "broken.pdf", "pdf")


class TestDocxAdapter:
    """Tests for DocxAdapter."""

    @pytest.fixture
    def offer_docx(self) -> bytes:
        document = docx.Document()
        document.add_paragraph("Коммерческое   предложение")
        document.add_paragraph("")
        document.add_paragraph("ТОО «Ромашка»")
        table = document.add_table(rows=2, cols=3)
        for cell, text in zip(table.rows[0].cells, ["Наименование", "Кол-во", "Сумма"]):
            cell.text = text
        for cell, text in zip(table.rows[1].cells, ["Фильтр масляный", "2", "16000"]):
            cell.text = text
        document.add_paragraph("Итого: 16000 KZT")
        return _docx_bytes(document)

    def test_format(self) -> None:
        assert DocxAdapter().format is DocumentFormat.DOCX

    def test_decode_in_document_order(self, offer_docx: bytes) -> None:
        text = DocxAdapter().decode(offer_docx)

        assert text.splitlines() == [
            "Коммерческое предложение",
            "ТОО «Ромашка»",
            "Наименование Кол-во Сумма",
            "Фильтр масляный 2 16000",
            "Итого: 16000 KZT",
        ]

    def test_merged_cells_reported_once(self) -> None:
        document = docx.Document()
        table = document.add_table(rows=1, cols=3)
        merged = table.cell(0, 0).merge(table.cell(0, 1))
        merged.text = "Доставка"
        table.cell(0, 2).text = "7 дней"

        assert DocxAdapter().decode(_docx_bytes(document)) == "Доставка 7 дней"

    def test_deterministic(self, offer_docx: bytes) -> None:
        adapter = DocxAdapter()
        assert adapter.decode(offer_docx) == adapter.decode(offer_docx)

    def test_invalid_bytes_fail_decoding(self) -> None:
        service = ExtractionService(
            decoders={DocumentFormat.DOCX: DocxAdapter()},
            structuring=MagicMock(),
        )
        with pytest.raises(DecodeFailed):
            service.extract(b"PK\x03\x04 broken", "broken.docx", "docx")


class TestDefaultDecoders:
    """Tests for default_decoders."""

    def test_one_decoder_per_format(self) -> None:
        decoders = default_decoders()
        assert isinstance(decoders[DocumentFormat.PDF], PdfPlumberAdapter)
        assert isinstance(decoders[DocumentFormat.DOCX], DocxAdapter)
