"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from offerlens.domain.models import Currency, DocumentFormat, LineItem, StructuredOffer
from offerlens.domain.services import ExtractionService
from offerlens.ports.decoder import DecoderPort
from offerlens.ports.structuring import StructuringPort

OFFER_TEXT = """\
Коммерческое предложение
ТОО «Ромашка»
Масло моторное 10W40 4 шт 60 000 KZT
Фильтр масляный MANN W712 2 16000
Свеча зажигания NGK 10 224000
Итого: 300 000 KZT
Доставка: 7 дней
Оплата: 100% предоплата
"""


@pytest.fixture
def sample_offer() -> StructuredOffer:
    """Offer as a well-behaved structuring service returns it."""
    return StructuredOffer(
        currency=Currency.KZT,
        total_price=300000,
        company="ТОО Ромашка",
        delivery_term="7 дней",
        payment_term="100% предоплата",
        positions=[
            LineItem(name="Масло моторное 10W40", quantity=4, unit="шт", unit_price=15000, total_price=60000),
            LineItem(name="Фильтр масляный MANN W712", quantity=2, unit="шт", unit_price=8000, total_price=16000),
            LineItem(name="Свеча зажигания NGK", quantity=10, unit="шт", unit_price=22400, total_price=224000),
        ],
    )


@pytest.fixture
def mock_decoder() -> MagicMock:
    """Mock decoder port."""
    mock = MagicMock(spec=DecoderPort)
    mock.decode.return_value = OFFER_TEXT
    return mock


@pytest.fixture
def mock_structuring(sample_offer: StructuredOffer) -> MagicMock:
    """Mock structuring port."""
    mock = MagicMock(spec=StructuringPort)
    mock.structure.return_value = sample_offer
    return mock


@pytest.fixture
def service(mock_decoder: MagicMock, mock_structuring: MagicMock) -> ExtractionService:
    """Extraction service wired to mock adapters, without the length bonus."""
    return ExtractionService(
        decoders={DocumentFormat.PDF: mock_decoder, DocumentFormat.DOCX: mock_decoder},
        structuring=mock_structuring,
        text_quality_bonus=False,
    )
