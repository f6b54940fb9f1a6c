"""Deterministic regex extraction used when the structuring service fails.

Every signal is extracted independently. A signal whose extractor breaks is
logged and treated as absent, so ``extract_fallback`` never raises.
"""

import logging
import re
from collections.abc import Callable
from typing import TypeVar

from .models import Currency, ExtractedText, FallbackDraft, LineItem, StructuredOffer
from .normalize import normalize_unit, parse_amount

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NUMBER = r"(\d{1,3}(?:[ \u00a0\u202f]\d{3})+(?:[.,]\d{1,2})?|\d+(?:[.,]\d{1,2})?)"

# Stronger money keywords first: "итого" beats a per-unit "цена"
_TOTAL_PATTERNS = [
    re.compile(
        rf"(?:итого|всего|total)\b(?:\s*(?:к\s+оплате|с\s+ндс|with\s+vat))?[:\s]*{_NUMBER}",
        re.IGNORECASE,
    ),
    re.compile(rf"(?:сумма|sum|amount)\w*[:\s]*{_NUMBER}", re.IGNORECASE),
    re.compile(rf"(?:стоимость|cost)\w*[:\s]*{_NUMBER}", re.IGNORECASE),
    re.compile(rf"(?:цена|price)\w*[:\s]*{_NUMBER}", re.IGNORECASE),
]

_CURRENCY_PATTERN = re.compile(
    r"(?<![а-яёa-z])(тенге|тг|kzt|₸|руб|rub|₽|долл|usd|\$|евро|eur|€)",
    re.IGNORECASE,
)

_DELIVERY_PATTERN = re.compile(
    r"(?:доставка|поставка|срок\w*(?:\s+поставки)?|delivery)[:\s]*"
    r"(\d+(?:\s*[-–]\s*\d+)?\s*(?:(?:рабочих|календарных|working|business)\s+)?"
    r"(?:дн\w*|день|недел\w*|месяц\w*|days?|weeks?|months?))",
    re.IGNORECASE,
)

_PAYMENT_PATTERN = re.compile(
    r"(?:оплата|платеж|платёж|payment)\w*[:\s]+([^.\n;]{1,120})",
    re.IGNORECASE,
)

_COMPANY_PATTERN = re.compile(
    r"(?<!\w)(ООО|ТОО|ИП|АО|ЗАО|ПАО|LLC|LLP|JSC)\s+"
    r"(?:[«\"“]([^»\"”\n]{1,80})[»\"”]|([^\s,;:«»\"]+))"
)

_LINE_SPLIT = re.compile(r"\n|\s{3,}")

_CURRENCY_TOKEN = r"(?:kzt|тг|тенге|₸|руб\w*|rub|usd|\$|eur|€)"
_UNIT_TOKEN = r"(?:шт|кг|л|м2|м3|м|т|pcs)\.?"

# Tier 1: name, quantity, optional unit, grouped price, currency
_SPECIFIC_ITEM = re.compile(
    r"(?P<name>[^\W\d_][\w\s\-./«»\"()]*?)\s+(?P<qty>\d{1,5})\s+(?:(?P<unit>" + _UNIT_TOKEN + r")\s+)?"
    r"(?P<price>\d{1,3}(?:[ \u00a0\u202f]\d{3})+|\d+)(?:[.,]\d{1,2})?\s*" + _CURRENCY_TOKEN + r"(?!\w)",
    re.IGNORECASE,
)

# Tier 2: a long text span, a small integer, a large integer
_GENERIC_ITEM = re.compile(
    r"(?P<name>[^\W\d_][\w\s\-.,\"«»()/]{7,}?)\s+(?P<qty>\d{1,4})\s+(?P<price>\d{4,})(?!\d)",
)

# Tier 3: chat signatures and system lines that look like items
_PHONE = re.compile(r"\+7[\s\-(]*\d")
_SYSTEM_TOKEN = re.compile(r"botproject|whapi|\bbot\b", re.IGNORECASE)

# Summary rows share the item layout: "Итого 2 150 000 KZT"
_SUMMARY_NAME = re.compile(r"(?:итого|всего|total|сумма|ндс)", re.IGNORECASE)

GENERIC_MAX_QUANTITY = 1000
GENERIC_PRICE_RANGE = (100, 10_000_000)

BASE_CONFIDENCE = 30
ONE_SIGNAL_CONFIDENCE = 50
BOTH_SIGNALS_CONFIDENCE = 70


def _safely(name: str, extractor: Callable[[], T], default: T) -> T:
    try:
        return extractor()
    except Exception as e:
        logger.warning(f"Fallback {name} extraction failed: {e}")
        return default


def find_total_price(text: str) -> float | None:
    for pattern in _TOTAL_PATTERNS:
        match = pattern.search(text)
        if match:
            amount = parse_amount(match.group(1))
            if amount is not None and amount > 0:
                return amount
    return None


def find_currency(text: str) -> Currency:
    match = _CURRENCY_PATTERN.search(text)
    if not match:
        return Currency.KZT
    return Currency.parse(match.group(1))


def find_delivery_term(text: str) -> str | None:
    match = _DELIVERY_PATTERN.search(text)
    return " ".join(match.group(1).split()) if match else None


def find_payment_term(text: str) -> str | None:
    match = _PAYMENT_PATTERN.search(text)
    if not match:
        return None
    term = " ".join(match.group(1).split())
    return term or None


def find_company(text: str) -> str | None:
    match = _COMPANY_PATTERN.search(text)
    if not match:
        return None
    prefix = match.group(1)
    name = (match.group(2) or match.group(3) or "").strip()
    return f"{prefix} {name}" if name else None


def is_excluded_line(line: str) -> bool:
    """Phone numbers, e-mails and bot names mark chat signatures, not items."""
    if _PHONE.search(line) or "@" in line:
        return True
    return bool(_SYSTEM_TOKEN.search(line))


def _make_item(name: str, quantity: int, price: float, unit: str | None = None) -> LineItem | None:
    if _SUMMARY_NAME.match(name.strip()):
        return None
    return LineItem(
        name=" ".join(name.split()),
        quantity=quantity,
        unit=normalize_unit(unit),
        unit_price=round(price / quantity),
        total_price=price,
    )


def _match_specific(line: str) -> LineItem | None:
    match = _SPECIFIC_ITEM.search(line)
    if not match:
        return None
    quantity = int(match.group("qty"))
    price = parse_amount(match.group("price"))
    if quantity <= 0 or not price or price <= 0:
        return None
    return _make_item(match.group("name"), quantity, price, match.group("unit"))


def _match_generic(line: str) -> LineItem | None:
    match = _GENERIC_ITEM.search(line)
    if not match or is_excluded_line(line):
        return None
    name = match.group("name").strip()
    quantity = int(match.group("qty"))
    price = int(match.group("price"))
    low, high = GENERIC_PRICE_RANGE
    if len(name) < 8 or not 0 < quantity < GENERIC_MAX_QUANTITY or not low < price < high:
        return None
    return _make_item(name, quantity, price)


def find_line_items(lines: list[str]) -> list[LineItem]:
    items = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        item = _match_specific(line) or _match_generic(line)
        if item:
            logger.debug(
                f"Fallback item: {item.name} - {item.quantity} x {item.unit_price} = {item.total_price}"
            )
            items.append(item)
    return items


def candidate_lines(text: ExtractedText) -> list[str]:
    source = text.raw or text.text
    return [line for line in _LINE_SPLIT.split(source) if line.strip()]


def extract_fallback(text: ExtractedText) -> FallbackDraft:
    """Extract whatever can be found with regexes. Never raises."""
    body = text.text
    # Terms end at a line break
    lines_text = text.raw or body
    logger.info(f"Using regex fallback extraction ({text.length} characters)")

    total_price = _safely("total price", lambda: find_total_price(body), None)
    currency = _safely("currency", lambda: find_currency(body), Currency.KZT)
    delivery_term = _safely("delivery term", lambda: find_delivery_term(lines_text), None)
    payment_term = _safely("payment term", lambda: find_payment_term(lines_text), None)
    company = _safely("company", lambda: find_company(body), None)
    positions = _safely("line items", lambda: find_line_items(candidate_lines(text)), [])

    if total_price is None and positions:
        total_price = sum(item.total_price or 0 for item in positions)
        logger.info(f"Total price derived from positions: {total_price} {currency.value}")

    if total_price is not None and positions:
        baseline = BOTH_SIGNALS_CONFIDENCE
    elif total_price is not None or positions:
        baseline = ONE_SIGNAL_CONFIDENCE
    else:
        baseline = BASE_CONFIDENCE

    logger.info(
        f"Fallback result: positions={len(positions)} total={total_price} "
        f"currency={currency.value}"
    )

    offer = StructuredOffer(
        currency=currency,
        total_price=total_price,
        company=company,
        delivery_term=delivery_term,
        payment_term=payment_term,
        positions=positions,
    )
    return FallbackDraft(offer=offer, baseline=baseline)
