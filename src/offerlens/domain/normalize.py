"""Value normalization shared by the structuring and fallback paths."""

import re
from pathlib import PurePath

from .errors import UnsupportedFormat
from .models import DEFAULT_UNIT, MIN_QUANTITY, DocumentFormat, LineItem

CANONICAL_UNITS = frozenset({"шт", "кг", "л", "м", "м2", "м3", "т"})

_UNIT_ALIASES = {
    "штук": "шт",
    "штука": "шт",
    "штуки": "шт",
    "ед": "шт",
    "единиц": "шт",
    "единица": "шт",
    "pc": "шт",
    "pcs": "шт",
    "piece": "шт",
    "pieces": "шт",
    "килограмм": "кг",
    "килограммы": "кг",
    "килограммов": "кг",
    "kg": "кг",
    "литр": "л",
    "литры": "л",
    "литров": "л",
    "l": "л",
    "liter": "л",
    "litre": "л",
    "метр": "м",
    "метры": "м",
    "метров": "м",
    "пм": "м",
    "п.м": "м",
    "пог.м": "м",
    "m": "м",
    "meter": "м",
    "м²": "м2",
    "кв.м": "м2",
    "квм": "м2",
    "квадратный метр": "м2",
    "m2": "м2",
    "sqm": "м2",
    "м³": "м3",
    "куб.м": "м3",
    "кубм": "м3",
    "кубический метр": "м3",
    "m3": "м3",
    "тн": "т",
    "тонна": "т",
    "тонны": "т",
    "тонн": "т",
    "t": "т",
    "ton": "т",
    "tonne": "т",
}

_MIME_FORMATS = {
    "application/pdf": DocumentFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
}

_SUFFIX_FORMATS = {
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
}

_AMOUNT_CLEANUP = re.compile(r"\s")
_AMOUNT_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


def normalize_unit(unit: object) -> str:
    """Map a unit string to its canonical token, defaulting to шт."""
    if not isinstance(unit, str):
        return DEFAULT_UNIT
    value = " ".join(unit.lower().split()).rstrip(".")
    if value in CANONICAL_UNITS:
        return value
    if value in _UNIT_ALIASES:
        return _UNIT_ALIASES[value]
    compact = value.replace(" ", "")
    return _UNIT_ALIASES.get(compact, DEFAULT_UNIT)


def parse_amount(value: object) -> float | None:
    """Coerce a number or numeric string ("150 000,50") to float."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    text = _AMOUNT_CLEANUP.sub("", value)
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            # 1.500,00
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    else:
        text = text.replace(",", ".")
    match = _AMOUNT_PATTERN.search(text)
    if not match:
        return None
    return float(match.group())


def clean_positions(items: list[LineItem]) -> list[LineItem]:
    """Drop invalid items and canonicalize the rest."""
    cleaned = []
    for item in items:
        if not item.is_valid:
            continue
        item.name = item.name.strip()
        item.quantity = max(MIN_QUANTITY, item.quantity)
        item.unit = normalize_unit(item.unit)
        cleaned.append(item)
    return cleaned


def detect_format(mime_type: str | None, file_name: str | None = None) -> DocumentFormat:
    """Derive the declared format from a MIME type, then the file extension.

    Legacy binary Word files (.doc, application/msword) are unsupported.
    """
    mime = (mime_type or "").split(";", 1)[0].strip().lower()
    if mime in _MIME_FORMATS:
        return _MIME_FORMATS[mime]
    if "pdf" in mime:
        return DocumentFormat.PDF
    if "wordprocessingml" in mime:
        return DocumentFormat.DOCX

    if file_name:
        suffix = PurePath(file_name).suffix.lower()
        if suffix in _SUFFIX_FORMATS:
            return _SUFFIX_FORMATS[suffix]

    raise UnsupportedFormat(mime_type or file_name)
