"""Text normalization and repair of fragmented decoder output."""

import re

CURRENCY_CODES = ("KZT", "RUB", "USD", "EUR")

# Runs of two or more single-character tokens of one script: "Л у к о й л", "1 5 0 0"
_SPLIT_CYRILLIC = re.compile(r"(?<!\S)[А-Яа-яЁё](?:[ \t]+[А-Яа-яЁё])+(?!\S)")
_SPLIT_LATIN = re.compile(r"(?<!\S)[A-Za-z](?:[ \t]+[A-Za-z])+(?!\S)")
_SPLIT_DIGITS = re.compile(r"(?<!\S)\d(?:[ \t]+\d)+(?!\S)")
_HORIZONTAL_SPACE = re.compile(r"[ \t]+")

_SPLIT_CURRENCY = [
    (re.compile(r"(?<![A-Za-z])" + r"[ \t]*".join(code) + r"(?![A-Za-z])", re.IGNORECASE), code)
    for code in CURRENCY_CODES
]


def normalize_whitespace(text: str) -> str:
    """Collapse all whitespace to single spaces and trim."""
    return " ".join(text.split())


def tidy_lines(text: str) -> str:
    """Collapse horizontal whitespace per line and drop blank lines."""
    lines = (_HORIZONTAL_SPACE.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def _join_run(match: re.Match) -> str:
    return "".join(match.group().split())


def defragment(text: str) -> str:
    """Merge characters that a decoder emitted as separate tokens.

    Lossy: two genuinely separate one-letter words ("и в") are merged too.
    """
    text = _SPLIT_CYRILLIC.sub(_join_run, text)
    text = _SPLIT_LATIN.sub(_join_run, text)
    text = _SPLIT_DIGITS.sub(_join_run, text)
    for pattern, code in _SPLIT_CURRENCY:
        text = pattern.sub(code, text)
    return text
