"""Domain errors."""


class ExtractionError(Exception):
    """Base class for extraction pipeline errors."""


class UnsupportedFormat(ExtractionError):
    """Declared document format cannot be decoded."""

    def __init__(self, declared: object) -> None:
        super().__init__(f"Unsupported document format: {declared}")
        self.declared = declared


class DecodeFailed(ExtractionError):
    """Document bytes could not be turned into text."""

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(f"Failed to decode {file_name}: {reason}")
        self.file_name = file_name
        self.reason = reason


class StructuringFailed(ExtractionError):
    """Structuring service was unreachable or returned unusable data."""
