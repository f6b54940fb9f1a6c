"""PDF decoder using pdfplumber."""

import io
import logging
from typing import NamedTuple

import pdfplumber

from ...domain.models import DocumentFormat
from ...domain.text import defragment
from ...ports.decoder import DecoderPort

logger = logging.getLogger(__name__)

DEFAULT_LINE_TOLERANCE = 3.0


class TextRun(NamedTuple):
    """A positioned run of glyphs on a page."""

    text: str
    x: float
    y: float


def layout_runs(runs: list[TextRun], line_tolerance: float = DEFAULT_LINE_TOLERANCE) -> str:
    """Order runs top-to-bottom, then left-to-right, and join them.

    Runs whose y differs from the first run of the current line by no more
    than ``line_tolerance`` belong to that line, so sub-pixel jitter does not
    reorder words. Runs of a line are separated by a space, lines by newlines.
    """
    lines: list[list[TextRun]] = []
    anchor_y: float | None = None
    for run in sorted(runs, key=lambda r: r.y):
        if anchor_y is None or run.y - anchor_y > line_tolerance:
            lines.append([])
            anchor_y = run.y
        lines[-1].append(run)

    rendered = []
    for line in lines:
        text = " ".join(run.text for run in sorted(line, key=lambda r: r.x) if run.text)
        if text:
            rendered.append(text)
    return "\n".join(rendered)


class PdfPlumberAdapter(DecoderPort):
    """Decoder for PDF documents with a text layer."""

    format = DocumentFormat.PDF

    def __init__(self, line_tolerance: float = DEFAULT_LINE_TOLERANCE) -> None:
        self.line_tolerance = line_tolerance

    def decode(self, content: bytes) -> str:
        pages = []
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            for page in pdf.pages:
                words = page.extract_words(use_text_flow=True)
                runs = [TextRun(w["text"], float(w["x0"]), float(w["top"])) for w in words]
                text = layout_runs(runs, self.line_tolerance)
                if text:
                    pages.append(text)
            logger.debug(f"Decoded {len(pdf.pages)} PDF pages")

        return defragment("\n".join(pages))
