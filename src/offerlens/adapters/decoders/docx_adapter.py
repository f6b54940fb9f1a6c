"""Word decoder using python-docx."""

import io
import logging

import docx
from docx.table import Table

from ...domain.models import DocumentFormat
from ...domain.text import tidy_lines
from ...ports.decoder import DecoderPort

logger = logging.getLogger(__name__)


def _table_lines(table: Table) -> list[str]:
    lines = []
    for row in table.rows:
        cells: list[str] = []
        for cell in row.cells:
            text = " ".join(cell.text.split())
            # Merged cells are reported once per grid column
            if text and (not cells or cells[-1] != text):
                cells.append(text)
        if cells:
            lines.append(" ".join(cells))
    return lines


class DocxAdapter(DecoderPort):
    """Decoder for Word (.docx) documents."""

    format = DocumentFormat.DOCX

    def decode(self, content: bytes) -> str:
        document = docx.Document(io.BytesIO(content))

        lines: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                lines.extend(_table_lines(block))
            else:
                lines.append(block.text)

        logger.debug(f"Decoded {len(lines)} Word lines")
        return tidy_lines("\n".join(lines))
