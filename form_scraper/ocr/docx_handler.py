"""Raw text extraction from Word (.docx) containers.

Walks the document body in order so paragraphs and table rows keep
their relative position. Table cells on one row are joined by a space,
which keeps ``Label | ______`` style form rows on a single line.
"""

import io

from docx import Document
from docx.oxml.table import CT_Tbl
from docx.oxml.text.paragraph import CT_P
from docx.table import Table
from docx.text.paragraph import Paragraph

from form_scraper.utils.errors import ExtractionFailure
from form_scraper.utils.logger import get_logger

logger = get_logger(__name__)


def _table_lines(table: Table) -> list[str]:
    lines: list[str] = []
    for row in table.rows:
        cells: list[str] = []
        for cell in row.cells:
            text = cell.text.strip()
            # merged cells repeat the same text across the span
            if text and (not cells or cells[-1] != text):
                cells.append(text)
        if cells:
            lines.append(" ".join(cells))
    return lines


class DocxHandler:
    """Extracts raw text from .docx bytes."""

    def extract_text(self, docx_bytes: bytes) -> str:
        """Return the document's text, one paragraph or table row per line.

        Args:
            docx_bytes: Raw .docx bytes.

        Returns:
            Stripped document text.

        Raises:
            ExtractionFailure: If the container cannot be opened.
        """
        try:
            document = Document(io.BytesIO(docx_bytes))
        except Exception as exc:
            raise ExtractionFailure(f"Could not open Word document: {exc}") from exc

        lines: list[str] = []
        for element in document.element.body:
            if isinstance(element, CT_P):
                text = Paragraph(element, document).text.strip()
                if text:
                    lines.append(text)
            elif isinstance(element, CT_Tbl):
                lines.extend(_table_lines(Table(element, document)))

        text = "\n".join(lines).strip()
        logger.info("Extracted %d characters from Word document", len(text))
        return text
