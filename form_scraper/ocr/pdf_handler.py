"""Low-level PDF access: per-page text layers and per-page rasterization.

Text layers are read with pdfplumber; pages are rendered with pdf2image
one at a time so a long scanned document never holds more than one
rasterized page in memory.
"""

import io
import re
from collections.abc import Iterator

import numpy as np
import pdfplumber
from pdf2image import convert_from_bytes

from form_scraper.utils.errors import ExtractionFailure
from form_scraper.utils.logger import get_logger

logger = get_logger(__name__)

# PDF user space is 72 units per inch, so a render scale maps to DPI.
_POINTS_PER_INCH = 72

_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")


def normalize_text_layer(text: str) -> str:
    """Drop whitespace that precedes line breaks in a text layer."""
    return _TRAILING_SPACE_RE.sub("\n", text)


class PDFHandler:
    """Reads text layers and renders single pages of a PDF.

    Args:
        render_scale: Zoom factor for rasterization relative to the
            PDF's native 72 DPI.
    """

    def __init__(self, render_scale: float = 2.0) -> None:
        self.render_scale = render_scale

    @property
    def dpi(self) -> int:
        return int(round(_POINTS_PER_INCH * self.render_scale))

    def iter_text_layers(self, pdf_bytes: bytes) -> Iterator[tuple[int, str]]:
        """Yield the embedded text layer of every page in order.

        Args:
            pdf_bytes: Raw PDF bytes.

        Yields:
            ``(page_number, text)`` pairs with 1-based page numbers. Pages
            without a text layer yield an empty string.

        Raises:
            ExtractionFailure: If the PDF cannot be opened or parsed.
        """
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                logger.info("Opened PDF with %d pages", len(pdf.pages))
                for number, page in enumerate(pdf.pages, start=1):
                    text = page.extract_text() or ""
                    yield number, normalize_text_layer(text)
        except Exception as exc:
            raise ExtractionFailure(f"PDF text layer extraction failed: {exc}") from exc

    def render_page(self, pdf_bytes: bytes, page_number: int) -> np.ndarray:
        """Rasterize exactly one page.

        Args:
            pdf_bytes: Raw PDF bytes.
            page_number: 1-based page number to render.

        Returns:
            RGB page image as a numpy array.

        Raises:
            ExtractionFailure: If rendering fails or yields no image.
        """
        try:
            images = convert_from_bytes(
                pdf_bytes,
                dpi=self.dpi,
                first_page=page_number,
                last_page=page_number,
            )
        except Exception as exc:
            raise ExtractionFailure(
                f"Rendering page {page_number} failed: {exc}"
            ) from exc

        if not images:
            raise ExtractionFailure(f"Rendering page {page_number} produced no image")

        logger.debug("Rendered page %d at %d DPI", page_number, self.dpi)
        return np.array(images[0].convert("RGB"))

