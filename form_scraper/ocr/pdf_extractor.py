"""Per-page PDF extraction with OCR fallback for scan-only pages.

Each page's embedded text layer is used when it is long enough;
otherwise exactly that page is rasterized, preprocessed and passed to
the recognition engine.
"""

from form_scraper.preprocessing.pipeline import PreprocessingPipeline
from form_scraper.utils.deadline import Deadline
from form_scraper.utils.logger import get_logger

from .pdf_handler import PDFHandler
from .results import ExtractionMethod, ExtractionResult, Page
from .tesseract_engine import OcrEngine

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"

# Text layers this short are treated as scan-only pages.
DEFAULT_TEXT_LAYER_THRESHOLD = 20


class PDFExtractor:
    """Extracts text from a PDF one page at a time.

    Args:
        pdf_handler: Text-layer reader and page renderer.
        preprocessing: Image preprocessing applied before OCR.
        ocr_engine: Recognition engine for scan-only pages.
        text_layer_threshold: A page's stripped text layer must be longer
            than this many characters to be used as-is.
    """

    def __init__(
        self,
        pdf_handler: PDFHandler,
        preprocessing: PreprocessingPipeline,
        ocr_engine: OcrEngine,
        text_layer_threshold: int = DEFAULT_TEXT_LAYER_THRESHOLD,
    ) -> None:
        self.pdf_handler = pdf_handler
        self.preprocessing = preprocessing
        self.ocr_engine = ocr_engine
        self.text_layer_threshold = text_layer_threshold

    def has_usable_text_layer(self, text: str) -> bool:
        return len(text.strip()) > self.text_layer_threshold

    def extract(
        self, pdf_bytes: bytes, deadline: Deadline | None = None
    ) -> ExtractionResult:
        """Extract every page of a PDF in order.

        Args:
            pdf_bytes: Raw PDF bytes.
            deadline: Time budget checked before each page and passed to
                each OCR call.

        Returns:
            Extraction result with one page per PDF page.

        Raises:
            ExtractionFailure: If the PDF cannot be parsed or rendered.
            OCRError: If recognition of a scan-only page fails.
            DeadlineExceeded: If the deadline runs out mid-document.
        """
        deadline = deadline or Deadline()
        pages: list[Page] = []

        for number, layer_text in self.pdf_handler.iter_text_layers(pdf_bytes):
            deadline.check(f"page {number}")

            if self.has_usable_text_layer(layer_text):
                pages.append(
                    Page(index=number, method=ExtractionMethod.PDF_TEXT, text=layer_text)
                )
                logger.debug(
                    "Page %d: using text layer (%d chars)", number, len(layer_text)
                )
                continue

            logger.info(
                "Page %d: text layer has %d chars, falling back to OCR",
                number,
                len(layer_text.strip()),
            )
            image = self.pdf_handler.render_page(pdf_bytes, number)
            prepared = self.preprocessing.process(image)
            text = self.ocr_engine.recognize(prepared, timeout=deadline.remaining())
            pages.append(Page(index=number, method=ExtractionMethod.PDF_OCR, text=text))

        result = ExtractionResult(
            method=self._document_method(pages),
            mime_type=PDF_MIME_TYPE,
            pages=tuple(pages),
        )
        ocr_pages = sum(1 for p in pages if p.method == ExtractionMethod.PDF_OCR)
        logger.info(
            "Extracted %d PDF pages (%d via OCR), %d characters",
            len(pages),
            ocr_pages,
            result.summary.char_count,
        )
        return result

    @staticmethod
    def _document_method(pages: list[Page]) -> ExtractionMethod:
        if pages and all(p.method == ExtractionMethod.PDF_OCR for p in pages):
            return ExtractionMethod.PDF_OCR
        return ExtractionMethod.PDF_TEXT
