"""Format dispatcher: routes an uploaded payload to the right extractor.

Combines PDF handling, Word unpacking, image preprocessing and OCR
behind a single ``process(bytes, mime_type)`` call that always returns
a usable :class:`ExtractionResult`. Degraded paths are logged, never
raised; only an expired caller deadline propagates.
"""

import base64
import binascii
import io
import re
import zipfile
from enum import StrEnum

import numpy as np
from PIL import Image, UnidentifiedImageError

from form_scraper.preprocessing.pipeline import PreprocessingPipeline
from form_scraper.utils.config import AppConfig
from form_scraper.utils.deadline import Deadline
from form_scraper.utils.errors import (
    DeadlineExceeded,
    ExtractionFailure,
    UnsupportedFormat,
)
from form_scraper.utils.logger import get_logger

from .docx_handler import DocxHandler
from .pdf_extractor import PDF_MIME_TYPE, PDFExtractor
from .pdf_handler import PDFHandler
from .results import (
    ExtractionMethod,
    ExtractionResult,
    empty_result,
    single_page_result,
)
from .tesseract_engine import OcrEngine, TesseractEngine

logger = get_logger(__name__)

DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
_DOCX_SUBTYPE = "/vnd.openxmlformats-officedocument.wordprocessingml.document"
_PDF_MIME_TYPES = {PDF_MIME_TYPE, "application/x-pdf"}
_GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

_DATA_URL_RE = re.compile(r"^data:([^;,]+)?(?:;[^,]*)?;base64,", re.IGNORECASE)


class DocumentFormat(StrEnum):
    """Extraction path chosen for a payload."""

    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"


def decode_data_url(payload: str) -> tuple[bytes, str]:
    """Decode a base64 payload, optionally wrapped in a ``data:`` URL.

    Args:
        payload: ``data:<mime>;base64,<data>`` or bare base64 text.

    Returns:
        Tuple of (raw bytes, mime type). The mime type defaults to
        ``application/octet-stream`` when no header is present.

    Raises:
        ValueError: If the base64 body is malformed.
    """
    mime_type = "application/octet-stream"
    body = payload.strip()
    match = _DATA_URL_RE.match(body)
    if match:
        mime_type = (match.group(1) or mime_type).lower()
        body = body[match.end() :]
    try:
        return base64.b64decode(body, validate=False), mime_type
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc


def _looks_like_docx(data: bytes) -> bool:
    if not data.startswith(b"PK"):
        return False
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            return any(name.startswith("word/") for name in archive.namelist())
    except zipfile.BadZipFile:
        return False


def resolve_format(mime_type: str | None, data: bytes = b"") -> DocumentFormat:
    """Choose the extraction path for a payload.

    The declared content type decides. Generic or missing types fall
    back to sniffing the leading bytes.

    Args:
        mime_type: Declared content type of the upload.
        data: Raw payload, used only for generic content types.

    Returns:
        The document format to extract as.

    Raises:
        UnsupportedFormat: If the content type is not recognized.
    """
    mime = (mime_type or "").split(";")[0].strip().lower()

    if mime in _PDF_MIME_TYPES:
        return DocumentFormat.PDF
    if mime == DOCX_MIME_TYPE or mime.endswith(_DOCX_SUBTYPE):
        return DocumentFormat.DOCX
    if mime.startswith("image/"):
        return DocumentFormat.IMAGE

    if mime in _GENERIC_MIME_TYPES:
        if data[:4] == b"%PDF":
            return DocumentFormat.PDF
        if _looks_like_docx(data):
            return DocumentFormat.DOCX
        return DocumentFormat.IMAGE

    raise UnsupportedFormat(f"Unrecognized content type {mime!r}")


class DocumentProcessor:
    """End-to-end text extraction for images, PDFs and Word documents.

    Args:
        config: Application configuration object.
        ocr_engine: Recognition engine to use. Defaults to a
            :class:`TesseractEngine` built from ``config.ocr``.
    """

    def __init__(self, config: AppConfig, ocr_engine: OcrEngine | None = None) -> None:
        self.config = config
        self.ocr_engine = ocr_engine or TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            language=config.ocr.language,
            psm=config.ocr.psm,
        )
        self.preprocessing = PreprocessingPipeline(config.preprocessing)
        self.pdf_handler = PDFHandler(render_scale=config.pdf.render_scale)
        self.pdf_extractor = PDFExtractor(
            self.pdf_handler,
            self.preprocessing,
            self.ocr_engine,
            text_layer_threshold=config.pdf.text_layer_threshold,
        )
        self.docx_handler = DocxHandler()

    def process(
        self,
        data: bytes,
        mime_type: str | None = None,
        timeout_seconds: float | None = None,
    ) -> ExtractionResult:
        """Extract normalized text from a document payload.

        Args:
            data: Raw document bytes.
            mime_type: Declared content type of the payload.
            timeout_seconds: Total OCR budget for this call. Defaults to
                ``config.ocr.timeout_seconds``.

        Returns:
            Extraction result; possibly empty, never an exception for
            degraded paths.

        Raises:
            DeadlineExceeded: If the time budget runs out.
        """
        if timeout_seconds is None:
            timeout_seconds = self.config.ocr.timeout_seconds
        deadline = Deadline(timeout_seconds)
        doc_format = self._resolve_format(mime_type, data)
        mime = (mime_type or "application/octet-stream").split(";")[0].strip().lower()

        logger.info(
            "Processing %d-byte payload as %s (declared %s)",
            len(data),
            doc_format.value,
            mime,
        )

        if doc_format == DocumentFormat.PDF:
            result = self._extract_pdf(data, deadline)
        elif doc_format == DocumentFormat.DOCX:
            result = self._extract_docx(data, mime)
        else:
            result = self._extract_image(data, mime, deadline)

        summary = result.summary
        logger.info(
            "Extraction via %s: %d pages, %d chars, %d words",
            result.method.value,
            summary.page_count,
            summary.char_count,
            summary.word_count,
        )
        return result

    @staticmethod
    def _resolve_format(mime_type: str | None, data: bytes) -> DocumentFormat:
        try:
            return resolve_format(mime_type, data)
        except UnsupportedFormat as exc:
            logger.warning("%s, treating payload as an image", exc)
            return DocumentFormat.IMAGE

    def _extract_pdf(self, data: bytes, deadline: Deadline) -> ExtractionResult:
        try:
            return self.pdf_extractor.extract(data, deadline)
        except DeadlineExceeded:
            raise
        except Exception as exc:
            logger.warning(
                "PDF extraction failed, retrying whole document as one image: %s",
                exc,
            )
            return self._extract_image(data, PDF_MIME_TYPE, deadline)

    def _extract_docx(self, data: bytes, mime: str) -> ExtractionResult:
        if mime in _GENERIC_MIME_TYPES:
            mime = DOCX_MIME_TYPE
        try:
            text = self.docx_handler.extract_text(data)
        except ExtractionFailure as exc:
            logger.warning("Word extraction failed, returning empty result: %s", exc)
            return empty_result(ExtractionMethod.DOCX_TEXT, mime)
        return single_page_result(ExtractionMethod.DOCX_TEXT, mime, text)

    def _extract_image(
        self, data: bytes, mime: str, deadline: Deadline
    ) -> ExtractionResult:
        try:
            deadline.check("image OCR")
            image = self._decode_image(data)
            prepared = self.preprocessing.process(image)
            text = self.ocr_engine.recognize(prepared, timeout=deadline.remaining())
        except DeadlineExceeded:
            raise
        except Exception as exc:
            logger.warning("Image OCR failed, returning empty page: %s", exc)
            text = ""
        return single_page_result(ExtractionMethod.IMAGE_OCR, mime, text)

    def _decode_image(self, data: bytes) -> np.ndarray:
        """Decode a payload into an RGB image array.

        PDFs that reach the image path (after a PDF failure) cannot be
        opened by Pillow, so their first page is rasterized instead.

        Raises:
            ExtractionFailure: If the payload is not a decodable image.
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                return np.array(img.convert("RGB"))
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            if data[:4] == b"%PDF":
                return self.pdf_handler.render_page(data, 1)
            raise ExtractionFailure(f"Could not decode image: {exc}") from exc
