"""Tests for the OCR engine, extraction result model and deadlines."""

import time
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from pytesseract import TesseractError, TesseractNotFoundError

from form_scraper.ocr.results import (
    ExtractionMethod,
    ExtractionResult,
    Page,
    count_words,
    empty_result,
    single_page_result,
)
from form_scraper.ocr.tesseract_engine import OcrEngine, TesseractEngine
from form_scraper.utils.deadline import Deadline
from form_scraper.utils.errors import DeadlineExceeded, OCRError


class TestTesseractEngine:
    """Tests for the TesseractEngine class (mocked)."""

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_recognize(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.return_value = "Full Name: ____"

        engine = TesseractEngine(language="eng", psm=6)
        text = engine.recognize(np.zeros((100, 200), dtype=np.uint8))

        assert text == "Full Name: ____"
        _, kwargs = mock_pytesseract.image_to_string.call_args
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == "--psm 6"
        assert kwargs["timeout"] == 0

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_timeout_forwarded(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.return_value = ""
        TesseractEngine().recognize(np.zeros((10, 10), dtype=np.uint8), timeout=2.5)
        _, kwargs = mock_pytesseract.image_to_string.call_args
        assert kwargs["timeout"] == 2.5

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_custom_tesseract_cmd(self, mock_pytesseract: MagicMock) -> None:
        TesseractEngine(tesseract_cmd="/opt/tesseract")
        assert mock_pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract"

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_no_time_left(self, mock_pytesseract: MagicMock) -> None:
        with pytest.raises(DeadlineExceeded):
            TesseractEngine().recognize(np.zeros((10, 10), dtype=np.uint8), timeout=0)
        mock_pytesseract.image_to_string.assert_not_called()

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_killed_subprocess_maps_to_deadline(
        self, mock_pytesseract: MagicMock
    ) -> None:
        mock_pytesseract.image_to_string.side_effect = RuntimeError(
            "Tesseract process timeout"
        )
        with pytest.raises(DeadlineExceeded):
            TesseractEngine().recognize(np.zeros((10, 10), dtype=np.uint8), timeout=1)

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_tesseract_error_maps_to_ocr_error(
        self, mock_pytesseract: MagicMock
    ) -> None:
        mock_pytesseract.image_to_string.side_effect = TesseractError(1, "bad lang")
        with pytest.raises(OCRError):
            TesseractEngine().recognize(np.zeros((10, 10), dtype=np.uint8), timeout=1)

    @patch("form_scraper.ocr.tesseract_engine.pytesseract")
    def test_missing_binary(self, mock_pytesseract: MagicMock) -> None:
        mock_pytesseract.image_to_string.side_effect = TesseractNotFoundError()
        with pytest.raises(OCRError):
            TesseractEngine().recognize(np.zeros((10, 10), dtype=np.uint8))

    def test_satisfies_protocol(self) -> None:
        assert isinstance(TesseractEngine(), OcrEngine)


class TestExtractionResult:
    """Tests for derived text and counts."""

    def test_full_text_joins_pages_with_blank_line(self) -> None:
        result = ExtractionResult(
            method=ExtractionMethod.PDF_TEXT,
            mime_type="application/pdf",
            pages=(
                Page(1, ExtractionMethod.PDF_TEXT, "Name: ____"),
                Page(2, ExtractionMethod.PDF_OCR, "Signature"),
            ),
        )
        assert result.full_text == "Name: ____\n\nSignature"
        summary = result.summary
        assert summary.page_count == 2
        assert summary.char_count == len(result.full_text)
        assert summary.word_count == 3

    def test_page_counts(self) -> None:
        page = Page(1, ExtractionMethod.IMAGE_OCR, "two  words\n")
        assert page.char_count == 11
        assert page.word_count == 2

    def test_single_page_result(self) -> None:
        result = single_page_result(ExtractionMethod.IMAGE_OCR, "image/png", "hi")
        assert result.summary.page_count == 1
        assert result.pages[0].index == 1
        assert result.pages[0].method == ExtractionMethod.IMAGE_OCR

    def test_empty_result(self) -> None:
        result = empty_result(ExtractionMethod.DOCX_TEXT, "application/msword")
        assert result.is_empty
        assert result.full_text == ""
        assert result.summary.word_count == 0

    def test_to_dict_uses_wire_values(self) -> None:
        data = single_page_result(ExtractionMethod.PDF_OCR, "application/pdf", "x").to_dict()
        assert data["method"] == "pdf-ocr"
        assert data["pages"][0]["method"] == "pdf-ocr"
        assert data["summary"] == {"page_count": 1, "char_count": 1, "word_count": 1}

    def test_count_words(self) -> None:
        assert count_words("") == 0
        assert count_words("  a\tb\nc  ") == 3


class TestDeadline:
    """Tests for the monotonic deadline."""

    def test_unbounded(self) -> None:
        deadline = Deadline()
        assert deadline.remaining() is None
        assert not deadline.expired()
        deadline.check()

    def test_remaining_decreases(self) -> None:
        deadline = Deadline(60)
        assert 0 < deadline.remaining() <= 60

    def test_expired_deadline_raises(self) -> None:
        deadline = Deadline(0.001)
        time.sleep(0.01)
        assert deadline.remaining() == 0.0
        with pytest.raises(DeadlineExceeded, match="page 3"):
            deadline.check("page 3")
