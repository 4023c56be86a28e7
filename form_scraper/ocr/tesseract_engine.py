"""Recognition engine capability and its Tesseract implementation.

The pipeline only depends on the :class:`OcrEngine` protocol, so tests
can pass a deterministic fake and deployments can swap language packs
without touching extraction logic.
"""

from typing import Protocol, runtime_checkable

import numpy as np
import pytesseract
from pytesseract import TesseractError, TesseractNotFoundError
from PIL import Image

from form_scraper.utils.errors import DeadlineExceeded, OCRError
from form_scraper.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class OcrEngine(Protocol):
    """Anything that can turn a prepared page image into plain text."""

    language: str

    def recognize(self, image: np.ndarray, timeout: float | None = None) -> str:
        """Recognize text in ``image``.

        Args:
            image: Preprocessed page image.
            timeout: Seconds the call may take. ``None`` means unbounded.

        Returns:
            Recognized plain text (possibly empty).

        Raises:
            OCRError: On unrecoverable engine failure.
            DeadlineExceeded: When ``timeout`` elapses.
        """
        ...


class TesseractEngine:
    """Wrapper around Tesseract OCR for page text recognition.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        language: Tesseract language pack to recognize with.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        language: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.language = language
        self.psm = psm

    def recognize(self, image: np.ndarray, timeout: float | None = None) -> str:
        """Extract plain text from an image.

        Args:
            image: Input image as a numpy array.
            timeout: Seconds before the Tesseract subprocess is killed.

        Returns:
            Recognized text.

        Raises:
            OCRError: If Tesseract fails or is not installed.
            DeadlineExceeded: If the call runs past ``timeout``.
        """
        if timeout is not None and timeout <= 0:
            raise DeadlineExceeded("No time left for OCR call")

        pil_image = Image.fromarray(image)
        try:
            text = pytesseract.image_to_string(
                pil_image,
                lang=self.language,
                config=f"--psm {self.psm}",
                timeout=timeout or 0,
            )
        except (TesseractError, TesseractNotFoundError) as exc:
            raise OCRError(f"Tesseract failed: {exc}") from exc
        except RuntimeError as exc:
            # pytesseract signals a killed subprocess with a bare RuntimeError
            if timeout and "timeout" in str(exc).lower():
                raise DeadlineExceeded(f"OCR timed out after {timeout:.1f}s") from exc
            raise OCRError(f"Tesseract failed: {exc}") from exc

        logger.info(
            "OCR recognized %d characters (lang=%s, psm=%d)",
            len(text),
            self.language,
            self.psm,
        )
        return text
