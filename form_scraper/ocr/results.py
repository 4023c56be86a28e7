"""Unified text-extraction result model.

Every extraction path (PDF text layer, PDF OCR, image OCR, Word) produces
the same immutable :class:`ExtractionResult`. Aggregate text and counts
are derived from the pages, never stored separately.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum

PAGE_SEPARATOR = "\n\n"

_WORD_RE = re.compile(r"\S+")


class ExtractionMethod(StrEnum):
    """How the text of a page (or a whole document) was obtained."""

    PDF_TEXT = "pdf-text"
    PDF_OCR = "pdf-ocr"
    IMAGE_OCR = "image-ocr"
    DOCX_TEXT = "docx"


def count_words(text: str) -> int:
    """Count whitespace-separated tokens in ``text``."""
    return len(_WORD_RE.findall(text))


@dataclass(frozen=True)
class Page:
    """Text recovered from a single page."""

    index: int
    method: ExtractionMethod
    text: str

    @property
    def char_count(self) -> int:
        return len(self.text)

    @property
    def word_count(self) -> int:
        return count_words(self.text)

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "method": self.method.value,
            "text": self.text,
            "char_count": self.char_count,
            "word_count": self.word_count,
        }


@dataclass(frozen=True)
class ExtractionSummary:
    """Document-level counts derived from the full text."""

    page_count: int
    char_count: int
    word_count: int


@dataclass(frozen=True)
class ExtractionResult:
    """Complete, immutable text extraction result for one document."""

    method: ExtractionMethod
    mime_type: str
    pages: tuple[Page, ...] = field(default_factory=tuple)

    @property
    def full_text(self) -> str:
        """Page texts in page order, separated by one blank line."""
        return PAGE_SEPARATOR.join(page.text for page in self.pages)

    @property
    def summary(self) -> ExtractionSummary:
        text = self.full_text
        return ExtractionSummary(
            page_count=len(self.pages),
            char_count=len(text),
            word_count=count_words(text),
        )

    @property
    def is_empty(self) -> bool:
        return not self.full_text.strip()

    def to_dict(self) -> dict[str, object]:
        summary = self.summary
        return {
            "method": self.method.value,
            "mime_type": self.mime_type,
            "pages": [page.to_dict() for page in self.pages],
            "full_text": self.full_text,
            "summary": {
                "page_count": summary.page_count,
                "char_count": summary.char_count,
                "word_count": summary.word_count,
            },
        }


def single_page_result(
    method: ExtractionMethod, mime_type: str, text: str
) -> ExtractionResult:
    """Build a one-page result, as produced by the image and Word paths."""
    return ExtractionResult(
        method=method,
        mime_type=mime_type,
        pages=(Page(index=1, method=method, text=text),),
    )


def empty_result(method: ExtractionMethod, mime_type: str) -> ExtractionResult:
    """Build a result with no pages, used when a container cannot be read."""
    return ExtractionResult(method=method, mime_type=mime_type, pages=())
