"""Top-level form scraping: document bytes in, structured form out.

:class:`FormScraper` is a pure pipeline with no storage side effects:
text extraction, field inference, sectioning and required-document
detection. Persisting the result is left to the caller.
"""

import math
import re
from dataclasses import dataclass

from form_scraper.extraction.field_inference import FieldInferenceEngine
from form_scraper.extraction.required_documents import (
    RequiredDocumentEntry,
    RequiredDocumentExtractor,
)
from form_scraper.extraction.sections import (
    FormFieldDescriptor,
    Section,
    build_descriptors,
    group_sections,
)
from form_scraper.ocr.document_processor import DocumentProcessor
from form_scraper.ocr.results import ExtractionResult
from form_scraper.ocr.tesseract_engine import OcrEngine
from form_scraper.utils.config import AppConfig
from form_scraper.utils.logger import get_logger

logger = get_logger(__name__)

# (substring of the lowercased label, normalized document type)
_DOCUMENT_TYPE_RULES: list[tuple[tuple[str, ...], str]] = [
    (("passport",), "passport"),
    (("pan",), "pan-card"),
    (("license", "licence", "driving"), "driving-license"),
    (("voter",), "voter-id"),
    (("citizenship",), "citizenship"),
    (("business",), "business-registration"),
    (("tax",), "tax-return"),
    (("land",), "land-registration"),
]


def normalize_document_type(label: str) -> str:
    """Map a free-form document type label onto a known type slug.

    Keywords match whole words only, so "Company" is not a PAN card.
    """
    words = set(re.findall(r"[a-z]+", label.lower()))
    for keywords, doc_type in _DOCUMENT_TYPE_RULES:
        if any(keyword in words or f"{keyword}s" in words for keyword in keywords):
            return doc_type
    return "other"


@dataclass(frozen=True)
class FormMetadata:
    """Form-level attributes derived from the inferred fields."""

    title: str
    document_type: str
    difficulty: str
    complexity_score: float
    estimated_completion_minutes: int
    tags: tuple[str, ...]

    @classmethod
    def from_fields(
        cls, title: str, document_type: str, field_count: int
    ) -> "FormMetadata":
        if field_count > 10:
            difficulty, complexity = "hard", 0.8
        elif field_count > 5:
            difficulty, complexity = "medium", 0.5
        else:
            difficulty, complexity = "easy", 0.3

        tags = [document_type.lower()] if document_type else []
        tags.append("manually-parsed")
        return cls(
            title=title,
            document_type=normalize_document_type(document_type),
            difficulty=difficulty,
            complexity_score=complexity,
            estimated_completion_minutes=max(5, math.ceil(field_count / 2)),
            tags=tuple(tags),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "document_type": self.document_type,
            "difficulty": self.difficulty,
            "complexity_score": self.complexity_score,
            "estimated_completion_minutes": self.estimated_completion_minutes,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class FormStructure:
    """Fields, sections and required documents inferred from text."""

    fields: tuple[FormFieldDescriptor, ...]
    sections: tuple[Section, ...]
    required_documents: tuple[RequiredDocumentEntry, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "fields": [f.to_dict() for f in self.fields],
            "sections": [s.to_dict() for s in self.sections],
            "required_documents": [d.to_dict() for d in self.required_documents],
        }


@dataclass(frozen=True)
class ScrapeResult:
    """Complete output of one scraping call."""

    extraction: ExtractionResult
    structure: FormStructure
    metadata: FormMetadata

    @property
    def fields(self) -> tuple[FormFieldDescriptor, ...]:
        return self.structure.fields

    @property
    def sections(self) -> tuple[Section, ...]:
        return self.structure.sections

    @property
    def required_documents(self) -> tuple[RequiredDocumentEntry, ...]:
        return self.structure.required_documents

    def to_dict(self) -> dict[str, object]:
        return {
            "metadata": self.metadata.to_dict(),
            "extraction": self.extraction.to_dict(),
            **self.structure.to_dict(),
        }


class FormScraper:
    """Turns an uploaded form document into structured form fields.

    Args:
        config: Application configuration object.
        ocr_engine: Recognition engine override, mainly for tests and
            alternate language packs.
    """

    def __init__(self, config: AppConfig, ocr_engine: OcrEngine | None = None) -> None:
        self.config = config
        self.processor = DocumentProcessor(config, ocr_engine=ocr_engine)
        self.inference = FieldInferenceEngine(
            max_loose_fields=config.inference.max_loose_fields,
            radio_lookahead=config.inference.radio_lookahead,
        )
        self.documents = RequiredDocumentExtractor(
            accepted_formats=config.documents.accepted_formats,
            max_size_bytes=config.documents.max_size_bytes,
        )

    def analyze_text(self, text: str) -> FormStructure:
        """Infer fields, sections and required documents from plain text.

        Args:
            text: Unified document text.

        Returns:
            The inferred form structure. ``fields`` is never empty.
        """
        per_section = self.config.inference.fields_per_section
        candidates = self.inference.infer(text)
        fields = build_descriptors(candidates, fields_per_section=per_section)
        sections = group_sections(fields, fields_per_section=per_section)
        documents = self.documents.extract(text)
        return FormStructure(
            fields=tuple(fields),
            sections=tuple(sections),
            required_documents=tuple(documents),
        )

    def scrape(
        self,
        data: bytes,
        mime_type: str | None = None,
        title: str = "",
        document_type: str = "",
        timeout_seconds: float | None = None,
    ) -> ScrapeResult:
        """Extract text from a document and infer its form structure.

        Args:
            data: Raw document bytes.
            mime_type: Declared content type of the document.
            title: Pass-through form title.
            document_type: Pass-through document type label.
            timeout_seconds: OCR time budget for the whole document.

        Returns:
            Extraction result, fields, sections, required documents and
            form metadata.

        Raises:
            DeadlineExceeded: If the time budget runs out.
        """
        extraction = self.processor.process(
            data, mime_type, timeout_seconds=timeout_seconds
        )
        structure = self.analyze_text(extraction.full_text)
        metadata = FormMetadata.from_fields(
            title, document_type, field_count=len(structure.fields)
        )

        logger.info(
            "Scraped %r: %d fields, %d sections, %d required documents (%s)",
            title or "untitled form",
            len(structure.fields),
            len(structure.sections),
            len(structure.required_documents),
            metadata.difficulty,
        )
        return ScrapeResult(extraction=extraction, structure=structure, metadata=metadata)
