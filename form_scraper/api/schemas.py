"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field

from form_scraper.extraction.field_types import FieldType
from form_scraper.ocr.results import ExtractionMethod


class PositionResponse(BaseModel):
    """Synthesized layout placeholder for a field."""

    page: int
    x: int
    y: int
    width: int
    height: int


class FieldResponse(BaseModel):
    """Response schema for a single inferred form field."""

    id: str
    label: str
    type: FieldType
    section_id: str
    position: PositionResponse
    required: bool
    options: list[str] | None = None
    validation_hint: str | None = None


class SectionResponse(BaseModel):
    """Response schema for a group of fields."""

    id: str
    title: str
    order: int
    field_ids: list[str]


class RequiredDocumentResponse(BaseModel):
    """Response schema for a supporting document the form asks for."""

    id: str
    name: str
    type: str
    description: str
    required: bool
    accepted_formats: list[str]
    max_size_bytes: int


class PageResponse(BaseModel):
    """Response schema for the text of one page."""

    index: int
    method: ExtractionMethod
    text: str
    char_count: int
    word_count: int


class SummaryResponse(BaseModel):
    """Document-level counts."""

    page_count: int
    char_count: int
    word_count: int


class ExtractionResponse(BaseModel):
    """Response schema for the text extraction stage."""

    method: ExtractionMethod
    mime_type: str
    pages: list[PageResponse]
    full_text: str
    summary: SummaryResponse


class MetadataResponse(BaseModel):
    """Form-level attributes."""

    title: str
    document_type: str
    difficulty: str
    complexity_score: float
    estimated_completion_minutes: int
    tags: list[str]


class FormStructureResponse(BaseModel):
    """Fields, sections and required documents inferred from text."""

    fields: list[FieldResponse]
    sections: list[SectionResponse]
    required_documents: list[RequiredDocumentResponse]


class ScrapeResponse(FormStructureResponse):
    """Response schema for a scraped form document."""

    metadata: MetadataResponse
    extraction: ExtractionResponse
    processing_time_ms: float = 0.0


class ParseTextRequest(BaseModel):
    """Request schema for inferring fields from already-extracted text."""

    text: str = Field(..., description="Plain document text, one line per row")


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool


class ScrapeDataUrlRequest(BaseModel):
    """Request schema for scraping a base64-encoded document."""

    data: str = Field(..., description="data:<mime>;base64,<payload> or bare base64")
    title: str = ""
    document_type: str = ""
    timeout_seconds: float | None = Field(default=None, gt=0)
