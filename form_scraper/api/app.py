"""FastAPI application for the form scraper.

Provides REST endpoints for scraping uploaded form documents, inferring
fields from plain text, and health checks. Results are returned to the
caller; nothing is stored server-side.
"""

import shutil
import time
from functools import lru_cache
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from form_scraper import __version__
from form_scraper.ocr.document_processor import decode_data_url
from form_scraper.scraper import FormScraper
from form_scraper.utils.config import load_config
from form_scraper.utils.errors import DeadlineExceeded
from form_scraper.utils.logger import get_logger

from .schemas import (
    FormStructureResponse,
    HealthResponse,
    ParseTextRequest,
    ScrapeDataUrlRequest,
    ScrapeResponse,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Form Scraper API",
    description="Turn scanned or digital government forms into structured fields",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_scraper() -> FormScraper:
    """Build the shared scraper from configuration on first use."""
    return FormScraper(load_config())


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=shutil.which("tesseract") is not None,
    )


def _run_scrape(
    content: bytes,
    mime_type: str | None,
    title: str,
    document_type: str,
    timeout_seconds: float | None,
) -> ScrapeResponse:
    start_time = time.time()
    try:
        result = get_scraper().scrape(
            content,
            mime_type,
            title=title,
            document_type=document_type,
            timeout_seconds=timeout_seconds,
        )
    except DeadlineExceeded as exc:
        logger.warning("Scrape of %r timed out: %s", title, exc)
        raise HTTPException(status_code=504, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Scrape failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    response = ScrapeResponse.model_validate(result.to_dict())
    response.processing_time_ms = (time.time() - start_time) * 1000
    return response


@app.post("/scrape", response_model=ScrapeResponse)
def scrape_document(
    file: Annotated[UploadFile, File(...)],
    title: Annotated[str, Query()] = "",
    document_type: Annotated[str, Query()] = "",
    timeout_seconds: Annotated[float | None, Query(gt=0)] = None,
) -> ScrapeResponse:
    """Scrape form fields from an uploaded document.

    Args:
        file: Uploaded image, PDF or Word document.
        title: Form title, passed through unchanged.
        document_type: Document type label, passed through unchanged.
        timeout_seconds: OCR time budget for this document.

    Returns:
        Extracted text, inferred fields, sections and required documents.
    """
    content = file.file.read()
    return _run_scrape(
        content,
        file.content_type,
        title or file.filename or "",
        document_type,
        timeout_seconds,
    )


@app.post("/scrape-data-url", response_model=ScrapeResponse)
def scrape_data_url(request: ScrapeDataUrlRequest) -> ScrapeResponse:
    """Scrape form fields from a base64 data URL payload."""
    try:
        content, mime_type = decode_data_url(request.data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _run_scrape(
        content,
        mime_type,
        request.title,
        request.document_type,
        request.timeout_seconds,
    )


@app.post("/parse-text", response_model=FormStructureResponse)
async def parse_text(request: ParseTextRequest) -> FormStructureResponse:
    """Infer fields, sections and required documents from plain text."""
    structure = get_scraper().analyze_text(request.text)
    return FormStructureResponse.model_validate(structure.to_dict())
