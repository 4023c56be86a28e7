"""Configuration management for the form scraper.

Loads and validates YAML configuration with sensible defaults
for preprocessing, OCR, PDF handling, field inference, and
required-document settings.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PreprocessingConfig(BaseModel):
    """Configuration for the grayscale/contrast/threshold image transform."""

    contrast_factor: float = 1.2
    contrast_midpoint: float = 128.0
    binarize_threshold: float = 160.0


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    language: str = "eng"
    psm: int = 3
    timeout_seconds: float | None = None


class PDFConfig(BaseModel):
    """Configuration for PDF text-layer and rasterization handling."""

    text_layer_threshold: int = Field(default=20, ge=0)
    render_scale: float = Field(default=2.0, gt=0)


class InferenceConfig(BaseModel):
    """Configuration for form-field inference and sectioning."""

    fields_per_section: int = Field(default=5, ge=1)
    max_loose_fields: int = Field(default=10, ge=1)
    radio_lookahead: int = Field(default=4, ge=0)


class DocumentsConfig(BaseModel):
    """Configuration for required-document entries."""

    accepted_formats: list[str] = Field(
        default_factory=lambda: ["pdf", "jpg", "jpeg", "png"]
    )
    max_size_bytes: int = 5 * 1024 * 1024


class AppConfig(BaseModel):
    """Top-level application configuration."""

    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    pdf: PDFConfig = Field(default_factory=PDFConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    documents: DocumentsConfig = Field(default_factory=DocumentsConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
