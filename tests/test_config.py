"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from form_scraper.utils.config import (
    AppConfig,
    DocumentsConfig,
    InferenceConfig,
    OCRConfig,
    PDFConfig,
    PreprocessingConfig,
    load_config,
)


class TestPreprocessingConfig:
    """Tests for PreprocessingConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = PreprocessingConfig()
        assert cfg.contrast_factor == 1.2
        assert cfg.contrast_midpoint == 128.0
        assert cfg.binarize_threshold == 160.0

    def test_override(self) -> None:
        cfg = PreprocessingConfig(binarize_threshold=140)
        assert cfg.binarize_threshold == 140.0


class TestOCRConfig:
    """Tests for OCRConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.language == "eng"
        assert cfg.psm == 3
        assert cfg.tesseract_cmd is None
        assert cfg.timeout_seconds is None

    def test_custom_lang(self) -> None:
        cfg = OCRConfig(language="jpn", psm=6)
        assert cfg.language == "jpn"
        assert cfg.psm == 6


class TestPDFConfig:
    """Tests for PDFConfig constraints."""

    def test_defaults(self) -> None:
        cfg = PDFConfig()
        assert cfg.text_layer_threshold == 20
        assert cfg.render_scale == 2.0

    def test_rejects_non_positive_scale(self) -> None:
        with pytest.raises(ValidationError):
            PDFConfig(render_scale=0)


class TestInferenceConfig:
    """Tests for InferenceConfig defaults."""

    def test_defaults(self) -> None:
        cfg = InferenceConfig()
        assert cfg.fields_per_section == 5
        assert cfg.max_loose_fields == 10
        assert cfg.radio_lookahead == 4

    def test_rejects_zero_section_size(self) -> None:
        with pytest.raises(ValidationError):
            InferenceConfig(fields_per_section=0)


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.preprocessing, PreprocessingConfig)
        assert isinstance(cfg.ocr, OCRConfig)
        assert isinstance(cfg.documents, DocumentsConfig)
        assert cfg.documents.accepted_formats == ["pdf", "jpg", "jpeg", "png"]
        assert cfg.documents.max_size_bytes == 5 * 1024 * 1024
        assert cfg.log_level == "INFO"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_project_config(self, config_dir: Path) -> None:
        cfg = load_config(config_dir / "config.yaml")
        assert cfg.ocr.language == "eng"
        assert cfg.pdf.text_layer_threshold == 20
        assert cfg.inference.fields_per_section == 5

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert cfg == AppConfig()

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "ocr": {"language": "deu", "timeout_seconds": 30},
            "inference": {"fields_per_section": 3},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.ocr.language == "deu"
        assert cfg.ocr.timeout_seconds == 30.0
        assert cfg.inference.fields_per_section == 3
        assert cfg.log_level == "DEBUG"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(config_file) == AppConfig()
