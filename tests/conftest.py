"""Shared test fixtures for the form scraper test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from form_scraper.utils.config import AppConfig


class FakeOcrEngine:
    """Deterministic stand-in for Tesseract.

    Returns queued texts in order (the last one repeats) and records
    every image and timeout it was called with.
    """

    language = "eng"

    def __init__(self, *texts: str, error: Exception | None = None) -> None:
        self.texts = list(texts) or [""]
        self.error = error
        self.images: list[np.ndarray] = []
        self.timeouts: list[float | None] = []

    def recognize(self, image: np.ndarray, timeout: float | None = None) -> str:
        self.images.append(image)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        if len(self.texts) > 1:
            return self.texts.pop(0)
        return self.texts[0]


def make_png_bytes(width: int = 200, height: int = 100) -> bytes:
    """Encode a white RGB image as PNG bytes."""
    img = Image.fromarray(np.full((height, width, 3), 255, dtype=np.uint8))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a simple synthetic RGB test image."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (255, 255, 255)
    return image


@pytest.fixture
def png_bytes() -> bytes:
    return make_png_bytes()


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
