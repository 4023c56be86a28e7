"""Tests for the image preprocessing pipeline."""

import numpy as np
import pytest

from form_scraper.preprocessing.binarize import (
    binarize_fixed,
    stretch_contrast,
    to_grayscale,
)
from form_scraper.preprocessing.pipeline import (
    PreprocessingPipeline,
    calculate_contrast,
)
from form_scraper.utils.config import PreprocessingConfig


class TestGrayscale:
    """Tests for channel-average grayscale conversion."""

    def test_averages_rgb_channels(self) -> None:
        image = np.array([[[255, 0, 0], [30, 60, 90]]], dtype=np.uint8)
        gray = to_grayscale(image)
        assert gray.shape == (1, 2)
        assert gray[0, 0] == pytest.approx(85.0)
        assert gray[0, 1] == pytest.approx(60.0)

    def test_ignores_alpha(self) -> None:
        image = np.array([[[90, 90, 90, 0]]], dtype=np.uint8)
        assert to_grayscale(image)[0, 0] == pytest.approx(90.0)

    def test_grayscale_passthrough(self, sample_image: np.ndarray) -> None:
        gray = to_grayscale(sample_image)
        assert gray.dtype == np.float32
        np.testing.assert_array_equal(gray, sample_image.astype(np.float32))


class TestContrastStretch:
    """Tests for the linear contrast stretch."""

    def test_midpoint_unchanged(self) -> None:
        gray = np.array([[128.0]], dtype=np.float32)
        assert stretch_contrast(gray)[0, 0] == pytest.approx(128.0)

    def test_stretch_and_clip(self) -> None:
        gray = np.array([[0.0, 150.0, 255.0]], dtype=np.float32)
        stretched = stretch_contrast(gray, factor=1.2, midpoint=128.0)
        assert stretched[0, 0] == 0.0
        assert stretched[0, 1] == pytest.approx(154.4, abs=1e-3)
        assert stretched[0, 2] == 255.0


class TestBinarizeFixed:
    """Tests for fixed-threshold binarization."""

    def test_strictly_greater_is_white(self) -> None:
        image = np.array([[159.9, 160.0, 160.5]], dtype=np.float32)
        binary = binarize_fixed(image, threshold=160.0)
        assert binary.dtype == np.uint8
        assert binary.tolist() == [[0, 0, 255]]

    def test_uint8_input(self, sample_image: np.ndarray) -> None:
        binary = binarize_fixed(sample_image)
        assert set(np.unique(binary)) == {0, 255}


class TestPreprocessingPipeline:
    """Tests for the composed preprocessing pipeline."""

    def test_output_is_binary_and_same_size(
        self, sample_color_image: np.ndarray
    ) -> None:
        result = PreprocessingPipeline().process(sample_color_image)
        assert result.shape == sample_color_image.shape[:2]
        assert result.dtype == np.uint8
        assert set(np.unique(result)) <= {0, 255}

    def test_stretch_applied_before_threshold(self) -> None:
        # 150 stays below 160 after stretching; 160 is lifted above it
        image = np.array([[[150, 150, 150], [160, 160, 160]]], dtype=np.uint8)
        result = PreprocessingPipeline().process(image)
        assert result.tolist() == [[0, 255]]

    def test_custom_threshold(self) -> None:
        image = np.array([[[150, 150, 150]]], dtype=np.uint8)
        config = PreprocessingConfig(binarize_threshold=100)
        assert PreprocessingPipeline(config).process(image).tolist() == [[255]]

    def test_deterministic(self, sample_color_image: np.ndarray) -> None:
        pipeline = PreprocessingPipeline()
        first = pipeline.process(sample_color_image)
        second = pipeline.process(sample_color_image)
        np.testing.assert_array_equal(first, second)


class TestCalculateContrast:
    """Tests for the contrast score."""

    def test_flat_image_has_zero_contrast(self) -> None:
        assert calculate_contrast(np.full((10, 10), 77, dtype=np.uint8)) == 0.0

    def test_two_tone_image(self, sample_image: np.ndarray) -> None:
        assert calculate_contrast(sample_image) > 0.0
