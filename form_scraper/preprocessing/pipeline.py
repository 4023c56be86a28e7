"""Image preprocessing applied before every OCR call.

Turns a raster image into a pure black/white page: channel-average
grayscale, linear contrast stretch, then a fixed threshold.
"""

import numpy as np

from form_scraper.utils.config import PreprocessingConfig
from form_scraper.utils.logger import get_logger

from .binarize import binarize_fixed, stretch_contrast, to_grayscale

logger = get_logger(__name__)


def calculate_contrast(image: np.ndarray) -> float:
    """Calculate image contrast as the standard deviation of pixel intensities.

    Args:
        image: Input image (color or grayscale).

    Returns:
        Contrast score (higher means more contrast).
    """
    return float(to_grayscale(image).std())


class PreprocessingPipeline:
    """Deterministic pixel transform for recognition accuracy.

    Holds no state beyond its configuration, so one instance can be
    shared by every page of every request.

    Args:
        config: Contrast and threshold parameters.
    """

    def __init__(self, config: PreprocessingConfig | None = None) -> None:
        self.config = config or PreprocessingConfig()

    def process(self, image: np.ndarray) -> np.ndarray:
        """Run grayscale, contrast stretch and binarization on an image.

        Args:
            image: Input image (RGB, RGBA or grayscale).

        Returns:
            Binary uint8 image with values 0 or 255.
        """
        gray = to_grayscale(image)
        stretched = stretch_contrast(
            gray,
            factor=self.config.contrast_factor,
            midpoint=self.config.contrast_midpoint,
        )
        result = binarize_fixed(stretched, threshold=self.config.binarize_threshold)

        logger.debug(
            "Preprocessed %dx%d image: contrast %.1f->%.1f",
            result.shape[1],
            result.shape[0],
            calculate_contrast(image),
            calculate_contrast(result),
        )
        return result
