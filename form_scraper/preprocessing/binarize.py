"""Grayscale, contrast stretch and fixed-threshold binarization.

Each step is a pure function from a pixel array to a new pixel array.
Intermediate values stay in float32 so the threshold comparison sees
the unrounded contrast-stretched intensity.
"""

import cv2
import numpy as np

from form_scraper.utils.logger import get_logger

logger = get_logger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert an image to grayscale by averaging its color channels.

    A plain channel mean is used rather than a luminance-weighted
    conversion, and any alpha channel is ignored.

    Args:
        image: Input image, either 2-D grayscale or H x W x C.

    Returns:
        Float32 grayscale image.
    """
    pixels = image.astype(np.float32)
    if pixels.ndim == 3:
        return pixels[..., :3].mean(axis=2)
    return pixels


def stretch_contrast(
    gray: np.ndarray,
    factor: float = 1.2,
    midpoint: float = 128.0,
) -> np.ndarray:
    """Apply a linear contrast stretch around a midpoint.

    Computes ``clamp((gray - midpoint) * factor + midpoint, 0, 255)``.

    Args:
        gray: Grayscale image.
        factor: Contrast multiplier.
        midpoint: Intensity left unchanged by the stretch.

    Returns:
        Float32 contrast-stretched image.
    """
    stretched = (gray.astype(np.float32) - midpoint) * factor + midpoint
    return np.clip(stretched, 0.0, 255.0)


def binarize_fixed(image: np.ndarray, threshold: float = 160.0) -> np.ndarray:
    """Binarize with a fixed threshold.

    Pixels strictly above ``threshold`` become white (255), all others
    black (0).

    Args:
        image: Grayscale image (float32 or uint8).
        threshold: Cut-off intensity.

    Returns:
        Binary uint8 image.
    """
    _, binary = cv2.threshold(
        image.astype(np.float32), threshold, 255.0, cv2.THRESH_BINARY
    )
    logger.debug("Applied fixed binarization (threshold=%.1f)", threshold)
    return binary.astype(np.uint8)
