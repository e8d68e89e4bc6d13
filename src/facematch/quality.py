"""
Face image quality gate.

Rejects images that are unlikely to yield a reliable encoding, based on:
- Size (width and height in pixels)
- Contrast (grayscale intensity range)
- Brightness (mean grayscale intensity)
- Sharpness (mean gradient magnitude)
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import numpy.typing as npt

from .config import Config
from .decoder import decode_image
from .errors import (
    FaceImageError,
    ImageTooLarge,
    ImageTooSmall,
    LowContrast,
    PoorBrightness,
    TooBlurry,
)
from .models import QualityReport
from .preprocessing import to_grayscale

logger = logging.getLogger(__name__)


def compute_sharpness(gray: npt.NDArray[Any]) -> float:
    """
    Compute sharpness as the mean gradient magnitude over interior pixels.

    Gradients are central differences: ``gx = right - left`` and
    ``gy = bottom - top``.

    Args:
        gray: Grayscale image (H, W)

    Returns:
        Mean gradient magnitude, 0.0 if the image has no interior pixels
    """
    h, w = gray.shape[:2]
    if h < 3 or w < 3:
        return 0.0

    g = gray.astype(np.float64)
    gx = g[1:-1, 2:] - g[1:-1, :-2]
    gy = g[2:, 1:-1] - g[:-2, 1:-1]
    return float(np.sqrt(gx * gx + gy * gy).mean())


def check_quality(raster: npt.NDArray[Any], cfg: Config) -> QualityReport:
    """
    Check if an image is acceptable for feature extraction.

    Checks run in order and the first failure is raised:
    - width and height within [min_dimension, max_dimension]
    - contrast >= min_contrast
    - brightness within [min_brightness, max_brightness]
    - sharpness >= min_sharpness

    Args:
        raster: Decoded RGB image (H, W, 3)
        cfg: Service configuration

    Returns:
        Measurements of the accepted image

    Raises:
        ImageTooSmall, ImageTooLarge, LowContrast, PoorBrightness, TooBlurry
    """
    height, width = raster.shape[:2]

    if width < cfg.min_dimension or height < cfg.min_dimension:
        msg = f"Image too small: {width}x{height} (minimum {cfg.min_dimension}x{cfg.min_dimension})"
        raise ImageTooSmall(msg)

    if width > cfg.max_dimension or height > cfg.max_dimension:
        msg = f"Image too large: {width}x{height} (maximum {cfg.max_dimension}x{cfg.max_dimension})"
        raise ImageTooLarge(msg)

    gray = to_grayscale(raster)

    contrast = int(gray.max()) - int(gray.min())
    if contrast < cfg.min_contrast:
        msg = f"Low contrast ({contrast} < {cfg.min_contrast})"
        raise LowContrast(msg)

    brightness = float(gray.mean())
    if not cfg.min_brightness <= brightness <= cfg.max_brightness:
        msg = (
            f"Poor brightness ({brightness:.1f} not in range "
            f"{cfg.min_brightness:g}-{cfg.max_brightness:g})"
        )
        raise PoorBrightness(msg)

    sharpness = compute_sharpness(gray)
    if sharpness < cfg.min_sharpness:
        msg = f"Image too blurry (sharpness: {sharpness:.2f} < {cfg.min_sharpness:g})"
        raise TooBlurry(msg)

    logger.debug(
        f"Quality metrics - Contrast: {contrast}, Brightness: {brightness:.1f}, "
        f"Sharpness: {sharpness:.2f}"
    )
    return QualityReport(
        width=width,
        height=height,
        contrast=contrast,
        brightness=brightness,
        sharpness=sharpness,
    )


def is_acceptable(payload: str, cfg: Config) -> bool:
    """
    Decode a base64 payload and report whether it passes the quality gate.

    Args:
        payload: Base64 image text, optionally data-URL prefixed
        cfg: Service configuration

    Returns:
        True if the image decodes and passes every check
    """
    try:
        raster = decode_image(payload)
        check_quality(raster, cfg)
    except FaceImageError as e:
        logger.info(f"Image validation failed: {e}")
        return False
    return True
