"""Preprocessing module for face rasters.

- Grayscale conversion with a fixed luminance formula
- Resampling to the canonical resolution shared by every encoding
"""

from __future__ import annotations

from typing import Any

import cv2
import numpy as np
import numpy.typing as npt

from .config import CANONICAL_SIZE

# ITU-R BT.601 luma coefficients
_LUMA_R = 0.299
_LUMA_G = 0.587
_LUMA_B = 0.114


def to_grayscale(raster: npt.NDArray[Any]) -> npt.NDArray[np.int32]:
    """Convert an RGB raster to integer intensities.

    Uses ``int(0.299*R + 0.587*G + 0.114*B)``, truncating rather than
    rounding. ``cv2.cvtColor`` rounds, so it is not used here.

    Args:
        raster: RGB image (H, W, 3), or an already grayscale (H, W) image.

    Returns:
        Grayscale image (H, W) as int32 in 0-255.
    """
    if raster.ndim == 2:
        return raster.astype(np.int32)

    r = raster[:, :, 0].astype(np.float64)
    g = raster[:, :, 1].astype(np.float64)
    b = raster[:, :, 2].astype(np.float64)
    luma = _LUMA_R * r + _LUMA_G * g + _LUMA_B * b
    return luma.astype(np.int32)


def resample_canonical(
    raster: npt.NDArray[Any], size: int = CANONICAL_SIZE
) -> npt.NDArray[Any]:
    """Resize a raster to exactly ``size`` x ``size`` pixels.

    Area interpolation is used when shrinking and bilinear when enlarging,
    so the result is a smooth, deterministic function of the input.

    Args:
        raster: Input image (H, W, 3) or (H, W).
        size: Canonical edge length.

    Returns:
        Resized image with the same dtype and channel count.
    """
    h, w = raster.shape[:2]
    if (h, w) == (size, size):
        return raster

    interpolation = cv2.INTER_AREA if h * w > size * size else cv2.INTER_LINEAR
    src = np.ascontiguousarray(raster)
    return cv2.resize(src, (size, size), interpolation=interpolation)
