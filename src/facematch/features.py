"""Face feature extraction using four independent families (intensity, LBP, edges, texture)."""


import logging
from typing import Any

import numpy as np
import numpy.typing as npt

from .config import CANONICAL_SIZE
from .models import FeatureSet
from .preprocessing import resample_canonical, to_grayscale

logger = logging.getLogger(__name__)

# Constants for magic values
HISTOGRAM_BINS = 256
LBP_BINS = 256
EDGE_BINS = 8
TEXTURE_GRID = 4
TEXTURE_BLOCKS = TEXTURE_GRID * TEXTURE_GRID

_EDGE_BIN_WIDTH = 2 * np.pi / EDGE_BINS

# (dy, dx, bit) in clockwise order starting at the top-left neighbour
_LBP_NEIGHBOURS = (
    (-1, -1, 1),
    (-1, 0, 2),
    (-1, 1, 4),
    (0, 1, 8),
    (1, 1, 16),
    (1, 0, 32),
    (1, -1, 64),
    (0, -1, 128),
)


class FeatureExtractor:
    """Deterministic feature extraction over a canonical face raster.

    This class computes four feature families:
    - Intensity histogram (raw counts)
    - Local binary pattern histogram
    - Gradient orientation histogram
    - Block-wise texture variance on a 4x4 grid

    Every raster is resampled to the same canonical size first, so raw
    histogram counts stay comparable between encodings.
    """

    def __init__(self, canonical_size: int = CANONICAL_SIZE):
        """Initialize extractor.

        Args:
            canonical_size: Edge length every raster is resampled to. Default 256.
        """
        self.canonical_size = canonical_size

    def compute_histogram(self, gray: npt.NDArray[Any]) -> npt.NDArray[np.int64]:
        """Count occurrences of each intensity value.

        Args:
            gray: Grayscale image (H, W) with values 0-255.

        Returns:
            Raw counts (256 bins), not normalized.
        """
        counts = np.bincount(gray.ravel().astype(np.int64), minlength=HISTOGRAM_BINS)
        return counts[:HISTOGRAM_BINS].astype(np.int64)

    def compute_lbp(self, gray: npt.NDArray[Any]) -> npt.NDArray[np.float64]:
        """Compute the local binary pattern histogram.

        Each interior pixel gets an 8-bit code: bit i is set when the i-th
        neighbour (clockwise from top-left) is >= the centre pixel.

        Args:
            gray: Grayscale image (H, W).

        Returns:
            Code frequencies (256 bins) divided by the interior pixel count.
        """
        h, w = gray.shape[:2]
        if h < 3 or w < 3:
            return np.zeros(LBP_BINS, dtype=np.float64)

        g = gray.astype(np.int32)
        center = g[1:-1, 1:-1]
        codes = np.zeros_like(center)

        for dy, dx, bit in _LBP_NEIGHBOURS:
            neighbour = g[1 + dy:h - 1 + dy, 1 + dx:w - 1 + dx]
            codes |= np.where(neighbour >= center, bit, 0).astype(np.int32)

        hist = np.bincount(codes.ravel(), minlength=LBP_BINS).astype(np.float64)
        return hist / float((h - 2) * (w - 2))

    def compute_edge_orientation(self, gray: npt.NDArray[Any]) -> npt.NDArray[np.float64]:
        """Compute a magnitude-weighted gradient orientation histogram.

        Gradients are central differences over interior pixels. Angles from
        atan2 in [-pi, pi] fall into 8 bins of 45 degrees.

        Args:
            gray: Grayscale image (H, W).

        Returns:
            Orientation histogram (8 bins) summing to 1, or zeros for a flat image.
        """
        h, w = gray.shape[:2]
        if h < 3 or w < 3:
            return np.zeros(EDGE_BINS, dtype=np.float64)

        g = gray.astype(np.float64)
        gx = g[1:-1, 2:] - g[1:-1, :-2]
        gy = g[2:, 1:-1] - g[:-2, 1:-1]

        magnitude = np.sqrt(gx * gx + gy * gy)
        angle = np.arctan2(gy, gx)
        bins = ((angle + np.pi) / _EDGE_BIN_WIDTH).astype(np.int64) % EDGE_BINS

        hist = np.bincount(bins.ravel(), weights=magnitude.ravel(), minlength=EDGE_BINS)
        total = hist.sum()
        if total > 0:
            hist /= total
        return hist

    def compute_texture(self, gray: npt.NDArray[Any]) -> npt.NDArray[np.float64]:
        """Compute per-block intensity standard deviation on a 4x4 grid.

        Args:
            gray: Grayscale image (H, W).

        Returns:
            16 values in row-major block order, divided by the largest one.
        """
        h, w = gray.shape[:2]
        cell_h, cell_w = h // TEXTURE_GRID, w // TEXTURE_GRID

        g = gray.astype(np.float64)
        features = np.zeros(TEXTURE_BLOCKS, dtype=np.float64)

        for i in range(TEXTURE_GRID):
            for j in range(TEXTURE_GRID):
                cell = g[i * cell_h:(i + 1) * cell_h, j * cell_w:(j + 1) * cell_w]
                if cell.size == 0:
                    continue
                mean = cell.mean()
                variance = (cell * cell).mean() - mean * mean
                features[i * TEXTURE_GRID + j] = np.sqrt(max(variance, 0.0))

        max_value = features.max()
        if max_value > 0:
            features /= max_value
        return features

    def compute_all_features(self, raster: npt.NDArray[Any]) -> FeatureSet:
        """Resample a raster and compute every feature family.

        The grayscale conversion is done once and shared by all families.

        Args:
            raster: Quality-checked RGB image (H, W, 3) of any size.

        Returns:
            Extracted feature set.
        """
        canonical = resample_canonical(raster, self.canonical_size)
        gray = to_grayscale(canonical)

        features = FeatureSet(
            histogram=self.compute_histogram(gray),
            lbp=self.compute_lbp(gray),
            edge_orientation=self.compute_edge_orientation(gray),
            texture=self.compute_texture(gray),
        )
        logger.debug(f"Extracted features at {self.canonical_size}x{self.canonical_size}")
        return features
