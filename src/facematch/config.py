"""Configuration dataclass for the facematch package."""

from __future__ import annotations

import os
from dataclasses import dataclass

# Every stored encoding depends on this size; changing it invalidates them.
CANONICAL_SIZE = 256

DEFAULT_CONFIDENCE_THRESHOLD = 80.0
DEFAULT_MINIMUM_GAP = 1.0

_ENV_PREFIX = "FACEMATCH_"


@dataclass(frozen=True)
class Config:
    """Tunable parameters for encoding and matching.

    Instances are immutable: values used when an encoding is created must
    still hold when it is compared later.
    """

    # Matching
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD  # percent
    minimum_gap: float = DEFAULT_MINIMUM_GAP  # percent, best vs second best

    # Canonical raster edge length (square)
    canonical_size: int = CANONICAL_SIZE

    # Quality gate
    min_dimension: int = 100
    max_dimension: int = 2000
    min_contrast: int = 30
    min_brightness: float = 30.0
    max_brightness: float = 225.0
    min_sharpness: float = 5.0

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if not 0.0 <= self.confidence_threshold <= 100.0:
            msg = f"confidence_threshold must be in [0,100], got {self.confidence_threshold}"
            raise ValueError(msg)
        if self.minimum_gap < 0.0:
            msg = f"minimum_gap must be >= 0, got {self.minimum_gap}"
            raise ValueError(msg)
        if self.canonical_size < 16:
            msg = f"canonical_size must be >= 16, got {self.canonical_size}"
            raise ValueError(msg)
        if self.min_dimension < 3:
            msg = f"min_dimension must be >= 3, got {self.min_dimension}"
            raise ValueError(msg)
        if self.max_dimension < self.min_dimension:
            msg = (
                f"max_dimension ({self.max_dimension}) must be >= "
                f"min_dimension ({self.min_dimension})"
            )
            raise ValueError(msg)
        if not 0 <= self.min_contrast <= 255:
            msg = f"min_contrast must be in [0,255], got {self.min_contrast}"
            raise ValueError(msg)
        if not 0.0 <= self.min_brightness <= self.max_brightness <= 255.0:
            msg = (
                "brightness bounds must satisfy 0 <= min <= max <= 255, "
                f"got [{self.min_brightness}, {self.max_brightness}]"
            )
            raise ValueError(msg)
        if self.min_sharpness < 0.0:
            msg = f"min_sharpness must be >= 0, got {self.min_sharpness}"
            raise ValueError(msg)


def load_config() -> Config:
    """Load configuration from ``FACEMATCH_*`` environment variables.

    Unset variables keep their defaults.

    Returns:
        Validated, immutable configuration.
    """
    defaults = Config()
    cfg = Config(
        confidence_threshold=float(
            os.getenv(f"{_ENV_PREFIX}CONFIDENCE_THRESHOLD", str(defaults.confidence_threshold))
        ),
        minimum_gap=float(os.getenv(f"{_ENV_PREFIX}MINIMUM_GAP", str(defaults.minimum_gap))),
        canonical_size=int(
            os.getenv(f"{_ENV_PREFIX}CANONICAL_SIZE", str(defaults.canonical_size))
        ),
        min_dimension=int(os.getenv(f"{_ENV_PREFIX}MIN_DIMENSION", str(defaults.min_dimension))),
        max_dimension=int(os.getenv(f"{_ENV_PREFIX}MAX_DIMENSION", str(defaults.max_dimension))),
        min_contrast=int(os.getenv(f"{_ENV_PREFIX}MIN_CONTRAST", str(defaults.min_contrast))),
        min_brightness=float(
            os.getenv(f"{_ENV_PREFIX}MIN_BRIGHTNESS", str(defaults.min_brightness))
        ),
        max_brightness=float(
            os.getenv(f"{_ENV_PREFIX}MAX_BRIGHTNESS", str(defaults.max_brightness))
        ),
        min_sharpness=float(os.getenv(f"{_ENV_PREFIX}MIN_SHARPNESS", str(defaults.min_sharpness))),
    )
    cfg.validate()
    return cfg
