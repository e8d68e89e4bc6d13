"""Pydantic models for type-safe data structures."""


import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class FeatureSet(BaseModel):
    """The four feature families extracted from one canonical raster.

    Attributes:
        histogram: Raw grayscale intensity counts (256 bins).
        lbp: Local binary pattern code frequencies (256 bins, 0-1).
        edge_orientation: Gradient magnitude per direction (8 bins, sum 1).
        texture: Per-block intensity std dev on a 4x4 grid (16 values, max 1).
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    histogram: np.ndarray
    lbp: np.ndarray
    edge_orientation: np.ndarray
    texture: np.ndarray


class QualityReport(BaseModel):
    """Measurements taken by the quality gate for an accepted image.

    Attributes:
        width: Raster width in pixels.
        height: Raster height in pixels.
        contrast: Max minus min grayscale intensity.
        brightness: Mean grayscale intensity.
        sharpness: Mean interior gradient magnitude.
    """
    width: int
    height: int
    contrast: int
    brightness: float
    sharpness: float


class SimilarityBreakdown(BaseModel):
    """Per-family similarity percentages for one encoding pair."""
    histogram: float = Field(default=0.0, ge=0.0, le=100.0)
    lbp: float = Field(default=0.0, ge=0.0, le=100.0)
    edge: float = Field(default=0.0, ge=0.0, le=100.0)
    texture: float = Field(default=0.0, ge=0.0, le=100.0)
    total: float = Field(default=0.0, ge=0.0, le=100.0)
    identical: bool = False


class MatchResult(BaseModel):
    """Outcome of selecting the best candidate for a probe encoding.

    Attributes:
        candidate_id: Id of the accepted candidate, or None if rejected.
        similarity: Best similarity score found (0-100).
        matched: Whether the best candidate was accepted.
        second_best: Runner-up similarity score (0-100).
    """
    candidate_id: str | None = None
    similarity: float = Field(default=0.0, ge=0.0, le=100.0)
    matched: bool = False
    second_best: float = Field(default=0.0, ge=0.0, le=100.0)

    @property
    def confidence_gap(self) -> float:
        """Difference between the best and second-best scores."""
        return self.similarity - self.second_best
