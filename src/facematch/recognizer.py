"""End-to-end face encoding and matching."""

import logging
from collections.abc import Iterable
from typing import Any

import numpy.typing as npt

from .codec import encode_features
from .config import Config
from .decoder import decode_image
from .features import FeatureExtractor
from .models import MatchResult, QualityReport, SimilarityBreakdown
from .quality import check_quality, is_acceptable
from .selector import select_best
from .similarity import compare_encodings, score_breakdown, verify

logger = logging.getLogger(__name__)


class FaceRecognizer:
    """Main class for turning face images into encodings and matching them.

    Pipeline: decode -> quality gate -> canonical resample -> extract -> encode.
    Holds no mutable state, so one instance can serve concurrent callers.
    """

    def __init__(self, cfg: Config | None = None):
        """Initialize the recognizer.

        Args:
            cfg: Configuration. Defaults to ``Config()``.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.cfg = cfg if cfg is not None else Config()
        self.cfg.validate()
        self.extractor = FeatureExtractor(self.cfg.canonical_size)

    def validate(self, payload: str) -> bool:
        """Return whether a base64 image decodes and passes the quality gate."""
        return is_acceptable(payload, self.cfg)

    def assess(self, payload: str) -> QualityReport:
        """Decode a base64 image and run the quality gate.

        Raises:
            FaceImageError: If the image is undecodable or fails a check.
        """
        return check_quality(decode_image(payload), self.cfg)

    def encode_raster(self, raster: npt.NDArray[Any]) -> str:
        """Quality-check a decoded raster and build its encoding.

        Args:
            raster: RGB image (H, W, 3).

        Returns:
            Encoding string.

        Raises:
            FaceImageError: If the raster fails the quality gate.
        """
        check_quality(raster, self.cfg)
        features = self.extractor.compute_all_features(raster)
        encoding = encode_features(features)
        logger.info(f"Face encoding created ({self.cfg.canonical_size}x{self.cfg.canonical_size})")
        return encoding

    def encode(self, payload: str) -> str:
        """Build the encoding of a base64 face image.

        Args:
            payload: Base64 image text, optionally data-URL prefixed.

        Returns:
            Encoding string to store with the employee record.

        Raises:
            FaceImageError: If the image is undecodable or fails the quality gate.
        """
        return self.encode_raster(decode_image(payload))

    def compare(self, encoding1: str, encoding2: str) -> float:
        """Similarity percentage of two encodings."""
        return compare_encodings(encoding1, encoding2)

    def breakdown(self, encoding1: str, encoding2: str) -> SimilarityBreakdown:
        """Per-family similarity of two encodings."""
        return score_breakdown(encoding1, encoding2)

    def verify(self, known_encoding: str, test_encoding: str) -> bool:
        """Whether two encodings match at the configured threshold."""
        return verify(known_encoding, test_encoding, self.cfg.confidence_threshold)

    def score_image(self, known_encoding: str, payload: str) -> float:
        """Encode a new image and score it against one stored encoding.

        Raises:
            FaceImageError: If the new image cannot be encoded.
        """
        return compare_encodings(known_encoding, self.encode(payload))

    def find_best_match(
        self, test_encoding: str, candidates: Iterable[tuple[str, str]]
    ) -> MatchResult:
        """Select the best stored encoding for a probe encoding.

        Args:
            test_encoding: Encoding of the probe image.
            candidates: (candidate_id, stored_encoding) pairs.

        Returns:
            Match decision using the configured threshold and gap.
        """
        return select_best(
            test_encoding,
            candidates,
            threshold=self.cfg.confidence_threshold,
            minimum_gap=self.cfg.minimum_gap,
        )

    def identify(self, payload: str, candidates: Iterable[tuple[str, str]]) -> MatchResult:
        """Encode a base64 image and select its best match.

        Raises:
            FaceImageError: If the image cannot be encoded.
        """
        return self.find_best_match(self.encode(payload), candidates)
