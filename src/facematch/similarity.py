"""Similarity scoring between two stored encodings.

Each feature family is compared with cosine similarity and the results are
combined with fixed weights into one percentage. Scoring is fail-soft: a
missing, unparsable or mismatched section contributes 0 instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import numpy.typing as npt

from .codec import EDGE_TAG, HIST_TAG, LBP_TAG, TEXTURE_TAG, parse_section, split_encoding
from .errors import EncodingParseError
from .models import SimilarityBreakdown

logger = logging.getLogger(__name__)

HISTOGRAM_WEIGHT = 0.30
LBP_WEIGHT = 0.40
EDGE_WEIGHT = 0.20
TEXTURE_WEIGHT = 0.10

FEATURE_WEIGHTS = {
    HIST_TAG: HISTOGRAM_WEIGHT,
    LBP_TAG: LBP_WEIGHT,
    EDGE_TAG: EDGE_WEIGHT,
    TEXTURE_TAG: TEXTURE_WEIGHT,
}

MAX_SIMILARITY = 100.0


def cosine_similarity(feat1: npt.NDArray[Any], feat2: npt.NDArray[Any]) -> float:
    """Compute cosine similarity between two feature vectors as a percentage.

    Args:
        feat1: First feature vector.
        feat2: Second feature vector, same length.

    Returns:
        Similarity in [0, 100]; 0 if either vector has zero norm.
    """
    dot_product = float(np.dot(feat1, feat2))
    norm1 = float(np.sqrt(np.dot(feat1, feat1)))
    norm2 = float(np.sqrt(np.dot(feat2, feat2)))

    if norm1 == 0 or norm2 == 0:
        return 0.0

    similarity = dot_product / (norm1 * norm2) * MAX_SIMILARITY
    if not np.isfinite(similarity):
        return 0.0
    return max(0.0, min(MAX_SIMILARITY, similarity))


def compare_sections(payload1: str, payload2: str, tag: str) -> float:
    """Compare one tagged section of two feature payloads.

    Args:
        payload1: First feature payload (after the hash).
        payload2: Second feature payload (after the hash).
        tag: Section tag to compare.

    Returns:
        Cosine similarity percentage, or 0.0 if either section is missing,
        unparsable, or the lengths differ.
    """
    try:
        values1 = parse_section(payload1, tag)
        values2 = parse_section(payload2, tag)
    except EncodingParseError as e:
        logger.debug(f"Section {tag} not comparable: {e}")
        return 0.0

    if len(values1) != len(values2):
        logger.debug(f"Section {tag} length mismatch: {len(values1)} vs {len(values2)}")
        return 0.0

    return cosine_similarity(values1, values2)


def score_breakdown(encoding1: str, encoding2: str) -> SimilarityBreakdown:
    """Compare two encodings family by family.

    Identical hashes short-circuit to 100. This only detects byte-identical
    source images; it says nothing about perceptual similarity.

    Args:
        encoding1: First stored encoding.
        encoding2: Second stored encoding.

    Returns:
        Per-family scores and the weighted total. Never raises.
    """
    try:
        hash1, payload1 = split_encoding(encoding1)
        hash2, payload2 = split_encoding(encoding2)
    except EncodingParseError as e:
        logger.debug(f"Invalid encoding format: {e}")
        return SimilarityBreakdown()

    if hash1 == hash2:
        return SimilarityBreakdown(
            histogram=MAX_SIMILARITY,
            lbp=MAX_SIMILARITY,
            edge=MAX_SIMILARITY,
            texture=MAX_SIMILARITY,
            total=MAX_SIMILARITY,
            identical=True,
        )

    hist_sim = compare_sections(payload1, payload2, HIST_TAG)
    lbp_sim = compare_sections(payload1, payload2, LBP_TAG)
    edge_sim = compare_sections(payload1, payload2, EDGE_TAG)
    texture_sim = compare_sections(payload1, payload2, TEXTURE_TAG)

    total = (HISTOGRAM_WEIGHT * hist_sim +
             LBP_WEIGHT * lbp_sim +
             EDGE_WEIGHT * edge_sim +
             TEXTURE_WEIGHT * texture_sim)
    total = max(0.0, min(MAX_SIMILARITY, total))

    logger.debug(
        f"Feature similarities - Histogram: {hist_sim:.2f}%, LBP: {lbp_sim:.2f}%, "
        f"Edge: {edge_sim:.2f}%, Texture: {texture_sim:.2f}%, Final: {total:.2f}%"
    )
    return SimilarityBreakdown(
        histogram=hist_sim,
        lbp=lbp_sim,
        edge=edge_sim,
        texture=texture_sim,
        total=total,
    )


def compare_encodings(encoding1: str, encoding2: str) -> float:
    """Compute the weighted similarity of two encodings.

    Args:
        encoding1: First stored encoding.
        encoding2: Second stored encoding.

    Returns:
        Similarity percentage in [0, 100]. Symmetric in its arguments.
    """
    return score_breakdown(encoding1, encoding2).total


def verify(known_encoding: str, test_encoding: str, threshold: float) -> bool:
    """1:1 verification of a probe encoding against one stored encoding.

    Args:
        known_encoding: Stored encoding of the claimed identity.
        test_encoding: Encoding of the new image.
        threshold: Minimum similarity percentage to accept.

    Returns:
        True if the similarity reaches the threshold.
    """
    return compare_encodings(known_encoding, test_encoding) >= threshold
