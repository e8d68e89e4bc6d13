"""
Best-match selection over a set of stored encodings.

Accepts the top-scoring candidate only if it reaches the confidence
threshold and, when there is more than one candidate, beats the runner-up
by at least the minimum gap.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from .config import DEFAULT_CONFIDENCE_THRESHOLD, DEFAULT_MINIMUM_GAP
from .models import MatchResult
from .similarity import compare_encodings

logger = logging.getLogger(__name__)

Scorer = Callable[[str, str], float]


def select_best(
    test_encoding: str,
    candidates: Iterable[tuple[str, str]],
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    minimum_gap: float = DEFAULT_MINIMUM_GAP,
    scorer: Scorer = compare_encodings,
) -> MatchResult:
    """
    Find the candidate that best matches a probe encoding.

    Every candidate is scored; there is no early termination.

    Args:
        test_encoding: Encoding of the probe image
        candidates: (candidate_id, stored_encoding) pairs
        threshold: Minimum similarity percentage to accept
        minimum_gap: Minimum lead of the best over the second-best score
        scorer: Similarity function called as scorer(stored, probe)

    Returns:
        MatchResult with the best score; candidate_id is set only if matched
    """
    best = 0.0
    second_best = 0.0
    best_id: str | None = None
    count = 0

    for candidate_id, encoding in candidates:
        similarity = scorer(encoding, test_encoding)
        logger.debug(f"Candidate {candidate_id} similarity: {similarity:.2f}%")

        if best_id is None or similarity > best:
            if best_id is not None:
                second_best = best
            best = similarity
            best_id = candidate_id
        elif similarity > second_best:
            second_best = similarity
        count += 1

    if count == 0:
        return MatchResult()

    is_match = best >= threshold
    gap = best - second_best

    if is_match and count > 1 and gap < minimum_gap:
        logger.warning(
            f"Best match confidence gap too small ({gap:.2f}% < {minimum_gap}%). "
            "Rejecting match."
        )
        is_match = False

    if is_match:
        logger.info(f"Matched candidate {best_id} with {best:.2f}% (gap {gap:.2f}%)")
    else:
        logger.info(
            f"No reliable match found. Best: {best:.2f}%, Second: {second_best:.2f}%, "
            f"Gap: {gap:.2f}%"
        )

    return MatchResult(
        candidate_id=best_id if is_match else None,
        similarity=best,
        matched=is_match,
        second_best=second_best,
    )
