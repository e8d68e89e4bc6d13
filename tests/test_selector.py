"""
Tests for best-match selection and the ambiguity guard.
"""

import pytest

from facematch import MatchResult, select_best


def make_scorer(scores: dict[str, float]):
    """Build a scorer that looks up a fixed score per stored encoding."""
    def scorer(stored: str, _probe: str) -> float:
        return scores[stored]
    return scorer


def make_candidates(scores: dict[str, float]) -> list[tuple[str, str]]:
    """Use each encoding name as both candidate id and stored encoding."""
    return [(name, name) for name in scores]


class TestSelectBest:
    """Test the threshold and minimum-gap decision rule."""

    def test_empty_candidates(self):
        """Test that no candidates never match."""
        result = select_best("probe", [])

        assert result == MatchResult(candidate_id=None, similarity=0.0, matched=False)

    def test_ambiguous_top_rejected(self):
        """Test that 85.0 vs 84.2 is rejected for a gap below 1.0."""
        scores = {"a": 85.0, "b": 84.2, "c": 60.0}

        result = select_best("probe", make_candidates(scores), 80.0, 1.0, make_scorer(scores))

        assert not result.matched
        assert result.candidate_id is None
        assert result.similarity == 85.0
        assert result.second_best == 84.2
        assert result.confidence_gap == pytest.approx(0.8)

    def test_clean_accept(self):
        """Test that 90 vs 70 vs 50 accepts the top candidate."""
        scores = {"a": 90.0, "b": 70.0, "c": 50.0}

        result = select_best("probe", make_candidates(scores), 80.0, 1.0, make_scorer(scores))

        assert result.matched
        assert result.candidate_id == "a"
        assert result.similarity == 90.0
        assert result.confidence_gap == pytest.approx(20.0)

    def test_best_not_first(self):
        """Test that the runner-up is tracked regardless of order."""
        scores = {"c": 60.0, "a": 85.0, "b": 84.2}

        result = select_best("probe", make_candidates(scores), 80.0, 1.0, make_scorer(scores))

        assert not result.matched
        assert result.second_best == 84.2

    def test_below_threshold(self):
        """Test that a clear winner below the threshold is rejected."""
        scores = {"a": 75.0, "b": 20.0}

        result = select_best("probe", make_candidates(scores), 80.0, 1.0, make_scorer(scores))

        assert not result.matched
        assert result.candidate_id is None
        assert result.similarity == 75.0

    def test_threshold_inclusive(self):
        """Test that a score equal to the threshold is accepted."""
        scores = {"a": 80.0, "b": 10.0}

        result = select_best("probe", make_candidates(scores), 80.0, 1.0, make_scorer(scores))

        assert result.matched

    def test_single_candidate_skips_gap(self):
        """Test that one candidate is judged by the threshold alone."""
        scores = {"only": 81.0}

        result = select_best("probe", make_candidates(scores), 80.0, 50.0, make_scorer(scores))

        assert result.matched
        assert result.candidate_id == "only"

    def test_tie_rejected(self):
        """Test that two equal top scores are ambiguous."""
        scores = {"a": 95.0, "b": 95.0}

        result = select_best("probe", make_candidates(scores), 80.0, 1.0, make_scorer(scores))

        assert not result.matched
        assert result.similarity == 95.0

    def test_custom_gap(self):
        """Test that the minimum gap is a parameter."""
        scores = {"a": 85.0, "b": 84.2}

        result = select_best("probe", make_candidates(scores), 80.0, 0.5, make_scorer(scores))

        assert result.matched
        assert result.candidate_id == "a"

    def test_scorer_argument_order(self):
        """Test that the scorer receives (stored, probe)."""
        calls = []

        def scorer(stored: str, probe: str) -> float:
            calls.append((stored, probe))
            return 50.0

        select_best("probe", [("id1", "stored1"), ("id2", "stored2")], scorer=scorer)

        assert calls == [("stored1", "probe"), ("stored2", "probe")]

    def test_accepts_generator(self):
        """Test that candidates may be any iterable."""
        scores = {"a": 99.0, "b": 10.0}

        result = select_best(
            "probe", ((k, k) for k in scores), 80.0, 1.0, make_scorer(scores)
        )

        assert result.candidate_id == "a"
