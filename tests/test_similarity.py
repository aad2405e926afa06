"""
Tests for cosine similarity and best-match selection.
"""

import math

import pytest

from hybrid_semantic_cache.errors import DimensionMismatchError
from hybrid_semantic_cache.similarity import BestMatch, cosine_similarity, find_best_match


def unit(angle: float) -> list[float]:
    """2-d unit vector at the given angle."""
    return [math.cos(angle), math.sin(angle)]


def with_similarity(similarity: float) -> list[float]:
    """2-d unit vector whose similarity to [1, 0] is the given value."""
    return unit(math.acos(similarity))


def test_identical_vectors_are_similar():
    """Self-similarity of a non-zero vector is 1."""
    v = [0.3, -1.2, 4.5, 0.01]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_similarity_is_symmetric():
    """Swapping arguments does not change the score."""
    a = [1.0, 2.0, 3.0]
    b = [-2.0, 0.5, 7.0]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_orthogonal_and_opposite_vectors():
    """Orthogonal vectors score 0, opposite vectors -1."""
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)


def test_magnitude_does_not_matter():
    """Scaling a vector keeps its direction and its similarity."""
    assert cosine_similarity([1.0, 1.0], [10.0, 10.0]) == pytest.approx(1.0)


def test_zero_vector_scores_zero():
    """A zero vector is never similar to anything, itself included."""
    assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0


def test_mismatched_lengths_raise():
    """Vectors of different length are a configuration error."""
    with pytest.raises(DimensionMismatchError) as exc_info:
        cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0])
    assert exc_info.value.expected == 3
    assert exc_info.value.actual == 2


def test_mismatch_is_a_value_error():
    """Callers catching ValueError still see dimension mismatches."""
    with pytest.raises(ValueError):
        cosine_similarity([1.0], [1.0, 2.0])


@pytest.mark.parametrize("threshold", [-1.0, 0.0, 0.5, 1.0])
def test_find_best_match_empty_candidates(threshold):
    """No candidates never matches, whatever the threshold."""
    assert find_best_match([1.0, 0.0], [], threshold) is None


def test_find_best_match_picks_highest_above_threshold():
    """[0.70, 0.92, 0.91] at 0.85 matches index 1."""
    candidates = [with_similarity(0.70), with_similarity(0.92), with_similarity(0.91)]

    match = find_best_match([1.0, 0.0], candidates, threshold=0.85)

    assert match is not None
    assert match.index == 1
    assert match.similarity == pytest.approx(0.92)


def test_find_best_match_below_threshold():
    """[0.80, 0.79] at 0.85 has no match."""
    candidates = [with_similarity(0.80), with_similarity(0.79)]
    assert find_best_match([1.0, 0.0], candidates, threshold=0.85) is None


def test_find_best_match_threshold_is_inclusive():
    """A best score exactly at the threshold matches."""
    match = find_best_match([1.0, 0.0], [[1.0, 0.0]], threshold=1.0)
    assert match == BestMatch(index=0, similarity=pytest.approx(1.0))


def test_find_best_match_first_occurrence_wins_ties():
    """Equal scores keep the earliest candidate."""
    candidates = [[0.0, 1.0], [2.0, 0.0], [1.0, 0.0], [3.0, 0.0]]

    match = find_best_match([1.0, 0.0], candidates, threshold=0.5)

    assert match is not None
    assert match.index == 1


def test_find_best_match_accepts_generators():
    """Candidates are consumed in a single pass."""
    candidates = (v for v in [with_similarity(0.5), with_similarity(0.99)])

    match = find_best_match([1.0, 0.0], candidates, threshold=0.9)

    assert match is not None
    assert match.index == 1


def test_find_best_match_raises_on_bad_candidate():
    """A mis-sized candidate fails the lookup instead of being skipped."""
    with pytest.raises(DimensionMismatchError):
        find_best_match([1.0, 0.0], [[1.0, 0.0], [1.0, 0.0, 0.0]], threshold=0.5)


def test_find_best_match_negative_scores():
    """Negative best scores can still satisfy a negative threshold."""
    match = find_best_match([1.0, 0.0], [[-1.0, 0.0], [-1.0, 0.1]], threshold=-1.0)

    assert match is not None
    assert match.index == 1
