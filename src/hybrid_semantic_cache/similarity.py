"""Cosine similarity and best-match selection over an in-memory candidate set.

Matching is a brute-force scan: O(n * d) per lookup for n cached entries of
dimension d. There is no index structure; the working set is expected to stay
modest.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from hybrid_semantic_cache.errors import DimensionMismatchError


@dataclass(frozen=True)
class BestMatch:
    """Position and score of the best candidate found by find_best_match."""

    index: int
    similarity: float


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute the cosine similarity between two equal-length vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Similarity in [-1, 1] up to floating-point drift. The value is not
        clamped. Returns 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors have different lengths
    """
    if len(a) != len(b):
        raise DimensionMismatchError(expected=len(a), actual=len(b))

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    dot = float(np.dot(va, vb))
    magnitude = float(np.sqrt(np.dot(va, va)) * np.sqrt(np.dot(vb, vb)))

    if magnitude == 0.0:
        return 0.0

    return dot / magnitude


def find_best_match(
    query: Sequence[float],
    candidates: Iterable[Sequence[float]],
    threshold: float,
) -> BestMatch | None:
    """Find the most similar candidate at or above a similarity threshold.

    Scans the candidates once. Ties keep the first occurrence: a later
    candidate only replaces the running best when strictly greater.

    Args:
        query: The query embedding
        candidates: Candidate embeddings, in snapshot order
        threshold: Minimum similarity for a match (inclusive)

    Returns:
        BestMatch for the best candidate, or None if there are no candidates
        or the best similarity is below the threshold

    Raises:
        DimensionMismatchError: If any candidate's length differs from the query's
    """
    best_index = -1
    best_similarity = 0.0

    for index, candidate in enumerate(candidates):
        similarity = cosine_similarity(query, candidate)
        if best_index < 0 or similarity > best_similarity:
            best_index = index
            best_similarity = similarity

    if best_index >= 0 and best_similarity >= threshold:
        return BestMatch(index=best_index, similarity=best_similarity)

    return None
