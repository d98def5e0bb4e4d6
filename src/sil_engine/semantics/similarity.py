"""Similarity scoring.

Cosine similarity and the small helpers built on it. All functions are
pure and accept any sequence of numbers (lists, tuples, numpy arrays).
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

from sil_engine.core.exceptions import DimensionMismatchError, EmptyCandidateSetError


Vector = Sequence[float] | npt.NDArray[np.float64]


def as_array(vector: Vector) -> npt.NDArray[np.float64]:
    """Convert a vector to a 1-D float64 array."""
    return np.asarray(vector, dtype=np.float64).reshape(-1)


def check_dimensions(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> None:
    """Raise DimensionMismatchError unless both arrays have the same length."""
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatchError(
            "Vectors must have the same dimension",
            left_dim=int(a.shape[0]),
            right_dim=int(b.shape[0]),
        )


def cosine_similarity(vec_a: Vector, vec_b: Vector) -> float:
    """Cosine similarity between two vectors.

    Args:
        vec_a: First vector.
        vec_b: Second vector.

    Returns:
        Similarity in [-1, 1]; 0.0 when either vector has zero magnitude.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    a = as_array(vec_a)
    b = as_array(vec_b)
    check_dimensions(a, b)

    magnitude = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if magnitude == 0.0:
        return 0.0

    similarity = float(np.dot(a, b)) / magnitude
    # Rounding can push |sim| a hair past 1
    return max(-1.0, min(1.0, similarity))


def normalize_vector(vector: Vector) -> npt.NDArray[np.float64]:
    """Scale a vector to unit length; a zero vector is returned unchanged."""
    arr = as_array(vector)
    magnitude = float(np.linalg.norm(arr))
    if magnitude == 0.0:
        return arr
    return arr / magnitude


def average_similarity(vector: Vector, others: Sequence[Vector]) -> float:
    """Mean cosine similarity of ``vector`` to each of ``others``.

    Raises:
        EmptyCandidateSetError: If ``others`` is empty.
    """
    if not others:
        raise EmptyCandidateSetError("Cannot average similarity over an empty set")
    return sum(cosine_similarity(vector, other) for other in others) / len(others)


def most_similar(target: Vector, candidates: Sequence[Vector]) -> tuple[int, float]:
    """Find the candidate closest to ``target``.

    Ties keep the earliest candidate so results are stable.

    Returns:
        Tuple of (candidate index, similarity).

    Raises:
        EmptyCandidateSetError: If ``candidates`` is empty.
    """
    if not candidates:
        raise EmptyCandidateSetError("No candidates to compare against")

    best_index = 0
    best_score = cosine_similarity(target, candidates[0])
    for index in range(1, len(candidates)):
        score = cosine_similarity(target, candidates[index])
        if score > best_score:
            best_index, best_score = index, score
    return best_index, best_score


def percentile_rank(score: float, reference_scores: Sequence[float]) -> int:
    """Percent of reference scores strictly below ``score``.

    Returns 50 when there is no reference data.
    """
    if not reference_scores:
        return 50
    lower = sum(1 for s in reference_scores if s < score)
    return int(lower * 100 / len(reference_scores) + 0.5)


__all__ = [
    "Vector",
    "as_array",
    "check_dimensions",
    "cosine_similarity",
    "normalize_vector",
    "average_similarity",
    "most_similar",
    "percentile_rank",
]
