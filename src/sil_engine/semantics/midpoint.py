"""Midpoint scoring.

Finds the candidate that best sits "between" two anchors. Each candidate
is ranked by a weighted sum of

* balance  = 1 - |simA - simB|  (equally close to both anchors), and
* coverage = (simA + simB) / 2  (close to the pair at all),

with balance weighted at least as heavily as coverage. Ties are broken
by input order so a given seed always yields the same answer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import numpy.typing as npt

from sil_engine.core.exceptions import ConfigurationError, EmptyCandidateSetError
from sil_engine.core.logging import get_logger
from sil_engine.semantics.similarity import (
    Vector,
    as_array,
    check_dimensions,
    cosine_similarity,
    normalize_vector,
)


logger = get_logger(__name__)

DEFAULT_BALANCE_WEIGHT = 0.6
DEFAULT_COVERAGE_WEIGHT = 0.4


@dataclass(frozen=True)
class MidpointScore:
    """Breakdown of a candidate's midpoint ranking.

    Attributes:
        sim_a: Cosine similarity to anchor A.
        sim_b: Cosine similarity to anchor B.
        balance: ``max(0, 1 - |sim_a - sim_b|)``.
        coverage: ``(sim_a + sim_b) / 2``.
        combined: Weighted ranking score.
    """

    sim_a: float
    sim_b: float
    balance: float
    coverage: float
    combined: float


def _check_weights(balance_weight: float, coverage_weight: float) -> None:
    if balance_weight < coverage_weight:
        raise ConfigurationError(
            "Balance weight must be >= coverage weight",
            config_key="midpoint_balance_weight",
            details={"balance_weight": balance_weight, "coverage_weight": coverage_weight},
        )


def midpoint_vector(vec_a: Vector, vec_b: Vector) -> npt.NDArray[np.float64]:
    """Normalized mean of two anchor vectors."""
    a = as_array(vec_a)
    b = as_array(vec_b)
    check_dimensions(a, b)
    return normalize_vector((a + b) / 2.0)


def midpoint_score(
    candidate: Vector,
    anchor_a: Vector,
    anchor_b: Vector,
    *,
    balance_weight: float = DEFAULT_BALANCE_WEIGHT,
    coverage_weight: float = DEFAULT_COVERAGE_WEIGHT,
) -> MidpointScore:
    """Score one candidate against two anchors.

    Raises:
        ConfigurationError: If coverage is weighted above balance.
        DimensionMismatchError: If vector lengths differ.
    """
    _check_weights(balance_weight, coverage_weight)

    sim_a = cosine_similarity(candidate, anchor_a)
    sim_b = cosine_similarity(candidate, anchor_b)
    balance = max(0.0, 1.0 - abs(sim_a - sim_b))
    coverage = (sim_a + sim_b) / 2.0
    return MidpointScore(
        sim_a=sim_a,
        sim_b=sim_b,
        balance=balance,
        coverage=coverage,
        combined=balance_weight * balance + coverage_weight * coverage,
    )


def rank_midpoints(
    anchor_a: Vector,
    anchor_b: Vector,
    candidates: Sequence[Vector],
    *,
    balance_weight: float = DEFAULT_BALANCE_WEIGHT,
    coverage_weight: float = DEFAULT_COVERAGE_WEIGHT,
) -> list[tuple[int, MidpointScore]]:
    """Rank every candidate, best first; equal scores keep input order.

    Raises:
        EmptyCandidateSetError: If ``candidates`` is empty.
    """
    if not candidates:
        raise EmptyCandidateSetError("No midpoint candidates supplied")

    scored = [
        (
            index,
            midpoint_score(
                vec,
                anchor_a,
                anchor_b,
                balance_weight=balance_weight,
                coverage_weight=coverage_weight,
            ),
        )
        for index, vec in enumerate(candidates)
    ]
    return sorted(scored, key=lambda item: item[1].combined, reverse=True)


def select_midpoint(
    anchor_a: Vector,
    anchor_b: Vector,
    candidates: Sequence[Vector],
    *,
    balance_weight: float = DEFAULT_BALANCE_WEIGHT,
    coverage_weight: float = DEFAULT_COVERAGE_WEIGHT,
) -> int:
    """Index of the best midpoint candidate.

    Raises:
        EmptyCandidateSetError: If ``candidates`` is empty.
    """
    best_index, best = rank_midpoints(
        anchor_a,
        anchor_b,
        candidates,
        balance_weight=balance_weight,
        coverage_weight=coverage_weight,
    )[0]
    logger.debug("Midpoint selected", index=best_index, combined=round(best.combined, 4))
    return best_index


def semantic_path(
    anchor_a: Vector,
    anchor_b: Vector,
    steps: int,
    candidates: Sequence[Vector],
) -> list[int]:
    """Chain of candidates stepping from anchor A toward anchor B.

    For each of ``steps`` interpolation points, picks the unused
    candidate most similar to the interpolated vector.

    Returns:
        Candidate indices in path order (may be shorter than ``steps``
        when candidates run out).
    """
    a = as_array(anchor_a)
    b = as_array(anchor_b)
    check_dimensions(a, b)

    path: list[int] = []
    used: set[int] = set()
    for step in range(1, steps + 1):
        t = step / (steps + 1)
        target = a * (1.0 - t) + b * t

        best_index: int | None = None
        best_sim = -2.0
        for index, vec in enumerate(candidates):
            if index in used:
                continue
            sim = cosine_similarity(vec, target)
            if sim > best_sim:
                best_index, best_sim = index, sim

        if best_index is None:
            break
        path.append(best_index)
        used.add(best_index)
    return path


__all__ = [
    "DEFAULT_BALANCE_WEIGHT",
    "DEFAULT_COVERAGE_WEIGHT",
    "MidpointScore",
    "midpoint_vector",
    "midpoint_score",
    "rank_midpoints",
    "select_midpoint",
    "semantic_path",
]
