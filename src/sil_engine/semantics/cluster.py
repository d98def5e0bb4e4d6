"""Cluster heat scoring.

Given vectors believed to share a latent theme, the cluster center is
their component-wise mean. "Heat" is how close a candidate sits to that
center, rescaled to [0, 1], and drives hot/cold proximity feedback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import numpy.typing as npt

from sil_engine.core.exceptions import DimensionMismatchError, EmptyCandidateSetError
from sil_engine.semantics.similarity import Vector, as_array, cosine_similarity, normalize_vector


HEAT_LABELS: tuple[tuple[float, str], ...] = (
    (0.2, "freezing"),
    (0.4, "cold"),
    (0.6, "warm"),
    (0.8, "hot"),
)


@dataclass(frozen=True)
class ClusterHeat:
    """Proximity of a candidate to a cluster center.

    Attributes:
        heat: Proximity in [0, 1]; 1 means aligned with the center.
        distance: ``1 - heat``.
    """

    heat: float
    distance: float


def cluster_center(vectors: Sequence[Vector]) -> npt.NDArray[np.float64]:
    """Component-wise mean of ``vectors``, normalized to unit length.

    Raises:
        EmptyCandidateSetError: If no vectors are given.
        DimensionMismatchError: If the vectors differ in length.
    """
    if not vectors:
        raise EmptyCandidateSetError("Cannot calculate a cluster center from no vectors")

    arrays = [as_array(v) for v in vectors]
    dim = arrays[0].shape[0]
    for arr in arrays[1:]:
        if arr.shape[0] != dim:
            raise DimensionMismatchError(
                "Cluster vectors must share one dimension",
                left_dim=dim,
                right_dim=int(arr.shape[0]),
            )
    return normalize_vector(np.mean(np.stack(arrays), axis=0))


def heat_from_similarity(similarity: float) -> float:
    """Rescale a cosine similarity from [-1, 1] to heat in [0, 1]."""
    return max(0.0, min(1.0, (similarity + 1.0) / 2.0))


def cluster_heat(candidate: Vector, center: Vector) -> ClusterHeat:
    """Heat of ``candidate`` relative to a precomputed cluster center."""
    heat = heat_from_similarity(cosine_similarity(candidate, center))
    return ClusterHeat(heat=heat, distance=1.0 - heat)


def heat_to_label(heat: float) -> str:
    """Categorical label for a heat value: freezing, cold, warm, hot, burning."""
    for threshold, label in HEAT_LABELS:
        if heat < threshold:
            return label
    return "burning"


def rank_by_heat(candidates: Sequence[Vector], center: Vector) -> list[tuple[int, float]]:
    """Rank candidates hottest first.

    Returns:
        List of (candidate index, heat). Equal heats keep input order.
    """
    scored = [(index, cluster_heat(vec, center).heat) for index, vec in enumerate(candidates)]
    return sorted(scored, key=lambda item: item[1], reverse=True)


def find_outliers(vectors: Sequence[Vector], threshold: float = 0.3) -> list[tuple[int, float]]:
    """Members whose heat to their own cluster center falls below ``threshold``.

    Returns:
        List of (index, heat) in input order.
    """
    center = cluster_center(vectors)
    return [
        (index, heat)
        for index, heat in ((i, cluster_heat(v, center).heat) for i, v in enumerate(vectors))
        if heat < threshold
    ]


__all__ = [
    "HEAT_LABELS",
    "ClusterHeat",
    "cluster_center",
    "heat_from_similarity",
    "cluster_heat",
    "heat_to_label",
    "rank_by_heat",
    "find_outliers",
]
