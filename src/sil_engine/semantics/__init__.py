"""Semantic scoring kernel.

Pure, deterministic scoring primitives that game plugins use to turn a
player's choice into a score and skill signals.

Submodules:
    similarity: Cosine similarity and nearest-candidate helpers (numpy)
    rarity: Frequency and pattern based word rarity
    cluster: Cluster centers and hot/cold heat
    midpoint: Balanced "in between" candidate ranking
    embeddings: Cached access to word vectors

Example:
    >>> from sil_engine.semantics import cosine_similarity, select_midpoint
    >>> cosine_similarity([1, 0], [1, 0])
    1.0
"""

from __future__ import annotations

# =============================================================================
# Similarity
# =============================================================================
from sil_engine.semantics.similarity import (
    Vector,
    average_similarity,
    cosine_similarity,
    most_similar,
    normalize_vector,
    percentile_rank,
)

# =============================================================================
# Rarity
# =============================================================================
from sil_engine.semantics.rarity import (
    RarityResult,
    filter_by_pattern,
    frequency_rarity,
    length_rarity,
    matches_pattern,
    phonetic_complexity,
    rarity_score,
)

# =============================================================================
# Cluster Heat
# =============================================================================
from sil_engine.semantics.cluster import (
    ClusterHeat,
    cluster_center,
    cluster_heat,
    find_outliers,
    heat_from_similarity,
    heat_to_label,
    rank_by_heat,
)

# =============================================================================
# Midpoint
# =============================================================================
from sil_engine.semantics.midpoint import (
    MidpointScore,
    midpoint_score,
    midpoint_vector,
    rank_midpoints,
    select_midpoint,
    semantic_path,
)

# =============================================================================
# Embeddings
# =============================================================================
from sil_engine.semantics.embeddings import (
    EmbeddingProvider,
    EmbeddingService,
    HashEmbeddingProvider,
    MappingEmbeddingProvider,
    WordEmbedding,
    get_embedding_service,
)


__all__ = [
    # Similarity
    "Vector",
    "cosine_similarity",
    "normalize_vector",
    "average_similarity",
    "most_similar",
    "percentile_rank",
    # Rarity
    "RarityResult",
    "frequency_rarity",
    "length_rarity",
    "matches_pattern",
    "filter_by_pattern",
    "rarity_score",
    "phonetic_complexity",
    # Cluster
    "ClusterHeat",
    "cluster_center",
    "cluster_heat",
    "heat_from_similarity",
    "heat_to_label",
    "rank_by_heat",
    "find_outliers",
    # Midpoint
    "MidpointScore",
    "midpoint_vector",
    "midpoint_score",
    "rank_midpoints",
    "select_midpoint",
    "semantic_path",
    # Embeddings
    "WordEmbedding",
    "EmbeddingProvider",
    "HashEmbeddingProvider",
    "MappingEmbeddingProvider",
    "EmbeddingService",
    "get_embedding_service",
]
