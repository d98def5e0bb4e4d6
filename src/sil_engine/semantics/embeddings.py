"""Word embedding access.

Games never read vectors directly: they ask the EmbeddingService, which
caches lookups from a pluggable EmbeddingProvider. Two providers ship
with the engine:

* HashEmbeddingProvider: deterministic pseudo-vectors derived from the
  word text. Not semantically meaningful, but stable across runs, which
  is enough for development and tests.
* MappingEmbeddingProvider: vectors supplied by the caller, e.g. loaded
  from a pre-built content pack.

A word with no vector is a content failure and surfaces as
ContentLoadError so the runner can retry the session with another seed.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Protocol, Sequence, runtime_checkable

import numpy as np
import numpy.typing as npt

from sil_engine.core.config import get_settings
from sil_engine.core.exceptions import ContentLoadError, ValidationError
from sil_engine.core.logging import get_logger
from sil_engine.engine.random_source import SeededRandom, seed_from_text
from sil_engine.semantics.similarity import Vector, as_array, normalize_vector


logger = get_logger(__name__)


@dataclass(frozen=True)
class WordEmbedding:
    """A word vector with optional corpus statistics.

    Attributes:
        word: Lower-cased word.
        vector: Embedding vector.
        language: Language code of the vocabulary.
        frequency: Corpus occurrence count, if known.
    """

    word: str
    vector: npt.NDArray[np.float64]
    language: str = "en"
    frequency: float | None = None


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Source of word embeddings."""

    def get_embedding(self, word: str, language: str = "en") -> WordEmbedding | None:
        """Return the embedding for ``word`` or None if unknown."""
        ...


# =============================================================================
# Providers
# =============================================================================


class HashEmbeddingProvider:
    """Deterministic pseudo-embeddings seeded from the word text.

    Example:
        >>> provider = HashEmbeddingProvider(dimension=8)
        >>> provider.get_embedding("ocean").vector.shape
        (8,)
    """

    def __init__(self, dimension: int = 64) -> None:
        if dimension < 2:
            raise ValidationError(
                "Embedding dimension must be at least 2",
                field_name="dimension",
                invalid_value=dimension,
            )
        self.dimension = dimension

    def get_embedding(self, word: str, language: str = "en") -> WordEmbedding | None:
        key = word.strip().lower()
        if not key:
            return None
        rng = SeededRandom(seed_from_text(f"{language}:{key}"))
        raw = [rng.uniform(-1.0, 1.0) for _ in range(self.dimension)]
        return WordEmbedding(
            word=key,
            vector=normalize_vector(raw),
            language=language,
            frequency=self.estimate_frequency(key),
        )

    @staticmethod
    def estimate_frequency(word: str) -> float:
        """Shorter words are assumed to be more frequent."""
        return float(max(1, 10 - len(word)) * 1000)


class MappingEmbeddingProvider:
    """Embeddings served from an in-memory mapping.

    Args:
        vectors: Word to vector mapping.
        frequencies: Optional word to corpus frequency mapping.
        language: Language of the supplied vocabulary.
    """

    def __init__(
        self,
        vectors: Mapping[str, Vector],
        *,
        frequencies: Mapping[str, float] | None = None,
        language: str = "en",
    ) -> None:
        self.language = language
        self._vectors = {word.lower(): as_array(vec) for word, vec in vectors.items()}
        self._frequencies = {word.lower(): freq for word, freq in (frequencies or {}).items()}

        dims = {vec.shape[0] for vec in self._vectors.values()}
        if len(dims) > 1:
            raise ValidationError(
                "All supplied vectors must share one dimension",
                field_name="vectors",
                invalid_value=sorted(dims),
            )

    def get_embedding(self, word: str, language: str = "en") -> WordEmbedding | None:
        key = word.strip().lower()
        if language != self.language or key not in self._vectors:
            return None
        return WordEmbedding(
            word=key,
            vector=self._vectors[key],
            language=language,
            frequency=self._frequencies.get(key),
        )

    def __len__(self) -> int:
        return len(self._vectors)


# =============================================================================
# Service
# =============================================================================


class EmbeddingService:
    """Caching front for an EmbeddingProvider.

    Example:
        >>> service = EmbeddingService(HashEmbeddingProvider(16))
        >>> vec = service.get_vector("tide")
    """

    def __init__(self, provider: EmbeddingProvider, *, cache_enabled: bool = True) -> None:
        self.provider = provider
        self.cache_enabled = cache_enabled
        self._cache: dict[str, WordEmbedding] = {}

    def get_embedding(self, word: str, language: str = "en") -> WordEmbedding:
        """Look up a word, consulting the cache first.

        Raises:
            ContentLoadError: If the provider has no vector for the word.
        """
        key = f"{language}:{word.strip().lower()}"
        if self.cache_enabled and key in self._cache:
            return self._cache[key]

        embedding = self.provider.get_embedding(word, language)
        if embedding is None:
            logger.warning("Embedding not found", word=word, language=language)
            raise ContentLoadError(
                f"No embedding available for '{word}'",
                resource=word,
                details={"language": language},
            )

        if self.cache_enabled:
            self._cache[key] = embedding
        return embedding

    def get_vector(self, word: str, language: str = "en") -> npt.NDArray[np.float64]:
        """Vector for ``word``.

        Raises:
            ContentLoadError: If the word is unknown.
        """
        return self.get_embedding(word, language).vector

    def get_vectors(self, words: Sequence[str], language: str = "en") -> list[npt.NDArray[np.float64]]:
        """Vectors for several words, in order."""
        return [self.get_vector(word, language) for word in words]

    def get_frequency(self, word: str, language: str = "en") -> float | None:
        """Corpus frequency of ``word`` or None when the provider has none."""
        return self.get_embedding(word, language).frequency

    def has_embedding(self, word: str, language: str = "en") -> bool:
        try:
            self.get_embedding(word, language)
        except ContentLoadError:
            return False
        return True

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)


@lru_cache(maxsize=1)
def get_embedding_service() -> EmbeddingService:
    """Shared service over hash embeddings sized from settings."""
    dimension = get_settings().scoring.embedding_dimension
    logger.debug("Creating embedding service", dimension=dimension)
    return EmbeddingService(HashEmbeddingProvider(dimension))


__all__ = [
    "WordEmbedding",
    "EmbeddingProvider",
    "HashEmbeddingProvider",
    "MappingEmbeddingProvider",
    "EmbeddingService",
    "get_embedding_service",
]
