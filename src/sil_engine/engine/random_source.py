"""Deterministic pseudo-random source for puzzle generation.

Every game and the mode runner draw randomness from a SeededRandom built
from the session seed, so the same seed always produces the same puzzle.
Only ``random.Random.random()`` is used underneath: it is the one method
whose output sequence Python guarantees to keep stable across releases,
so every derived draw (integers, shuffles, samples) is built from it.
"""

from __future__ import annotations

import hashlib
import secrets
from datetime import date
from random import Random
from typing import Sequence, TypeVar

from sil_engine.core.exceptions import EmptyCandidateSetError, ValidationError
from sil_engine.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

MAX_SEED = 2**31 - 1


class SeededRandom:
    """Seeded pseudo-random stream.

    Example:
        >>> rng = SeededRandom(42)
        >>> rng.next_int(1, 6)  # same value on every run
        >>> rng.shuffle(["a", "b", "c"])
    """

    def __init__(self, seed: int) -> None:
        """Initialize the stream.

        Args:
            seed: Integer seed; equal seeds give equal streams.
        """
        self._seed = seed
        self._rng = Random(seed)

    @property
    def seed(self) -> int:
        """The seed this stream was created from."""
        return self._seed

    def next_float(self) -> float:
        """Draw a float in [0, 1)."""
        return self._rng.random()

    def next_int(self, low: int, high: int) -> int:
        """Draw an integer in the inclusive range [low, high].

        Raises:
            ValidationError: If ``high < low``.
        """
        if high < low:
            raise ValidationError(
                f"Empty integer range [{low}, {high}]",
                field_name="high",
                invalid_value=high,
            )
        span = high - low + 1
        return low + min(int(self._rng.random() * span), span - 1)

    def uniform(self, low: float, high: float) -> float:
        """Draw a float in [low, high)."""
        return low + (high - low) * self._rng.random()

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element.

        Raises:
            EmptyCandidateSetError: If ``items`` is empty.
        """
        if not items:
            raise EmptyCandidateSetError("Cannot choose from an empty sequence")
        return items[self.next_int(0, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy (Fisher-Yates); the input is untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next_int(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        """Return ``k`` distinct elements in draw order.

        Raises:
            ValidationError: If ``k`` exceeds the number of items.
        """
        if k > len(items) or k < 0:
            raise ValidationError(
                f"Cannot sample {k} items from {len(items)}",
                field_name="k",
                invalid_value=k,
            )
        return self.shuffle(items)[:k]

    def fork(self, offset: int) -> SeededRandom:
        """Create an independent stream for a sub-puzzle or round."""
        return SeededRandom(derive_seed(self._seed, offset))


def derive_seed(base_seed: int, offset: int) -> int:
    """Derive the seed for round ``offset`` of a session.

    Rounds are reproducible yet distinct: round i uses ``base + i``.
    """
    return base_seed + offset


def seed_from_text(text: str) -> int:
    """Map arbitrary text (e.g., a share code) to a stable integer seed."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % MAX_SEED


def daily_seed(day: date | None = None) -> int:
    """Seed shared by every player on a given day (YYYYMMDD).

    Args:
        day: The day; defaults to today.

    Returns:
        Integer seed such as 20240131.
    """
    day = day or date.today()
    return int(day.strftime("%Y%m%d"))


def random_seed() -> int:
    """Fresh unpredictable seed for an ad-hoc session."""
    seed = secrets.randbelow(MAX_SEED)
    logger.debug("Generated random seed", seed=seed)
    return seed


__all__ = [
    "MAX_SEED",
    "SeededRandom",
    "derive_seed",
    "seed_from_text",
    "daily_seed",
    "random_seed",
]
