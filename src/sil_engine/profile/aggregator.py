"""Skill-signal aggregation into the Brainprint.

Each completed summary carries skill signals (``{"precision": 82.0}``).
The aggregator folds every signal into a per-dimension running mean:

    new = old + (value - old) / (n + 1),  n += 1

Dimensions absent from a summary are left untouched. Summaries recorded
with a session id are idempotent: replaying the same id is ignored, so
re-delivered telemetry never double counts.
"""

from __future__ import annotations

import math
import threading
from datetime import datetime, timezone
from typing import Mapping

from sil_engine.core.logging import get_logger
from sil_engine.models import BrainprintDimension, BrainprintProfile, GameResultSummary
from sil_engine.profile.store import InMemoryProfileStore, ProfileStore


logger = get_logger(__name__)

DEFAULT_USER_ID = "local"

SKILL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "semantic": ("precision", "inference", "association", "coherence", "bridging", "balance"),
    "creative": ("divergence", "creativity", "synthesis", "innovation"),
    "executive": ("executive", "attention", "selectivity", "focus", "decisiveness"),
    "affective": ("affective", "synesthesia", "intuition"),
}


def confidence_from_sessions(session_count: int) -> int:
    """Confidence (0-95) that a profile reflects the player.

    Grows logarithmically: about 50 after 10 sessions, 95 from 100 on.
    """
    if session_count <= 0:
        return 0
    if session_count >= 100:
        return 95
    score = 30 + 20 * math.log10(session_count)
    return int(min(95.0, max(0.0, score)) + 0.5)


class BrainprintAggregator:
    """Thread-safe Brainprint for one player.

    Example:
        >>> aggregator = BrainprintAggregator(InMemoryProfileStore(), user_id="u1")
        >>> aggregator.record(summary, session_id="s-1")
        True
        >>> aggregator.snapshot()["precision"].score
        82.0
    """

    def __init__(self, store: ProfileStore | None = None, *, user_id: str = DEFAULT_USER_ID) -> None:
        """Load (or create) the player's profile.

        Args:
            store: Where the profile is persisted; in-memory by default.
            user_id: Owner of the profile.
        """
        self.user_id = user_id
        self.store = store if store is not None else InMemoryProfileStore()
        self._lock = threading.Lock()
        self._profile = self.store.load(user_id) or BrainprintProfile(user_id=user_id)
        self._seen = set(self._profile.processed_session_ids)

    def record(self, summary: GameResultSummary, *, session_id: str | None = None) -> bool:
        """Fold a summary's skill signals into the profile.

        The profile is updated in place rather than rebuilt per record.

        Args:
            summary: Completed game summary.
            session_id: Identifier used for replay protection.

        Returns:
            False if the session id was already recorded, else True.
        """
        with self._lock:
            if session_id is not None and session_id in self._seen:
                logger.info("Skipping replayed session", user_id=self.user_id, session_id=session_id)
                return False

            profile = self._profile
            dimensions = profile.dimensions
            for dimension_id, value in summary.skill_signals.items():
                current = dimensions.get(dimension_id) or BrainprintDimension(id=dimension_id)
                dimensions[dimension_id] = current.fold(value)

            if session_id is not None:
                profile.processed_session_ids.append(session_id)
                self._seen.add(session_id)

            profile.total_sessions += 1
            profile.updated_at = datetime.now(timezone.utc)
            self.store.save(profile)

        logger.debug(
            "Brainprint updated",
            user_id=self.user_id,
            session_id=session_id,
            dimensions=sorted(summary.skill_signals),
        )
        return True

    def snapshot(self) -> dict[str, BrainprintDimension]:
        """Current statistics keyed by dimension id."""
        with self._lock:
            return dict(self._profile.dimensions)

    @property
    def profile(self) -> BrainprintProfile:
        with self._lock:
            return self._profile.model_copy(deep=True)

    @property
    def total_sessions(self) -> int:
        with self._lock:
            return self._profile.total_sessions

    def confidence_score(self) -> int:
        return confidence_from_sessions(self.total_sessions)

    def top_skills(self, count: int = 5) -> list[tuple[str, float]]:
        """Strongest dimensions, highest score first (ties by id)."""
        ranked = sorted(self.snapshot().values(), key=lambda d: (-d.score, d.id))
        return [(dimension.id, dimension.score) for dimension in ranked[:count]]

    def growth_areas(self, count: int = 3) -> list[tuple[str, float]]:
        """Weakest dimensions, lowest score first (ties by id)."""
        ranked = sorted(self.snapshot().values(), key=lambda d: (d.score, d.id))
        return [(dimension.id, dimension.score) for dimension in ranked[:count]]

    def compare(
        self,
        other: BrainprintAggregator | Mapping[str, BrainprintDimension],
    ) -> dict[str, float]:
        """Per-dimension difference ``other - self``.

        A dimension missing on either side counts as 0.
        """
        theirs = other.snapshot() if isinstance(other, BrainprintAggregator) else dict(other)
        ours = self.snapshot()
        return {
            dimension_id: (theirs[dimension_id].score if dimension_id in theirs else 0.0)
            - (ours[dimension_id].score if dimension_id in ours else 0.0)
            for dimension_id in sorted(set(ours) | set(theirs))
        }

    def category_distribution(self) -> dict[str, int]:
        """Average score per skill category, rounded; 0 for empty categories."""
        snapshot = self.snapshot()
        distribution: dict[str, int] = {}
        for category, skills in SKILL_CATEGORIES.items():
            values = [snapshot[skill].score for skill in skills if skill in snapshot]
            distribution[category] = int(sum(values) / len(values) + 0.5) if values else 0
        return distribution


__all__ = [
    "DEFAULT_USER_ID",
    "SKILL_CATEGORIES",
    "confidence_from_sessions",
    "BrainprintAggregator",
]
