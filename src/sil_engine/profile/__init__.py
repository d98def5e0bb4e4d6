"""Brainprint aggregation, player progression and profile storage."""

from __future__ import annotations

from sil_engine.profile.aggregator import (
    DEFAULT_USER_ID,
    SKILL_CATEGORIES,
    BrainprintAggregator,
    confidence_from_sessions,
)
from sil_engine.profile.progression import (
    BADGES,
    ProgressTracker,
    calculate_level,
    calculate_xp,
    check_badges,
    initialize_progress,
    should_continue_streak,
    update_progress,
    xp_for_level,
    xp_progress_to_next_level,
)
from sil_engine.profile.store import InMemoryProfileStore, ProfileStore


__all__ = [
    "DEFAULT_USER_ID",
    "SKILL_CATEGORIES",
    "BrainprintAggregator",
    "confidence_from_sessions",
    # Progression
    "BADGES",
    "ProgressTracker",
    "calculate_level",
    "calculate_xp",
    "check_badges",
    "initialize_progress",
    "should_continue_streak",
    "update_progress",
    "xp_for_level",
    "xp_progress_to_next_level",
    # Storage
    "InMemoryProfileStore",
    "ProfileStore",
]
