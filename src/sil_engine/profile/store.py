"""Brainprint profile storage.

The aggregator and the progress tracker read and write through the
ProfileStore protocol; hosts plug in their own persistence.
InMemoryProfileStore keeps everything for the life of the process.
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from sil_engine.core.logging import get_logger
from sil_engine.models import BrainprintProfile, PlayerProgress


logger = get_logger(__name__)


def _detached(profile: BrainprintProfile) -> BrainprintProfile:
    # Dimensions are frozen and ids are strings; only the containers are shared.
    return profile.model_copy(
        update={
            "dimensions": dict(profile.dimensions),
            "processed_session_ids": list(profile.processed_session_ids),
        }
    )


@runtime_checkable
class ProfileStore(Protocol):
    """Load and save Brainprint profiles and player progress by user id."""

    def load(self, user_id: str) -> BrainprintProfile | None:
        """Return the stored profile, or None for a new user."""
        ...

    def save(self, profile: BrainprintProfile) -> None:
        """Persist ``profile``, replacing any previous version."""
        ...

    def load_progress(self, user_id: str) -> PlayerProgress | None:
        """Return the stored progression, or None for a new user."""
        ...

    def save_progress(self, progress: PlayerProgress) -> None:
        """Persist ``progress``, replacing any previous version."""
        ...


class InMemoryProfileStore:
    """Process-local profile store.

    Profiles are copied on the way in and out, so callers never share
    mutable state with the store. Progress models are frozen and kept
    as given.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, BrainprintProfile] = {}
        self._progress: dict[str, PlayerProgress] = {}
        self._lock = threading.Lock()

    def load(self, user_id: str) -> BrainprintProfile | None:
        with self._lock:
            profile = self._profiles.get(user_id)
        return _detached(profile) if profile else None

    def save(self, profile: BrainprintProfile) -> None:
        with self._lock:
            self._profiles[profile.user_id] = _detached(profile)
        logger.debug("Profile saved", user_id=profile.user_id, sessions=profile.total_sessions)

    def load_progress(self, user_id: str) -> PlayerProgress | None:
        with self._lock:
            return self._progress.get(user_id)

    def save_progress(self, progress: PlayerProgress) -> None:
        with self._lock:
            self._progress[progress.user_id] = progress
        logger.debug("Progress saved", user_id=progress.user_id, xp=progress.xp, level=progress.level)

    def delete(self, user_id: str) -> bool:
        """Remove a profile and its progress. Returns True if a profile existed."""
        with self._lock:
            self._progress.pop(user_id, None)
            return self._profiles.pop(user_id, None) is not None

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._profiles

    def __len__(self) -> int:
        with self._lock:
            return len(self._profiles)


__all__ = [
    "ProfileStore",
    "InMemoryProfileStore",
]
