"""Brainprint profile models.

A Brainprint is the multi-dimensional player profile built by averaging
skill signals across sessions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class BrainprintDimension(BaseModel):
    """Running statistics for one cognitive dimension.

    Attributes:
        id: Dimension identifier (e.g., 'precision').
        score: Running mean of every signal recorded for the dimension.
        sample_count: Number of signals folded into the mean.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, description="Dimension identifier")
    score: float = Field(default=0.0, description="Running mean")
    sample_count: Annotated[int, Field(ge=0)] = Field(default=0, description="Samples folded")

    def fold(self, value: float) -> BrainprintDimension:
        """Return the dimension with ``value`` folded into the running mean."""
        count = self.sample_count + 1
        return BrainprintDimension(
            id=self.id,
            score=self.score + (value - self.score) / count,
            sample_count=count,
        )


class BrainprintProfile(BaseModel):
    """Persisted Brainprint state for one player.

    Attributes:
        user_id: Owner of the profile.
        dimensions: Dimension statistics keyed by dimension id.
        processed_session_ids: Sessions already folded, for replay protection.
        total_sessions: Number of summaries folded into the profile.
        updated_at: When the profile last changed.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    user_id: str = Field(min_length=1, description="Profile owner")
    dimensions: dict[str, BrainprintDimension] = Field(
        default_factory=dict,
        description="Dimension statistics",
    )
    processed_session_ids: list[str] = Field(
        default_factory=list,
        description="Session ids already folded into the profile",
    )
    total_sessions: Annotated[int, Field(ge=0)] = Field(default=0, description="Summaries folded")
    updated_at: datetime | None = Field(default=None, description="Last update time")


__all__ = [
    "BrainprintDimension",
    "BrainprintProfile",
]
