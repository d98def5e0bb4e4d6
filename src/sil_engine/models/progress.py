"""Player progression models.

Progression is the motivational layer next to the Brainprint: experience
points and levels, the daily play streak, the daily goal, and badges.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class GoalType(StrEnum):
    """What a daily goal counts."""

    GAMES_PLAYED = "games_played"
    SCORE_THRESHOLD = "score_threshold"
    STREAK_DAYS = "streak_days"


class BadgeRarity(StrEnum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class DailyGoal(BaseModel):
    """Today's goal and how far the player got.

    Attributes:
        type: What the goal counts.
        target: Count needed to complete the goal.
        current: Count reached today, capped at ``target``.
        completed: Whether ``current`` reached ``target``.
        last_completed_date: Last day the goal was completed.
        xp_reward: Bonus experience advertised for completing the goal.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: GoalType = Field(default=GoalType.GAMES_PLAYED)
    target: Annotated[int, Field(ge=1)] = 3
    current: Annotated[int, Field(ge=0)] = 0
    completed: bool = False
    last_completed_date: date | None = None
    xp_reward: Annotated[int, Field(ge=0)] = 20


class Badge(BaseModel):
    """An achievement, earned once per player."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, description="Stable badge identifier")
    name: str
    description: str
    icon: str
    rarity: BadgeRarity
    earned_at: int = Field(default=0, ge=0, description="Epoch milliseconds")


class PlayerStats(BaseModel):
    """Lifetime play statistics.

    Attributes:
        total_games_played: Summaries folded into the progress.
        total_play_time_ms: Sum of summary durations.
        avg_score: Mean score over every game played.
        best_score: Highest score seen.
        favorite_game: Game id credited as the favorite.
        games_played_today: Games played on ``PlayerProgress.last_played_date``.
        last_session_at: When the last game was folded, epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_games_played: Annotated[int, Field(ge=0)] = 0
    total_play_time_ms: Annotated[int, Field(ge=0)] = 0
    avg_score: float = 0.0
    best_score: Annotated[float, Field(ge=0, le=100)] = 0.0
    favorite_game: str | None = None
    games_played_today: Annotated[int, Field(ge=0)] = 0
    last_session_at: Annotated[int, Field(ge=0)] = 0


class LevelProgress(BaseModel):
    """Where a total XP sits between two levels.

    Attributes:
        current_level: Level reached with the total XP.
        xp_for_current_level: Total XP at which ``current_level`` starts.
        xp_for_next_level: XP the next level takes on top of that.
        xp_progress: XP earned since ``current_level`` started.
        percentage: ``xp_progress`` as a share of ``xp_for_next_level``, 0-100.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    current_level: int
    xp_for_current_level: int
    xp_for_next_level: int
    xp_progress: int
    percentage: float


class PlayerProgress(BaseModel):
    """Persisted progression state for one player.

    ``last_played_date`` is None until the first game is folded.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str = Field(min_length=1, description="Progress owner")
    xp: Annotated[int, Field(ge=0)] = 0
    level: Annotated[int, Field(ge=1)] = 1
    streak: Annotated[int, Field(ge=0)] = 0
    last_played_date: date | None = None
    daily_goal: DailyGoal = Field(default_factory=DailyGoal)
    badges: tuple[Badge, ...] = ()
    stats: PlayerStats = Field(default_factory=PlayerStats)

    @property
    def badge_ids(self) -> frozenset[str]:
        return frozenset(badge.id for badge in self.badges)


__all__ = [
    "GoalType",
    "BadgeRarity",
    "DailyGoal",
    "Badge",
    "PlayerStats",
    "LevelProgress",
    "PlayerProgress",
]
