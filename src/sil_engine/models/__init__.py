"""Pydantic V2 schemas for the SIL game session engine.

Submodules:
    enums: Enumeration types (GameMode, ActionType, RunnerPhase, ...)
    session: Session models (GameContext, GameState, PlayerAction, ...)
    profile: Brainprint profile models
    progress: Player progression models (XP, streaks, badges)

Example:
    >>> from sil_engine.models import GameContext, GameMode, PlayerAction
    >>> ctx = GameContext(seed=42, mode=GameMode.JOURNEY)
    >>> action = PlayerAction.select(3)
"""

from __future__ import annotations

from sil_engine.models.enums import (
    ActionType,
    GameCategory,
    GameMode,
    RunnerPhase,
    UIFeedback,
    UIInput,
    UILayout,
)
from sil_engine.models.profile import BrainprintDimension, BrainprintProfile
from sil_engine.models.progress import (
    Badge,
    BadgeRarity,
    DailyGoal,
    GoalType,
    LevelProgress,
    PlayerProgress,
    PlayerStats,
)
from sil_engine.models.session import (
    GameContext,
    GameMetadata,
    GameResultSummary,
    GameState,
    ModeResult,
    PlayerAction,
    RoundRecord,
    UISchema,
    now_ms,
)


__all__ = [
    # Enumerations
    "ActionType",
    "GameCategory",
    "GameMode",
    "RunnerPhase",
    "UIFeedback",
    "UIInput",
    "UILayout",
    # Session
    "GameContext",
    "GameMetadata",
    "GameResultSummary",
    "GameState",
    "ModeResult",
    "PlayerAction",
    "RoundRecord",
    "UISchema",
    "now_ms",
    # Profile
    "BrainprintDimension",
    "BrainprintProfile",
    # Progress
    "Badge",
    "BadgeRarity",
    "DailyGoal",
    "GoalType",
    "LevelProgress",
    "PlayerProgress",
    "PlayerStats",
]
