"""Enumeration types for the SIL game session engine.

These enums are the closed vocabularies shared by plugins, the mode
runner, and the registry: play modes, action kinds, runner phases, and
game catalog categories.
"""

from __future__ import annotations

from enum import StrEnum


class GameMode(StrEnum):
    """Play modes a game session can run in.

    The mode governs how many rounds of a game are played and how
    their results are combined.
    """

    ONE_SHOT = "one_shot"
    JOURNEY = "journey"
    ARENA = "arena"
    ENDURANCE = "endurance"

    @property
    def display_name(self) -> str:
        """Get a human readable mode name.

        Returns:
            Title-cased name (e.g., 'One Shot').
        """
        return self.value.replace("_", " ").title()


class ActionType(StrEnum):
    """Kinds of player actions accepted by game plugins.

    Plugins handle the subset relevant to their puzzle. QUIT is consumed
    by the mode runner itself and never reaches a plugin.
    """

    SELECT = "select"
    SUBMIT = "submit"
    TAP = "tap"
    TAP_MANY = "tap_many"
    CUSTOM = "custom"
    NOOP = "noop"
    QUIT = "quit"


class RunnerPhase(StrEnum):
    """Phases of the mode runner state machine."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    AWAITING_ACTION = "awaiting_action"
    SCORING = "scoring"
    COMPLETED = "completed"


class GameCategory(StrEnum):
    """Catalog categories used by the static game metadata table."""

    ORIGINAL = "original"
    SEMANTIC = "semantic"
    MATH_LOGIC = "math_logic"


class UILayout(StrEnum):
    """Primary layout pattern advertised in a game's UI schema."""

    GRID = "grid"
    LIST = "list"
    SINGLE = "single"
    DUAL_ANCHOR = "dual_anchor"
    WHEEL = "wheel"
    TIMELINE = "timeline"


class UIInput(StrEnum):
    """Input method a game expects from the player."""

    TAP_ONE = "tap_one"
    TAP_MANY = "tap_many"
    TYPE_ONE_WORD = "type_one_word"
    NONE = "none"


class UIFeedback(StrEnum):
    """Feedback display style advertised in a game's UI schema."""

    SCORE_BAR = "score_bar"
    HOT_COLD = "hot_cold"
    PERCENTILE = "percentile"
    RANK = "rank"
    NONE = "none"


__all__ = [
    "GameMode",
    "ActionType",
    "RunnerPhase",
    "GameCategory",
    "UILayout",
    "UIInput",
    "UIFeedback",
]
