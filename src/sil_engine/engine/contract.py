"""Game plugin contract.

Every game is a GameDefinition: static catalog attributes plus three
operations the mode runner drives.

    init(context)                  -> GameState   (deterministic in seed)
    update(context, state, action) -> GameState   (pure)
    summarize(context, state)      -> GameResultSummary

The runner never trusts a plugin blindly. ``check_transition`` and
``checked_summarize`` enforce the invariants every plugin must keep and
turn violations into ContractViolationError subclasses instead of
silently repairing them.

Example:
    >>> class Coin(GameDefinition):
    ...     id = "coin"
    ...     name = "COIN"
    ...     category = GameCategory.MATH_LOGIC
    ...     supported_modes = frozenset({GameMode.ONE_SHOT})
    ...     def init(self, context): ...
    ...     def update(self, context, state, action): ...
    ...     def summarize(self, context, state): ...
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import ClassVar

from sil_engine.core.exceptions import (
    SessionFatalError,
    SilEngineError,
    StateInvariantError,
    SummaryInvariantError,
    ValidationError,
)
from sil_engine.core.logging import get_logger
from sil_engine.models import (
    GameCategory,
    GameContext,
    GameMetadata,
    GameMode,
    GameResultSummary,
    GameState,
    PlayerAction,
    UISchema,
)


logger = get_logger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


# =============================================================================
# Plugin Base Class
# =============================================================================


class GameDefinition(ABC):
    """Base class for game plugins.

    Subclasses set the class attributes and implement the three
    operations. Instances hold no per-session state; everything a
    session needs lives in GameState.data.

    Attributes:
        id: Unique game identifier, matching the registry key.
        name: Display name.
        short_description: One-line description.
        category: Catalog category.
        supported_modes: Modes the game can be played in.
        ui_schema: Rendering hints for the UI layer.
    """

    id: ClassVar[str] = ""
    name: ClassVar[str] = ""
    short_description: ClassVar[str] = ""
    category: ClassVar[GameCategory] = GameCategory.ORIGINAL
    supported_modes: ClassVar[frozenset[GameMode]] = frozenset()
    ui_schema: ClassVar[UISchema] = UISchema()

    @abstractmethod
    def init(self, context: GameContext) -> GameState:
        """Create the initial state for a session.

        Must be deterministic in ``context.seed`` and the game's static
        content.

        Raises:
            ContentLoadError: If static content cannot be obtained.
        """

    @abstractmethod
    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        """Apply one player action.

        Must be pure. An action that does not fit the state returns the
        same ``state`` object unchanged.
        """

    @abstractmethod
    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        """Summarize a done state into a result with skill signals."""

    def supports(self, mode: GameMode) -> bool:
        """Whether the game can be played in ``mode``."""
        return mode in self.supported_modes

    def metadata(self) -> GameMetadata:
        """Catalog entry built from the class attributes."""
        return GameMetadata(
            id=self.id,
            name=self.name,
            short_description=self.short_description,
            category=self.category,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r})"


def validate_game_definition(game: object) -> GameDefinition:
    """Check that a loaded object is a usable game plugin.

    Args:
        game: Object produced by a registry loader.

    Returns:
        The same object, typed as a GameDefinition.

    Raises:
        ValidationError: If a required attribute or operation is missing.
    """
    if not isinstance(game, GameDefinition):
        raise ValidationError(
            f"Expected a GameDefinition, got {type(game).__name__}",
            field_name="game",
        )
    if not game.id:
        raise ValidationError("Game id must not be empty", field_name="id")
    if not game.name:
        raise ValidationError("Game name must not be empty", field_name="name", details={"game_id": game.id})
    if not game.supported_modes:
        raise ValidationError(
            "Game must support at least one mode",
            field_name="supported_modes",
            details={"game_id": game.id},
        )
    if not isinstance(game.ui_schema, UISchema):
        raise ValidationError("Game must declare a ui_schema", field_name="ui_schema", details={"game_id": game.id})
    for operation in ("init", "update", "summarize"):
        if not callable(getattr(game, operation, None)):
            raise ValidationError(
                f"Game operation '{operation}' is not callable",
                field_name=operation,
                details={"game_id": game.id},
            )
    return game


# =============================================================================
# Scoring Helpers
# =============================================================================


def round_score(value: float) -> int:
    """Round half-up and clamp to [0, 100]."""
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(value + 0.5)))


def proximity_score(normalized_distance: float) -> int:
    """Score a distance-based answer.

    Args:
        normalized_distance: Distance from the ideal answer, where 0 is
            perfect and 1 (or more) is as far as it counts.

    Returns:
        ``round(max(0, 100 - d * 100))``.
    """
    return round_score(max(0.0, 100.0 - normalized_distance * 100.0))


def exact_match_score(is_correct: bool) -> int:
    """100 for a correct answer, 0 otherwise."""
    return MAX_SCORE if is_correct else MIN_SCORE


# =============================================================================
# Invariant Checks
# =============================================================================


def check_transition(game: GameDefinition, before: GameState, after: GameState) -> None:
    """Verify that ``after`` is a legal successor of ``before``.

    Raises:
        StateInvariantError: If step decreased or done was reverted.
    """
    if after.step < before.step:
        raise StateInvariantError(
            "Game state step decreased",
            game_id=game.id,
            details={"before": before.step, "after": after.step},
        )
    if before.done and not after.done:
        raise StateInvariantError("Game state left the done state", game_id=game.id)


def check_summary(game: GameDefinition, summary: GameResultSummary) -> GameResultSummary:
    """Verify the score of a summary without altering it.

    Raises:
        SummaryInvariantError: If the score is not an integer in [0, 100].
    """
    score = summary.score
    if isinstance(score, bool) or not isinstance(score, int):
        raise SummaryInvariantError(
            "Summary score must be an integer",
            game_id=game.id,
            details={"score": score},
        )
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise SummaryInvariantError(
            f"Summary score must be within [{MIN_SCORE}, {MAX_SCORE}]",
            game_id=game.id,
            details={"score": score},
        )
    return summary


def checked_summarize(game: GameDefinition, context: GameContext, state: GameState) -> GameResultSummary:
    """Call ``game.summarize`` and enforce the summary invariants.

    Raises:
        SummaryInvariantError: If the state is not done or the score is invalid.
        SessionFatalError: If the plugin raised while summarizing.
    """
    if not state.done:
        raise SummaryInvariantError("Cannot summarize a state that is not done", game_id=game.id)

    try:
        summary = game.summarize(context, state)
    except SilEngineError as exc:
        logger.error("Summarize failed", game_id=game.id, error=str(exc))
        raise SessionFatalError(
            f"Game '{game.id}' failed to summarize: {exc.message}",
            details={"game_id": game.id},
        ) from exc
    except Exception as exc:
        logger.exception("Summarize raised unexpectedly", game_id=game.id)
        raise SessionFatalError(
            f"Game '{game.id}' failed to summarize: {exc}",
            details={"game_id": game.id},
        ) from exc

    return check_summary(game, summary)


__all__ = [
    "MIN_SCORE",
    "MAX_SCORE",
    "GameDefinition",
    "validate_game_definition",
    "round_score",
    "proximity_score",
    "exact_match_score",
    "check_transition",
    "check_summary",
    "checked_summarize",
]
