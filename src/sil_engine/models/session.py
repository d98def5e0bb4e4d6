"""Session data models for the SIL game session engine.

Models:
    UISchema: Rendering hints a game advertises to the UI layer.
    GameMetadata: Static catalog entry for a game.
    GameContext: Immutable per-session configuration.
    GameState: Immutable snapshot of one game instance.
    PlayerAction: A single player input consumed by update.
    GameResultSummary: Final result of a completed game.
    RoundRecord: One round (or one game in Endurance) of a mode session.
    ModeResult: Outcome of a whole mode session.
"""

from __future__ import annotations

import time
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from sil_engine.models.enums import (
    ActionType,
    GameCategory,
    GameMode,
    UIFeedback,
    UIInput,
    UILayout,
)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# =============================================================================
# Static Game Description
# =============================================================================


class UISchema(BaseModel):
    """How the UI layer should render a game.

    Opaque to the engine; carried on the game definition for the UI.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    layout: UILayout = Field(default=UILayout.GRID, description="Primary layout pattern")
    input: UIInput = Field(default=UIInput.TAP_ONE, description="Expected input method")
    feedback: UIFeedback = Field(default=UIFeedback.SCORE_BAR, description="Feedback style")
    animation: str | None = Field(default=None, description="Animation style")
    card_style: str | None = Field(default=None, description="Visual style of cards")


class GameMetadata(BaseModel):
    """Lightweight catalog entry, available without loading the game."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, description="Unique game identifier")
    name: str = Field(min_length=1, description="Display name")
    short_description: str = Field(default="", description="One-line description")
    category: GameCategory = Field(description="Catalog category")


# =============================================================================
# Session Models
# =============================================================================


class GameContext(BaseModel):
    """Per-session configuration handed to every plugin operation.

    Created once per session by the runner and never mutated; rounds
    that need a different seed get a derived copy.

    Attributes:
        user_id: Optional player identifier.
        seed: Integer driving all pseudo-randomness in the session.
        language: Content language code (e.g., 'en').
        mode: The play mode the session runs in.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str | None = Field(default=None, description="Player identifier")
    seed: int = Field(description="Seed for deterministic puzzle generation")
    language: str = Field(default="en", min_length=2, description="Language code")
    mode: GameMode = Field(default=GameMode.ONE_SHOT, description="Play mode")

    def with_seed(self, seed: int) -> GameContext:
        """Return a copy of this context with a different seed."""
        return self.model_copy(update={"seed": seed})

    def with_mode(self, mode: GameMode) -> GameContext:
        """Return a copy of this context with a different mode."""
        return self.model_copy(update={"mode": mode})


class GameState(BaseModel):
    """Snapshot of a single game instance.

    States are replaced, never mutated: every accepted update returns a
    new GameState. ``step`` never decreases and ``done`` never goes back
    to False once set.

    Attributes:
        step: Number of accepted actions so far.
        done: Whether the game reached a terminal state.
        data: Game-specific JSON-serializable payload.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    step: Annotated[int, Field(ge=0)] = Field(default=0, description="Accepted action count")
    done: bool = Field(default=False, description="Terminal flag")
    data: dict[str, Any] = Field(default_factory=dict, description="Game payload")

    def advance(self, data: dict[str, Any], *, done: bool = False) -> GameState:
        """Build the successor state with ``step + 1``.

        Args:
            data: Replacement game payload.
            done: Whether the successor is terminal.

        Returns:
            A new GameState.
        """
        return GameState(step=self.step + 1, done=self.done or done, data=data)


class PlayerAction(BaseModel):
    """A single player input.

    Attributes:
        type: Action kind.
        payload: Action arguments (e.g., ``{"index": 3}``).
        timestamp: Capture time in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ActionType = Field(description="Action kind")
    payload: dict[str, Any] = Field(default_factory=dict, description="Action arguments")
    timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")

    @classmethod
    def select(cls, index: int) -> PlayerAction:
        """Shortcut for a selection of the candidate at ``index``."""
        return cls(type=ActionType.SELECT, payload={"index": index})

    @classmethod
    def submit(cls, text: str) -> PlayerAction:
        """Shortcut for a free-text submission."""
        return cls(type=ActionType.SUBMIT, payload={"text": text})

    @classmethod
    def quit(cls) -> PlayerAction:
        """Shortcut for the player ending the mode session."""
        return cls(type=ActionType.QUIT)


class GameResultSummary(BaseModel):
    """Result of a completed game.

    Produced exactly once per completed session and immutable afterwards.
    Bounds on ``score`` are enforced by the runner, which reports a
    violation as a plugin defect instead of clamping it.

    Attributes:
        score: Integer score in [0, 100].
        duration_ms: Wall time of the game in milliseconds.
        skill_signals: Named cognitive sub-dimension values (~0-100).
        accuracy: Optional accuracy metric (0-100).
        metadata: Game-specific details.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    score: int | float = Field(description="Final score")
    duration_ms: Annotated[int, Field(ge=0)] = Field(default=0, description="Duration in ms")
    skill_signals: dict[str, float] = Field(default_factory=dict, description="Skill signals")
    accuracy: float | None = Field(default=None, description="Accuracy (0-100)")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Game details")


class RoundRecord(BaseModel):
    """One completed round of a mode session.

    In Endurance mode each record is one game of the sequence.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    game_id: str = Field(description="Game played in this round")
    round_index: Annotated[int, Field(ge=0)] = Field(description="0-based round position")
    seed: int = Field(description="Seed the round was initialized with")
    summary: GameResultSummary = Field(description="Round result")


class ModeResult(BaseModel):
    """Outcome of a completed mode session.

    Attributes:
        mode: The mode that was played.
        summary: Mode-level aggregate summary.
        rounds: Completed rounds in play order.
        metadata: Mode bookkeeping (round counts, deadline, game ids).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: GameMode = Field(description="Mode played")
    summary: GameResultSummary = Field(description="Aggregate summary")
    rounds: list[RoundRecord] = Field(default_factory=list, description="Completed rounds")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Mode bookkeeping")

    @property
    def round_scores(self) -> list[int | float]:
        """Scores of the completed rounds, in order."""
        return [record.summary.score for record in self.rounds]


__all__ = [
    "now_ms",
    "UISchema",
    "GameMetadata",
    "GameContext",
    "GameState",
    "PlayerAction",
    "GameResultSummary",
    "RoundRecord",
    "ModeResult",
]
