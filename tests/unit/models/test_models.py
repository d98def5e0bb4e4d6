"""Tests for the session and profile models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sil_engine.models import (
    ActionType,
    BrainprintDimension,
    GameContext,
    GameMode,
    GameResultSummary,
    GameState,
    ModeResult,
    PlayerAction,
    RoundRecord,
)


class TestGameMode:
    """Tests for GameMode."""

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [(GameMode.ONE_SHOT, "One Shot"), (GameMode.JOURNEY, "Journey"), (GameMode.ENDURANCE, "Endurance")],
    )
    def test_display_name(self, mode: GameMode, expected: str) -> None:
        """Test display names are title-cased."""
        assert mode.display_name == expected

    def test_from_value(self) -> None:
        """Test modes parse from their wire value."""
        assert GameMode("arena") is GameMode.ARENA


class TestGameContext:
    """Tests for GameContext."""

    def test_defaults(self) -> None:
        """Test language and mode defaults."""
        context = GameContext(seed=5)

        assert context.language == "en"
        assert context.mode == GameMode.ONE_SHOT
        assert context.user_id is None

    def test_copies(self) -> None:
        """Test with_seed and with_mode leave the original untouched."""
        context = GameContext(seed=5)

        assert context.with_seed(9).seed == 9
        assert context.with_mode(GameMode.ARENA).mode == GameMode.ARENA
        assert context.seed == 5

    def test_frozen(self) -> None:
        """Test contexts cannot be mutated."""
        context = GameContext(seed=5)

        with pytest.raises(ValidationError):
            context.seed = 6  # type: ignore[misc]


class TestGameState:
    """Tests for GameState."""

    def test_advance(self) -> None:
        """Test advance increments the step and replaces the data."""
        state = GameState(data={"a": 1})

        successor = state.advance({"a": 2}, done=True)

        assert successor.step == 1
        assert successor.done
        assert successor.data == {"a": 2}
        assert state.step == 0

    def test_done_is_sticky(self) -> None:
        """Test a done state stays done when advanced."""
        done = GameState(step=3, done=True)

        assert done.advance({}).done

    def test_negative_step_rejected(self) -> None:
        """Test step cannot be negative."""
        with pytest.raises(ValidationError):
            GameState(step=-1)


class TestPlayerAction:
    """Tests for PlayerAction shortcuts."""

    def test_shortcuts(self) -> None:
        """Test select, submit and quit build the expected actions."""
        assert PlayerAction.select(3).payload == {"index": 3}
        assert PlayerAction.submit("ocean").payload == {"text": "ocean"}
        assert PlayerAction.quit().type == ActionType.QUIT

    def test_unknown_type_rejected(self) -> None:
        """Test action types are validated."""
        with pytest.raises(ValidationError):
            PlayerAction(type="jump")


class TestResults:
    """Tests for summaries and mode results."""

    def test_round_scores(self) -> None:
        """Test round scores follow play order."""
        rounds = [
            RoundRecord(game_id="grip", round_index=i, seed=10 + i, summary=GameResultSummary(score=score))
            for i, score in enumerate([40, 90])
        ]
        result = ModeResult(mode=GameMode.JOURNEY, summary=GameResultSummary(score=65), rounds=rounds)

        assert result.round_scores == [40, 90]

    def test_negative_duration_rejected(self) -> None:
        """Test summaries reject negative durations."""
        with pytest.raises(ValidationError):
            GameResultSummary(score=10, duration_ms=-1)


class TestBrainprintDimension:
    """Tests for the running mean."""

    def test_fold(self) -> None:
        """Test folding values keeps an exact running mean."""
        dimension = BrainprintDimension(id="precision")

        for value in (80.0, 60.0, 100.0):
            dimension = dimension.fold(value)

        assert dimension.score == pytest.approx(80.0)
        assert dimension.sample_count == 3
