"""Tests for the game plugin contract and its invariant checks."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from sil_engine.core.exceptions import (
    SessionFatalError,
    StateInvariantError,
    SummaryInvariantError,
    ValidationError,
)
from sil_engine.engine.contract import (
    check_summary,
    check_transition,
    checked_summarize,
    exact_match_score,
    proximity_score,
    round_score,
    validate_game_definition,
)
from sil_engine.models import GameCategory, GameContext, GameMode, GameResultSummary, GameState


class TestValidateGameDefinition:
    """Tests for validate_game_definition."""

    def test_accepts_valid_game(self, make_game: Callable[..., Any]) -> None:
        """Test a complete game passes validation unchanged."""
        game = make_game()

        assert validate_game_definition(game) is game

    def test_rejects_non_game(self) -> None:
        """Test arbitrary objects are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_game_definition(object())

        assert "GameDefinition" in str(exc_info.value)

    def test_rejects_empty_id(self, make_game: Callable[..., Any]) -> None:
        """Test a game needs an id."""
        with pytest.raises(ValidationError) as exc_info:
            validate_game_definition(make_game(""))

        assert exc_info.value.details["field_name"] == "id"

    def test_rejects_no_modes(self, make_game: Callable[..., Any]) -> None:
        """Test a game must support at least one mode."""
        with pytest.raises(ValidationError) as exc_info:
            validate_game_definition(make_game(modes=frozenset()))

        assert exc_info.value.details["field_name"] == "supported_modes"

    def test_metadata_from_class_attributes(self, make_game: Callable[..., Any]) -> None:
        """Test the catalog entry mirrors the game attributes."""
        metadata = make_game("alpha").metadata()

        assert metadata.id == "alpha"
        assert metadata.name == "Scripted"
        assert metadata.category == GameCategory.ORIGINAL

    def test_supports(self, make_game: Callable[..., Any]) -> None:
        """Test supports reflects supported_modes."""
        game = make_game(modes=frozenset({GameMode.ONE_SHOT}))

        assert game.supports(GameMode.ONE_SHOT)
        assert not game.supports(GameMode.ARENA)


class TestScoringHelpers:
    """Tests for the shared scoring helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(59.5, 60), (59.49, 59), (0.5, 1), (-3.0, 0), (140.0, 100), (100.0, 100)],
    )
    def test_round_score(self, value: float, expected: int) -> None:
        """Test half-up rounding with clamping."""
        assert round_score(value) == expected

    def test_proximity_score(self) -> None:
        """Test distance scoring."""
        assert proximity_score(0.0) == 100
        assert proximity_score(0.25) == 75
        assert proximity_score(1.0) == 0
        assert proximity_score(3.0) == 0

    def test_exact_match_score(self) -> None:
        """Test exact-match scoring."""
        assert exact_match_score(True) == 100
        assert exact_match_score(False) == 0


class TestInvariantChecks:
    """Tests for state and summary invariant checks."""

    def test_transition_forward_ok(self, make_game: Callable[..., Any]) -> None:
        """Test a forward step passes."""
        before = GameState()
        check_transition(make_game(), before, before.advance({}, done=True))

    def test_transition_step_decrease(self, make_game: Callable[..., Any]) -> None:
        """Test a decreasing step is a violation."""
        with pytest.raises(StateInvariantError):
            check_transition(make_game(), GameState(step=2), GameState(step=1))

    def test_transition_done_reverted(self, make_game: Callable[..., Any]) -> None:
        """Test leaving the done state is a violation."""
        with pytest.raises(StateInvariantError):
            check_transition(make_game(), GameState(step=1, done=True), GameState(step=2, done=False))

    def test_advance_keeps_done(self) -> None:
        """Test advance never clears the done flag."""
        state = GameState(step=1, done=True)

        assert state.advance({}, done=False).done is True

    @pytest.mark.parametrize("score", [101, -1, 55.5])
    def test_summary_bad_score(self, make_game: Callable[..., Any], score: Any) -> None:
        """Test out-of-range and fractional scores are rejected, not clamped."""
        with pytest.raises(SummaryInvariantError):
            check_summary(make_game(), GameResultSummary(score=score))

    def test_summary_bounds_inclusive(self, make_game: Callable[..., Any]) -> None:
        """Test 0 and 100 are valid scores."""
        game = make_game()

        assert check_summary(game, GameResultSummary(score=0)).score == 0
        assert check_summary(game, GameResultSummary(score=100)).score == 100


class TestCheckedSummarize:
    """Tests for checked_summarize."""

    def test_not_done_rejected(self, make_game: Callable[..., Any], context: GameContext) -> None:
        """Test summarizing a running state is a violation."""
        with pytest.raises(SummaryInvariantError):
            checked_summarize(make_game(), context, GameState())

    def test_valid_summary(self, make_game: Callable[..., Any], context: GameContext) -> None:
        """Test a valid summary is returned unchanged."""
        state = GameState(step=1, done=True, data={"seed": 1, "score": 70})

        summary = checked_summarize(make_game(), context, state)

        assert summary.score == 70
        assert summary.skill_signals == {"precision": 70.0}

    def test_plugin_error_is_fatal(self, make_game: Callable[..., Any], context: GameContext) -> None:
        """Test an exception inside summarize becomes SessionFatalError."""
        game = make_game(summarize_error=KeyError("score"))
        state = GameState(step=1, done=True, data={"seed": 1, "score": 70})

        with pytest.raises(SessionFatalError) as exc_info:
            checked_summarize(game, context, state)

        assert isinstance(exc_info.value.__cause__, KeyError)
        assert exc_info.value.details["game_id"] == "scripted"
