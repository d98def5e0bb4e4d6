"""Tests for the ModeRunner facade."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from sil_engine.core.config import GameSettings, Settings
from sil_engine.core.exceptions import (
    ContentLoadError,
    SessionStateError,
    UnknownGameError,
    UnsupportedModeError,
    ValidationError,
)
from sil_engine.engine.runner import ModeRunner
from sil_engine.games.registry import GameRegistry
from sil_engine.models import ActionType, GameMode, PlayerAction, RunnerPhase


def scored(value: int) -> PlayerAction:
    return PlayerAction(type=ActionType.SUBMIT, payload={"score": value})


class FailingSink:
    """Event sink that always raises."""

    def __init__(self) -> None:
        self.calls = 0

    def emit(self, event: Any) -> None:
        self.calls += 1
        raise RuntimeError("sink offline")


@pytest.fixture
def games(make_game: Callable[..., Any]) -> dict[str, Any]:
    """Provide stub games keyed by id.

    Returns:
        Mapping of game id to ScriptedGame.
    """
    return {
        "alpha": make_game("alpha"),
        "beta": make_game("beta"),
        "gamma": make_game("gamma"),
        "solo": make_game("solo", modes=frozenset({GameMode.ONE_SHOT})),
        "flaky": make_game("flaky", fail_inits=1),
    }


@pytest.fixture
def registry(games: dict[str, Any]) -> GameRegistry:
    """Provide a registry over the stub games.

    Returns:
        GameRegistry whose loaders return the stub instances.
    """
    return GameRegistry(
        loaders={game_id: (lambda g=game: g) for game_id, game in games.items()},
        metadata=[],
    )


@pytest.fixture
def runner(registry: GameRegistry, event_sink: Any, aggregator: Any, clock: Any) -> ModeRunner:
    """Provide a runner wired to the in-memory sink and aggregator.

    Returns:
        ModeRunner with three-round journeys.
    """
    settings = Settings(game=GameSettings(journey_rounds=3, arena_duration_ms=10_000))
    return ModeRunner(
        registry,
        event_sink=event_sink,
        aggregator=aggregator,
        settings=settings,
        clock=clock,
    )


class TestSessionCreation:
    """Tests for prepare and start."""

    @pytest.mark.asyncio
    async def test_start_begins_first_round(self, runner: ModeRunner, event_sink: Any) -> None:
        """Test start returns a session awaiting the first action."""
        session = await runner.start("alpha", GameMode.ONE_SHOT, user_id="player-1", seed=7)

        assert session.phase == RunnerPhase.AWAITING_ACTION
        assert session.context.seed == 7
        assert session.context.language == "en"
        assert runner.get_session(session.session_id) is session

        (event,) = event_sink.of_type("game_session_start")
        assert event.session_id == session.session_id
        assert event.user_id == "player-1"
        assert event.metadata.game_id == "alpha"
        assert event.metadata.mode == GameMode.ONE_SHOT
        assert event.metadata.seed == 7

    @pytest.mark.asyncio
    async def test_prepare_leaves_session_idle(self, runner: ModeRunner, event_sink: Any) -> None:
        """Test prepare builds the session without starting it."""
        session = await runner.prepare("alpha", "journey", seed=1)

        assert session.phase == RunnerPhase.IDLE
        assert len(event_sink) == 0

    @pytest.mark.asyncio
    async def test_random_seed_when_omitted(self, runner: ModeRunner) -> None:
        """Test a seed is generated when none is supplied."""
        session = await runner.prepare("alpha", GameMode.ONE_SHOT)

        assert isinstance(session.context.seed, int)

    @pytest.mark.asyncio
    async def test_unknown_mode(self, runner: ModeRunner) -> None:
        """Test an unknown mode string is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            await runner.prepare("alpha", "marathon")

        assert exc_info.value.details["field_name"] == "mode"

    @pytest.mark.asyncio
    async def test_invalid_config(self, runner: ModeRunner) -> None:
        """Test out-of-range and unknown config keys are rejected."""
        with pytest.raises(ValidationError):
            await runner.prepare("alpha", GameMode.JOURNEY, config={"rounds": 0})
        with pytest.raises(ValidationError):
            await runner.prepare("alpha", GameMode.JOURNEY, config={"laps": 3})

    @pytest.mark.asyncio
    async def test_several_games_outside_endurance(self, runner: ModeRunner) -> None:
        """Test only Endurance accepts a list of games."""
        with pytest.raises(ValidationError):
            await runner.prepare(["alpha", "beta"], GameMode.JOURNEY)

    @pytest.mark.asyncio
    async def test_unknown_game(self, runner: ModeRunner) -> None:
        """Test an unregistered game id is rejected."""
        with pytest.raises(UnknownGameError):
            await runner.start("grip2", GameMode.ONE_SHOT)

    @pytest.mark.asyncio
    async def test_unsupported_mode_before_init(self, runner: ModeRunner, games: dict[str, Any]) -> None:
        """Test mode support is checked before the game is initialized."""
        with pytest.raises(UnsupportedModeError):
            await runner.start("solo", GameMode.ARENA)

        assert games["solo"].init_seeds == []

    @pytest.mark.asyncio
    async def test_failed_init_can_be_retried(self, runner: ModeRunner, games: dict[str, Any]) -> None:
        """Test a session whose first init failed stays retrievable."""
        with pytest.raises(ContentLoadError):
            await runner.start("flaky", GameMode.ONE_SHOT, seed=10, session_id="flaky-1")

        session = runner.get_session("flaky-1")
        assert session is not None
        assert session.phase == RunnerPhase.INITIALIZING

        session.retry(20)
        session.submit(scored(55))

        assert session.result.summary.score == 55
        assert games["flaky"].init_seeds == [10, 20]


class TestRunGame:
    """Tests for run_game and completion wiring."""

    @pytest.mark.asyncio
    async def test_journey_uses_settings_rounds(self, runner: ModeRunner, aggregator: Any) -> None:
        """Test the default round count comes from settings."""
        result = await runner.run_game("alpha", GameMode.JOURNEY, [scored(30), scored(60), scored(90)])

        assert result.summary.score == 60
        assert result.metadata["total_rounds"] == 3
        assert aggregator.total_sessions == 1
        assert aggregator.snapshot()["precision"].score == pytest.approx(60.0)

    @pytest.mark.asyncio
    async def test_config_overrides_rounds(self, runner: ModeRunner) -> None:
        """Test caller config overrides the settings default."""
        result = await runner.run_game("alpha", GameMode.JOURNEY, [scored(10)], config={"rounds": 1})

        assert result.round_scores == [10]

    @pytest.mark.asyncio
    async def test_end_event(self, runner: ModeRunner, event_sink: Any) -> None:
        """Test completion emits one end event with the summary."""
        result = await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(75)], user_id="player-1")

        (event,) = event_sink.of_type("game_session_end")
        assert event.metadata.score == 75
        assert event.metadata.completed is True
        assert event.metadata.skill_signals == {"precision": 75.0}
        assert event.metadata.duration_ms == result.summary.duration_ms

    @pytest.mark.asyncio
    async def test_actions_run_out(self, runner: ModeRunner) -> None:
        """Test an unfinished One-Shot session is an error."""
        with pytest.raises(SessionStateError):
            await runner.run_game("alpha", GameMode.ONE_SHOT, [])

    @pytest.mark.asyncio
    async def test_arena_stopped_when_actions_run_out(self, runner: ModeRunner, event_sink: Any) -> None:
        """Test Arena sessions are stopped after the last action."""
        result = await runner.run_game("alpha", GameMode.ARENA, [scored(80), scored(60)])

        assert result.metadata["ended_by"] == "stopped"
        assert result.round_scores == [80, 60]
        (event,) = event_sink.of_type("game_session_end")
        assert event.metadata.completed is False

    @pytest.mark.asyncio
    async def test_endurance_publishes_each_game(
        self,
        runner: ModeRunner,
        event_sink: Any,
        aggregator: Any,
    ) -> None:
        """Test Endurance reports every finished game separately."""
        result = await runner.run_game(
            ["alpha", "beta", "gamma"],
            GameMode.ENDURANCE,
            [scored(90), scored(40), PlayerAction.quit()],
            session_id="endurance-1",
        )

        assert [r.game_id for r in result.rounds] == ["alpha", "beta"]
        ends = event_sink.of_type("game_session_end")
        assert [(e.metadata.game_id, e.metadata.score) for e in ends] == [("alpha", 90), ("beta", 40)]
        assert event_sink.of_type("game_session_start")[0].metadata.game_id == "alpha,beta,gamma"
        assert aggregator.profile.processed_session_ids == ["endurance-1:alpha", "endurance-1:beta"]

    @pytest.mark.asyncio
    async def test_replayed_session_not_double_counted(self, runner: ModeRunner, aggregator: Any) -> None:
        """Test a repeated session id is folded only once."""
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(20)], session_id="same")
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(100)], session_id="same")

        assert aggregator.total_sessions == 1
        assert aggregator.snapshot()["precision"].score == 20.0

    @pytest.mark.asyncio
    async def test_sink_failure_does_not_break_play(self, registry: GameRegistry, clock: Any) -> None:
        """Test a failing sink is logged and the session still completes."""
        sink = FailingSink()
        runner = ModeRunner(registry, event_sink=sink, clock=clock)

        result = await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(45)])

        assert result.summary.score == 45
        assert sink.calls == 2

    @pytest.mark.asyncio
    async def test_active_sessions(self, runner: ModeRunner) -> None:
        """Test completed sessions drop out of active_sessions."""
        running = await runner.start("alpha", GameMode.ONE_SHOT)
        await runner.run_game("beta", GameMode.ONE_SHOT, [scored(1)])

        assert runner.active_sessions == [running]


class TestPerPlayerProfiles:
    """Tests for crediting summaries to the session's player."""

    @pytest.mark.asyncio
    async def test_players_do_not_share_a_brainprint(
        self,
        runner: ModeRunner,
        aggregator: Any,
        profile_store: Any,
    ) -> None:
        """Test one player's scores never move another player's profile."""
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(100)], user_id="alice")
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(0)], user_id="bob")

        alice = runner.aggregator_for("alice")
        assert alice is not None
        precision = alice.snapshot()["precision"]
        assert (precision.score, precision.sample_count) == (100.0, 1)
        assert profile_store.load("bob").dimensions["precision"].score == 0.0
        assert aggregator.total_sessions == 0

    @pytest.mark.asyncio
    async def test_sessions_without_user_use_injected_aggregator(self, runner: ModeRunner, aggregator: Any) -> None:
        """Test anonymous and same-user sessions fold into the injected aggregator."""
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(30)])
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(50)], user_id="player-1")

        assert runner.aggregator_for(None) is aggregator
        assert runner.aggregator_for("player-1") is aggregator
        assert aggregator.total_sessions == 2

    @pytest.mark.asyncio
    async def test_progress_follows_each_game(self, runner: ModeRunner, profile_store: Any) -> None:
        """Test each published game adds XP to its player's stored progress."""
        await runner.run_game(
            ["alpha", "beta"],
            GameMode.ENDURANCE,
            [scored(95), scored(10)],
            user_id="alice",
        )

        progress = profile_store.load_progress("alice")
        assert progress.xp == 11
        assert progress.stats.total_games_played == 2
        assert progress.stats.best_score == 95
        assert progress.stats.favorite_game == "alpha"
        assert [badge.id for badge in progress.badges] == ["score-95"]
        assert profile_store.load_progress("bob") is None

    @pytest.mark.asyncio
    async def test_replay_adds_no_progress(self, runner: ModeRunner) -> None:
        """Test a replayed session earns no XP."""
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(50)], session_id="dup", user_id="alice")
        await runner.run_game("alpha", GameMode.ONE_SHOT, [scored(50)], session_id="dup", user_id="alice")

        tracker = runner.progress_for("alice")
        assert tracker is not None
        assert tracker.progress.xp == 5

    def test_no_aggregator_no_profiles(self, registry: GameRegistry, clock: Any) -> None:
        """Test a runner without an aggregator tracks nothing."""
        runner = ModeRunner(registry, clock=clock)

        assert runner.aggregator_for("alice") is None
        assert runner.progress_for("alice") is None
