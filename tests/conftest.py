"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the SIL game session engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import pytest

from sil_engine.core.exceptions import ContentLoadError, InvalidActionError
from sil_engine.engine.contract import GameDefinition
from sil_engine.models import (
    ActionType,
    GameCategory,
    GameContext,
    GameMode,
    GameResultSummary,
    GameState,
    PlayerAction,
)


if TYPE_CHECKING:
    from collections.abc import Generator

    from sil_engine.profile import BrainprintAggregator, InMemoryProfileStore
    from sil_engine.semantics import EmbeddingService
    from sil_engine.telemetry import InMemoryEventSink


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and process-wide singletons around each test."""
    from sil_engine.core.config import clear_settings_cache
    from sil_engine.games.registry import get_registry
    from sil_engine.semantics.embeddings import get_embedding_service

    clear_settings_cache()
    get_embedding_service.cache_clear()
    get_registry.cache_clear()
    yield
    clear_settings_cache()
    get_embedding_service.cache_clear()
    get_registry.cache_clear()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "SIL_ENGINE_DEBUG": "true",
        "SIL_ENGINE_LOG_LEVEL": "DEBUG",
        "SIL_ENGINE_GAME_JOURNEY_ROUNDS": "3",
        "SIL_ENGINE_GAME_ARENA_DURATION_MS": "30000",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed time.

    Returns:
        FakeClock instance.
    """
    return FakeClock()


# =============================================================================
# Stub Games
# =============================================================================


class ScriptedGame(GameDefinition):
    """Game whose score is whatever the player submits.

    ``PlayerAction(type=SUBMIT, payload={"score": n})`` records ``n``;
    the round is done after ``steps`` such actions. A CUSTOM action with
    ``{"rewind": True}`` returns a state with a lower step; any other
    CUSTOM action raises InvalidActionError. The first ``fail_updates``
    update calls raise ContentLoadError.
    """

    name = "Scripted"
    short_description = "Test game with scripted scores"
    category = GameCategory.ORIGINAL

    def __init__(
        self,
        game_id: str = "scripted",
        *,
        steps: int = 1,
        modes: frozenset[GameMode] | None = None,
        fail_inits: int = 0,
        fail_updates: int = 0,
        summarize_error: Exception | None = None,
        score_override: Any = None,
    ) -> None:
        self.id = game_id
        self.supported_modes = frozenset(GameMode) if modes is None else frozenset(modes)
        self.steps = steps
        self.fail_inits = fail_inits
        self.fail_updates = fail_updates
        self.summarize_error = summarize_error
        self.score_override = score_override
        self.init_seeds: list[int] = []

    def init(self, context: GameContext) -> GameState:
        self.init_seeds.append(context.seed)
        if self.fail_inits > 0:
            self.fail_inits -= 1
            raise ContentLoadError("Scripted content missing", game_id=self.id, resource=str(context.seed))
        return GameState(data={"seed": context.seed, "score": 0})

    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        if state.done:
            return state
        if self.fail_updates > 0:
            self.fail_updates -= 1
            raise ContentLoadError("Scripted content dropped mid-round", game_id=self.id)
        if action.type == ActionType.CUSTOM:
            if action.payload.get("rewind"):
                return GameState(step=max(0, state.step - 1), data={**state.data, "rewound": True})
            raise InvalidActionError("Scripted game rejects custom actions")
        if action.type != ActionType.SUBMIT or "score" not in action.payload:
            return state

        data = {**state.data, "score": action.payload["score"]}
        return state.advance(data, done=state.step + 1 >= self.steps)

    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        if self.summarize_error is not None:
            raise self.summarize_error
        score = self.score_override if self.score_override is not None else state.data["score"]
        return GameResultSummary(
            score=score,
            accuracy=float(state.data["score"]),
            skill_signals={"precision": float(state.data["score"])},
            metadata={"seed": state.data["seed"]},
        )


@pytest.fixture
def make_game() -> Callable[..., ScriptedGame]:
    """Factory for scripted stub games.

    Returns:
        Callable accepting the ScriptedGame constructor arguments.
    """

    def _make(game_id: str = "scripted", **kwargs: Any) -> ScriptedGame:
        return ScriptedGame(game_id, **kwargs)

    return _make


@pytest.fixture
def scripted_game() -> ScriptedGame:
    """Provide a single-step scripted game supporting every mode.

    Returns:
        ScriptedGame instance.
    """
    return ScriptedGame()


@pytest.fixture
def context() -> GameContext:
    """Provide a session context with a fixed seed.

    Returns:
        GameContext with seed 100.
    """
    return GameContext(user_id="player-1", seed=100)


# =============================================================================
# Telemetry & Profile Fixtures
# =============================================================================


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    """Provide an empty in-memory event sink.

    Returns:
        InMemoryEventSink instance.
    """
    from sil_engine.telemetry import InMemoryEventSink

    return InMemoryEventSink()


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    """Provide an empty in-memory profile store.

    Returns:
        InMemoryProfileStore instance.
    """
    from sil_engine.profile import InMemoryProfileStore

    return InMemoryProfileStore()


@pytest.fixture
def aggregator(profile_store: InMemoryProfileStore) -> BrainprintAggregator:
    """Provide an aggregator backed by the in-memory store.

    Args:
        profile_store: Store the profile is saved to.

    Returns:
        BrainprintAggregator for user 'player-1'.
    """
    from sil_engine.profile import BrainprintAggregator

    return BrainprintAggregator(profile_store, user_id="player-1")


# =============================================================================
# Embedding Fixtures
# =============================================================================


@pytest.fixture
def word_vectors() -> dict[str, list[float]]:
    """Provide a tiny hand-built vocabulary.

    'ocean' and 'land' are orthogonal anchors; 'shore' sits exactly
    between them while 'wave' leans towards 'ocean'.

    Returns:
        Mapping of word to 3-d vector.
    """
    return {
        "ocean": [1.0, 0.0, 0.0],
        "land": [0.0, 1.0, 0.0],
        "shore": [1.0, 1.0, 0.0],
        "wave": [0.9, 0.1, 0.0],
        "rock": [0.1, 0.9, 0.0],
        "star": [0.0, 0.0, 1.0],
    }


@pytest.fixture
def embedding_service(word_vectors: dict[str, list[float]]) -> EmbeddingService:
    """Provide an embedding service over the tiny vocabulary.

    Returns:
        EmbeddingService with frequencies for 'ocean' and 'wave'.
    """
    from sil_engine.semantics import EmbeddingService, MappingEmbeddingProvider

    provider = MappingEmbeddingProvider(word_vectors, frequencies={"ocean": 50_000.0, "wave": 9.0})
    return EmbeddingService(provider)
