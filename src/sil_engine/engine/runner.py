"""Mode runner facade.

Resolves games through the registry, builds the session context, and
wires completed sessions to telemetry and the Brainprint:

    runner = ModeRunner(event_sink=sink, aggregator=aggregator)
    session = await runner.start("grip", GameMode.JOURNEY, seed=42)
    session.submit(PlayerAction.select(3))
    ...
    session.result.summary.score

Every summary a session produces is emitted as one game_session_end
event and folded into the aggregator: the mode-level summary for
One-Shot, Journey and Arena, and each game's own summary for Endurance.
Summaries are credited to the session's player: each user id gets its
own Brainprint and progression over the aggregator's store, and
sessions without a user id go to the injected aggregator.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sil_engine.core.config import Settings, get_settings
from sil_engine.core.exceptions import (
    ContentLoadError,
    SessionStateError,
    UnsupportedModeError,
    ValidationError,
)
from sil_engine.core.logging import get_logger, session_log_context
from sil_engine.engine.contract import GameDefinition
from sil_engine.engine.modes import (
    END_STOPPED,
    ArenaSession,
    Clock,
    EnduranceSession,
    JourneySession,
    ModeSession,
    OneShotSession,
)
from sil_engine.engine.random_source import random_seed
from sil_engine.games.registry import GameRegistry, get_registry
from sil_engine.models import GameContext, GameMode, ModeResult, PlayerAction, now_ms
from sil_engine.profile.aggregator import BrainprintAggregator
from sil_engine.profile.progression import ProgressTracker
from sil_engine.telemetry import (
    EventSink,
    GameSessionEndEvent,
    GameSessionStartEvent,
    SessionEndMetadata,
    SessionStartMetadata,
)


logger = get_logger(__name__)


class ModeConfig(BaseModel):
    """Caller overrides for mode behavior; unset fields use settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rounds: int | None = Field(default=None, ge=1, le=50, description="Journey rounds")
    duration_ms: int | None = Field(default=None, gt=0, description="Arena time box")


class ModeRunner:
    """Creates and tracks mode sessions.

    Args:
        registry: Where games are loaded from; the shared registry by default.
        event_sink: Receives session start/end events.
        aggregator: Receives summaries of sessions without a user id (or
            with its own user id); its store backs every other player.
        settings: Engine settings; ``get_settings()`` by default.
        clock: Millisecond clock used by sessions.
    """

    def __init__(
        self,
        registry: GameRegistry | None = None,
        *,
        event_sink: EventSink | None = None,
        aggregator: BrainprintAggregator | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.registry = registry if registry is not None else get_registry()
        self.event_sink = event_sink
        self.aggregator = aggregator
        self.settings = settings if settings is not None else get_settings()
        self._clock = clock or now_ms
        self._sessions: dict[str, ModeSession] = {}
        self._aggregators: dict[str, BrainprintAggregator] = {}
        self._trackers: dict[str, ProgressTracker] = {}

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    async def prepare(
        self,
        game_id: str | Sequence[str],
        mode: GameMode | str,
        *,
        user_id: str | None = None,
        language: str | None = None,
        seed: int | None = None,
        config: Mapping[str, Any] | None = None,
        session_id: str | None = None,
    ) -> ModeSession:
        """Load the games and build an idle session.

        Mode support is checked here, before any game state exists.

        Args:
            game_id: Game to play, or the ordered game ids for Endurance.
            mode: Play mode.
            user_id: Optional player id.
            language: Content language; settings default when omitted.
            seed: Base seed; a random one when omitted.
            config: Mode overrides (``rounds``, ``duration_ms``).
            session_id: Explicit session id.

        Raises:
            ValidationError: If the mode, game list or config is invalid.
            UnknownGameError: If a game id is not registered.
            ContentLoadError: If a game fails to load.
            UnsupportedModeError: If a game does not support the mode.
        """
        mode = self._parse_mode(mode)
        options = self._parse_config(config)
        game_ids = [game_id] if isinstance(game_id, str) else list(game_id)
        if not game_ids:
            raise ValidationError("At least one game id is required", field_name="game_id")
        if mode != GameMode.ENDURANCE and len(game_ids) != 1:
            raise ValidationError(
                f"{mode.display_name} mode plays exactly one game",
                field_name="game_id",
                invalid_value=game_ids,
            )

        games = await self.registry.load_many(game_ids)
        context = GameContext(
            user_id=user_id,
            seed=seed if seed is not None else random_seed(),
            language=language or self.settings.game.default_language,
            mode=mode,
        )
        session = self._create_session(mode, games, context, options, session_id)
        self._sessions[session.session_id] = session
        return session

    async def start(
        self,
        game_id: str | Sequence[str],
        mode: GameMode | str,
        *,
        user_id: str | None = None,
        language: str | None = None,
        seed: int | None = None,
        config: Mapping[str, Any] | None = None,
        session_id: str | None = None,
    ) -> ModeSession:
        """Prepare a session and begin its first round.

        If the first round fails to load its content the session is
        kept, still in initializing; fetch it with ``get_session`` and
        call ``retry`` with another seed.
        """
        session = await self.prepare(
            game_id,
            mode,
            user_id=user_id,
            language=language,
            seed=seed,
            config=config,
            session_id=session_id,
        )
        try:
            session.begin()
        except ContentLoadError:
            logger.warning("Session start deferred", session_id=session.session_id)
            raise
        return session

    async def run_game(
        self,
        game_id: str | Sequence[str],
        mode: GameMode | str,
        actions: Iterable[PlayerAction],
        **kwargs: Any,
    ) -> ModeResult:
        """Play ``actions`` through a new session and return its result.

        Sessions that can be stopped (Arena, Endurance) are stopped when
        the actions run out.

        Raises:
            SessionStateError: If a One-Shot or Journey session is still
                running after the last action.
        """
        session = await self.start(game_id, mode, **kwargs)
        with session_log_context(session.session_id, session.context.user_id):
            for action in actions:
                if session.is_complete:
                    break
                session.submit(action)

        if not session.is_complete:
            if not session.allows_stop:
                raise SessionStateError(
                    "Actions ran out before the session completed",
                    session_id=session.session_id,
                    phase=session.phase.value,
                )
            session.stop()
        return session.result

    def get_session(self, session_id: str) -> ModeSession | None:
        return self._sessions.get(session_id)

    def aggregator_for(self, user_id: str | None) -> BrainprintAggregator | None:
        """The Brainprint credited with ``user_id``'s sessions.

        None when the runner has no aggregator.
        """
        if self.aggregator is None:
            return None
        if user_id is None or user_id == self.aggregator.user_id:
            return self.aggregator
        if user_id not in self._aggregators:
            self._aggregators[user_id] = BrainprintAggregator(self.aggregator.store, user_id=user_id)
        return self._aggregators[user_id]

    def progress_for(self, user_id: str | None) -> ProgressTracker | None:
        """The progression credited with ``user_id``'s games, stored next to its Brainprint."""
        aggregator = self.aggregator_for(user_id)
        if aggregator is None:
            return None
        if aggregator.user_id not in self._trackers:
            self._trackers[aggregator.user_id] = ProgressTracker(aggregator.store, user_id=aggregator.user_id)
        return self._trackers[aggregator.user_id]

    @property
    def active_sessions(self) -> list[ModeSession]:
        return [session for session in self._sessions.values() if not session.is_complete]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_mode(mode: GameMode | str) -> GameMode:
        try:
            return GameMode(mode)
        except ValueError as exc:
            raise ValidationError(f"Unknown mode '{mode}'", field_name="mode", invalid_value=mode) from exc

    @staticmethod
    def _parse_config(config: Mapping[str, Any] | None) -> ModeConfig:
        try:
            return ModeConfig.model_validate(dict(config or {}))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid mode config: {exc.error_count()} error(s)",
                field_name="config",
                details={"errors": [err["msg"] for err in exc.errors()]},
            ) from exc

    def _create_session(
        self,
        mode: GameMode,
        games: list[GameDefinition],
        context: GameContext,
        options: ModeConfig,
        session_id: str | None,
    ) -> ModeSession:
        hooks: dict[str, Any] = {
            "session_id": session_id,
            "clock": self._clock,
            "on_start": self._session_started,
            "on_complete": self._session_completed,
        }
        if mode == GameMode.ENDURANCE:
            return EnduranceSession(games, context, **hooks)

        game = games[0]
        if not game.supports(mode):
            raise UnsupportedModeError(
                f"Game '{game.id}' does not support mode '{mode.value}'",
                game_id=game.id,
                mode=mode.value,
                supported_modes=sorted(m.value for m in game.supported_modes),
            )
        if mode == GameMode.JOURNEY:
            rounds = options.rounds or self.settings.game.journey_rounds
            return JourneySession(game, context, rounds=rounds, **hooks)
        if mode == GameMode.ARENA:
            duration_ms = options.duration_ms or self.settings.game.arena_duration_ms
            return ArenaSession(game, context, duration_ms=duration_ms, **hooks)
        return OneShotSession(game, context, **hooks)

    def _session_started(self, session: ModeSession) -> None:
        self._emit(
            GameSessionStartEvent(
                timestamp=self._clock(),
                user_id=session.context.user_id,
                session_id=session.session_id,
                metadata=SessionStartMetadata(
                    game_id=",".join(session.game_ids),
                    mode=session.mode,
                    seed=session.context.seed,
                ),
            )
        )

    def _session_completed(self, session: ModeSession, result: ModeResult) -> None:
        completed = result.metadata.get("ended_by") != END_STOPPED
        published = session.published_summaries(result)
        user_id = session.context.user_id
        aggregator = self.aggregator_for(user_id)
        tracker = self.progress_for(user_id)
        for game_id, summary in published:
            self._emit(
                GameSessionEndEvent(
                    timestamp=self._clock(),
                    user_id=user_id,
                    session_id=session.session_id,
                    metadata=SessionEndMetadata(
                        game_id=game_id,
                        mode=session.mode,
                        score=summary.score,
                        duration_ms=summary.duration_ms,
                        completed=completed,
                        skill_signals=summary.skill_signals,
                    ),
                )
            )
            if aggregator is None or tracker is None:
                continue
            replay_key = session.session_id if len(published) == 1 else f"{session.session_id}:{game_id}"
            if aggregator.record(summary, session_id=replay_key):
                tracker.record(summary, game_id=game_id)

    def _emit(self, event: GameSessionStartEvent | GameSessionEndEvent) -> None:
        if self.event_sink is None:
            return
        try:
            self.event_sink.emit(event)
        except Exception:
            logger.exception("Event sink failed", event_type=event.type, session_id=event.session_id)


__all__ = [
    "ModeConfig",
    "ModeRunner",
]
