"""Mode sessions.

A mode session drives one or more rounds of game plugins through the
runner state machine:

    boot        idle -> initializing
    ready       initializing -> awaiting_action
    act         awaiting_action -> scoring
    resume      scoring -> awaiting_action      (round continues)
    next_round  scoring -> initializing         (next round)
    finish      scoring -> completed
    halt        awaiting_action -> completed    (stop, quit, timeout)
                initializing -> completed       (same, while a round init is pending)

Each mode decides which game (if any) plays round ``i`` and how round
results combine:

* One-Shot: a single round; its summary is the session summary.
* Journey: a fixed number of rounds of one game, averaged.
* Arena: rounds repeat until a deadline passes or the player stops;
  the in-flight round at that moment is discarded.
* Endurance: an ordered list of distinct games, one round each, which
  the player may quit early; each game's summary is kept individually.

Round ``i`` always runs with seed ``base + i`` so a whole session is
reproducible from its base seed. Only one action is processed at a
time; a session is not safe to share between threads.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Sequence

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from sil_engine.core.exceptions import (
    ContentLoadError,
    InvalidActionError,
    PostCompletionActionError,
    SessionFatalError,
    SessionStateError,
    StateInvariantError,
    SummaryInvariantError,
    UnsupportedModeError,
    ValidationError,
)
from sil_engine.core.logging import get_logger
from sil_engine.engine.contract import GameDefinition, check_transition, checked_summarize, round_score
from sil_engine.engine.random_source import derive_seed
from sil_engine.models import (
    ActionType,
    GameContext,
    GameMode,
    GameResultSummary,
    GameState,
    ModeResult,
    PlayerAction,
    RoundRecord,
    RunnerPhase,
    now_ms,
)


logger = get_logger(__name__)

Clock = Callable[[], int]
SessionCallback = Callable[["ModeSession"], None]
CompletionCallback = Callable[["ModeSession", ModeResult], None]

END_COMPLETED = "completed"
END_STOPPED = "stopped"
END_TIMEOUT = "timeout"

# Phases a session can be stopped or timed out from.
_HALTABLE = (RunnerPhase.AWAITING_ACTION, RunnerPhase.INITIALIZING)


# =============================================================================
# State Machine
# =============================================================================


class SessionMachine(StateMachine):
    """Runner phases and the transitions allowed between them."""

    idle = State("Idle", value=RunnerPhase.IDLE.value, initial=True)
    initializing = State("Initializing", value=RunnerPhase.INITIALIZING.value)
    awaiting_action = State("Awaiting action", value=RunnerPhase.AWAITING_ACTION.value)
    scoring = State("Scoring", value=RunnerPhase.SCORING.value)
    completed = State("Completed", value=RunnerPhase.COMPLETED.value, final=True)

    boot = idle.to(initializing)
    ready = initializing.to(awaiting_action)
    act = awaiting_action.to(scoring)
    resume = scoring.to(awaiting_action)
    next_round = scoring.to(initializing)
    finish = scoring.to(completed)
    halt = awaiting_action.to(completed) | initializing.to(completed)

    @property
    def phase(self) -> RunnerPhase:
        return RunnerPhase(str(self.current_state.value))


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of submitting one action to a mode session.

    - `accepted`: the plugin produced a new state.
    - `round_completed`: the action finished the current round.
    - `mode_completed`: the whole session is now complete.
    """

    state: GameState | None
    accepted: bool
    round_completed: bool = False
    mode_completed: bool = False


@dataclass(slots=True)
class ActiveRound:
    """The round currently being played."""

    game: GameDefinition
    index: int
    context: GameContext
    state: GameState
    started_at: int


def aggregate_rounds(records: Sequence[RoundRecord], *, duration_ms: int = 0) -> GameResultSummary:
    """Combine round summaries into one mode-level summary.

    Score is the half-up rounded mean of round scores (0 with no
    rounds). Each skill signal is its per-round sum divided by the
    number of rounds, so a dimension reported by only some rounds is
    diluted rather than over-weighted.
    """
    count = len(records)
    scores = [record.summary.score for record in records]
    if not count:
        return GameResultSummary(
            score=0,
            duration_ms=duration_ms,
            metadata={"round_scores": [], "rounds_completed": 0},
        )

    totals: dict[str, float] = {}
    for record in records:
        for dimension, value in record.summary.skill_signals.items():
            totals[dimension] = totals.get(dimension, 0.0) + value

    accuracies = [r.summary.accuracy for r in records if r.summary.accuracy is not None]
    return GameResultSummary(
        score=round_score(sum(scores) / count),
        duration_ms=duration_ms,
        skill_signals={dimension: total / count for dimension, total in totals.items()},
        accuracy=sum(accuracies) / len(accuracies) if accuracies else None,
        metadata={"round_scores": scores, "rounds_completed": count},
    )


# =============================================================================
# Base Session
# =============================================================================


class ModeSession(ABC):
    """Common round loop shared by every mode.

    Subclasses choose the game for each round and how completed rounds
    are combined. The session is driven by ``begin``, then ``submit``
    for each action, until ``result`` is available.

    Example:
        >>> session = JourneySession(game, GameContext(seed=7), rounds=3)
        >>> session.begin()
        >>> outcome = session.submit(PlayerAction.select(2))
    """

    mode: ClassVar[GameMode]
    allows_stop: ClassVar[bool] = False

    def __init__(
        self,
        context: GameContext,
        *,
        session_id: str | None = None,
        clock: Clock | None = None,
        on_start: SessionCallback | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> None:
        self.context = context if context.mode == self.mode else context.with_mode(self.mode)
        self.session_id = session_id or uuid.uuid4().hex
        self._clock = clock or now_ms
        self._on_start = on_start
        self._on_complete = on_complete

        self._machine = SessionMachine()
        self._round: ActiveRound | None = None
        self._pending_index = 0
        self._records: list[RoundRecord] = []
        self._result: ModeResult | None = None
        self._fatal = False
        self._started_at: int | None = None

    # -------------------------------------------------------------------------
    # Mode hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def game_for_round(self, index: int) -> GameDefinition | None:
        """Game that plays round ``index``, or None when the session is exhausted."""

    @abstractmethod
    def build_summary(self, duration_ms: int) -> GameResultSummary:
        """Mode-level summary over the completed rounds."""

    @property
    @abstractmethod
    def game_ids(self) -> list[str]:
        """Ids of the games this session plays."""

    def mode_metadata(self) -> dict[str, Any]:
        return {}

    def published_summaries(self, result: ModeResult) -> list[tuple[str, GameResultSummary]]:
        """Summaries reported to telemetry and the Brainprint, keyed by game id."""
        return [(self.game_ids[0], result.summary)]

    def _on_begin(self) -> None:
        """Called once the session enters initializing."""

    def _deadline_passed(self) -> bool:
        return False

    def _should_continue(self, next_index: int) -> bool:
        return self.game_for_round(next_index) is not None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> RunnerPhase:
        return self._machine.phase

    @property
    def is_complete(self) -> bool:
        return self._result is not None

    @property
    def state(self) -> GameState | None:
        """State of the in-flight round, if any."""
        return self._round.state if self._round else None

    @property
    def current_game(self) -> GameDefinition | None:
        return self._round.game if self._round else None

    @property
    def current_round(self) -> int:
        return self._round.index if self._round else self._pending_index

    @property
    def rounds(self) -> list[RoundRecord]:
        return list(self._records)

    @property
    def result(self) -> ModeResult:
        """The completed session result.

        Raises:
            SessionStateError: If the session has not completed.
        """
        if self._result is None:
            raise SessionStateError(
                "Session has not completed",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        return self._result

    # -------------------------------------------------------------------------
    # Driving the session
    # -------------------------------------------------------------------------

    def begin(self) -> GameState:
        """Start the session and initialize the first round.

        Returns:
            Initial state of round 0.

        Raises:
            SessionStateError: If the session was already started.
            ContentLoadError: If the first round cannot load its content;
                the session stays in initializing and can be retried.
        """
        if self.phase != RunnerPhase.IDLE:
            raise SessionStateError(
                "Session already started",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        self._fire("boot")
        self._started_at = self._clock()
        self._on_begin()
        logger.info(
            "Mode session started",
            session_id=self.session_id,
            mode=self.mode.value,
            games=self.game_ids,
            seed=self.context.seed,
        )
        if self._on_start is not None:
            self._on_start(self)
        return self._start_round(0)

    def retry(self, seed: int) -> GameState:
        """Re-attempt a failed round initialization with a new base seed.

        Raises:
            SessionStateError: If no initialization is pending.
        """
        if self.phase != RunnerPhase.INITIALIZING:
            raise SessionStateError(
                "Nothing to retry",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        logger.info("Retrying round init", session_id=self.session_id, seed=seed)
        self.context = self.context.with_seed(seed)
        return self._start_round(self._pending_index)

    def submit(self, action: PlayerAction) -> ActionOutcome:
        """Apply one player action to the in-flight round.

        Returns:
            What happened: whether the action was accepted and whether it
            completed the round or the whole session.

        Raises:
            PostCompletionActionError: If the session already completed.
            SessionFatalError: If an earlier summarize failed.
            SessionStateError: If no round is awaiting an action.
            StateInvariantError: If the plugin broke a state invariant.
            SummaryInvariantError: If the plugin produced an invalid summary.
            ContentLoadError: If the next round cannot be initialized.
        """
        self._ensure_accepting(allow_pending=True)

        if self._deadline_passed():
            self._halt(END_TIMEOUT)
            return ActionOutcome(state=None, accepted=False, mode_completed=True)

        if action.type == ActionType.QUIT:
            if not self.allows_stop:
                logger.info("Quit ignored", session_id=self.session_id, mode=self.mode.value)
                return ActionOutcome(state=self.state, accepted=False)
            self._halt(END_STOPPED)
            return ActionOutcome(state=None, accepted=True, mode_completed=True)

        if self._round is None:
            raise SessionStateError(
                "Round is not initialized; retry first",
                session_id=self.session_id,
                phase=self.phase.value,
            )

        active = self._round
        self._fire("act")

        try:
            new_state = active.game.update(active.context, active.state, action)
        except InvalidActionError as exc:
            logger.debug("Action rejected", session_id=self.session_id, reason=exc.message)
            self._fire("resume")
            return ActionOutcome(state=active.state, accepted=False)
        except Exception:
            logger.warning(
                "Plugin update failed",
                session_id=self.session_id,
                game_id=active.game.id,
                round=active.index,
            )
            self._fire("resume")
            raise

        if new_state is active.state or new_state == active.state:
            self._fire("resume")
            return ActionOutcome(state=active.state, accepted=False)

        try:
            check_transition(active.game, active.state, new_state)
        except StateInvariantError:
            self._fire("resume")
            raise

        active.state = new_state
        if not new_state.done:
            self._fire("resume")
            return ActionOutcome(state=new_state, accepted=True)

        record = self._complete_round(active)
        next_index = record.round_index + 1
        if self._should_continue(next_index):
            self._fire("next_round")
            next_state = self._start_round(next_index)
            return ActionOutcome(state=next_state, accepted=True, round_completed=True)

        self._fire("finish")
        self._finalize(END_TIMEOUT if self._deadline_passed() else END_COMPLETED)
        return ActionOutcome(state=new_state, accepted=True, round_completed=True, mode_completed=True)

    def stop(self) -> ModeResult:
        """End the session at the player's request.

        The in-flight round is discarded. Allowed while a failed round
        init awaits a retry; completed rounds are kept.

        Raises:
            SessionStateError: If this mode cannot be stopped early.
        """
        if not self.allows_stop:
            raise SessionStateError(
                f"{self.mode.display_name} sessions cannot be stopped early",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        self._ensure_accepting(allow_pending=True)
        return self._halt(END_STOPPED)

    def check_deadline(self) -> bool:
        """Complete the session if its deadline has passed.

        Returns:
            True if the session is complete after the check.
        """
        if self._result is None and self.phase in _HALTABLE and self._deadline_passed():
            self._halt(END_TIMEOUT)
        return self.is_complete

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _fire(self, event: str) -> None:
        try:
            self._machine.send(event)
        except TransitionNotAllowed as exc:
            raise SessionStateError(
                f"Transition '{event}' not allowed",
                session_id=self.session_id,
                phase=self.phase.value,
            ) from exc

    def _ensure_accepting(self, *, allow_pending: bool = False) -> None:
        if self._result is not None:
            raise PostCompletionActionError(
                "Session already completed",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        if self._fatal:
            raise SessionFatalError(
                "Session cannot continue after a summarize failure",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        accepted = _HALTABLE if allow_pending else (RunnerPhase.AWAITING_ACTION,)
        if self.phase not in accepted:
            raise SessionStateError(
                "Session is not awaiting an action",
                session_id=self.session_id,
                phase=self.phase.value,
            )

    def _start_round(self, index: int) -> GameState:
        game = self.game_for_round(index)
        if game is None:
            raise SessionStateError(
                f"No game scheduled for round {index}",
                session_id=self.session_id,
                phase=self.phase.value,
            )
        context = self.context.with_seed(derive_seed(self.context.seed, index))
        self._pending_index = index

        try:
            state = game.init(context)
        except ContentLoadError as exc:
            logger.warning(
                "Round init failed",
                session_id=self.session_id,
                game_id=game.id,
                round=index,
                seed=context.seed,
                error=exc.message,
            )
            raise

        self._round = ActiveRound(
            game=game,
            index=index,
            context=context,
            state=state,
            started_at=self._clock(),
        )
        self._fire("ready")
        logger.debug("Round ready", session_id=self.session_id, game_id=game.id, round=index)
        return state

    def _complete_round(self, active: ActiveRound) -> RoundRecord:
        try:
            summary = checked_summarize(active.game, active.context, active.state)
        except (SessionFatalError, SummaryInvariantError):
            self._fatal = True
            logger.error(
                "Round summary rejected",
                session_id=self.session_id,
                game_id=active.game.id,
                round=active.index,
            )
            raise

        if summary.duration_ms == 0:
            elapsed = max(0, self._clock() - active.started_at)
            summary = summary.model_copy(update={"duration_ms": elapsed})

        record = RoundRecord(
            game_id=active.game.id,
            round_index=active.index,
            seed=active.context.seed,
            summary=summary,
        )
        self._records.append(record)
        self._round = None
        logger.info(
            "Round complete",
            session_id=self.session_id,
            game_id=record.game_id,
            round=record.round_index,
            score=summary.score,
        )
        return record

    def _halt(self, reason: str) -> ModeResult:
        if self._round is not None:
            logger.info(
                "Discarding in-flight round",
                session_id=self.session_id,
                game_id=self._round.game.id,
                round=self._round.index,
                reason=reason,
            )
            self._pending_index = self._round.index
            self._round = None
        self._fire("halt")
        return self._finalize(reason)

    def _finalize(self, reason: str) -> ModeResult:
        duration_ms = max(0, self._clock() - (self._started_at or 0))
        metadata: dict[str, Any] = {
            "session_id": self.session_id,
            "game_ids": self.game_ids,
            "rounds_completed": len(self._records),
            "ended_by": reason,
        }
        metadata.update(self.mode_metadata())
        self._result = ModeResult(
            mode=self.mode,
            summary=self.build_summary(duration_ms),
            rounds=list(self._records),
            metadata=metadata,
        )
        logger.info(
            "Mode session completed",
            session_id=self.session_id,
            mode=self.mode.value,
            score=self._result.summary.score,
            rounds=len(self._records),
            ended_by=reason,
        )
        if self._on_complete is not None:
            self._on_complete(self, self._result)
        return self._result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(session_id={self.session_id!r}, phase={self.phase.value!r})"


# =============================================================================
# Modes
# =============================================================================


class OneShotSession(ModeSession):
    """A single round; the round summary is the session summary."""

    mode = GameMode.ONE_SHOT

    def __init__(self, game: GameDefinition, context: GameContext, **kwargs: Any) -> None:
        super().__init__(context, **kwargs)
        self.game = game

    @property
    def game_ids(self) -> list[str]:
        return [self.game.id]

    def game_for_round(self, index: int) -> GameDefinition | None:
        return self.game if index == 0 else None

    def build_summary(self, duration_ms: int) -> GameResultSummary:
        return self._records[0].summary


class JourneySession(ModeSession):
    """A fixed number of rounds of one game.

    Args:
        game: The game to play.
        context: Session context; its seed is the base seed.
        rounds: Number of rounds (at least 1).
    """

    mode = GameMode.JOURNEY

    def __init__(self, game: GameDefinition, context: GameContext, *, rounds: int = 5, **kwargs: Any) -> None:
        if rounds < 1:
            raise ValidationError("Journey needs at least one round", field_name="rounds", invalid_value=rounds)
        super().__init__(context, **kwargs)
        self.game = game
        self.total_rounds = rounds

    @property
    def game_ids(self) -> list[str]:
        return [self.game.id]

    def game_for_round(self, index: int) -> GameDefinition | None:
        return self.game if index < self.total_rounds else None

    def build_summary(self, duration_ms: int) -> GameResultSummary:
        return aggregate_rounds(self._records, duration_ms=duration_ms)

    def mode_metadata(self) -> dict[str, Any]:
        return {"total_rounds": self.total_rounds}


class ArenaSession(ModeSession):
    """Timed rounds of one game.

    The deadline is fixed when the session begins. It is checked
    passively, on each submitted action and at each round boundary, so
    an idle session completes on its next interaction or an explicit
    ``check_deadline`` call.
    """

    mode = GameMode.ARENA
    allows_stop = True

    def __init__(
        self,
        game: GameDefinition,
        context: GameContext,
        *,
        duration_ms: int = 60_000,
        **kwargs: Any,
    ) -> None:
        if duration_ms <= 0:
            raise ValidationError(
                "Arena duration must be positive",
                field_name="duration_ms",
                invalid_value=duration_ms,
            )
        super().__init__(context, **kwargs)
        self.game = game
        self.duration_ms = duration_ms
        self.deadline: int | None = None

    @property
    def game_ids(self) -> list[str]:
        return [self.game.id]

    @property
    def remaining_ms(self) -> int:
        if self.deadline is None:
            return self.duration_ms
        return max(0, self.deadline - self._clock())

    def game_for_round(self, index: int) -> GameDefinition | None:
        return self.game

    def _on_begin(self) -> None:
        self.deadline = self._clock() + self.duration_ms

    def _deadline_passed(self) -> bool:
        return self.deadline is not None and self._clock() >= self.deadline

    def _should_continue(self, next_index: int) -> bool:
        return not self._deadline_passed()

    def build_summary(self, duration_ms: int) -> GameResultSummary:
        return aggregate_rounds(self._records, duration_ms=duration_ms)

    def mode_metadata(self) -> dict[str, Any]:
        return {"duration_ms": self.duration_ms, "deadline": self.deadline}


class EnduranceSession(ModeSession):
    """A sequence of distinct games, one round each.

    Every game is checked for endurance support before any of them is
    initialized. A QUIT action ends the session after the games already
    finished; the game in progress is discarded.
    """

    mode = GameMode.ENDURANCE
    allows_stop = True

    def __init__(self, games: Sequence[GameDefinition], context: GameContext, **kwargs: Any) -> None:
        if not games:
            raise ValidationError("Endurance needs at least one game", field_name="games")
        ids = [game.id for game in games]
        if len(set(ids)) != len(ids):
            raise ValidationError("Endurance games must be distinct", field_name="games", invalid_value=ids)
        for game in games:
            if not game.supports(GameMode.ENDURANCE):
                raise UnsupportedModeError(
                    f"Game '{game.id}' does not support endurance mode",
                    game_id=game.id,
                    mode=GameMode.ENDURANCE.value,
                    supported_modes=sorted(mode.value for mode in game.supported_modes),
                )
        super().__init__(context, **kwargs)
        self.games = list(games)

    @property
    def game_ids(self) -> list[str]:
        return [game.id for game in self.games]

    def game_for_round(self, index: int) -> GameDefinition | None:
        return self.games[index] if index < len(self.games) else None

    def build_summary(self, duration_ms: int) -> GameResultSummary:
        summary = aggregate_rounds(self._records, duration_ms=duration_ms)
        metadata = dict(summary.metadata)
        metadata["game_scores"] = {record.game_id: record.summary.score for record in self._records}
        return summary.model_copy(update={"metadata": metadata})

    def published_summaries(self, result: ModeResult) -> list[tuple[str, GameResultSummary]]:
        return [(record.game_id, record.summary) for record in result.rounds]


__all__ = [
    "Clock",
    "END_COMPLETED",
    "END_STOPPED",
    "END_TIMEOUT",
    "SessionMachine",
    "ActionOutcome",
    "ActiveRound",
    "aggregate_rounds",
    "ModeSession",
    "OneShotSession",
    "JourneySession",
    "ArenaSession",
    "EnduranceSession",
]
