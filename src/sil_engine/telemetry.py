"""Session telemetry events.

The runner reports session lifecycle events to an injected EventSink
rather than a global store. Two sinks are provided: an in-memory sink
for tests and embedding hosts, and one that writes events to the
structured log.

Event shapes:
    game_session_start: {game_id, mode, seed}
    game_session_end: {game_id, mode, score, duration_ms, completed, skill_signals}
"""

from __future__ import annotations

import threading
import uuid
from typing import Annotated, Literal, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from sil_engine.core.logging import get_logger
from sil_engine.models import GameMode, now_ms


logger = get_logger(__name__)


# =============================================================================
# Event Models
# =============================================================================


class SessionStartMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: str
    mode: GameMode
    seed: int


class SessionEndMetadata(BaseModel):
    """Payload of a game_session_end event.

    Attributes:
        game_id: Game the summary belongs to.
        mode: Mode the session was played in.
        score: Summary score.
        duration_ms: Summary duration.
        completed: False when the player ended the session early.
        skill_signals: Skill signals of the summary.
    """

    model_config = ConfigDict(frozen=True)

    game_id: str
    mode: GameMode
    score: int | float
    duration_ms: int
    completed: bool
    skill_signals: dict[str, float] = Field(default_factory=dict)


class _BaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    user_id: str | None = None
    session_id: str | None = None


class GameSessionStartEvent(_BaseEvent):
    type: Literal["game_session_start"] = "game_session_start"
    metadata: SessionStartMetadata


class GameSessionEndEvent(_BaseEvent):
    type: Literal["game_session_end"] = "game_session_end"
    metadata: SessionEndMetadata


TelemetryEvent = Annotated[
    Union[GameSessionStartEvent, GameSessionEndEvent],
    Field(discriminator="type"),
]


# =============================================================================
# Sinks
# =============================================================================


@runtime_checkable
class EventSink(Protocol):
    """Destination for telemetry events."""

    def emit(self, event: GameSessionStartEvent | GameSessionEndEvent) -> None:
        ...


class InMemoryEventSink:
    """Collects events in a list."""

    def __init__(self) -> None:
        self._events: list[GameSessionStartEvent | GameSessionEndEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: GameSessionStartEvent | GameSessionEndEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[GameSessionStartEvent | GameSessionEndEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: str) -> list[GameSessionStartEvent | GameSessionEndEvent]:
        """Events whose ``type`` equals ``event_type``, in emission order."""
        return [event for event in self.events if event.type == event_type]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self.events)


class LoggingEventSink:
    """Writes every event to the structured log."""

    def emit(self, event: GameSessionStartEvent | GameSessionEndEvent) -> None:
        logger.info(
            "Telemetry event",
            event_type=event.type,
            session_id=event.session_id,
            user_id=event.user_id,
            **event.metadata.model_dump(mode="json"),
        )


__all__ = [
    "SessionStartMetadata",
    "SessionEndMetadata",
    "GameSessionStartEvent",
    "GameSessionEndEvent",
    "TelemetryEvent",
    "EventSink",
    "InMemoryEventSink",
    "LoggingEventSink",
]
