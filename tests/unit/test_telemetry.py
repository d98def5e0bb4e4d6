"""Tests for telemetry events and sinks."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter

from sil_engine.models import GameMode
from sil_engine.telemetry import (
    EventSink,
    GameSessionEndEvent,
    GameSessionStartEvent,
    InMemoryEventSink,
    LoggingEventSink,
    SessionEndMetadata,
    SessionStartMetadata,
    TelemetryEvent,
)


@pytest.fixture
def start_event() -> GameSessionStartEvent:
    """Provide a session start event.

    Returns:
        GameSessionStartEvent for a grip journey.
    """
    return GameSessionStartEvent(
        session_id="s-1",
        user_id="u-1",
        metadata=SessionStartMetadata(game_id="grip", mode=GameMode.JOURNEY, seed=42),
    )


@pytest.fixture
def end_event() -> GameSessionEndEvent:
    """Provide a session end event.

    Returns:
        GameSessionEndEvent with one skill signal.
    """
    return GameSessionEndEvent(
        session_id="s-1",
        metadata=SessionEndMetadata(
            game_id="grip",
            mode=GameMode.JOURNEY,
            score=60,
            duration_ms=1200,
            completed=True,
            skill_signals={"precision": 60.0},
        ),
    )


class TestEvents:
    """Tests for the event models."""

    def test_defaults(self, start_event: GameSessionStartEvent) -> None:
        """Test ids and timestamps are filled in."""
        assert start_event.type == "game_session_start"
        assert len(start_event.event_id) == 32
        assert start_event.timestamp > 0

    def test_discriminated_round_trip(self, end_event: GameSessionEndEvent) -> None:
        """Test serialized events parse back to the right event class."""
        adapter = TypeAdapter(TelemetryEvent)

        parsed = adapter.validate_python(end_event.model_dump(mode="json"))

        assert isinstance(parsed, GameSessionEndEvent)
        assert parsed.metadata.skill_signals == {"precision": 60.0}
        assert parsed.metadata.mode == GameMode.JOURNEY


class TestSinks:
    """Tests for the event sinks."""

    def test_in_memory_sink(
        self,
        event_sink: InMemoryEventSink,
        start_event: GameSessionStartEvent,
        end_event: GameSessionEndEvent,
    ) -> None:
        """Test events are kept in emission order and filterable."""
        event_sink.emit(start_event)
        event_sink.emit(end_event)

        assert event_sink.events == [start_event, end_event]
        assert event_sink.of_type("game_session_end") == [end_event]
        assert len(event_sink) == 2

        event_sink.clear()
        assert len(event_sink) == 0

    def test_logging_sink(self, start_event: GameSessionStartEvent) -> None:
        """Test the logging sink accepts events."""
        sink = LoggingEventSink()

        sink.emit(start_event)

        assert isinstance(sink, EventSink)
