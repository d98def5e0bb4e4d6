"""SIL Game Session Engine.

Core of a cognitive-assessment game platform: a uniform plugin contract
for games, a mode runner for One-Shot, Journey, Arena and Endurance
play, a semantic scoring kernel, a Brainprint skill aggregator, and a
lazily loading game registry.

Example:
    >>> from sil_engine import ModeRunner, GameMode, PlayerAction, InMemoryEventSink
    >>>
    >>> runner = ModeRunner(event_sink=InMemoryEventSink())
    >>> session = await runner.start("numgrip", GameMode.JOURNEY, seed=20240131)
    >>> outcome = session.submit(PlayerAction.select(4))
    >>> session.result.summary.score  # once the journey completes

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 session and profile models.
    engine: Seeded randomness, plugin contract, modes and runner.
    semantics: Similarity, rarity, cluster heat, midpoint scoring.
    profile: Brainprint aggregation, player progression and profile storage.
    games: Game catalog, lazy registry, built-in plugins.
    telemetry: Session events and sinks.
"""

from __future__ import annotations

# Core
from sil_engine.core.config import Settings, get_settings
from sil_engine.core.exceptions import SilEngineError
from sil_engine.core.logging import configure_logging, get_logger

# Models
from sil_engine.models import (
    ActionType,
    GameContext,
    GameMode,
    GameResultSummary,
    GameState,
    ModeResult,
    PlayerAction,
)

# Engine
from sil_engine.engine import (
    GameDefinition,
    ModeSession,
    daily_seed,
    random_seed,
    seed_from_text,
)
from sil_engine.engine.runner import ModeRunner

# Registry, profile, telemetry
from sil_engine.games import GameRegistry, get_registry
from sil_engine.profile import BrainprintAggregator, InMemoryProfileStore, ProfileStore, ProgressTracker
from sil_engine.telemetry import EventSink, InMemoryEventSink, LoggingEventSink


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "SilEngineError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "ActionType",
    "GameContext",
    "GameMode",
    "GameResultSummary",
    "GameState",
    "ModeResult",
    "PlayerAction",
    # Engine
    "GameDefinition",
    "ModeSession",
    "ModeRunner",
    "daily_seed",
    "random_seed",
    "seed_from_text",
    # Registry
    "GameRegistry",
    "get_registry",
    # Profile
    "BrainprintAggregator",
    "InMemoryProfileStore",
    "ProfileStore",
    "ProgressTracker",
    # Telemetry
    "EventSink",
    "InMemoryEventSink",
    "LoggingEventSink",
]
