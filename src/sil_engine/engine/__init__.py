"""Game session engine.

Submodules:
    random_source: Seeded pseudo-randomness and seed helpers
    contract: GameDefinition plugin contract and invariant checks
    modes: Runner state machine and the four play modes
    runner: ModeRunner facade over the registry, telemetry and Brainprint

The runner depends on the game registry, which itself builds on this
package, so import it from ``sil_engine.engine.runner`` (or the
top-level ``sil_engine`` package).

Example:
    >>> from sil_engine.engine import JourneySession
    >>> session = JourneySession(game, GameContext(seed=7), rounds=5)
    >>> session.begin()
    >>> session.submit(PlayerAction.select(0))
"""

from __future__ import annotations

# =============================================================================
# Randomness
# =============================================================================
from sil_engine.engine.random_source import (
    MAX_SEED,
    SeededRandom,
    daily_seed,
    derive_seed,
    random_seed,
    seed_from_text,
)

# =============================================================================
# Plugin Contract
# =============================================================================
from sil_engine.engine.contract import (
    GameDefinition,
    check_summary,
    check_transition,
    checked_summarize,
    exact_match_score,
    proximity_score,
    round_score,
    validate_game_definition,
)

# =============================================================================
# Modes
# =============================================================================
from sil_engine.engine.modes import (
    ActionOutcome,
    ArenaSession,
    EnduranceSession,
    JourneySession,
    ModeSession,
    OneShotSession,
    SessionMachine,
    aggregate_rounds,
)


__all__ = [
    # Randomness
    "MAX_SEED",
    "SeededRandom",
    "derive_seed",
    "seed_from_text",
    "daily_seed",
    "random_seed",
    # Contract
    "GameDefinition",
    "validate_game_definition",
    "round_score",
    "proximity_score",
    "exact_match_score",
    "check_transition",
    "check_summary",
    "checked_summarize",
    # Modes
    "SessionMachine",
    "ActionOutcome",
    "ModeSession",
    "OneShotSession",
    "JourneySession",
    "ArenaSession",
    "EnduranceSession",
    "aggregate_rounds",
]
