"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        SilEngineError: Base exception for all engine errors.
        ContentLoadError, UnknownGameError, UnsupportedModeError: Registry errors.
        InvalidActionError, PostCompletionActionError, SessionStateError,
        SessionFatalError: Session errors.
        SummaryInvariantError, StateInvariantError: Plugin contract violations.
        DimensionMismatchError, EmptyCandidateSetError: Scoring kernel errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        session_log_context: Tag log entries with session ids.
"""

from __future__ import annotations

from sil_engine.core.config import (
    GameSettings,
    ScoringSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from sil_engine.core.exceptions import (
    ConfigurationError,
    ContentLoadError,
    ContractViolationError,
    DimensionMismatchError,
    EmptyCandidateSetError,
    InvalidActionError,
    PostCompletionActionError,
    ScoringError,
    SessionError,
    SessionFatalError,
    SessionStateError,
    SilEngineError,
    StateInvariantError,
    SummaryInvariantError,
    UnknownGameError,
    UnsupportedModeError,
    ValidationError,
)
from sil_engine.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    session_log_context,
)


__all__ = [
    # Base exception
    "SilEngineError",
    # Registry & content exceptions
    "ContentLoadError",
    "UnknownGameError",
    "UnsupportedModeError",
    # Session exceptions
    "SessionError",
    "InvalidActionError",
    "PostCompletionActionError",
    "SessionStateError",
    "SessionFatalError",
    # Contract violations
    "ContractViolationError",
    "SummaryInvariantError",
    "StateInvariantError",
    # Scoring exceptions
    "ScoringError",
    "DimensionMismatchError",
    "EmptyCandidateSetError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "GameSettings",
    "ScoringSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "session_log_context",
]
