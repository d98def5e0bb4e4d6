"""Custom exception hierarchy for the SIL game session engine.

All exceptions inherit from SilEngineError so callers can handle engine
failures uniformly at the application boundary while still reacting to
the specific domain error (retry a content load, redirect on an unknown
game, show a "try again" hint for an invalid action).

Context keywords accepted by the subclasses (``game_id``, ``session_id``,
``field_name``, ...) are merged into ``details`` after any explicit
details; keywords left as None are omitted.

Example:
    >>> from sil_engine.core.exceptions import UnknownGameError
    >>> raise UnknownGameError("Game not found", game_id="grip2")
"""

from __future__ import annotations

from typing import Any


def _with_context(details: dict[str, Any] | None, **context: Any) -> dict[str, Any]:
    merged = dict(details or {})
    merged.update((key, value) for key, value in context.items() if value is not None)
    return merged


class SilEngineError(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error description.
        details: Additional error context, rendered after the message.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{rendered}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Registry & Content Exceptions
# =============================================================================


class ContentLoadError(SilEngineError):
    """Raised when a game plugin or its static content cannot be loaded.

    Recoverable: the caller may retry the load, or retry session
    initialization with a different seed.

    Args:
        message: Human-readable error description.
        game_id: Game whose content failed.
        resource: The missing resource (module path, word, ...).
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        *,
        game_id: str | None = None,
        resource: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, game_id=game_id, resource=resource))


class UnknownGameError(SilEngineError):
    """Raised when a game id is not present in the static registry table."""

    def __init__(self, message: str, *, game_id: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=_with_context(details, game_id=game_id))


class UnsupportedModeError(SilEngineError):
    """Raised when a game is requested in a mode it does not support.

    Checked before init is ever called, so no state exists yet.
    """

    def __init__(
        self,
        message: str,
        *,
        game_id: str | None = None,
        mode: str | None = None,
        supported_modes: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(details, game_id=game_id, mode=mode, supported_modes=supported_modes),
        )


# =============================================================================
# Session Exceptions
# =============================================================================


class SessionError(SilEngineError):
    """Base exception for errors raised while driving a session.

    Args:
        message: Human-readable error description.
        session_id: Identifier of the affected session.
        phase: Runner phase at the time of the error.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        *,
        session_id: str | None = None,
        phase: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, session_id=session_id, phase=phase))


class InvalidActionError(SessionError):
    """Raised when an action does not fit the current game state.

    Recovered locally: the state is left unchanged.
    """


class PostCompletionActionError(SessionError):
    """Raised when an action is submitted after the session completed."""


class SessionStateError(SessionError):
    """Raised when a runner operation is not allowed in the current phase."""


class SessionFatalError(SessionError):
    """Raised when a plugin fails while summarizing a done state.

    The session is left non-terminating; this indicates a plugin bug.
    """


# =============================================================================
# Contract Violations
# =============================================================================


class ContractViolationError(SilEngineError):
    """Base exception for plugin contract violations.

    These are defects, never transient failures, and are not retried.
    """

    def __init__(self, message: str, *, game_id: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=_with_context(details, game_id=game_id))


class SummaryInvariantError(ContractViolationError):
    """Raised when summarize runs on a non-done state or returns a bad score."""


class StateInvariantError(ContractViolationError):
    """Raised when update decreases step or reverts a done state."""


# =============================================================================
# Scoring Kernel Exceptions
# =============================================================================


class ScoringError(SilEngineError):
    """Base exception for semantic scoring kernel errors."""


class DimensionMismatchError(ScoringError):
    """Raised when two vectors of different lengths are compared."""

    def __init__(
        self,
        message: str,
        *,
        left_dim: int | None = None,
        right_dim: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, left_dim=left_dim, right_dim=right_dim))


class EmptyCandidateSetError(ScoringError):
    """Raised when a selection or aggregation receives no candidates."""


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(SilEngineError):
    """Raised when engine settings cannot be loaded or are inconsistent."""

    def __init__(self, message: str, *, config_key: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=_with_context(details, config_key=config_key))


class ValidationError(SilEngineError):
    """Raised when a game definition or caller-supplied mode input is malformed.

    Args:
        message: Human-readable error description.
        field_name: Name of the offending field.
        invalid_value: The rejected value.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(details, field_name=field_name, invalid_value=invalid_value),
        )


__all__ = [
    # Base exception
    "SilEngineError",
    # Registry & content
    "ContentLoadError",
    "UnknownGameError",
    "UnsupportedModeError",
    # Session
    "SessionError",
    "InvalidActionError",
    "PostCompletionActionError",
    "SessionStateError",
    "SessionFatalError",
    # Contract violations
    "ContractViolationError",
    "SummaryInvariantError",
    "StateInvariantError",
    # Scoring
    "ScoringError",
    "DimensionMismatchError",
    "EmptyCandidateSetError",
    # Configuration
    "ConfigurationError",
    "ValidationError",
]
