"""Structured logging for the SIL game session engine.

All engine modules log through structlog with key/value events. Hosts
call ``configure_logging`` once; without it structlog's defaults apply.
Log entries emitted while a session handles an action carry the
session's identifiers through ``session_log_context``.

Example:
    >>> from sil_engine.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Round completed", game_id="grip", round_index=2, score=80)
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from sil_engine.core.config import Settings


ENGINE_NAME = "sil_engine"
STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_engine_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("engine", ENGINE_NAME)
    return event_dict


def _level_number(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of the console format.
        log_file: Optional file that also receives stdlib log records.
    """
    level_number = _level_number(level)
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_engine_name,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(format=STDLIB_FORMAT, level=level_number, handlers=handlers, force=True)


def configure_from_settings(settings: Settings) -> None:
    """Configure logging from the engine settings' log options."""
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs to every later log entry in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def session_log_context(session_id: str, user_id: str | None = None) -> Iterator[None]:
    """Tag log entries emitted inside the block with the session identifiers.

    Previously bound values are restored on exit.

    Example:
        >>> with session_log_context("s-1", user_id="u-1"):
        ...     logger.info("Action accepted")  # includes session_id and user_id
    """
    with structlog.contextvars.bound_contextvars(session_id=session_id, user_id=user_id):
        yield


__all__ = [
    "add_engine_name",
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "session_log_context",
]
