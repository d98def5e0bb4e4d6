"""Shared helpers for the built-in game plugins."""

from __future__ import annotations

from sil_engine.engine.contract import GameDefinition
from sil_engine.models import ActionType, GameMode, PlayerAction
from sil_engine.semantics.embeddings import EmbeddingService, get_embedding_service


ALL_MODES: frozenset[GameMode] = frozenset(GameMode)

SELECTION_ACTIONS = frozenset({ActionType.SELECT, ActionType.TAP})


def selected_index(action: PlayerAction, option_count: int) -> int | None:
    """Option index chosen by a select/tap action, or None if invalid.

    Accepts ``{"index": 3}`` or the UI's ``{"word_id": "3"}`` payload.
    """
    if action.type not in SELECTION_ACTIONS:
        return None
    raw = action.payload.get("index", action.payload.get("word_id"))
    if raw is None or isinstance(raw, bool):
        return None
    try:
        index = int(raw)
    except (TypeError, ValueError):
        return None
    return index if 0 <= index < option_count else None


class SemanticGame(GameDefinition):
    """Base for games that score with word embeddings.

    Args:
        embeddings: Service to read vectors from; the shared service
            over hash embeddings by default.
    """

    def __init__(self, embeddings: EmbeddingService | None = None) -> None:
        self._embeddings = embeddings

    @property
    def embeddings(self) -> EmbeddingService:
        return self._embeddings if self._embeddings is not None else get_embedding_service()


__all__ = [
    "ALL_MODES",
    "SELECTION_ACTIONS",
    "selected_index",
    "SemanticGame",
]
