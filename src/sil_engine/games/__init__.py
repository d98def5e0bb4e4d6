"""Game catalog and built-in plugins.

Plugin modules (grip, zero, pivotword, midpoint, numgrip) are not
imported here; the registry loads them on first use.

Example:
    >>> from sil_engine.games import get_registry
    >>> game = await get_registry().load("numgrip")
"""

from __future__ import annotations

from sil_engine.games.registry import (
    GAME_LOADERS,
    GAME_METADATA,
    GameRegistry,
    LoaderSpec,
    get_registry,
)


__all__ = [
    "GAME_LOADERS",
    "GAME_METADATA",
    "GameRegistry",
    "LoaderSpec",
    "get_registry",
]
