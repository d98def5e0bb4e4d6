"""Game registry and lazy loader.

The catalog (GAME_METADATA) is static and cheap to list. A game's code
is only imported when a session first needs it, then cached for the
life of the registry.

Loads are asynchronous and de-duplicated: concurrent requests for the
same id share one in-flight asyncio.Task, so a plugin module is loaded
at most once however many sessions ask for it at the same moment. A
failed load is not cached and may be retried.

Loader table entries are either ``"package.module:attribute"`` strings
or callables (sync or async) returning the game, a module, or a mapping
with a ``default`` entry. Classes are instantiated.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
from functools import lru_cache
from types import ModuleType
from typing import Any, Awaitable, Callable, Mapping, Sequence, Union

from sil_engine.core.exceptions import ContentLoadError, UnknownGameError
from sil_engine.core.logging import get_logger
from sil_engine.engine.contract import GameDefinition, validate_game_definition
from sil_engine.models import GameCategory, GameMetadata, GameMode


logger = get_logger(__name__)

LoaderFn = Callable[[], Union[Any, Awaitable[Any]]]
LoaderSpec = Union[str, LoaderFn]


# =============================================================================
# Static Tables
# =============================================================================


GAME_METADATA: tuple[GameMetadata, ...] = (
    GameMetadata(
        id="grip",
        name="GRIP",
        short_description="Find the word closest to the hidden theme",
        category=GameCategory.ORIGINAL,
    ),
    GameMetadata(
        id="zero",
        name="ZERO",
        short_description="Find the rarest word matching the pattern",
        category=GameCategory.ORIGINAL,
    ),
    GameMetadata(
        id="pivotword",
        name="PIVOTWORD",
        short_description="Pick the word that best connects two anchors",
        category=GameCategory.SEMANTIC,
    ),
    GameMetadata(
        id="midpoint",
        name="MIDPOINT",
        short_description="Find the intuitive numeric midpoint",
        category=GameCategory.MATH_LOGIC,
    ),
    GameMetadata(
        id="numgrip",
        name="NUMGRIP",
        short_description="Find the odd number out",
        category=GameCategory.MATH_LOGIC,
    ),
)

GAME_LOADERS: dict[str, LoaderSpec] = {
    "grip": "sil_engine.games.grip:grip_game",
    "zero": "sil_engine.games.zero:zero_game",
    "pivotword": "sil_engine.games.pivotword:pivotword_game",
    "midpoint": "sil_engine.games.midpoint:midpoint_game",
    "numgrip": "sil_engine.games.numgrip:numgrip_game",
}


# =============================================================================
# Loading Helpers
# =============================================================================


async def _import_target(path: str) -> tuple[Any, str | None]:
    module_path, _, attribute = path.partition(":")
    module = await asyncio.to_thread(importlib.import_module, module_path)
    return module, attribute or None


def _unwrap(game_id: str, loaded: Any, attribute: str | None) -> GameDefinition:
    if attribute is not None:
        try:
            target = getattr(loaded, attribute)
        except AttributeError as exc:
            raise ContentLoadError(
                f"Plugin module has no attribute '{attribute}'",
                game_id=game_id,
                resource=attribute,
            ) from exc
    elif isinstance(loaded, Mapping) and "default" in loaded:
        target = loaded["default"]
    elif isinstance(loaded, ModuleType):
        if not hasattr(loaded, "default"):
            raise ContentLoadError(
                "Plugin module exports no 'default' game",
                game_id=game_id,
                resource=loaded.__name__,
            )
        target = loaded.default
    else:
        target = loaded

    if isinstance(target, type):
        target = target()
    return validate_game_definition(target)


class GameRegistry:
    """Catalog plus lazy, cached access to game definitions.

    Example:
        >>> registry = GameRegistry()
        >>> [m.id for m in registry.list_metadata()]
        ['grip', 'zero', 'pivotword', 'midpoint', 'numgrip']
        >>> game = await registry.load("grip")
    """

    def __init__(
        self,
        loaders: Mapping[str, LoaderSpec] | None = None,
        metadata: Sequence[GameMetadata] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            loaders: Loader table keyed by game id; defaults to GAME_LOADERS.
            metadata: Catalog entries; defaults to GAME_METADATA.
        """
        self._loaders: dict[str, LoaderSpec] = dict(GAME_LOADERS if loaders is None else loaders)
        self._metadata: dict[str, GameMetadata] = {
            entry.id: entry for entry in (GAME_METADATA if metadata is None else metadata)
        }
        self._cache: dict[str, GameDefinition] = {}
        self._inflight: dict[str, asyncio.Task[GameDefinition]] = {}

    # -------------------------------------------------------------------------
    # Catalog (no loading)
    # -------------------------------------------------------------------------

    def list_metadata(self) -> list[GameMetadata]:
        return list(self._metadata.values())

    def get_metadata(self, game_id: str) -> GameMetadata | None:
        return self._metadata.get(game_id)

    def known_ids(self) -> list[str]:
        return list(self._loaders)

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._loaders

    # -------------------------------------------------------------------------
    # Loaded games
    # -------------------------------------------------------------------------

    def is_loaded(self, game_id: str) -> bool:
        return game_id in self._cache

    def by_mode(self, mode: GameMode) -> list[GameDefinition]:
        """Loaded games that support ``mode``, in load order."""
        return [game for game in self._cache.values() if game.supports(mode)]

    async def load(self, game_id: str) -> GameDefinition:
        """Resolve a game definition, loading it on first use.

        Raises:
            UnknownGameError: If no loader is registered for ``game_id``.
            ContentLoadError: If the loader fails or yields an invalid game.
        """
        cached = self._cache.get(game_id)
        if cached is not None:
            return cached

        if game_id not in self._loaders:
            raise UnknownGameError(f"Game '{game_id}' is not registered", game_id=game_id)

        task = self._inflight.get(game_id)
        if task is None:
            task = asyncio.ensure_future(self._load(game_id))
            self._inflight[game_id] = task
        else:
            logger.debug("Joining in-flight load", game_id=game_id)
        return await asyncio.shield(task)

    async def load_many(self, game_ids: Sequence[str]) -> list[GameDefinition]:
        """Load several games concurrently, preserving order."""
        return list(await asyncio.gather(*(self.load(game_id) for game_id in game_ids)))

    async def _load(self, game_id: str) -> GameDefinition:
        loader = self._loaders[game_id]
        logger.info("Loading game", game_id=game_id)
        try:
            if isinstance(loader, str):
                loaded, attribute = await _import_target(loader)
            else:
                loaded = loader()
                if inspect.isawaitable(loaded):
                    loaded = await loaded
                attribute = None
            game = _unwrap(game_id, loaded, attribute)
        except ContentLoadError:
            logger.error("Game load failed", game_id=game_id)
            raise
        except Exception as exc:
            logger.error("Game load failed", game_id=game_id, error=str(exc))
            raise ContentLoadError(
                f"Failed to load game '{game_id}': {exc}",
                game_id=game_id,
            ) from exc
        finally:
            self._inflight.pop(game_id, None)

        if game.id != game_id:
            raise ContentLoadError(
                f"Loader for '{game_id}' produced game '{game.id}'",
                game_id=game_id,
            )

        self._cache[game_id] = game
        logger.info("Game loaded", game_id=game_id, modes=sorted(m.value for m in game.supported_modes))
        return game

    def clear(self) -> None:
        """Forget loaded games; in-flight loads are unaffected."""
        self._cache.clear()


@lru_cache(maxsize=1)
def get_registry() -> GameRegistry:
    """Process-wide registry over the built-in games."""
    return GameRegistry()


__all__ = [
    "GAME_METADATA",
    "GAME_LOADERS",
    "LoaderSpec",
    "GameRegistry",
    "get_registry",
]
