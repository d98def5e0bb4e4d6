"""GRIP: pick the word closest to a hidden theme.

Nine words are dealt from one theme's pool. The player taps one and is
scored by its cluster heat relative to the theme vector.

Skill signals: precision, inference.
"""

from __future__ import annotations

from sil_engine.core.logging import get_logger
from sil_engine.engine.contract import round_score
from sil_engine.engine.random_source import SeededRandom
from sil_engine.games.base import ALL_MODES, SemanticGame, selected_index
from sil_engine.models import (
    GameCategory,
    GameContext,
    GameResultSummary,
    GameState,
    PlayerAction,
    UIFeedback,
    UIInput,
    UILayout,
    UISchema,
)
from sil_engine.semantics.cluster import cluster_heat, heat_to_label


logger = get_logger(__name__)

HAND_SIZE = 9

WORD_POOLS: dict[str, tuple[str, ...]] = {
    "ocean": (
        "wave", "tide", "reef", "ship", "sail", "beach", "storm", "calm", "deep", "anchor",
        "pearl", "salt", "moon", "fish", "coral", "sand", "wind", "harbor", "coast", "drift",
    ),
    "mountain": (
        "peak", "summit", "cliff", "valley", "ridge", "slope", "alpine", "snow", "rock", "trail",
        "forest", "eagle", "stone", "climb", "height", "cloud", "vista", "range", "base", "crest",
    ),
    "city": (
        "street", "tower", "metro", "park", "light", "crowd", "noise", "store", "cafe", "plaza",
        "traffic", "bridge", "building", "square", "corner", "avenue", "urban", "skyline", "market", "district",
    ),
}


class GripGame(SemanticGame):
    id = "grip"
    name = "GRIP"
    short_description = "Find the word closest to the hidden theme"
    category = GameCategory.ORIGINAL
    supported_modes = ALL_MODES
    ui_schema = UISchema(
        layout=UILayout.GRID,
        input=UIInput.TAP_ONE,
        feedback=UIFeedback.HOT_COLD,
        animation="scale",
        card_style="word",
    )

    def init(self, context: GameContext) -> GameState:
        rng = SeededRandom(context.seed)
        theme = rng.choice(sorted(WORD_POOLS))
        words = rng.sample(WORD_POOLS[theme], HAND_SIZE)

        # Fail fast if any vector is missing
        self.embeddings.get_vector(theme, context.language)
        self.embeddings.get_vectors(words, context.language)

        return GameState(data={"theme": theme, "words": words, "selected_index": None, "score": 0})

    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        if state.done:
            return state
        index = selected_index(action, len(state.data["words"]))
        if index is None:
            return state

        word = state.data["words"][index]
        center = self.embeddings.get_vector(state.data["theme"], context.language)
        heat = cluster_heat(self.embeddings.get_vector(word, context.language), center).heat

        data = dict(state.data)
        data.update(
            selected_index=index,
            heat=heat,
            feedback=heat_to_label(heat),
            score=round_score(heat * 100),
        )
        return state.advance(data, done=True)

    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        score = state.data["score"]
        return GameResultSummary(
            score=score,
            accuracy=float(score),
            skill_signals={"precision": float(score), "inference": float(score)},
            metadata={
                "theme": state.data["theme"],
                "words": state.data["words"],
                "selected_index": state.data["selected_index"],
            },
        )


grip_game = GripGame()


__all__ = ["WORD_POOLS", "GripGame", "grip_game"]
