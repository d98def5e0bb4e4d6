"""PIVOTWORD: pick the word that bridges two anchors.

The target is the candidate ``select_midpoint`` ranks best between the
two anchor words. A pick is scored by how far down that ranking it
sits: the best bridge scores 100, the worst 0.

Skill signals: bridging, analogy_strength, precision.
"""

from __future__ import annotations

from sil_engine.core.config import get_settings
from sil_engine.core.logging import get_logger
from sil_engine.engine.contract import proximity_score
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
from sil_engine.semantics.midpoint import rank_midpoints


logger = get_logger(__name__)

PIVOT_SETS: tuple[tuple[tuple[str, str], tuple[str, ...]], ...] = (
    (("ocean", "land"), ("shore", "beach", "coast", "island", "harbor", "cliff")),
    (("day", "night"), ("dawn", "dusk", "twilight", "noon", "midnight", "shadow")),
    (("fire", "water"), ("steam", "smoke", "ice", "boil", "heat", "cold")),
)


class PivotwordGame(SemanticGame):
    id = "pivotword"
    name = "PIVOTWORD"
    short_description = "Pick the word that best connects two anchors"
    category = GameCategory.SEMANTIC
    supported_modes = ALL_MODES
    ui_schema = UISchema(
        layout=UILayout.DUAL_ANCHOR,
        input=UIInput.TAP_ONE,
        feedback=UIFeedback.RANK,
        animation="pulse",
        card_style="word",
    )

    def init(self, context: GameContext) -> GameState:
        rng = SeededRandom(context.seed)
        (anchor_a, anchor_b), pool = rng.choice(PIVOT_SETS)
        candidates = rng.shuffle(pool)

        scoring = get_settings().scoring
        ranking = rank_midpoints(
            self.embeddings.get_vector(anchor_a, context.language),
            self.embeddings.get_vector(anchor_b, context.language),
            self.embeddings.get_vectors(candidates, context.language),
            balance_weight=scoring.midpoint_balance_weight,
            coverage_weight=scoring.midpoint_coverage_weight,
        )
        order = [index for index, _ in ranking]
        logger.debug("Pivot ranked", anchors=(anchor_a, anchor_b), target=candidates[order[0]])

        return GameState(
            data={
                "anchor_a": anchor_a,
                "anchor_b": anchor_b,
                "candidates": candidates,
                "ranking": order,
                "target_index": order[0],
                "selected_index": None,
                "score": 0,
            }
        )

    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        if state.done:
            return state
        candidates = state.data["candidates"]
        index = selected_index(action, len(candidates))
        if index is None:
            return state

        rank = state.data["ranking"].index(index)
        distance = rank / (len(candidates) - 1) if len(candidates) > 1 else 0.0

        data = dict(state.data)
        data.update(selected_index=index, rank=rank, score=proximity_score(distance))
        return state.advance(data, done=True)

    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        score = state.data["score"]
        return GameResultSummary(
            score=score,
            accuracy=float(score),
            skill_signals={
                "bridging": float(score),
                "analogy_strength": float(score),
                "precision": 100.0 if state.data["selected_index"] == state.data["target_index"] else 0.0,
            },
            metadata={
                "anchor_a": state.data["anchor_a"],
                "anchor_b": state.data["anchor_b"],
                "target": state.data["candidates"][state.data["target_index"]],
                "selected_index": state.data["selected_index"],
            },
        )


pivotword_game = PivotwordGame()


__all__ = ["PIVOT_SETS", "PivotwordGame", "pivotword_game"]
