"""MIDPOINT: pick the number closest to the midpoint of A and B.

Scored by proximity: every unit away from the true midpoint costs one
point.
"""

from __future__ import annotations

from sil_engine.engine.contract import GameDefinition, proximity_score
from sil_engine.engine.random_source import SeededRandom
from sil_engine.games.base import ALL_MODES, selected_index
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


CANDIDATE_COUNT = 9
MAX_OFFSET = 15
DISTANCE_SCALE = 100


class MidpointGame(GameDefinition):
    id = "midpoint"
    name = "MIDPOINT"
    short_description = "Find the intuitive numeric midpoint"
    category = GameCategory.MATH_LOGIC
    supported_modes = ALL_MODES
    ui_schema = UISchema(layout=UILayout.GRID, input=UIInput.TAP_ONE, feedback=UIFeedback.SCORE_BAR)

    def init(self, context: GameContext) -> GameState:
        rng = SeededRandom(context.seed)
        number_a = rng.next_int(10, 59)
        number_b = rng.next_int(60, 109)
        midpoint = (number_a + number_b + 1) // 2

        # The true midpoint is always on the board
        distractors = rng.sample([o for o in range(-MAX_OFFSET, MAX_OFFSET + 1) if o], CANDIDATE_COUNT - 1)
        candidates = rng.shuffle([midpoint] + [midpoint + offset for offset in distractors])

        return GameState(
            data={
                "number_a": number_a,
                "number_b": number_b,
                "midpoint": midpoint,
                "candidates": candidates,
                "selected": None,
                "score": 0,
            }
        )

    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        if state.done:
            return state
        index = selected_index(action, len(state.data["candidates"]))
        if index is None:
            return state

        selected = state.data["candidates"][index]
        distance = abs(selected - state.data["midpoint"])
        data = dict(state.data)
        data.update(selected=selected, distance=distance, score=proximity_score(distance / DISTANCE_SCALE))
        return state.advance(data, done=True)

    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        score = state.data["score"]
        return GameResultSummary(
            score=score,
            skill_signals={
                "numeric_midpoint_precision": float(score),
                "interpolation": score * 0.95,
                "proportionality_intuition": score * 0.9,
            },
            metadata={"midpoint": state.data["midpoint"], "selected": state.data["selected"]},
        )


midpoint_game = MidpointGame()


__all__ = ["MidpointGame", "midpoint_game"]
