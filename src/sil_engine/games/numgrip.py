"""NUMGRIP: find the odd number out.

Eight numbers share a divisor; one does not. Exact-match scoring: the
odd one scores 100, anything else 0.
"""

from __future__ import annotations

from sil_engine.engine.contract import GameDefinition, exact_match_score
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


GROUP_SIZE = 8
MAX_MULTIPLE = 30


class NumgripGame(GameDefinition):
    id = "numgrip"
    name = "NUMGRIP"
    short_description = "Find the odd number out"
    category = GameCategory.MATH_LOGIC
    supported_modes = ALL_MODES
    ui_schema = UISchema(layout=UILayout.GRID, input=UIInput.TAP_ONE, feedback=UIFeedback.SCORE_BAR)

    def init(self, context: GameContext) -> GameState:
        rng = SeededRandom(context.seed)
        divisor = rng.next_int(3, 9)
        members = rng.sample(range(divisor, divisor * MAX_MULTIPLE + 1, divisor), GROUP_SIZE)

        odd = rng.next_int(10, divisor * MAX_MULTIPLE)
        while odd % divisor == 0:
            odd += 1

        odd_index = rng.next_int(0, GROUP_SIZE)
        numbers = members[:odd_index] + [odd] + members[odd_index:]
        return GameState(
            data={
                "divisor": divisor,
                "numbers": numbers,
                "odd_index": odd_index,
                "selected_index": None,
                "score": 0,
            }
        )

    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        if state.done:
            return state
        index = selected_index(action, len(state.data["numbers"]))
        if index is None:
            return state

        data = dict(state.data)
        data.update(selected_index=index, score=exact_match_score(index == state.data["odd_index"]))
        return state.advance(data, done=True)

    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        score = state.data["score"]
        return GameResultSummary(
            score=score,
            accuracy=float(score),
            skill_signals={"numeric_precision": float(score), "inference": float(score)},
            metadata={
                "divisor": state.data["divisor"],
                "odd": state.data["numbers"][state.data["odd_index"]],
                "selected_index": state.data["selected_index"],
            },
        )


numgrip_game = NumgripGame()


__all__ = ["NumgripGame", "numgrip_game"]
