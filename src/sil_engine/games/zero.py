"""ZERO: submit the rarest word that fits a letter pattern.

Patterns use V (vowel) / C (consonant) notation. Malformed words and
words breaking the pattern are rejected without changing the state;
a fitting word is scored by its rarity.

Skill signals: divergence, creativity, phonetic_complexity.
"""

from __future__ import annotations

import re

from sil_engine.core.exceptions import ContentLoadError
from sil_engine.core.logging import get_logger
from sil_engine.engine.random_source import SeededRandom
from sil_engine.games.base import ALL_MODES, SemanticGame
from sil_engine.models import (
    ActionType,
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
from sil_engine.semantics.rarity import matches_pattern, phonetic_complexity, rarity_score


logger = get_logger(__name__)

PATTERNS: tuple[tuple[str, str], ...] = (
    ("CVCVC", "5 letters: consonant-vowel-consonant-vowel-consonant"),
    ("VCCV", "4 letters: vowel-consonant-consonant-vowel"),
    ("CVCC", "4 letters: consonant-vowel-consonant-consonant"),
    ("CCVC", "4 letters: consonant-consonant-vowel-consonant"),
    ("CVCV", "4 letters: consonant-vowel-consonant-vowel"),
    ("VCVC", "4 letters: vowel-consonant-vowel-consonant"),
    ("CVVCV", "5 letters: consonant-vowel-vowel-consonant-vowel"),
    ("CVCVV", "5 letters: consonant-vowel-consonant-vowel-vowel"),
)

_WORD = re.compile(r"^[a-z]{3,15}$")


class ZeroGame(SemanticGame):
    id = "zero"
    name = "ZERO"
    short_description = "Find the rarest word matching the pattern"
    category = GameCategory.ORIGINAL
    supported_modes = ALL_MODES
    ui_schema = UISchema(
        layout=UILayout.SINGLE,
        input=UIInput.TYPE_ONE_WORD,
        feedback=UIFeedback.SCORE_BAR,
        animation="fade",
        card_style="word",
    )

    def init(self, context: GameContext) -> GameState:
        pattern, description = SeededRandom(context.seed).choice(PATTERNS)
        return GameState(data={"pattern": pattern, "description": description, "word": None, "score": 0})

    def update(self, context: GameContext, state: GameState, action: PlayerAction) -> GameState:
        if state.done or action.type != ActionType.SUBMIT:
            return state

        word = str(action.payload.get("text", "")).strip().lower()
        pattern = state.data["pattern"]
        if not _WORD.match(word) or not matches_pattern(word, pattern):
            return state

        result = rarity_score(word, frequency=self._frequency(word, context.language), pattern=pattern)
        data = dict(state.data)
        data.update(word=word, score=result.rarity_score)
        return state.advance(data, done=True)

    def summarize(self, context: GameContext, state: GameState) -> GameResultSummary:
        score = state.data["score"]
        word = state.data["word"] or ""
        return GameResultSummary(
            score=score,
            accuracy=float(score),
            skill_signals={
                "divergence": float(score),
                "creativity": float(score),
                "phonetic_complexity": float(phonetic_complexity(word)),
            },
            metadata={"pattern": state.data["pattern"], "word": state.data["word"]},
        )

    def _frequency(self, word: str, language: str) -> float | None:
        # Words outside the embedding vocabulary use the length proxy
        try:
            return self.embeddings.get_frequency(word, language)
        except ContentLoadError:
            logger.debug("No frequency data", word=word)
            return None


zero_game = ZeroGame()


__all__ = ["PATTERNS", "ZeroGame", "zero_game"]
