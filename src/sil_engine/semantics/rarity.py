"""Rarity scoring.

Maps how common a word is to a 0-100 "uncommonness" scale. Corpus
frequency is used when known; otherwise word length stands in as a
synthetic proxy. Pattern constraints use V (vowel) / C (consonant)
notation, e.g. ``"CVCVC"``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence


VOWELS = frozenset("aeiou")

# log10 of the most frequent word count we expect (~1M occurrences)
MAX_LOG_FREQUENCY = 6.0

PATTERN_BONUS = 1.2

_CONSONANT_CLUSTER = re.compile(r"[bcdfghjklmnpqrstvwxyz]{3,}")
_UNUSUAL_COMBOS = ("xz", "qx", "jq", "vw", "wv")
_SILENT_PATTERNS = ("kn", "gn", "mb", "wr", "gh")


@dataclass(frozen=True)
class RarityResult:
    """Outcome of a rarity calculation.

    Attributes:
        rarity_score: Integer rarity in [0, 100], higher is rarer.
        pattern_match: Whether the word satisfied the required pattern.
    """

    rarity_score: int
    pattern_match: bool = True


def frequency_rarity(frequency: float) -> float:
    """Inverse log-frequency rarity.

    Monotonically non-increasing in ``frequency``: common words score
    low, rare words score high.

    Args:
        frequency: Corpus occurrence count (>= 0).

    Returns:
        Rarity in [0, 100].
    """
    log_freq = math.log10(max(0.0, frequency) + 1.0)
    rarity = 100.0 * (1.0 - log_freq / MAX_LOG_FREQUENCY)
    return max(0.0, min(100.0, rarity))


def length_rarity(word: str) -> float:
    """Length-based rarity proxy used when no frequency data exists."""
    length = len(word)
    if length <= 3:
        return 20.0
    if length <= 5:
        return 30.0
    if length <= 7:
        return 50.0
    if length <= 10:
        return 70.0
    return 90.0


def matches_pattern(word: str, pattern: str) -> bool:
    """Check a word against a V/C pattern.

    Any pattern character other than V or C matches any letter.

    Example:
        >>> matches_pattern("tiger", "CVCVC")
        True
    """
    if len(word) != len(pattern):
        return False
    for char, pattern_char in zip(word.lower(), pattern):
        is_vowel = char in VOWELS
        if pattern_char == "V" and not is_vowel:
            return False
        if pattern_char == "C" and is_vowel:
            return False
    return True


def filter_by_pattern(words: Sequence[str], pattern: str) -> list[str]:
    """Keep only the words matching ``pattern``, preserving order."""
    return [word for word in words if matches_pattern(word, pattern)]


def rarity_score(
    word: str,
    *,
    frequency: float | None = None,
    pattern: str | None = None,
) -> RarityResult:
    """Score how rare ``word`` is, optionally under a pattern constraint.

    A word that breaks the required pattern scores 0; a compliant one
    gets a 20% bonus, capped at 100.

    Args:
        word: The word to score.
        frequency: Corpus frequency, or None to use the length proxy.
        pattern: Optional V/C pattern the word must satisfy.

    Returns:
        RarityResult with an integer score.
    """
    rarity = frequency_rarity(frequency) if frequency is not None else length_rarity(word)

    pattern_match = True
    if pattern:
        pattern_match = matches_pattern(word, pattern)
        rarity = min(100.0, rarity * PATTERN_BONUS) if pattern_match else 0.0

    return RarityResult(rarity_score=int(rarity + 0.5), pattern_match=pattern_match)


def phonetic_complexity(word: str) -> int:
    """Rough phonetic complexity in [0, 100].

    Counts consonant clusters, unusual letter pairs, and likely silent
    letter combinations.
    """
    lowered = word.lower()
    complexity = 20 * len(_CONSONANT_CLUSTER.findall(lowered))
    complexity += 15 * sum(1 for combo in _UNUSUAL_COMBOS if combo in lowered)
    complexity += 10 * sum(1 for combo in _SILENT_PATTERNS if combo in lowered)
    return min(100, complexity)


__all__ = [
    "VOWELS",
    "RarityResult",
    "frequency_rarity",
    "length_rarity",
    "matches_pattern",
    "filter_by_pattern",
    "rarity_score",
    "phonetic_complexity",
]
