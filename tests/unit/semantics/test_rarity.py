"""Tests for rarity scoring."""

from __future__ import annotations

import pytest

from sil_engine.semantics.rarity import (
    filter_by_pattern,
    frequency_rarity,
    length_rarity,
    matches_pattern,
    phonetic_complexity,
    rarity_score,
)


class TestFrequencyRarity:
    """Tests for frequency_rarity."""

    def test_monotonic(self) -> None:
        """Test more frequent words are never rarer."""
        values = [frequency_rarity(f) for f in (0, 1, 10, 100, 10_000, 1_000_000)]

        assert values == sorted(values, reverse=True)

    def test_bounds(self) -> None:
        """Test rarity stays within [0, 100]."""
        assert frequency_rarity(0) == 100.0
        assert frequency_rarity(10**9) == 0.0

    def test_negative_frequency_clamped(self) -> None:
        """Test negative frequencies count as zero."""
        assert frequency_rarity(-5) == 100.0


class TestPatterns:
    """Tests for V/C pattern matching."""

    @pytest.mark.parametrize(
        ("word", "pattern", "expected"),
        [
            ("tiger", "CVCVC", True),
            ("Tiger", "CVCVC", True),
            ("ocean", "CVCVC", False),
            ("echo", "VCCV", True),
            ("cat", "CVCV", False),
        ],
    )
    def test_matches_pattern(self, word: str, pattern: str, expected: bool) -> None:
        """Test vowel/consonant positions and length."""
        assert matches_pattern(word, pattern) is expected

    def test_wildcard_positions(self) -> None:
        """Test characters other than V and C match anything."""
        assert matches_pattern("cat", "C*C")

    def test_filter_by_pattern(self) -> None:
        """Test filtering keeps order."""
        assert filter_by_pattern(["tiger", "ocean", "lemon"], "CVCVC") == ["tiger", "lemon"]


class TestRarityScore:
    """Tests for rarity_score."""

    def test_length_proxy_without_frequency(self) -> None:
        """Test the length proxy is used when no frequency is known."""
        assert rarity_score("cat").rarity_score == 20
        assert rarity_score("strawberry").rarity_score == 70
        assert length_rarity("extraordinary") == 90.0

    def test_frequency_used(self) -> None:
        """Test known frequencies drive the score."""
        assert rarity_score("zyx", frequency=0).rarity_score == 100

    def test_pattern_bonus(self) -> None:
        """Test matching the pattern earns a 20% bonus."""
        result = rarity_score("tiger", pattern="CVCVC")

        assert result.pattern_match
        assert result.rarity_score == 36

    def test_pattern_violation_scores_zero(self) -> None:
        """Test breaking the pattern scores zero."""
        result = rarity_score("ocean", pattern="CVCVC")

        assert not result.pattern_match
        assert result.rarity_score == 0

    def test_bonus_capped(self) -> None:
        """Test the bonus never pushes past 100."""
        assert rarity_score("tiger", frequency=0, pattern="CVCVC").rarity_score == 100


class TestPhoneticComplexity:
    """Tests for phonetic_complexity."""

    def test_simple_word(self) -> None:
        """Test a plain word scores zero."""
        assert phonetic_complexity("banana") == 0

    def test_cluster_and_silent(self) -> None:
        """Test clusters and silent patterns add up."""
        # "str" and "ght" clusters plus the silent "gh"
        assert phonetic_complexity("straight") == 50

    def test_capped(self) -> None:
        """Test complexity never exceeds 100."""
        assert phonetic_complexity("xzqxjqvwwvknmbwrghstrngthsbcd") <= 100
