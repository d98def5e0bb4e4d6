"""Player progression: experience, levels, streaks, daily goals and badges.

Every completed summary is folded into a PlayerProgress:

* XP is awarded by score band, 1 to 10 per game.
* Level ``n`` takes ``50 * n`` XP on top of level ``n - 1``; level 2
  starts at 100 XP, level 3 at 250, level 4 at 450.
* The streak counts consecutive calendar days with at least one game.
  Playing again on the same day keeps it; skipping a day resets it to 1.
* The daily goal counts games played today, capped at its target.
* Badges are awarded once, when a streak, level, game count or best
  score threshold is first reached.

The functions are pure; ProgressTracker persists the result through a
ProfileStore next to the player's Brainprint.
"""

from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from typing import Callable

from sil_engine.core.logging import get_logger
from sil_engine.models import (
    Badge,
    BadgeRarity,
    DailyGoal,
    GameResultSummary,
    LevelProgress,
    PlayerProgress,
    PlayerStats,
)
from sil_engine.profile.aggregator import DEFAULT_USER_ID
from sil_engine.profile.store import InMemoryProfileStore, ProfileStore


logger = get_logger(__name__)

Now = Callable[[], datetime]

XP_PER_LEVEL = 50

# (minimum score, xp), best band first
XP_BANDS: tuple[tuple[int, int], ...] = (
    (95, 10),
    (90, 9),
    (80, 8),
    (70, 7),
    (60, 6),
    (50, 5),
    (40, 4),
    (30, 3),
    (20, 2),
)
PARTICIPATION_XP = 1


# =============================================================================
# Badges
# =============================================================================


BADGES: dict[str, Badge] = {
    badge_id: Badge(id=badge_id, name=name, description=description, icon=icon, rarity=rarity)
    for badge_id, name, description, icon, rarity in (
        ("streak-7", "7-Day Streak", "Played for 7 days in a row", "🔥", BadgeRarity.COMMON),
        ("streak-30", "30-Day Streak", "Played for 30 days in a row", "🔥🔥", BadgeRarity.RARE),
        ("streak-100", "Century Streak", "Played for 100 days in a row", "🔥🔥🔥", BadgeRarity.LEGENDARY),
        ("level-10", "Level 10", "Reached level 10", "⭐", BadgeRarity.COMMON),
        ("level-50", "Level 50", "Reached level 50", "⭐⭐", BadgeRarity.EPIC),
        ("games-100", "Century Player", "Played 100 games", "🎮", BadgeRarity.COMMON),
        ("games-1000", "Millennium Player", "Played 1000 games", "🎮🎮", BadgeRarity.LEGENDARY),
        ("score-95", "Excellence", "Scored 95+ on a game", "🏆", BadgeRarity.RARE),
        ("score-99", "Perfection", "Scored 99+ on a game", "🏆🏆", BadgeRarity.LEGENDARY),
    )
}

# (badge id, metric, threshold), in award order
_BADGE_THRESHOLDS: tuple[tuple[str, str, float], ...] = (
    ("streak-7", "streak", 7),
    ("streak-30", "streak", 30),
    ("streak-100", "streak", 100),
    ("level-10", "level", 10),
    ("level-50", "level", 50),
    ("games-100", "games", 100),
    ("games-1000", "games", 1000),
    ("score-95", "best_score", 95),
    ("score-99", "best_score", 99),
)


# =============================================================================
# XP & Levels
# =============================================================================


def calculate_xp(score: float) -> int:
    """XP earned for one game: 10 for 95+, down to 1 for participation."""
    for minimum, xp in XP_BANDS:
        if score >= minimum:
            return xp
    return PARTICIPATION_XP


def xp_for_level(level: int) -> int:
    """XP needed to go from ``level - 1`` to ``level``."""
    return level * XP_PER_LEVEL


def level_threshold(level: int) -> int:
    """Total XP at which ``level`` starts; level 1 starts at 0."""
    return sum(xp_for_level(step) for step in range(2, level + 1))


def calculate_level(total_xp: int) -> int:
    """Level reached with ``total_xp``. Always at least 1."""
    level = 1
    next_threshold = xp_for_level(2)
    while next_threshold <= total_xp:
        level += 1
        next_threshold += xp_for_level(level + 1)
    return level


def xp_progress_to_next_level(total_xp: int) -> LevelProgress:
    """Where ``total_xp`` sits between the current level and the next.

    Example:
        >>> xp_progress_to_next_level(175).percentage
        50.0
    """
    level = calculate_level(total_xp)
    start = level_threshold(level)
    needed = xp_for_level(level + 1)
    progress = total_xp - start
    return LevelProgress(
        current_level=level,
        xp_for_current_level=start,
        xp_for_next_level=needed,
        xp_progress=progress,
        percentage=progress / needed * 100,
    )


# =============================================================================
# Streaks, Goals & Badges
# =============================================================================


def should_continue_streak(last_played: date, today: date) -> bool:
    """True if ``last_played`` is today or yesterday."""
    return last_played in (today, today - timedelta(days=1))


def check_badges(
    progress: PlayerProgress,
    streak: int,
    level: int,
    stats: PlayerStats,
    *,
    earned_at: int = 0,
) -> list[Badge]:
    """Badges newly earned with the given streak, level and stats.

    Badges already held in ``progress`` are never awarded again.
    """
    metrics: dict[str, float] = {
        "streak": streak,
        "level": level,
        "games": stats.total_games_played,
        "best_score": stats.best_score,
    }
    held = progress.badge_ids
    return [
        BADGES[badge_id].model_copy(update={"earned_at": earned_at})
        for badge_id, metric, threshold in _BADGE_THRESHOLDS
        if badge_id not in held and metrics[metric] >= threshold
    ]


def _advance_goal(goal: DailyGoal, played_today: bool, today: date) -> DailyGoal:
    current = min(goal.current + 1 if played_today else 1, goal.target)
    completed = current >= goal.target
    return goal.model_copy(
        update={
            "current": current,
            "completed": completed,
            "last_completed_date": today if completed else goal.last_completed_date,
        }
    )


def initialize_progress(user_id: str) -> PlayerProgress:
    """Fresh progress: level 1, no streak, a three-game daily goal."""
    return PlayerProgress(user_id=user_id)


def update_progress(
    progress: PlayerProgress,
    summary: GameResultSummary,
    *,
    game_id: str,
    now: datetime | None = None,
) -> PlayerProgress:
    """Fold one completed game into ``progress``.

    Args:
        progress: Progress before the game.
        summary: The game's summary; its score and duration are used.
        game_id: Game that produced the summary.
        now: Time the game completed; UTC now by default. Its calendar
            date decides streaks and the daily goal.

    Returns:
        The updated progress, with any new badges appended.
    """
    now = now or datetime.now(timezone.utc)
    today = now.date()
    last = progress.last_played_date
    played_today = last == today

    if played_today:
        streak = progress.streak
    elif last is not None and should_continue_streak(last, today):
        streak = progress.streak + 1
    else:
        streak = 1

    xp = progress.xp + calculate_xp(summary.score)
    level = calculate_level(xp)

    previous = progress.stats
    played = previous.total_games_played + 1
    stats = PlayerStats(
        total_games_played=played,
        total_play_time_ms=previous.total_play_time_ms + summary.duration_ms,
        avg_score=(previous.avg_score * previous.total_games_played + summary.score) / played,
        best_score=max(previous.best_score, summary.score),
        favorite_game=previous.favorite_game or game_id,
        games_played_today=previous.games_played_today + 1 if played_today else 1,
        last_session_at=int(now.timestamp() * 1000),
    )

    earned = check_badges(progress, streak, level, stats, earned_at=stats.last_session_at)
    return progress.model_copy(
        update={
            "xp": xp,
            "level": level,
            "streak": streak,
            "last_played_date": today,
            "daily_goal": _advance_goal(progress.daily_goal, played_today, today),
            "badges": progress.badges + tuple(earned),
            "stats": stats,
        }
    )


# =============================================================================
# Tracker
# =============================================================================


class ProgressTracker:
    """Thread-safe progression for one player, persisted per game.

    Example:
        >>> tracker = ProgressTracker(store, user_id="u1")
        >>> tracker.record(summary, game_id="grip")
        []
        >>> tracker.progress.level
        1
    """

    def __init__(
        self,
        store: ProfileStore | None = None,
        *,
        user_id: str = DEFAULT_USER_ID,
        now: Now | None = None,
    ) -> None:
        self.user_id = user_id
        self.store = store if store is not None else InMemoryProfileStore()
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._progress = self.store.load_progress(user_id) or initialize_progress(user_id)

    def record(self, summary: GameResultSummary, *, game_id: str) -> list[Badge]:
        """Fold a completed game and persist the result.

        Returns:
            Badges earned by this game.
        """
        with self._lock:
            before = len(self._progress.badges)
            self._progress = update_progress(self._progress, summary, game_id=game_id, now=self._now())
            self.store.save_progress(self._progress)
            earned = list(self._progress.badges[before:])

        logger.debug(
            "Progress updated",
            user_id=self.user_id,
            game_id=game_id,
            xp=self._progress.xp,
            level=self._progress.level,
            streak=self._progress.streak,
        )
        for badge in earned:
            logger.info("Badge earned", user_id=self.user_id, badge_id=badge.id)
        return earned

    @property
    def progress(self) -> PlayerProgress:
        with self._lock:
            return self._progress

    def level_progress(self) -> LevelProgress:
        return xp_progress_to_next_level(self.progress.xp)


__all__ = [
    "XP_PER_LEVEL",
    "BADGES",
    "calculate_xp",
    "xp_for_level",
    "level_threshold",
    "calculate_level",
    "xp_progress_to_next_level",
    "should_continue_streak",
    "check_badges",
    "initialize_progress",
    "update_progress",
    "ProgressTracker",
]
