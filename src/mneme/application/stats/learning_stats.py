"""
Pool-level learning statistics for dashboards.

Pure functions over a card pool; ``now`` is supplied by the caller so "today"
is the calendar day of ``now`` in whatever timezone ``now`` carries.
"""

from datetime import datetime

from mneme.application.utils.numeric import round_half_up, safe_mean
from mneme.domain.models import Card, CardCategory
from mneme.domain.stats.models import (
    LearningStats,
    RetentionStats,
    StreakStats,
    TodayStats,
)


def calculate_learning_stats(cards: list[Card], now: datetime) -> LearningStats:
    """
    Summarize a card pool.

    Empty pools (or empty subsets) report 0 for every average.
    """
    active = [c for c in cards if not c.suspended]

    return LearningStats(
        total_cards=len(cards),
        new_cards=sum(1 for c in active if c.category == CardCategory.NEW),
        learning_cards=sum(1 for c in active if c.category == CardCategory.LEARNING),
        review_cards=sum(1 for c in active if c.category == CardCategory.REVIEW),
        mature_cards=sum(1 for c in active if c.is_mature),
        suspended_cards=len(cards) - len(active),
        today=_today_stats(cards, now),
        streaks=_streak_stats(cards),
        retention=_retention_stats(cards),
    )


def _today_stats(cards: list[Card], now: datetime) -> TodayStats:
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    reviewed_today = [
        c for c in cards if c.last_reviewed is not None and c.last_reviewed >= day_start
    ]
    time_spent_ms = sum(c.metrics.average_response_time for c in reviewed_today)

    return TodayStats(
        new_cards_studied=sum(1 for c in reviewed_today if c.repetitions == 1),
        reviews_completed=len(reviewed_today),
        time_spent=round_half_up(time_spent_ms / 60_000),
        accuracy=round_half_up(safe_mean([c.metrics.retention_rate for c in reviewed_today])),
    )


def _streak_stats(cards: list[Card]) -> StreakStats:
    reviewed = sorted(
        (c for c in cards if c.last_reviewed is not None),
        key=lambda c: c.last_reviewed,
        reverse=True,
    )

    # Walk back from the most recent review until a card whose streak is broken.
    current = 0
    for card in reviewed:
        if card.metrics.correct_streak <= 0:
            break
        current = max(current, card.metrics.correct_streak)

    return StreakStats(
        current_streak=current,
        longest_streak=max((c.metrics.longest_streak for c in cards), default=0),
        last_study_date=reviewed[0].last_reviewed if reviewed else None,
    )


def _retention_stats(cards: list[Card]) -> RetentionStats:
    young = [c.metrics.retention_rate for c in cards if c.repetitions > 0 and not c.is_mature]
    mature = [c.metrics.retention_rate for c in cards if c.is_mature]
    overall = [c.metrics.retention_rate for c in cards]

    return RetentionStats(
        overall=round_half_up(safe_mean(overall)),
        young=round_half_up(safe_mean(young)),
        mature=round_half_up(safe_mean(mature)),
    )
