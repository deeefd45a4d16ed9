from datetime import timedelta

import pytest

from mneme.application.stats import calculate_learning_stats
from mneme.domain.models import Card, LearningMetrics
from mneme.domain.stats import LearningStats, RetentionStats, StreakStats, TodayStats


@pytest.fixture
def pool(now):
    return [
        Card("new"),
        Card(
            "learning",
            repetitions=1,
            interval=2,
            last_reviewed=now - timedelta(hours=1),
            metrics=LearningMetrics(
                total_reviews=1, correct_streak=1, longest_streak=1,
                average_response_time=60_000, retention_rate=100.0,
            ),
        ),
        Card(
            "review",
            repetitions=5,
            interval=30,
            last_reviewed=now - timedelta(hours=2),
            metrics=LearningMetrics(
                total_reviews=5, correct_streak=4, longest_streak=6,
                average_response_time=120_000, retention_rate=80.0,
            ),
        ),
        Card(
            "yesterday",
            repetitions=3,
            interval=10,
            last_reviewed=now - timedelta(days=1),
            metrics=LearningMetrics(total_reviews=4, longest_streak=3, retention_rate=50.0),
        ),
        Card(
            "leech",
            repetitions=4,
            interval=25,
            suspended=True,
            metrics=LearningMetrics(total_reviews=12, longest_streak=2),
        ),
    ]


def test_category_counts_exclude_suspended(pool, now):
    stats = calculate_learning_stats(pool, now)

    assert stats.total_cards == 5
    assert stats.new_cards == 1
    assert stats.learning_cards == 2
    assert stats.review_cards == 1
    assert stats.mature_cards == 1
    assert stats.suspended_cards == 1


def test_today(pool, now):
    today = calculate_learning_stats(pool, now).today

    assert today == TodayStats(
        new_cards_studied=1,
        reviews_completed=2,
        time_spent=3,
        accuracy=90,
    )


def test_streaks(pool, now):
    streaks = calculate_learning_stats(pool, now).streaks

    assert streaks == StreakStats(
        current_streak=4,
        longest_streak=6,
        last_study_date=now - timedelta(hours=1),
    )


def test_streak_broken_by_latest_review(now):
    cards = [
        Card("a", last_reviewed=now, metrics=LearningMetrics(correct_streak=0)),
        Card("b", last_reviewed=now - timedelta(days=1), metrics=LearningMetrics(correct_streak=5)),
    ]
    assert calculate_learning_stats(cards, now).streaks.current_streak == 0


def test_retention(pool, now):
    retention = calculate_learning_stats(pool, now).retention
    assert retention == RetentionStats(overall=46, young=75, mature=40)


def test_empty_pool(now):
    stats = calculate_learning_stats([], now)
    assert stats == LearningStats(
        total_cards=0,
        new_cards=0,
        learning_cards=0,
        review_cards=0,
        mature_cards=0,
        suspended_cards=0,
    )
