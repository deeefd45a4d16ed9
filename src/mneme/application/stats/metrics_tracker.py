"""
Learning metrics tracker.

Streaming update of a card's rolling statistics. This is a pure computation
module with no I/O; no raw history is kept, so the card record stays fixed-size.
"""

from dataclasses import replace

from mneme.domain.constants import (
    RECENT_ACCURACY_DECAY,
    RECENT_ACCURACY_WINDOW,
    RESPONSE_TIME_EMA_ALPHA,
)
from mneme.domain.models import LearningMetrics, ReviewResult


class LearningMetricsTracker:
    """
    Derives updated LearningMetrics from prior metrics and one new result.

    Stateless and side-effect free.
    """

    def update(self, metrics: LearningMetrics, result: ReviewResult) -> LearningMetrics:
        is_correct = result.is_correct
        total_reviews = metrics.total_reviews + 1
        correct_streak = metrics.correct_streak + 1 if is_correct else 0
        retention_rate = self._retention_rate(metrics, is_correct)

        return replace(
            metrics,
            total_reviews=total_reviews,
            correct_streak=correct_streak,
            longest_streak=max(metrics.longest_streak, correct_streak),
            average_response_time=self._average_response_time(metrics, result),
            difficulty_rating=result.difficulty_rating,
            retention_rate=retention_rate,
            last_accuracy=self._recent_accuracy(metrics, is_correct, retention_rate),
        )

    def _average_response_time(self, metrics: LearningMetrics, result: ReviewResult) -> float:
        """Exponential moving average; the first review seeds it."""
        if metrics.total_reviews == 0:
            return float(result.response_time)
        alpha = RESPONSE_TIME_EMA_ALPHA
        return metrics.average_response_time * (1 - alpha) + result.response_time * alpha

    def _retention_rate(self, metrics: LearningMetrics, is_correct: bool) -> float:
        """Cumulative percentage of correct reviews, updated incrementally."""
        correct_so_far = metrics.retention_rate / 100 * metrics.total_reviews
        return (correct_so_far + (1 if is_correct else 0)) / (metrics.total_reviews + 1) * 100

    def _recent_accuracy(
        self, metrics: LearningMetrics, is_correct: bool, retention_rate: float
    ) -> float:
        """
        Approximate accuracy over the last ~10 reviews.

        Until ten reviews exist the whole history is the recent window, so the
        cumulative rate is exact. After that, decay the previous estimate and
        add this review's share (100% / 10).
        """
        if metrics.total_reviews < RECENT_ACCURACY_WINDOW:
            return retention_rate
        share = 100 / RECENT_ACCURACY_WINDOW
        return metrics.last_accuracy * RECENT_ACCURACY_DECAY + (share if is_correct else 0.0)
