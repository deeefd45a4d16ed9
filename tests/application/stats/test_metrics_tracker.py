import pytest

from mneme.application.stats import LearningMetricsTracker
from mneme.domain.errors import InvalidReviewResult
from mneme.domain.models import LearningMetrics, ReviewResult


@pytest.fixture
def tracker():
    return LearningMetricsTracker()


def test_first_review_seeds_metrics(tracker):
    metrics = tracker.update(
        LearningMetrics(), ReviewResult(grade=3, response_time=2000, difficulty_rating=2)
    )

    assert metrics.total_reviews == 1
    assert metrics.correct_streak == 1
    assert metrics.longest_streak == 1
    assert metrics.average_response_time == 2000
    assert metrics.retention_rate == pytest.approx(100.0)
    assert metrics.last_accuracy == pytest.approx(100.0)
    assert metrics.difficulty_rating == 2


def test_incorrect_review_breaks_streak(tracker):
    metrics = tracker.update(LearningMetrics(), ReviewResult(grade=4, response_time=2000))
    metrics = tracker.update(metrics, ReviewResult(grade=2, response_time=4000))

    assert metrics.total_reviews == 2
    assert metrics.correct_streak == 0
    assert metrics.longest_streak == 1
    # EMA with alpha 0.2
    assert metrics.average_response_time == pytest.approx(2400.0)
    assert metrics.retention_rate == pytest.approx(50.0)
    assert metrics.last_accuracy == pytest.approx(50.0)


def test_retention_is_cumulative_percentage(tracker):
    metrics = LearningMetrics()
    for grade in [3, 3, 1, 4, 2, 3]:
        metrics = tracker.update(metrics, ReviewResult(grade=grade))

    assert metrics.retention_rate == pytest.approx(4 / 6 * 100)
    assert metrics.longest_streak == 2
    assert metrics.correct_streak == 1


class TestRecentAccuracy:
    def test_decays_after_window(self, tracker):
        prior = LearningMetrics(total_reviews=10, retention_rate=80.0, last_accuracy=80.0)

        correct = tracker.update(prior, ReviewResult(grade=3))
        wrong = tracker.update(prior, ReviewResult(grade=1))

        assert correct.last_accuracy == pytest.approx(82.0)
        assert wrong.last_accuracy == pytest.approx(72.0)

    def test_stays_within_percentage_range(self, tracker):
        metrics = LearningMetrics()
        for _ in range(50):
            metrics = tracker.update(metrics, ReviewResult(grade=4))
        assert metrics.last_accuracy == pytest.approx(100.0)
        assert metrics.retention_rate == pytest.approx(100.0)

        for _ in range(50):
            metrics = tracker.update(metrics, ReviewResult(grade=1))
        assert 0.0 <= metrics.last_accuracy < 1.0


def test_input_is_not_mutated(tracker):
    before = LearningMetrics()
    tracker.update(before, ReviewResult(grade=3, response_time=1000))
    assert before == LearningMetrics()


def test_non_finite_response_time_is_rejected_before_tracking(tracker):
    with pytest.raises(InvalidReviewResult):
        ReviewResult(grade=3, response_time=float("nan"))

    metrics = tracker.update(LearningMetrics(), ReviewResult(grade=3, response_time=1000))
    metrics = tracker.update(metrics, ReviewResult(grade=3, response_time=2000))
    assert metrics.average_response_time == pytest.approx(1200.0)
