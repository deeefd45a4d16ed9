"""
Domain models for session and pool statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class DifficultyAdjustment(StrEnum):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


class BurnoutRisk(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class SessionProgress:
    """
    Live, read-only view of a running session.

    Attributes:
        cards_completed: Cards answered or skipped so far.
        cards_remaining: Cards left in the queue.
        time_elapsed: Minutes since the session started.
        accuracy: Percentage of answered cards graded Good or Easy.
        current_streak: Trailing run of correct answers.
        estimated_time_remaining: Minutes, from the mean response time.
    """

    cards_completed: int
    cards_remaining: int
    time_elapsed: float
    accuracy: float
    current_streak: int
    estimated_time_remaining: float


@dataclass(frozen=True)
class SessionStats:
    """Aggregate statistics over the answers given in one session."""

    total_questions: int
    correct_answers: int
    accuracy: float  # percentage
    average_response_time: float  # ms
    time_per_card: float  # seconds
    difficulty_breakdown: dict[str, int] = field(default_factory=dict)
    type_breakdown: dict[str, int] = field(default_factory=dict)
    type_accuracy: dict[str, float] = field(default_factory=dict)
    grade_distribution: dict[int, int] = field(default_factory=dict)
    cards_presented: int = 0


@dataclass(frozen=True)
class Recommendations:
    """Suggestions for the learner's next session."""

    suggested_session_length: int  # minutes
    difficulty_adjustment: DifficultyAdjustment
    recommended_question_types: list[str] = field(default_factory=list)
    study_tips: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BurnoutAssessment:
    """Fatigue risk derived from session statistics."""

    risk: BurnoutRisk
    score: int
    factors: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TodayStats:
    new_cards_studied: int = 0
    reviews_completed: int = 0
    time_spent: int = 0  # minutes
    accuracy: int = 0  # percentage


@dataclass(frozen=True)
class StreakStats:
    current_streak: int = 0
    longest_streak: int = 0
    last_study_date: datetime | None = None


@dataclass(frozen=True)
class RetentionStats:
    overall: int = 0
    young: int = 0
    mature: int = 0


@dataclass(frozen=True)
class LearningStats:
    """
    Dashboard snapshot over a whole card pool.

    Category counts exclude suspended cards; ``suspended_cards`` counts them.
    """

    total_cards: int
    new_cards: int
    learning_cards: int
    review_cards: int
    mature_cards: int
    suspended_cards: int
    today: TodayStats = field(default_factory=TodayStats)
    streaks: StreakStats = field(default_factory=StreakStats)
    retention: RetentionStats = field(default_factory=RetentionStats)
