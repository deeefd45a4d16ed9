"""
Domain models for cards, review events and study sessions.

These are pure data structures with no I/O or external dependencies. Value
types are frozen; the engine returns new instances via ``dataclasses.replace``
instead of mutating what the caller passed in.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum, StrEnum

from .constants import (
    MATURE_INTERVAL_DAYS,
    SM2_INITIAL_EASE_FACTOR,
)
from .errors import InvalidConfig, InvalidGrade, InvalidReviewResult


class Grade(IntEnum):
    """Learner's recall outcome for one review (Anki-style buttons)."""

    AGAIN = 1  # Forgot completely
    HARD = 2  # Remembered with difficulty
    GOOD = 3  # Remembered correctly
    EASY = 4  # Remembered easily


class SchedulerKind(StrEnum):
    """Which scheduling strategy governs a card."""

    FSRS = "fsrs"
    SM2 = "sm2"


class CardCategory(StrEnum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"


class DifficultyLevel(StrEnum):
    """Content difficulty of the question, as tagged by the caller."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


HARD_LEVELS = frozenset({DifficultyLevel.ADVANCED, DifficultyLevel.EXPERT})


class SessionType(StrEnum):
    REVIEW = "review"
    LEARN = "learn"
    CRAM = "cram"
    TEST = "test"


class Mood(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    OKAY = "okay"
    POOR = "poor"
    TERRIBLE = "terrible"


@dataclass(frozen=True)
class LearningMetrics:
    """
    Rolling per-card statistics, updated incrementally on every review.

    Attributes:
        total_reviews: Number of answered reviews.
        correct_streak: Consecutive reviews graded Good or Easy.
        longest_streak: Best correct_streak ever reached.
        average_response_time: Exponential moving average in milliseconds.
        difficulty_rating: Learner's latest self-reported difficulty (1-5).
        retention_rate: Cumulative percentage of correct reviews.
        last_accuracy: Recent-window accuracy estimate (percentage).
    """

    total_reviews: int = 0
    correct_streak: int = 0
    longest_streak: int = 0
    average_response_time: float = 0.0
    difficulty_rating: int = 3
    retention_rate: float = 0.0
    last_accuracy: float = 0.0


@dataclass(frozen=True)
class Card:
    """
    Scheduling state of one learnable item.

    The id is opaque to the engine. New / learning / review categories are
    derived from repetitions and interval, never stored.
    """

    id: str

    # Scheduling state
    stability: float = 1.0  # Days until recall probability decays to ~90%
    difficulty: float = 5.0  # 1-10
    retrievability: float = 0.0  # 0-1
    interval: int = 1  # Days until next review
    repetitions: int = 0  # Successful reviews in a row, reset on failure
    lapses: int = 0
    ease_factor: float = SM2_INITIAL_EASE_FACTOR  # SM-2 only

    # Flags
    suspended: bool = False
    buried: bool = False
    buried_on: date | None = None  # None: buried until unburied or released

    # Timestamps
    last_reviewed: datetime | None = None
    next_review_date: datetime | None = None  # None means due now

    # Content tags supplied by the caller
    confidence: int = 3
    level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    question_type: str = "flashcard"

    scheduler: SchedulerKind = SchedulerKind.FSRS
    metrics: LearningMetrics = field(default_factory=LearningMetrics)

    def __post_init__(self):
        # Hosts often hand over plain strings from storage.
        object.__setattr__(self, "level", DifficultyLevel(self.level))
        object.__setattr__(self, "scheduler", SchedulerKind(self.scheduler))

    @property
    def category(self) -> CardCategory:
        if self.repetitions == 0:
            return CardCategory.NEW
        if self.interval < MATURE_INTERVAL_DAYS:
            return CardCategory.LEARNING
        return CardCategory.REVIEW

    @property
    def is_new(self) -> bool:
        return self.repetitions == 0

    @property
    def is_mature(self) -> bool:
        return self.interval >= MATURE_INTERVAL_DAYS

    def is_buried(self, now: datetime) -> bool:
        """
        Buried cards stay hidden for the rest of the day they were buried on.

        A burial without ``buried_on`` (hosts that only store the flag) has no
        day to expire on; ``release_expired_burials`` dates it from the last review
        day, or from ``now`` for a never-reviewed card.
        """
        if not self.buried:
            return False
        if self.buried_on is None:
            return True
        return now.date() <= self.buried_on

    def is_available(self, now: datetime) -> bool:
        return not self.suspended and not self.is_buried(now)

    def is_due(self, now: datetime) -> bool:
        return self.next_review_date is None or self.next_review_date <= now


@dataclass(frozen=True)
class ReviewResult:
    """
    One answer event. Created by the caller per answer, consumed once.

    Attributes:
        grade: 1=Again, 2=Hard, 3=Good, 4=Easy.
        response_time: Milliseconds taken to answer.
        confidence: Learner self-report, 1-5.
        difficulty_rating: Learner self-report, 1-5.
    """

    grade: int
    response_time: float = 0.0
    confidence: int = 3
    difficulty_rating: int = 3

    def __post_init__(self):
        try:
            grade = Grade(self.grade)
        except (ValueError, TypeError):
            raise InvalidGrade(self.grade) from None
        object.__setattr__(self, "grade", grade)

        if not math.isfinite(self.response_time) or self.response_time < 0:
            raise InvalidReviewResult(
                f"response_time must be a finite value >= 0, got {self.response_time}",
                details={"response_time": self.response_time},
            )
        for name in ("confidence", "difficulty_rating"):
            value = getattr(self, name)
            if not 1 <= value <= 5:
                raise InvalidReviewResult(
                    f"{name} must be between 1 and 5, got {value}",
                    details={name: value},
                )

    @property
    def is_correct(self) -> bool:
        return self.grade >= Grade.GOOD


@dataclass(frozen=True)
class UpdatedSchedule:
    """Output of a scheduler strategy for one review."""

    stability: float
    difficulty: float
    retrievability: float
    interval: int
    repetitions: int
    ease_factor: float
    next_review_date: datetime


@dataclass(frozen=True)
class StudySession:
    """
    Record of one bounded study run.

    Replaced (never mutated in place) by the session runtime while active and
    finalized by ``end_session``.
    """

    id: str
    start_time: datetime
    session_type: SessionType = SessionType.REVIEW
    end_time: datetime | None = None
    questions_reviewed: int = 0
    correct_answers: int = 0
    average_response_time: float = 0.0  # ms
    focus_time: float = 0.0  # minutes, elapsed minus estimated breaks
    mood: Mood = Mood.OKAY
    notes: str | None = None
    user_id: str | None = None

    @property
    def is_finalized(self) -> bool:
        return self.end_time is not None


@dataclass(frozen=True)
class StudySessionConfig:
    """Caller-supplied session budget. Pure configuration."""

    max_new_cards: int = 10
    max_review_cards: int = 20
    time_limit_minutes: float = 30
    session_type: SessionType = SessionType.REVIEW
    include_difficult: bool = True
    shuffle: bool = True
    show_hints: bool = True
    enable_memory_aids: bool = True

    @property
    def max_total_cards(self) -> int:
        return self.max_new_cards + self.max_review_cards

    def validate(self) -> "StudySessionConfig":
        if self.max_new_cards < 0 or self.max_review_cards < 0:
            raise InvalidConfig(
                "Card budgets must not be negative",
                details={
                    "max_new_cards": self.max_new_cards,
                    "max_review_cards": self.max_review_cards,
                },
            )
        if self.max_total_cards <= 0:
            raise InvalidConfig("Session must allow at least one card")
        if not math.isfinite(self.time_limit_minutes) or self.time_limit_minutes <= 0:
            raise InvalidConfig(
                f"time_limit_minutes must be positive and finite, got {self.time_limit_minutes}",
                details={"time_limit_minutes": self.time_limit_minutes},
            )
        return self

    @classmethod
    def for_type(cls, session_type: SessionType | str) -> "StudySessionConfig":
        """Preset budgets per session type."""
        session_type = SessionType(session_type)
        if session_type == SessionType.LEARN:
            return cls(
                max_new_cards=15,
                max_review_cards=5,
                time_limit_minutes=25,
                session_type=session_type,
                include_difficult=False,
                shuffle=False,
            )
        if session_type == SessionType.REVIEW:
            return cls(max_new_cards=5, max_review_cards=25, time_limit_minutes=30)
        if session_type == SessionType.CRAM:
            return cls(
                max_new_cards=0,
                max_review_cards=50,
                time_limit_minutes=60,
                session_type=session_type,
                show_hints=False,
            )
        # test
        return cls(
            max_new_cards=0,
            max_review_cards=30,
            time_limit_minutes=45,
            session_type=session_type,
            show_hints=False,
            enable_memory_aids=False,
        )
