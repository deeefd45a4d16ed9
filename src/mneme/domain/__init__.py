# Domain Package
from .errors import (
    InvalidConfig,
    InvalidGrade,
    InvalidReviewResult,
    MnemeError,
    NoActiveQuestion,
    SchedulerMismatch,
    SessionAlreadyActive,
    SessionNotActive,
    SessionStateError,
)
from .models import (
    Card,
    CardCategory,
    DifficultyLevel,
    Grade,
    LearningMetrics,
    Mood,
    ReviewResult,
    SchedulerKind,
    SessionType,
    StudySession,
    StudySessionConfig,
    UpdatedSchedule,
)
from .ports import SchedulerStrategy

__all__ = [
    "Card",
    "CardCategory",
    "DifficultyLevel",
    "Grade",
    "InvalidConfig",
    "InvalidGrade",
    "InvalidReviewResult",
    "LearningMetrics",
    "MnemeError",
    "Mood",
    "NoActiveQuestion",
    "ReviewResult",
    "SchedulerKind",
    "SchedulerMismatch",
    "SchedulerStrategy",
    "SessionAlreadyActive",
    "SessionNotActive",
    "SessionStateError",
    "SessionType",
    "StudySession",
    "StudySessionConfig",
    "UpdatedSchedule",
]
