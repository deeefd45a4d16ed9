"""mneme: spaced-repetition scheduling engine and study-session runtime."""

from mneme.application.config import AppConfig, FsrsParameters, resolve_config
from mneme.application.queue_builder import SelectionBudget, build_session_queue, select_cards
from mneme.application.scheduling import (
    FsrsScheduler,
    Sm2Scheduler,
    get_scheduler,
    migrate_card,
    reset_card,
    review_card,
)
from mneme.application.session import AdaptiveRecommender, StudySessionRuntime
from mneme.application.stats import LearningMetricsTracker, calculate_learning_stats
from mneme.consts import VERSION
from mneme.domain import (
    Card,
    Grade,
    ReviewResult,
    SchedulerKind,
    StudySession,
    StudySessionConfig,
)

__version__ = VERSION

__all__ = [
    "AdaptiveRecommender",
    "AppConfig",
    "Card",
    "FsrsParameters",
    "FsrsScheduler",
    "Grade",
    "LearningMetricsTracker",
    "ReviewResult",
    "SchedulerKind",
    "SelectionBudget",
    "Sm2Scheduler",
    "StudySession",
    "StudySessionConfig",
    "StudySessionRuntime",
    "build_session_queue",
    "calculate_learning_stats",
    "get_scheduler",
    "migrate_card",
    "reset_card",
    "resolve_config",
    "review_card",
    "select_cards",
]
