# Domain Stats Package
from .models import (
    BurnoutAssessment,
    BurnoutRisk,
    DifficultyAdjustment,
    LearningStats,
    Recommendations,
    RetentionStats,
    SessionProgress,
    SessionStats,
    StreakStats,
    TodayStats,
)

__all__ = [
    "BurnoutAssessment",
    "BurnoutRisk",
    "DifficultyAdjustment",
    "LearningStats",
    "Recommendations",
    "RetentionStats",
    "SessionProgress",
    "SessionStats",
    "StreakStats",
    "TodayStats",
]
