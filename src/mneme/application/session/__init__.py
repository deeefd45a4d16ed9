# Application Session Package
from .recommendations import AdaptiveRecommender
from .runtime import (
    AnsweredCard,
    SessionState,
    StudySessionRuntime,
    estimate_break_time,
)

__all__ = [
    "AdaptiveRecommender",
    "AnsweredCard",
    "SessionState",
    "StudySessionRuntime",
    "estimate_break_time",
]
