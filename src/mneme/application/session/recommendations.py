"""
Adaptive recommendations and burnout estimation.

Pure functions of session statistics and progress: the same inputs always
produce the same outputs.
"""

from mneme.application.config import RecommendationThresholds
from mneme.domain.models import HARD_LEVELS, DifficultyLevel
from mneme.domain.stats.models import (
    BurnoutAssessment,
    BurnoutRisk,
    DifficultyAdjustment,
    Recommendations,
    SessionProgress,
    SessionStats,
)

BURNOUT_RECOMMENDATIONS: dict[BurnoutRisk, list[str]] = {
    BurnoutRisk.HIGH: [
        "Take a 10-15 minute break",
        "Switch to easier review cards",
        "Consider ending session and resuming later",
    ],
    BurnoutRisk.MEDIUM: [
        "Take a 5-minute break",
        "Focus on easier cards for a while",
    ],
    BurnoutRisk.LOW: [
        "You're doing well! Keep up the good pace",
    ],
}


class AdaptiveRecommender:
    """
    Derives post-session suggestions from session statistics.

    Accuracy-based rules only fire once at least one answer was given; an
    empty session has no accuracy to judge.
    """

    def __init__(self, thresholds: RecommendationThresholds | None = None):
        self.thresholds = thresholds or RecommendationThresholds()

    def recommend(self, stats: SessionStats, progress: SessionProgress) -> Recommendations:
        return Recommendations(
            suggested_session_length=self.suggest_session_length(stats, progress),
            difficulty_adjustment=self.difficulty_adjustment(stats),
            recommended_question_types=self.weak_question_types(stats),
            study_tips=self.study_tips(stats, progress),
        )

    def suggest_session_length(self, stats: SessionStats, progress: SessionProgress) -> int:
        t = self.thresholds
        if not stats.total_questions:
            return t.default_session_minutes
        if (
            stats.accuracy > t.long_session_accuracy
            and progress.current_streak > t.long_session_streak
        ):
            return t.long_session_minutes
        if stats.accuracy < t.struggling_accuracy:
            return t.short_session_minutes
        return t.default_session_minutes

    def difficulty_adjustment(self, stats: SessionStats) -> DifficultyAdjustment:
        t = self.thresholds
        if not stats.total_questions:
            return DifficultyAdjustment.MAINTAIN
        if (
            stats.accuracy > t.increase_accuracy
            and stats.average_response_time < t.increase_max_response_ms
        ):
            return DifficultyAdjustment.INCREASE
        if stats.accuracy < t.struggling_accuracy:
            return DifficultyAdjustment.DECREASE
        return DifficultyAdjustment.MAINTAIN

    def weak_question_types(self, stats: SessionStats) -> list[str]:
        return [
            question_type
            for question_type, accuracy in stats.type_accuracy.items()
            if accuracy < self.thresholds.weak_type_accuracy
        ]

    def study_tips(self, stats: SessionStats, progress: SessionProgress) -> list[str]:
        t = self.thresholds
        tips: list[str] = []
        if stats.total_questions and stats.accuracy < t.tips_accuracy:
            tips.append("Focus on understanding concepts before memorizing facts")
            tips.append("Use active recall techniques like flashcards")
        if stats.average_response_time > t.slow_response_ms:
            tips.append("Practice quick recall to improve response time")
            tips.append("Review material more frequently to build familiarity")
        if progress.current_streak > t.great_streak:
            tips.append("Great streak! Try teaching concepts to someone else")
            tips.append("Consider increasing difficulty for more challenge")
        return tips

    def assess_burnout(self, stats: SessionStats, progress: SessionProgress) -> BurnoutAssessment:
        t = self.thresholds
        factors: list[str] = []
        score = 0

        if progress.time_elapsed > t.burnout_elapsed_minutes:
            factors.append("Extended session duration")
            score += 2

        if stats.total_questions and stats.accuracy < t.burnout_accuracy:
            factors.append("Low accuracy indicating fatigue")
            score += 2

        if stats.average_response_time > t.burnout_response_ms:
            factors.append("Slow response times")
            score += 1

        hard_cards = sum(
            count
            for level, count in stats.difficulty_breakdown.items()
            if DifficultyLevel(level) in HARD_LEVELS
        )
        if hard_cards > stats.cards_presented * t.burnout_hard_ratio:
            factors.append("High proportion of difficult cards")
            score += 1

        risk = self.risk_bucket(score)
        return BurnoutAssessment(
            risk=risk,
            score=score,
            factors=factors,
            recommendations=list(BURNOUT_RECOMMENDATIONS[risk]),
        )

    def risk_bucket(self, score: int) -> BurnoutRisk:
        if score >= self.thresholds.high_risk_score:
            return BurnoutRisk.HIGH
        if score >= self.thresholds.medium_risk_score:
            return BurnoutRisk.MEDIUM
        return BurnoutRisk.LOW
