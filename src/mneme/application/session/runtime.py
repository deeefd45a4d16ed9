"""
Study session runtime.

A small, caller-owned state machine driving one study session at a time:

    idle -> active -> (present card -> answer or skip)* -> completed

Each runtime instance holds its own queue, cursor and answers; there is no
module-level state, so independent sessions never interfere. Calls on one
instance must be serialized by the caller.
"""

import logging
import random
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from ulid import ULID

from mneme.application.config import AppConfig
from mneme.application.queue_builder import build_session_queue
from mneme.application.scheduling.card_ops import review_card
from mneme.application.scheduling.factory import get_schedulers
from mneme.application.session.recommendations import AdaptiveRecommender
from mneme.application.stats.metrics_tracker import LearningMetricsTracker
from mneme.application.utils.numeric import percentage, safe_mean
from mneme.domain.constants import (
    DEFAULT_RESPONSE_TIME_MS,
    LONG_SESSION_BREAK_RATIO,
    LONG_SESSION_MINUTES,
    MEDIUM_SESSION_BREAK_RATIO,
    MEDIUM_SESSION_MINUTES,
)
from mneme.domain.errors import NoActiveQuestion, SessionAlreadyActive, SessionNotActive
from mneme.domain.models import (
    Card,
    Grade,
    Mood,
    ReviewResult,
    StudySession,
    StudySessionConfig,
)
from mneme.domain.stats.models import (
    BurnoutAssessment,
    Recommendations,
    SessionProgress,
    SessionStats,
)

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class AnsweredCard:
    """One answered question: the card as presented, as updated, and the answer."""

    before: Card
    after: Card
    result: ReviewResult


def generate_session_id(now: datetime) -> str:
    """Generate a sortable session ID using a ULID stamped with ``now``."""
    return f"session_{ULID.from_datetime(now)}"


def estimate_break_time(total_minutes: float) -> float:
    """Tiered break estimate: 20% of long sessions, 10% of medium, none otherwise."""
    if total_minutes > LONG_SESSION_MINUTES:
        return total_minutes * LONG_SESSION_BREAK_RATIO
    if total_minutes > MEDIUM_SESSION_MINUTES:
        return total_minutes * MEDIUM_SESSION_BREAK_RATIO
    return 0.0


def _minutes_between(start: datetime, end: datetime) -> float:
    return max(0.0, (end - start).total_seconds() / 60)


class StudySessionRuntime:
    """
    Drives one study session: presents one card at a time, applies the card's
    scheduler, advances, and finalizes.

    Timing behaviour such as auto-advance belongs to the host: it should run
    its own timer and call ``skip_question`` or ``end_session`` explicitly.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        tracker: LearningMetricsTracker | None = None,
    ):
        """
        Args:
            config: Engine configuration; loaded with defaults if not provided.
            tracker: Optional custom metrics tracker.
        """
        self._config = config or AppConfig()
        self._schedulers = get_schedulers(self._config)
        self._tracker = tracker or LearningMetricsTracker()
        self._recommender = AdaptiveRecommender(self._config.recommendations)

        self._state = SessionState.IDLE
        self._session: StudySession | None = None
        self._session_config: StudySessionConfig | None = None
        self._queue: list[Card] = []
        self._cursor = 0
        self._answers: list[AnsweredCard] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> StudySession | None:
        return self._session

    @property
    def queue(self) -> tuple[Card, ...]:
        return tuple(self._queue)

    @property
    def answers(self) -> tuple[AnsweredCard, ...]:
        return tuple(self._answers)

    @property
    def updated_cards(self) -> list[Card]:
        """Reviewed card values, in answer order, for the caller to persist."""
        return [a.after for a in self._answers]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_session(
        self,
        pool: list[Card],
        config: StudySessionConfig,
        now: datetime,
        user_id: str | None = None,
        rng: random.Random | None = None,
    ) -> StudySession:
        """
        Build the queue and open a new session.

        An empty pool is valid and produces an empty queue.

        Raises:
            SessionAlreadyActive: A session is already running on this runtime.
            InvalidConfig: The budget or time limit is not usable.
        """
        if self._state == SessionState.ACTIVE:
            raise SessionAlreadyActive(
                "A session is already active; end it before starting another",
                details={"session_id": self._session.id if self._session else None},
            )

        queue = build_session_queue(pool, config, now, rng)

        self._session_config = config
        self._queue = queue
        self._cursor = 0
        self._answers = []
        self._session = StudySession(
            id=generate_session_id(now),
            start_time=now,
            session_type=config.session_type,
            user_id=user_id,
        )
        self._state = SessionState.ACTIVE

        logger.info(
            f"Started {config.session_type.value} session {self._session.id} "
            f"with {len(queue)} cards"
        )
        return self._session

    def current_question(self) -> Card | None:
        """The card at the cursor, or None when the queue is exhausted or idle."""
        if self._state != SessionState.ACTIVE or self._cursor >= len(self._queue):
            return None
        return self._queue[self._cursor]

    def submit_answer(self, result: ReviewResult, now: datetime) -> Card:
        """
        Grade the current card and advance.

        Returns:
            The updated card, for the caller to persist.

        Raises:
            SessionNotActive: No session is running.
            NoActiveQuestion: Every card in the queue was already handled.
        """
        card = self._require_current()

        updated = review_card(
            card,
            result,
            now,
            self._schedulers[card.scheduler],
            tracker=self._tracker,
            lapse_threshold=self._config.lapse_suspend_threshold,
        )
        self._answers.append(AnsweredCard(before=card, after=updated, result=result))

        session = self._session
        self._session = replace(
            session,
            questions_reviewed=session.questions_reviewed + 1,
            correct_answers=session.correct_answers + (1 if result.is_correct else 0),
            average_response_time=safe_mean([a.result.response_time for a in self._answers]),
        )
        self._cursor += 1
        return updated

    def skip_question(self) -> None:
        """Advance without scheduling or recording anything."""
        self._require_current()
        self._cursor += 1

    def end_session(
        self,
        mood: Mood | str = Mood.OKAY,
        notes: str | None = None,
        *,
        now: datetime,
    ) -> StudySession:
        """
        Finalize the session. Always valid while active, even mid-queue.

        Raises:
            SessionNotActive: No session is running.
        """
        self._require_active()
        end_time = max(now, self._session.start_time)

        total_minutes = _minutes_between(self._session.start_time, end_time)
        focus_time = max(0.0, total_minutes - estimate_break_time(total_minutes))

        self._session = replace(
            self._session,
            end_time=end_time,
            mood=Mood(mood),
            notes=notes,
            focus_time=focus_time,
        )
        self._state = SessionState.COMPLETED

        logger.info(
            f"Ended session {self._session.id}: {self._session.correct_answers}/"
            f"{self._session.questions_reviewed} correct, {focus_time:.1f} focus minutes"
        )
        return self._session

    # ------------------------------------------------------------------
    # Derived statistics
    # ------------------------------------------------------------------

    def progress(self, now: datetime) -> SessionProgress:
        """
        Live progress. After completion, elapsed time stops at the end time.

        Raises:
            SessionNotActive: No session was ever started.
        """
        session = self._require_started()
        end = session.end_time or now
        remaining = len(self._queue) - self._cursor
        mean_response = safe_mean(
            [a.result.response_time for a in self._answers], default=DEFAULT_RESPONSE_TIME_MS
        )

        return SessionProgress(
            cards_completed=self._cursor,
            cards_remaining=remaining,
            time_elapsed=_minutes_between(session.start_time, end),
            accuracy=percentage(self._correct_count(), len(self._answers)),
            current_streak=self._current_streak(),
            estimated_time_remaining=remaining * mean_response / 60_000,
        )

    def session_stats(self) -> SessionStats:
        """
        Aggregate statistics over this session's answers.

        Difficulty and type breakdowns cover every presented card, skipped
        ones included.

        Raises:
            SessionNotActive: No session was ever started.
        """
        self._require_started()
        total = len(self._answers)
        presented = self._queue[: self._cursor]
        mean_response = safe_mean([a.result.response_time for a in self._answers])

        grade_distribution = {int(g): 0 for g in Grade}
        grade_distribution.update(Counter(int(a.result.grade) for a in self._answers))

        return SessionStats(
            total_questions=total,
            correct_answers=self._correct_count(),
            accuracy=percentage(self._correct_count(), total),
            average_response_time=mean_response,
            time_per_card=mean_response / 1000,
            difficulty_breakdown=dict(Counter(c.level.value for c in presented)),
            type_breakdown=dict(Counter(c.question_type for c in presented)),
            type_accuracy=self._type_accuracy(),
            grade_distribution=grade_distribution,
            cards_presented=len(presented),
        )

    def recommendations(self, now: datetime) -> Recommendations:
        return self._recommender.recommend(self.session_stats(), self.progress(now))

    def burnout_risk(self, now: datetime) -> BurnoutAssessment:
        return self._recommender.assess_burnout(self.session_stats(), self.progress(now))

    def learning_velocity(self, now: datetime) -> float:
        """Correct answers per hour of session time; 0 before any answer."""
        if self._session is None or not self._answers:
            return 0.0
        end = self._session.end_time or now
        hours = _minutes_between(self._session.start_time, end) / 60
        return self._correct_count() / hours if hours > 0 else 0.0

    def is_time_up(self, now: datetime) -> bool:
        """Whether the configured time limit has elapsed. The host decides what to do."""
        if self._state != SessionState.ACTIVE:
            return False
        elapsed = _minutes_between(self._session.start_time, now)
        return elapsed >= self._session_config.time_limit_minutes

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_active(self) -> None:
        if self._state != SessionState.ACTIVE:
            raise SessionNotActive(
                f"No active session (state: {self._state.value})",
                details={"state": self._state.value},
            )

    def _require_started(self) -> StudySession:
        if self._session is None:
            raise SessionNotActive("No session has been started")
        return self._session

    def _require_current(self) -> Card:
        self._require_active()
        card = self.current_question()
        if card is None:
            raise NoActiveQuestion(
                "No active question to answer",
                details={"cursor": self._cursor, "queue_length": len(self._queue)},
            )
        return card

    def _correct_count(self) -> int:
        return sum(1 for a in self._answers if a.result.is_correct)

    def _current_streak(self) -> int:
        streak = 0
        for answer in reversed(self._answers):
            if not answer.result.is_correct:
                break
            streak += 1
        return streak

    def _type_accuracy(self) -> dict[str, float]:
        totals: Counter[str] = Counter()
        correct: Counter[str] = Counter()
        for answer in self._answers:
            question_type = answer.before.question_type
            totals[question_type] += 1
            if answer.result.is_correct:
                correct[question_type] += 1
        return {t: percentage(correct[t], n) for t, n in totals.items()}
