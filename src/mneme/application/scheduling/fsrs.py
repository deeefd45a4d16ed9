"""
Forgetting-curve scheduler (FSRS-style).

Recall probability follows a power-law forgetting curve

    R(t, S) = (1 + t / (9 * S)) ** -1

where ``t`` is elapsed days and ``S`` is stability. A first review initializes
stability and difficulty from the grade; later reviews grow stability more when
recall was harder (low R) and the grade was higher, and collapse it on Again.
"""

import logging
import math
from datetime import datetime, timedelta

from mneme.application.config import FsrsParameters
from mneme.application.utils.numeric import clamp, round_half_up, whole_days_between
from mneme.domain.constants import (
    FSRS_DECAY_FACTOR,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    MIN_STABILITY,
)
from mneme.domain.models import Card, Grade, ReviewResult, SchedulerKind, UpdatedSchedule
from mneme.domain.ports import SchedulerStrategy

logger = logging.getLogger(__name__)


class FsrsScheduler(SchedulerStrategy):
    """
    Primary scheduling strategy.

    Stateless apart from its parameter set, so one instance can serve any
    number of cards concurrently.
    """

    kind = SchedulerKind.FSRS

    def __init__(self, params: FsrsParameters | None = None):
        self.params = params or FsrsParameters()

    def update(self, card: Card, result: ReviewResult, now: datetime) -> UpdatedSchedule:
        grade = Grade(result.grade)

        if card.repetitions == 0:
            stability = self.init_stability(grade)
            difficulty = self.init_difficulty(grade)
        else:
            old_stability = self._bound_stability(card.stability)
            elapsed = whole_days_between(card.last_reviewed, now)
            current_retrievability = self.forgetting_curve(elapsed, old_stability)
            stability = self.next_stability(grade, old_stability, current_retrievability)
            difficulty = self.next_difficulty(grade, card.difficulty)

        stability = self._bound_stability(stability)
        interval = self.next_interval(stability)
        if grade == Grade.AGAIN:
            # A lapse never pushes the next review further out.
            interval = max(1, min(interval, card.interval))

        repetitions = card.repetitions + 1 if grade >= Grade.GOOD else 0
        retrievability = clamp(self.forgetting_curve(interval, stability), 0.0, 1.0)

        logger.debug(
            f"FSRS update card={card.id} grade={grade.name} "
            f"S={card.stability:.3f}->{stability:.3f} interval={interval}"
        )

        return UpdatedSchedule(
            stability=stability,
            difficulty=difficulty,
            retrievability=retrievability,
            interval=interval,
            repetitions=repetitions,
            ease_factor=card.ease_factor,
            next_review_date=now + timedelta(days=interval),
        )

    def init_stability(self, grade: int) -> float:
        return max(MIN_STABILITY, self.params.initial_stability(grade))

    def init_difficulty(self, grade: int) -> float:
        p = self.params
        return clamp(
            p.initial_difficulty_base - (grade - 3) * p.initial_difficulty_slope,
            MIN_DIFFICULTY,
            MAX_DIFFICULTY,
        )

    @staticmethod
    def forgetting_curve(elapsed_days: float, stability: float) -> float:
        return (1 + elapsed_days / (FSRS_DECAY_FACTOR * stability)) ** -1

    def next_stability(
        self, grade: int, stability: float, current_retrievability: float
    ) -> float:
        p = self.params
        try:
            if grade == Grade.AGAIN:
                return stability * math.exp(p.lapse_base * (grade - 3) * p.lapse_scale)

            hard_penalty = p.hard_penalty if grade == Grade.HARD else 1.0
            easy_bonus = p.easy_bonus if grade == Grade.EASY else 1.0

            return stability * (
                1
                + math.exp(p.stability_growth)
                * (11 - grade)
                * stability ** -p.stability_decay
                * (math.exp((1 - current_retrievability) * p.retrievability_gain) - 1)
                * hard_penalty
                * easy_bonus
            )
        except OverflowError:
            # Extreme custom weights; _bound_stability caps the result.
            return math.inf

    def next_difficulty(self, grade: int, difficulty: float) -> float:
        p = self.params
        delta = -p.difficulty_step * (grade - 3)
        mean_reversion = p.mean_reversion * (self.init_difficulty(Grade.EASY) - difficulty)
        return clamp(difficulty + delta + mean_reversion, MIN_DIFFICULTY, MAX_DIFFICULTY)

    def next_interval(self, stability: float) -> int:
        """Invert the forgetting curve at the requested retention."""
        r = self.params.request_retention
        raw = stability * FSRS_DECAY_FACTOR * (1 / r - 1)
        return int(round_half_up(clamp(raw, 1, self.params.maximum_interval)))

    @property
    def max_stability(self) -> float:
        """Stability at which the interval reaches ``maximum_interval``."""
        p = self.params
        at_cap = p.maximum_interval / (FSRS_DECAY_FACTOR * (1 / p.request_retention - 1))
        return max(float(p.maximum_interval), at_cap)

    def _bound_stability(self, stability: float) -> float:
        # Anything past the cap schedules identically; NaN falls to the minimum.
        return clamp(stability, MIN_STABILITY, self.max_stability)
