"""Legacy ease-factor scheduler (SM-2), kept for cards created before FSRS."""

import logging
from datetime import datetime, timedelta

from mneme.application.config import Sm2Parameters
from mneme.application.utils.numeric import round_half_up
from mneme.domain.constants import SM2_SECOND_INTERVAL
from mneme.domain.models import Card, Grade, ReviewResult, SchedulerKind, UpdatedSchedule
from mneme.domain.ports import SchedulerStrategy

logger = logging.getLogger(__name__)

QUALITY_BY_GRADE = {
    Grade.AGAIN: 0,
    Grade.HARD: 3,
    Grade.GOOD: 4,
    Grade.EASY: 5,
}


class Sm2Scheduler(SchedulerStrategy):
    kind = SchedulerKind.SM2

    def __init__(self, params: Sm2Parameters | None = None):
        self.params = params or Sm2Parameters()

    def update(self, card: Card, result: ReviewResult, now: datetime) -> UpdatedSchedule:
        quality = self.grade_to_quality(result.grade)
        interval = max(1, card.interval)
        repetitions = card.repetitions

        if quality >= 3:
            if repetitions == 0:
                interval = 1
            elif repetitions == 1:
                interval = SM2_SECOND_INTERVAL
            else:
                interval = round_half_up(interval * card.ease_factor)
            repetitions += 1
        else:
            repetitions = 0
            interval = 1

        ease_factor = self.next_ease_factor(card.ease_factor, quality)
        interval = min(interval, self.params.maximum_interval)

        logger.debug(
            f"SM-2 update card={card.id} q={quality} EF={ease_factor:.2f} interval={interval}"
        )

        return UpdatedSchedule(
            stability=card.stability,
            difficulty=card.difficulty,
            retrievability=card.retrievability,
            interval=interval,
            repetitions=repetitions,
            ease_factor=ease_factor,
            next_review_date=now + timedelta(days=interval),
        )

    @staticmethod
    def grade_to_quality(grade: int) -> int:
        return QUALITY_BY_GRADE[Grade(grade)]

    def next_ease_factor(self, ease_factor: float, quality: int) -> float:
        miss = 5 - quality
        return max(
            self.params.min_ease_factor,
            ease_factor + (0.1 - miss * (0.08 + miss * 0.02)),
        )
