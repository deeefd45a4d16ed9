"""
Card-level operations: applying a review, burial, suspension and reset.

Every function returns a new Card; the caller's value is never mutated and
persisting the result is the caller's job.
"""

import logging
from dataclasses import replace
from datetime import datetime

from mneme.application.config import Sm2Parameters
from mneme.application.stats.metrics_tracker import LearningMetricsTracker
from mneme.domain.constants import (
    LAPSE_SUSPEND_THRESHOLD,
    RESET_DIFFICULTY,
    RESET_DIFFICULTY_RATING,
    RESET_STABILITY,
)
from mneme.domain.errors import SchedulerMismatch
from mneme.domain.models import Card, CardCategory, Grade, LearningMetrics, ReviewResult
from mneme.domain.ports import SchedulerStrategy

logger = logging.getLogger(__name__)

_default_tracker = LearningMetricsTracker()


def review_card(
    card: Card,
    result: ReviewResult,
    now: datetime,
    scheduler: SchedulerStrategy,
    tracker: LearningMetricsTracker | None = None,
    lapse_threshold: int = LAPSE_SUSPEND_THRESHOLD,
) -> Card:
    """
    Apply one review to a card.

    Args:
        card: Card state before the review.
        result: The learner's answer.
        now: Review time.
        scheduler: Strategy governing this card; must match ``card.scheduler``.
        tracker: Optional custom metrics tracker.
        lapse_threshold: Lapse count at which an Again answer suspends the card.

    Returns:
        The reviewed card. Burial is cleared; an existing suspension is kept.

    Raises:
        SchedulerMismatch: The strategy does not govern this card. Use
            ``migrate_card`` to move a card between strategies first.
    """
    if scheduler.kind != card.scheduler:
        raise SchedulerMismatch(
            f"Card {card.id} is scheduled by {card.scheduler.value}, "
            f"not {scheduler.kind.value}; migrate it explicitly",
            details={"card_id": card.id, "card": card.scheduler, "strategy": scheduler.kind},
        )

    schedule = scheduler.update(card, result, now)
    metrics = (tracker or _default_tracker).update(card.metrics, result)

    lapsed = result.grade == Grade.AGAIN
    lapses = card.lapses + 1 if lapsed else card.lapses
    auto_suspend = lapsed and lapses >= lapse_threshold
    if auto_suspend and not card.suspended:
        logger.info(f"Suspending card {card.id} after {lapses} lapses")

    return replace(
        card,
        stability=schedule.stability,
        difficulty=schedule.difficulty,
        retrievability=schedule.retrievability,
        interval=schedule.interval,
        repetitions=schedule.repetitions,
        ease_factor=schedule.ease_factor,
        next_review_date=schedule.next_review_date,
        last_reviewed=now,
        lapses=lapses,
        metrics=metrics,
        confidence=result.confidence,
        buried=False,
        buried_on=None,
        suspended=card.suspended or auto_suspend,
    )


def categorize(card: Card) -> CardCategory:
    return card.category


def bury_card(card: Card, now: datetime) -> Card:
    """Hide a card for the rest of the calendar day of ``now``."""
    return replace(card, buried=True, buried_on=now.date())


def unbury_card(card: Card) -> Card:
    return replace(card, buried=False, buried_on=None)


def release_expired_burials(cards: list[Card], now: datetime) -> list[Card]:
    """
    Clear the buried flag on cards whose burial day has passed.

    Call on load. Burials stored without a date are dated from the card's last
    review, or from ``now`` if it was never reviewed, so they expire too.
    """
    released = []
    for card in cards:
        if card.buried and card.buried_on is None:
            day = card.last_reviewed or now
            card = replace(card, buried_on=day.date())
        if card.buried and not card.is_buried(now):
            card = unbury_card(card)
        released.append(card)
    return released


def suspend_card(card: Card) -> Card:
    return replace(card, suspended=True)


def unsuspend_card(card: Card) -> Card:
    return replace(card, suspended=False)


def reset_card(card: Card, now: datetime, params: Sm2Parameters | None = None) -> Card:
    """
    Forget all progress. The card becomes New and is due immediately.

    Content tags and the governing strategy are kept. The ease factor restarts
    at ``params.initial_ease_factor``.
    """
    params = params or Sm2Parameters()
    return replace(
        card,
        repetitions=0,
        interval=1,
        ease_factor=params.initial_ease_factor,
        stability=RESET_STABILITY,
        difficulty=RESET_DIFFICULTY,
        retrievability=0.0,
        lapses=0,
        last_reviewed=None,
        next_review_date=now,
        suspended=False,
        buried=False,
        buried_on=None,
        metrics=LearningMetrics(difficulty_rating=RESET_DIFFICULTY_RATING),
    )
