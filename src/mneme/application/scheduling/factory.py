"""
Scheduler factory.
Centralizes selection of the scheduling strategy and explicit migration of
cards between strategies.
"""

import logging
from dataclasses import replace

from mneme.application.config import AppConfig
from mneme.application.scheduling.fsrs import FsrsScheduler
from mneme.application.scheduling.sm2 import Sm2Scheduler
from mneme.application.utils.numeric import clamp
from mneme.domain.constants import MIN_STABILITY, RESET_DIFFICULTY
from mneme.domain.models import Card, SchedulerKind
from mneme.domain.ports import SchedulerStrategy

logger = logging.getLogger(__name__)


def get_scheduler(
    kind: SchedulerKind | str | None = None, config: AppConfig | None = None
) -> SchedulerStrategy:
    """
    Returns the SchedulerStrategy for ``kind``.

    Falls back to ``config.default_scheduler`` when no kind is given.
    """
    config = config or AppConfig()
    kind = SchedulerKind(kind or config.default_scheduler)

    if kind == SchedulerKind.SM2:
        return Sm2Scheduler(config.sm2)
    return FsrsScheduler(config.fsrs)


def get_schedulers(config: AppConfig | None = None) -> dict[SchedulerKind, SchedulerStrategy]:
    """One strategy instance per kind, for routing cards by their own tag."""
    config = config or AppConfig()
    return {kind: get_scheduler(kind, config) for kind in SchedulerKind}


def migrate_card(
    card: Card, target: SchedulerKind | str, config: AppConfig | None = None
) -> Card:
    """
    Move a card to another scheduling strategy.

    SM-2 -> FSRS: the current interval seeds stability (at 90% retention the
    FSRS interval equals stability) and difficulty restarts at the midpoint.
    FSRS -> SM-2: the interval is kept, capped to the SM-2 maximum, and the
    card keeps its ease factor. A never-reviewed card starts from the
    configured initial ease factor instead.
    """
    config = config or AppConfig()
    target = SchedulerKind(target)
    if card.scheduler == target:
        return card

    logger.info(f"Migrating card {card.id} from {card.scheduler.value} to {target.value}")

    if target == SchedulerKind.FSRS:
        stability = max(MIN_STABILITY, float(card.interval))
        retrievability = (
            FsrsScheduler.forgetting_curve(card.interval, stability) if card.repetitions else 0.0
        )
        return replace(
            card,
            scheduler=target,
            stability=stability,
            difficulty=RESET_DIFFICULTY,
            retrievability=clamp(retrievability, 0.0, 1.0),
        )

    ease_factor = card.ease_factor
    if card.is_new and card.last_reviewed is None:
        ease_factor = config.sm2.initial_ease_factor

    return replace(
        card,
        scheduler=target,
        interval=max(1, min(card.interval, config.sm2.maximum_interval)),
        ease_factor=max(config.sm2.min_ease_factor, ease_factor),
    )
