"""
Queue builder for study sessions.

Builds ordered study queues by:
1. Dropping suspended and buried cards
2. Ordering due learning/review cards by how overdue they are
3. Topping up with new cards in pool order
4. Shuffling only as a final, optional step
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime

from mneme.domain.constants import DEFAULT_MAX_QUESTIONS
from mneme.domain.errors import InvalidConfig
from mneme.domain.models import HARD_LEVELS, Card, CardCategory, StudySessionConfig

logger = logging.getLogger(__name__)


@dataclass
class SelectionBudget:
    """
    How many and which cards a selection may return.

    ``max_reviews`` and ``max_new`` default to the total budget when unset.
    """

    max_questions: int = DEFAULT_MAX_QUESTIONS
    max_reviews: int | None = None  # Due learning + review cards
    max_new: int | None = None
    include_new: bool = True
    include_learning: bool = True
    include_review: bool = True
    prioritize_overdue: bool = True
    shuffle: bool = False

    def validate(self) -> "SelectionBudget":
        if self.max_questions <= 0:
            raise InvalidConfig(
                f"max_questions must be positive, got {self.max_questions}",
                details={"max_questions": self.max_questions},
            )
        for name in ("max_reviews", "max_new"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidConfig(f"{name} must not be negative, got {value}")
        return self

    @property
    def review_cap(self) -> int:
        if self.max_reviews is None:
            return self.max_questions
        return min(self.max_reviews, self.max_questions)


def select_cards(
    pool: list[Card],
    budget: SelectionBudget,
    now: datetime,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Choose a bounded, ordered batch of due and new cards.

    Deterministic for a given ``now`` unless ``budget.shuffle`` is set; pass a
    seeded ``rng`` to make the shuffle reproducible.

    Args:
        pool: All candidate cards, in the caller's order.
        budget: Count limits and category switches.
        now: Reference time for due-ness and burial.
        rng: Random source for the final shuffle.

    Returns:
        At most ``budget.max_questions`` cards, due cards first.
    """
    budget.validate()

    available = [c for c in pool if c.is_available(now)]
    due = [c for c in available if _wanted(c, budget) and c.is_due(now)]
    due.sort(key=lambda c: _due_order(c, now, budget.prioritize_overdue))

    selected = due[: budget.review_cap]

    remaining = budget.max_questions - len(selected)
    if budget.include_new and remaining > 0:
        new_cap = remaining if budget.max_new is None else min(remaining, budget.max_new)
        new_cards = [c for c in available if c.category == CardCategory.NEW]
        selected.extend(new_cards[:new_cap])

    if budget.shuffle:
        (rng or random.Random()).shuffle(selected)

    logger.debug(
        f"Selected {len(selected)} of {len(pool)} cards "
        f"({len(available)} available, {len(due)} due)"
    )
    return selected


def build_session_queue(
    pool: list[Card],
    config: StudySessionConfig,
    now: datetime,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Build the queue for one study session from its config.

    Cards tagged advanced or expert are dropped before selection when
    ``include_difficult`` is off, so the budget is filled with eligible cards.
    """
    config.validate()

    candidates = pool
    if not config.include_difficult:
        candidates = [c for c in pool if c.level not in HARD_LEVELS]

    budget = SelectionBudget(
        max_questions=config.max_total_cards,
        max_reviews=config.max_review_cards,
        max_new=config.max_new_cards,
        include_new=config.max_new_cards > 0,
        shuffle=config.shuffle,
    )
    return select_cards(candidates, budget, now, rng)


def _wanted(card: Card, budget: SelectionBudget) -> bool:
    category = card.category
    if category == CardCategory.LEARNING:
        return budget.include_learning
    if category == CardCategory.REVIEW:
        return budget.include_review
    return False


def _due_order(card: Card, now: datetime, prioritize_overdue: bool) -> tuple[int, float]:
    """Sort key; never-scheduled cards count as the most overdue."""
    if card.next_review_date is None:
        return (0, 0.0)
    if prioritize_overdue:
        overdue = (now - card.next_review_date).total_seconds()
        return (1, -overdue)
    return (1, card.next_review_date.timestamp())
