"""
Ports (interfaces) for scheduling strategies.

These define the contract that every scheduling algorithm must implement.
Application services depend on this abstraction, not on a concrete algorithm.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Card, ReviewResult, SchedulerKind, UpdatedSchedule


class SchedulerStrategy(ABC):
    """
    Port for computing a card's next schedule from one review.

    Implementations:
        - FsrsScheduler: Power-law forgetting curve (primary).
        - Sm2Scheduler: Ease-factor scheduler (compatibility path).
    """

    kind: SchedulerKind

    @abstractmethod
    def update(self, card: Card, result: ReviewResult, now: datetime) -> UpdatedSchedule:
        """
        Compute the updated schedule for a card after one review.

        Args:
            card: The card's state before the review.
            result: The learner's answer.
            now: Review time, supplied by the caller.

        Returns:
            UpdatedSchedule with every scheduling field in range.
        """
        pass
