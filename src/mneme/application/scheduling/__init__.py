# Application Scheduling Package
from .card_ops import (
    bury_card,
    categorize,
    release_expired_burials,
    reset_card,
    review_card,
    suspend_card,
    unbury_card,
    unsuspend_card,
)
from .factory import get_scheduler, get_schedulers, migrate_card
from .fsrs import FsrsScheduler
from .sm2 import Sm2Scheduler

__all__ = [
    "FsrsScheduler",
    "Sm2Scheduler",
    "bury_card",
    "categorize",
    "get_scheduler",
    "get_schedulers",
    "migrate_card",
    "release_expired_burials",
    "reset_card",
    "review_card",
    "suspend_card",
    "unbury_card",
    "unsuspend_card",
]
