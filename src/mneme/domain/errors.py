"""
Engine exceptions.

Every error raised by mneme is a local, synchronous validation failure. None of
them are retryable: the engine performs no I/O, so there is no transient class.
"""

from typing import Any


class MnemeError(Exception):
    """Base exception for all mneme errors."""

    error_code = "mneme_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Args:
            message: Human-readable error message.
            details: Optional structured context for the caller.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for host-side reporting."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidReviewResult(MnemeError, ValueError):
    """A review event carries an out-of-range field."""

    error_code = "invalid_review_result"


class InvalidGrade(InvalidReviewResult):
    """Grade outside 1-4 (Again, Hard, Good, Easy)."""

    error_code = "invalid_grade"

    def __init__(self, grade: Any):
        super().__init__(
            f"Grade must be between 1 and 4, got {grade!r}",
            details={"grade": grade},
        )
        self.grade = grade


class InvalidConfig(MnemeError, ValueError):
    """Non-positive budgets or time limits."""

    error_code = "invalid_config"


class SchedulerMismatch(MnemeError, ValueError):
    """A strategy was asked to update a card governed by another strategy."""

    error_code = "scheduler_mismatch"


class SessionStateError(MnemeError, RuntimeError):
    """An operation was called in the wrong session state."""

    error_code = "session_state"


class SessionNotActive(SessionStateError):
    """Operation called before start or after end of a session."""

    error_code = "session_not_active"


class SessionAlreadyActive(SessionStateError):
    """start_session called twice without an intervening end_session."""

    error_code = "session_already_active"


class NoActiveQuestion(SessionStateError):
    """submit/skip called with nothing current."""

    error_code = "no_active_question"
