from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

DAY = timedelta(days=1)
WEEK = timedelta(weeks=1)


class TimeoutOperator(str, Enum):
    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class Timeout:
    """
    Session-count and duration thresholds combined with AND/OR.

    Both bounds are exclusive: a value equal to its threshold has not elapsed.
    """

    sessions: int
    duration: timedelta
    operation: TimeoutOperator = TimeoutOperator.AND

    def __post_init__(self) -> None:
        if not isinstance(self.duration, timedelta):
            raise ValueError("Timeout.duration must be a timedelta.")
        if not isinstance(self.operation, TimeoutOperator):
            object.__setattr__(self, "operation", TimeoutOperator(self.operation))

    def has_elapsed(self, sessions: int, duration: timedelta) -> bool:
        sessions_passed = sessions > self.sessions
        duration_passed = duration > self.duration
        if self.operation is TimeoutOperator.AND:
            return sessions_passed and duration_passed
        return sessions_passed or duration_passed


__all__ = ["DAY", "WEEK", "Timeout", "TimeoutOperator"]
