"""
Review request controller.

Tracks one app session at a time, accumulates its score from logged actions
and decides whether an action flagged ``show_review`` should actually ask the
user for a review. The request only fires when every gate passes, in order:

1. the session is not bad (when bad sessions disable prompting)
2. the session score is above ``score_threshold``
3. the initial timeout since the first recorded session has elapsed
4. the cooldown since the last bad session has elapsed
5. the version moved far enough since the last request
6. the timeout since the last request has elapsed
7. the average score of recent sessions meets ``average_score_threshold``

The controller is a plain instance owned by the embedder. It does no locking:
callers sharing one controller must serialise ``log`` and ``start_session``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Tuple

from reviewgate.errors import RequesterNotConfiguredError
from reviewgate.observability.logging import structured_log
from reviewgate.requester.base import ReviewRequester
from reviewgate.session import Action, Session
from reviewgate.storage.base import ReviewStorage
from reviewgate.timeout import DAY, WEEK, Timeout, TimeoutOperator
from reviewgate.utils.numeric import average, clamp
from reviewgate.version import Version

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(date: Optional[datetime]) -> datetime:
    """Resolve ``date`` to an aware UTC datetime; naive values are read as UTC and ``None`` is now."""
    if date is None:
        return _now()
    if date.tzinfo is None or date.utcoffset() is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


# ============================================================================
# POLICY
# ============================================================================

@dataclass(frozen=True)
class AverageScoreThreshold:
    """Minimum mean score over the last ``sessions`` stored sessions. ``sessions <= 0`` disables the check."""

    score: float = 75.0
    sessions: int = 3


@dataclass
class ReviewPolicy:
    average_score_threshold: AverageScoreThreshold = field(default_factory=AverageScoreThreshold)
    score_threshold: float = 100.0
    score_bounds: Optional[Tuple[float, float]] = (-200.0, 200.0)
    initial_request_timeout: Timeout = field(
        default_factory=lambda: Timeout(sessions=2, duration=4 * DAY, operation=TimeoutOperator.AND)
    )
    review_request_timeout: Timeout = field(
        default_factory=lambda: Timeout(sessions=4, duration=8 * WEEK, operation=TimeoutOperator.AND)
    )
    review_version_timeout: Optional[Version] = field(default_factory=lambda: Version(0, 0, 1))
    disabled_for_bad_session: bool = True
    bad_session_timeout: Timeout = field(
        default_factory=lambda: Timeout(sessions=2, duration=2 * DAY, operation=TimeoutOperator.OR)
    )

    @classmethod
    def from_settings(cls, settings=None) -> "ReviewPolicy":
        if settings is None:
            from reviewgate.config import get_settings

            settings = get_settings()
        bounds = None
        if settings.score_bounds_enabled:
            bounds = (settings.review_score_min, settings.review_score_max)
        version_timeout = None
        if settings.review_version_timeout:
            version_timeout = Version.parse(settings.review_version_timeout)
        return cls(
            average_score_threshold=AverageScoreThreshold(
                score=settings.review_average_score,
                sessions=settings.review_average_sessions,
            ),
            score_threshold=settings.review_score_threshold,
            score_bounds=bounds,
            initial_request_timeout=Timeout(
                sessions=settings.review_initial_sessions,
                duration=timedelta(days=settings.review_initial_days),
                operation=TimeoutOperator(settings.review_initial_operation),
            ),
            review_request_timeout=Timeout(
                sessions=settings.review_request_sessions,
                duration=timedelta(days=settings.review_request_days),
                operation=TimeoutOperator(settings.review_request_operation),
            ),
            review_version_timeout=version_timeout,
            disabled_for_bad_session=settings.disabled_for_bad_session,
            bad_session_timeout=Timeout(
                sessions=settings.review_bad_sessions,
                duration=timedelta(days=settings.review_bad_days),
                operation=TimeoutOperator(settings.review_bad_operation),
            ),
        )


# ============================================================================
# RESULTS
# ============================================================================

class Gate(str, Enum):
    ACTION_NOT_REVIEWABLE = "action_not_reviewable"
    BAD_SESSION = "bad_session"
    SCORE_THRESHOLD = "score_threshold"
    INITIAL_TIMEOUT = "initial_timeout"
    BAD_SESSION_TIMEOUT = "bad_session_timeout"
    VERSION_CHANGE = "version_change"
    REQUEST_TIMEOUT = "request_timeout"
    AVERAGE_SCORE = "average_score"
    REQUESTER_DECLINED = "requester_declined"


@dataclass(frozen=True)
class LogResult:
    shown: bool
    blocked_by: Optional[Gate] = None

    def __bool__(self) -> bool:
        return self.shown


# ============================================================================
# CONTROLLER
# ============================================================================

class ReviewRequestController:
    def __init__(
        self,
        storage: ReviewStorage,
        requester: Optional[ReviewRequester] = None,
        policy: Optional[ReviewPolicy] = None,
        version: Version = Version.INITIAL,
    ) -> None:
        self.storage = storage
        self.requester = requester
        self.policy = policy or ReviewPolicy()
        self._current_session = Session(date=_now(), version=version)

    @classmethod
    def from_settings(cls, settings=None, requester: Optional[ReviewRequester] = None) -> "ReviewRequestController":
        from reviewgate.storage import create_storage

        if settings is None:
            from reviewgate.config import get_settings

            settings = get_settings()
        return cls(
            storage=create_storage(settings),
            requester=requester,
            policy=ReviewPolicy.from_settings(settings),
        )

    @property
    def current_session(self) -> Session:
        return self._current_session.copy()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(self, version: Version, date: Optional[datetime] = None) -> Session:
        date = _as_utc(date)
        self._current_session = Session(date=date, version=version)
        if self.storage.first_session_date is None:
            self.storage.first_session_date = date
        self.storage.save_session(self._current_session)
        self.storage.number_of_sessions = self.storage.number_of_sessions + 1
        structured_log(
            {
                "event": "review_session_started",
                "version": str(version),
                "number_of_sessions": self.storage.number_of_sessions,
            }
        )
        return self.current_session

    def reset(self) -> None:
        """Forget all history and bookkeeping; the current version is kept."""
        self.storage.last_request_session = None
        self.storage.last_request_date = None
        self.storage.last_request_version = None
        self.storage.number_of_sessions = 0
        self.storage.first_session_date = None
        self.storage.clear_sessions()
        self._current_session = Session(date=_now(), version=self._current_session.version)
        structured_log({"event": "review_state_reset"})

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def _previous_sessions(self, stored: Optional[List[Session]] = None) -> List[Session]:
        stored = self.storage.sessions if stored is None else stored
        return [s for s in stored if s != self._current_session]

    def current_session_is_above_score_threshold(self, date: Optional[datetime] = None) -> bool:
        return self._current_session.score > self.policy.score_threshold

    def timeout_since_first_session_has_elapsed(self, date: Optional[datetime] = None) -> bool:
        date = _as_utc(date)
        first_session_date = _as_utc(self.storage.first_session_date or self._current_session.date)
        return self.policy.initial_request_timeout.has_elapsed(
            self.storage.number_of_sessions,
            date - first_session_date,
        )

    def timeout_since_last_bad_session_has_elapsed(self, date: Optional[datetime] = None) -> bool:
        """Cooldown since the last bad session in history. The current session is not considered."""
        date = _as_utc(date)
        stored = self.storage.sessions
        previous = self._previous_sessions(stored)
        last_bad_index = None
        for index, session in enumerate(previous):
            if session.is_bad:
                last_bad_index = index
        if last_bad_index is None:
            return True
        last_bad = previous[last_bad_index]
        sessions_since = len(stored) - last_bad_index
        return self.policy.bad_session_timeout.has_elapsed(sessions_since, date - _as_utc(last_bad.date))

    def version_change_since_last_request_is_satisfied(self, date: Optional[datetime] = None) -> bool:
        last_version = self.storage.last_request_version
        minimum = self.policy.review_version_timeout
        if last_version is None or minimum is None:
            return True
        moved = self._current_session.version.saturating_subtract(last_version)
        return moved.meets(minimum)

    def timeout_since_last_request_has_elapsed(self, date: Optional[datetime] = None) -> bool:
        date = _as_utc(date)
        last_date = self.storage.last_request_date
        last_session = self.storage.last_request_session
        if last_date is None or last_session is None:
            return True
        return self.policy.review_request_timeout.has_elapsed(
            self.storage.number_of_sessions - last_session,
            date - _as_utc(last_date),
        )

    def average_score_threshold_is_met(self, date: Optional[datetime] = None) -> bool:
        """False when there is no previous session to average, unless the check is disabled."""
        threshold = self.policy.average_score_threshold
        if threshold.sessions <= 0:
            return True
        previous = self._previous_sessions()
        if not previous:
            return False
        recent = previous[-threshold.sessions:]
        return average(s.score for s in recent) >= threshold.score

    def _first_failing_gate(self, date: datetime) -> Optional[Gate]:
        if self._current_session.is_bad and self.policy.disabled_for_bad_session:
            return Gate.BAD_SESSION
        if not self.current_session_is_above_score_threshold():
            return Gate.SCORE_THRESHOLD
        if not self.timeout_since_first_session_has_elapsed(date):
            return Gate.INITIAL_TIMEOUT
        if not self.timeout_since_last_bad_session_has_elapsed(date):
            return Gate.BAD_SESSION_TIMEOUT
        if not self.version_change_since_last_request_is_satisfied(date):
            return Gate.VERSION_CHANGE
        if not self.timeout_since_last_request_has_elapsed(date):
            return Gate.REQUEST_TIMEOUT
        if not self.average_score_threshold_is_met(date):
            return Gate.AVERAGE_SCORE
        return None

    # ------------------------------------------------------------------
    # Logging actions
    # ------------------------------------------------------------------

    def _apply(self, action: Action) -> None:
        session = self._current_session
        score = session.score + action.score
        if self.policy.score_bounds is not None:
            score = clamp(score, self.policy.score_bounds)
        session.score = score
        # a bad session never becomes good again
        session.is_bad = session.is_bad or action.is_bad
        self.storage.save_session(session)

    async def log(self, action: Action, date: Optional[datetime] = None) -> LogResult:
        """
        Record ``action`` against the current session and request a review if
        it asks for one and every gate passes.

        The score update and save happen before any await, whatever the
        outcome. Bookkeeping of a successful request is written only once the
        requester has answered.

        Raises:
            RequesterNotConfiguredError: every gate passed but no requester is set.
        """
        date = _as_utc(date)
        self._apply(action)

        if not action.show_review:
            return LogResult(shown=False, blocked_by=Gate.ACTION_NOT_REVIEWABLE)

        failed = self._first_failing_gate(date)
        if failed is not None:
            structured_log({"event": "review_gate_blocked", "gate": failed.value, "score": self._current_session.score})
            return LogResult(shown=False, blocked_by=failed)

        requester = self.requester
        if requester is None:
            logger.error("review gates passed but no requester is configured")
            raise RequesterNotConfiguredError()

        version = self._current_session.version
        session_number = self.storage.number_of_sessions
        outcome = await requester.request_review()
        if not outcome.counts_as_shown:
            structured_log({"event": "review_request_declined"})
            return LogResult(shown=False, blocked_by=Gate.REQUESTER_DECLINED)

        self.storage.last_request_date = date
        self.storage.last_request_session = session_number
        self.storage.last_request_version = version
        structured_log(
            {
                "event": "review_requested",
                "outcome": outcome.value,
                "version": str(version),
                "session": session_number,
            }
        )
        return LogResult(shown=True)


__all__ = [
    "AverageScoreThreshold",
    "Gate",
    "LogResult",
    "ReviewPolicy",
    "ReviewRequestController",
]
