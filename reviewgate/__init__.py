"""
reviewgate: decide when to ask a user for an app review.

Exports the controller and its value types, plus the storage and requester
capabilities it consumes.
"""

from reviewgate.controller import (
    AverageScoreThreshold,
    Gate,
    LogResult,
    ReviewPolicy,
    ReviewRequestController,
)
from reviewgate.errors import RequesterNotConfiguredError, ReviewGateError, VersionParseError
from reviewgate.requester import (
    CallableRequester,
    CompletionHandlerRequester,
    RequestOutcome,
    ReviewRequester,
)
from reviewgate.session import Action, Session
from reviewgate.storage import (
    InMemoryReviewStorage,
    JsonFileStore,
    KeyValueReviewStorage,
    ReviewStorage,
    create_storage,
)
from reviewgate.timeout import DAY, WEEK, Timeout, TimeoutOperator
from reviewgate.version import Version

__all__ = [
    "Action",
    "AverageScoreThreshold",
    "CallableRequester",
    "CompletionHandlerRequester",
    "DAY",
    "Gate",
    "InMemoryReviewStorage",
    "JsonFileStore",
    "KeyValueReviewStorage",
    "LogResult",
    "RequestOutcome",
    "RequesterNotConfiguredError",
    "ReviewGateError",
    "ReviewPolicy",
    "ReviewRequestController",
    "ReviewRequester",
    "ReviewStorage",
    "Session",
    "Timeout",
    "TimeoutOperator",
    "Version",
    "VersionParseError",
    "WEEK",
    "create_storage",
]
