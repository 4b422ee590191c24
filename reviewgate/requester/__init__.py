from reviewgate.requester.adapters import CallableRequester, CompletionHandlerRequester
from reviewgate.requester.base import RequestOutcome, ReviewRequester

__all__ = [
    "RequestOutcome",
    "ReviewRequester",
    "CallableRequester",
    "CompletionHandlerRequester",
]
