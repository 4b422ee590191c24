"""Requester capability: the thing that actually asks the user for a review."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class RequestOutcome(str, Enum):
    SHOWN = "shown"
    NOT_SHOWN = "not_shown"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, flag: Optional[bool]) -> "RequestOutcome":
        if isinstance(flag, RequestOutcome):
            return flag
        if flag is None:
            return cls.UNKNOWN
        return cls.SHOWN if flag else cls.NOT_SHOWN

    @property
    def counts_as_shown(self) -> bool:
        # platforms that cannot report whether a prompt appeared answer UNKNOWN
        return self is not RequestOutcome.NOT_SHOWN


class ReviewRequester(ABC):
    """Abstract base class for review requesters."""

    @abstractmethod
    async def request_review(self) -> RequestOutcome:
        """
        Ask the user for a review.

        Returns:
            SHOWN or NOT_SHOWN when the requester knows whether a prompt was
            displayed, UNKNOWN when it cannot tell.
        """


__all__ = ["RequestOutcome", "ReviewRequester"]
