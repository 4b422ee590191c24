"""Storage capability consumed by the review request controller."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from reviewgate.session import Session
from reviewgate.version import Version


class ReviewStorage(ABC):
    """
    Durable session history and review bookkeeping.

    ``number_of_sessions`` is owned by the controller: implementations store it
    but never advance it on their own.
    """

    @abstractmethod
    def save_session(self, session: Session) -> None:
        """
        Insert ``session``, or replace the stored session with the same
        (date, version) in place so history order is kept.
        """

    @abstractmethod
    def clear_sessions(self) -> None:
        """Drop the whole session history."""

    @property
    @abstractmethod
    def sessions(self) -> List[Session]:
        """All stored sessions, oldest first."""

    @property
    @abstractmethod
    def first_session_date(self) -> Optional[datetime]: ...

    @first_session_date.setter
    @abstractmethod
    def first_session_date(self, value: Optional[datetime]) -> None: ...

    @property
    @abstractmethod
    def last_request_date(self) -> Optional[datetime]: ...

    @last_request_date.setter
    @abstractmethod
    def last_request_date(self, value: Optional[datetime]) -> None: ...

    @property
    @abstractmethod
    def last_request_session(self) -> Optional[int]: ...

    @last_request_session.setter
    @abstractmethod
    def last_request_session(self, value: Optional[int]) -> None: ...

    @property
    @abstractmethod
    def last_request_version(self) -> Optional[Version]: ...

    @last_request_version.setter
    @abstractmethod
    def last_request_version(self, value: Optional[Version]) -> None: ...

    @property
    @abstractmethod
    def number_of_sessions(self) -> int: ...

    @number_of_sessions.setter
    @abstractmethod
    def number_of_sessions(self, value: int) -> None: ...


__all__ = ["ReviewStorage"]
