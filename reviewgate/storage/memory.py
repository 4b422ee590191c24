from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from reviewgate.session import Session
from reviewgate.storage.base import ReviewStorage
from reviewgate.version import Version


class InMemoryReviewStorage(ReviewStorage):
    """
    In-memory storage for tests and ephemeral embedders.

    Seeding with existing sessions counts each of them as a started session.
    """

    def __init__(self, sessions: Optional[Iterable[Session]] = None) -> None:
        self._sessions: List[Session] = [s.copy() for s in (sessions or [])]
        self._number_of_sessions = len(self._sessions)
        self._first_session_date: Optional[datetime] = None
        self._last_request_date: Optional[datetime] = None
        self._last_request_session: Optional[int] = None
        self._last_request_version: Optional[Version] = None

    def save_session(self, session: Session) -> None:
        stored = session.copy()
        for index, existing in enumerate(self._sessions):
            if existing == stored:
                self._sessions[index] = stored
                return
        self._sessions.append(stored)

    def clear_sessions(self) -> None:
        self._sessions = []

    @property
    def sessions(self) -> List[Session]:
        return [s.copy() for s in self._sessions]

    @property
    def first_session_date(self) -> Optional[datetime]:
        return self._first_session_date

    @first_session_date.setter
    def first_session_date(self, value: Optional[datetime]) -> None:
        self._first_session_date = value

    @property
    def last_request_date(self) -> Optional[datetime]:
        return self._last_request_date

    @last_request_date.setter
    def last_request_date(self, value: Optional[datetime]) -> None:
        self._last_request_date = value

    @property
    def last_request_session(self) -> Optional[int]:
        return self._last_request_session

    @last_request_session.setter
    def last_request_session(self, value: Optional[int]) -> None:
        self._last_request_session = value

    @property
    def last_request_version(self) -> Optional[Version]:
        return self._last_request_version

    @last_request_version.setter
    def last_request_version(self, value: Optional[Version]) -> None:
        self._last_request_version = value

    @property
    def number_of_sessions(self) -> int:
        return self._number_of_sessions

    @number_of_sessions.setter
    def number_of_sessions(self, value: int) -> None:
        self._number_of_sessions = int(value)


__all__ = ["InMemoryReviewStorage"]
