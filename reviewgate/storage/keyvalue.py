"""
Key-value backed review storage.

The session history is serialised as one JSON document under
``<namespace>.sessions``; every bookkeeping field lives under its own key.
Any ``MutableMapping[str, str]`` works as the backend (``JsonFileStore`` for
a file on disk, a plain dict in tests).

Write failures are logged and swallowed here: the controller never sees a
storage error. Values that cannot be decoded read back as absent.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, MutableMapping, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from reviewgate.session import Session
from reviewgate.storage.base import ReviewStorage
from reviewgate.version import Version

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "review_request"


class VersionRecord(BaseModel):
    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int = Field(ge=0)

    @classmethod
    def from_version(cls, version: Version) -> "VersionRecord":
        return cls(major=version.major, minor=version.minor, patch=version.patch)

    def to_version(self) -> Version:
        return Version(self.major, self.minor, self.patch)


class SessionRecord(BaseModel):
    date: datetime
    version: VersionRecord
    score: float = 0.0
    is_bad: bool = False

    @classmethod
    def from_session(cls, session: Session) -> "SessionRecord":
        return cls(
            date=session.date,
            version=VersionRecord.from_version(session.version),
            score=session.score,
            is_bad=session.is_bad,
        )

    def to_session(self) -> Session:
        return Session(date=self.date, version=self.version.to_version(), score=self.score, is_bad=self.is_bad)


_HISTORY = TypeAdapter(List[SessionRecord])
_DATE = TypeAdapter(datetime)
_INT = TypeAdapter(int)
_VERSION = TypeAdapter(VersionRecord)


class KeyValueReviewStorage(ReviewStorage):
    def __init__(self, store: MutableMapping[str, str], namespace: str = DEFAULT_NAMESPACE) -> None:
        self._store = store
        self.namespace = namespace

    def _key(self, name: str) -> str:
        return f"{self.namespace}.{name}"

    def _read(self, name: str, adapter: TypeAdapter):
        raw = self._store.get(self._key(name))
        if raw is None:
            return None
        try:
            return adapter.validate_json(raw)
        except ValidationError:
            logger.warning("discarding unreadable review storage value", extra={"key": self._key(name)})
            return None

    def _write(self, name: str, adapter: TypeAdapter, value) -> None:
        key = self._key(name)
        try:
            if value is None:
                self._store.pop(key, None)
                return
            self._store[key] = adapter.dump_json(value).decode("utf-8")
        except Exception:
            # storage failures stay at this boundary
            logger.warning("review storage write failed", extra={"key": key}, exc_info=True)

    # Sessions

    def _records(self) -> List[SessionRecord]:
        return self._read("sessions", _HISTORY) or []

    def save_session(self, session: Session) -> None:
        records = self._records()
        record = SessionRecord.from_session(session)
        for index, existing in enumerate(records):
            if existing.date == record.date and existing.version == record.version:
                records[index] = record
                break
        else:
            records.append(record)
        self._write("sessions", _HISTORY, records)

    def clear_sessions(self) -> None:
        self._write("sessions", _HISTORY, None)

    @property
    def sessions(self) -> List[Session]:
        return [record.to_session() for record in self._records()]

    # Bookkeeping

    @property
    def first_session_date(self) -> Optional[datetime]:
        return self._read("first_session_date", _DATE)

    @first_session_date.setter
    def first_session_date(self, value: Optional[datetime]) -> None:
        self._write("first_session_date", _DATE, value)

    @property
    def last_request_date(self) -> Optional[datetime]:
        return self._read("last_request_date", _DATE)

    @last_request_date.setter
    def last_request_date(self, value: Optional[datetime]) -> None:
        self._write("last_request_date", _DATE, value)

    @property
    def last_request_session(self) -> Optional[int]:
        return self._read("last_request_session", _INT)

    @last_request_session.setter
    def last_request_session(self, value: Optional[int]) -> None:
        self._write("last_request_session", _INT, value)

    @property
    def last_request_version(self) -> Optional[Version]:
        record = self._read("last_request_version", _VERSION)
        return record.to_version() if record is not None else None

    @last_request_version.setter
    def last_request_version(self, value: Optional[Version]) -> None:
        record = VersionRecord.from_version(value) if value is not None else None
        self._write("last_request_version", _VERSION, record)

    @property
    def number_of_sessions(self) -> int:
        return self._read("number_of_sessions", _INT) or 0

    @number_of_sessions.setter
    def number_of_sessions(self, value: int) -> None:
        self._write("number_of_sessions", _INT, int(value))


__all__ = ["KeyValueReviewStorage", "SessionRecord", "VersionRecord", "DEFAULT_NAMESPACE"]
