from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from reviewgate.version import Version


@dataclass(frozen=True)
class Action:
    """A scored user action; never stored."""

    score: float
    is_bad: bool = False
    show_review: bool = False


@dataclass(eq=False)
class Session:
    """
    One usage period of the app and its accumulated review score.

    Identity is (date, version) only. Two records with the same start date and
    version are the same session, whatever their score or bad flag, which is
    what lets storage replace a session in place on every save.
    """

    date: datetime
    version: Version = field(default=Version.INITIAL)
    score: float = 0.0
    is_bad: bool = False

    @property
    def key(self) -> tuple[datetime, Version]:
        return (self.date, self.version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Session):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def copy(self) -> "Session":
        return Session(date=self.date, version=self.version, score=self.score, is_bad=self.is_bad)


__all__ = ["Action", "Session"]
