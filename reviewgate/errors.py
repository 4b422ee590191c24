from __future__ import annotations

from typing import Optional


class ReviewGateError(Exception):
    """Base exception for review gating errors."""


class RequesterNotConfiguredError(ReviewGateError):
    """Raised when every gate passes but no review requester is registered."""

    def __init__(self, message: str = "review requester not configured") -> None:
        super().__init__(message)


class VersionParseError(ReviewGateError, ValueError):
    def __init__(self, message: str, raw: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw = raw


__all__ = ["ReviewGateError", "RequesterNotConfiguredError", "VersionParseError"]
