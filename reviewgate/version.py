"""
Semantic version value used to key sessions and throttle review requests.

Ordering is lexicographic over (major, minor, patch). Subtraction is a
saturating difference: every component is floored at zero independently, so
it only answers "how far has the version moved forward", never a true delta.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import ClassVar

from reviewgate.errors import VersionParseError


@dataclass(frozen=True, order=True)
class Version:
    major: int = 0
    minor: int = 0
    patch: int = 0

    ZERO: ClassVar["Version"]
    INITIAL: ClassVar["Version"]

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Version.{name} must be an int.")
            if value < 0:
                raise ValueError(f"Version.{name} must be non-negative.")

    def __add__(self, other: "Version") -> "Version":
        if not isinstance(other, Version):
            return NotImplemented
        return Version(self.major + other.major, self.minor + other.minor, self.patch + other.patch)

    def __sub__(self, other: "Version") -> "Version":
        if not isinstance(other, Version):
            return NotImplemented
        return self.saturating_subtract(other)

    def saturating_subtract(self, other: "Version") -> "Version":
        return Version(
            max(0, self.major - other.major),
            max(0, self.minor - other.minor),
            max(0, self.patch - other.patch),
        )

    def meets(self, minimum: "Version") -> bool:
        """True when every component is at least the matching component of ``minimum``."""
        return (
            self.major >= minimum.major
            and self.minor >= minimum.minor
            and self.patch >= minimum.patch
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse a dotted version string.

        Missing or non-numeric minor/patch parts fall back to 0; the major part
        is required. ``"2"`` -> 2.0.0, ``"v1.4"`` -> 1.4.0, ``"3.1.rc2"`` -> 3.1.0.
        """
        if not isinstance(text, str):
            raise VersionParseError("version must be a string", raw=None)
        raw = text.strip()
        if raw[:1] in ("v", "V"):
            raw = raw[1:]
        parts = raw.split(".")
        if not parts or not parts[0].isdigit():
            raise VersionParseError(f"invalid major version in {text!r}", raw=text)
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else 0
        patch = int(parts[2]) if len(parts) > 2 and parts[2].isdigit() else 0
        return cls(major, minor, patch)

    @classmethod
    def from_distribution(cls, name: str) -> "Version":
        try:
            raw = metadata.version(name)
        except metadata.PackageNotFoundError as exc:
            raise VersionParseError(f"distribution {name!r} is not installed", raw=name) from exc
        return cls.parse(raw)


Version.ZERO = Version(0, 0, 0)
Version.INITIAL = Version(1, 0, 0)


__all__ = ["Version"]
