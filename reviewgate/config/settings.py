from __future__ import annotations

import functools
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_OPERATIONS = ("and", "or")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # App / env
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Persistence
    review_store_path: Optional[str] = Field(None, alias="REVIEW_STORE_PATH")
    review_store_namespace: str = Field("review_request", alias="REVIEW_STORE_NAMESPACE")

    # Scoring
    review_score_threshold: float = Field(100.0, alias="REVIEW_SCORE_THRESHOLD")
    review_score_bounds_enabled: int = Field(1, alias="REVIEW_SCORE_BOUNDS_ENABLED")
    review_score_min: float = Field(-200.0, alias="REVIEW_SCORE_MIN")
    review_score_max: float = Field(200.0, alias="REVIEW_SCORE_MAX")
    review_average_score: float = Field(75.0, alias="REVIEW_AVERAGE_SCORE")
    review_average_sessions: int = Field(3, alias="REVIEW_AVERAGE_SESSIONS")

    # Timeouts (durations in days)
    review_initial_sessions: int = Field(2, alias="REVIEW_INITIAL_SESSIONS")
    review_initial_days: float = Field(4.0, alias="REVIEW_INITIAL_DAYS")
    review_initial_operation: str = Field("and", alias="REVIEW_INITIAL_OPERATION")
    review_request_sessions: int = Field(4, alias="REVIEW_REQUEST_SESSIONS")
    review_request_days: float = Field(56.0, alias="REVIEW_REQUEST_DAYS")
    review_request_operation: str = Field("and", alias="REVIEW_REQUEST_OPERATION")
    review_bad_sessions: int = Field(2, alias="REVIEW_BAD_SESSIONS")
    review_bad_days: float = Field(2.0, alias="REVIEW_BAD_DAYS")
    review_bad_operation: str = Field("or", alias="REVIEW_BAD_OPERATION")

    # Version / bad-session gating
    review_version_timeout: Optional[str] = Field("0.0.1", alias="REVIEW_VERSION_TIMEOUT")
    review_disabled_for_bad_session: int = Field(1, alias="REVIEW_DISABLED_FOR_BAD_SESSION")

    @field_validator("app_env")
    @classmethod
    def normalize_env(cls, v: str) -> str:
        val = (v or "dev").lower()
        return val

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @field_validator("review_initial_operation", "review_request_operation", "review_bad_operation")
    @classmethod
    def normalize_operation(cls, v: str) -> str:
        return (v or "").strip().lower()

    @field_validator("review_version_timeout", mode="before")
    @classmethod
    def parse_version_timeout(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator(
        "review_average_sessions",
        "review_initial_sessions",
        "review_request_sessions",
        "review_bad_sessions",
    )
    @classmethod
    def clamp_non_negative(cls, v: int) -> int:
        return max(0, v)

    @property
    def score_bounds_enabled(self) -> bool:
        return self.review_score_bounds_enabled == 1

    @property
    def disabled_for_bad_session(self) -> bool:
        return self.review_disabled_for_bad_session == 1


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def validate_for_env(settings: Settings) -> Dict[str, Any]:
    issues: list[str] = []
    if settings.score_bounds_enabled and settings.review_score_min > settings.review_score_max:
        issues.append("REVIEW_SCORE_MIN must not exceed REVIEW_SCORE_MAX")
    for name in ("review_initial_operation", "review_request_operation", "review_bad_operation"):
        if getattr(settings, name) not in _OPERATIONS:
            issues.append(f"{name.upper()} must be one of {', '.join(_OPERATIONS)}")
    if settings.review_score_bounds_enabled not in (0, 1):
        issues.append("REVIEW_SCORE_BOUNDS_ENABLED must be 0 or 1")
    if settings.review_disabled_for_bad_session not in (0, 1):
        issues.append("REVIEW_DISABLED_FOR_BAD_SESSION must be 0 or 1")
    if settings.app_env == "prod" and not settings.review_store_path:
        issues.append("REVIEW_STORE_PATH should be set in prod")
    summary = settings_public_summary(settings)
    summary["issues"] = issues
    return summary


def settings_public_summary(settings: Optional[Settings] = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "env": s.app_env,
        "store_configured": bool(s.review_store_path),
        "score_threshold": s.review_score_threshold,
        "score_bounds": [s.review_score_min, s.review_score_max] if s.score_bounds_enabled else None,
        "average_score_threshold": {"score": s.review_average_score, "sessions": s.review_average_sessions},
        "initial_timeout": {
            "sessions": s.review_initial_sessions,
            "days": s.review_initial_days,
            "operation": s.review_initial_operation,
        },
        "request_timeout": {
            "sessions": s.review_request_sessions,
            "days": s.review_request_days,
            "operation": s.review_request_operation,
        },
        "bad_session_timeout": {
            "sessions": s.review_bad_sessions,
            "days": s.review_bad_days,
            "operation": s.review_bad_operation,
        },
        "version_timeout": s.review_version_timeout,
        "disabled_for_bad_session": s.disabled_for_bad_session,
    }


__all__ = ["Settings", "get_settings", "settings_public_summary", "validate_for_env"]
