from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "reviewgate"


def _json_default(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def structured_log(event: Dict[str, Any]) -> None:
    # Events carry only gate names, scores, versions and session counters.
    try:
        logger.info(json.dumps(dict(event), separators=(",", ":"), default=_json_default))
    except Exception:
        # logging must never break the decision path
        return


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Apply ``level`` (or ``Settings.log_level``) to the package logger."""
    if level is None:
        from reviewgate.config import get_settings

        level = get_settings().log_level
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return package_logger


__all__ = ["structured_log", "configure_logging"]
