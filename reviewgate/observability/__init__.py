from __future__ import annotations

from .logging import configure_logging, structured_log

__all__ = [
    "configure_logging",
    "structured_log",
]
