from .settings import (
    Settings,
    get_settings,
    settings_public_summary,
    validate_for_env,
)

__all__ = [
    "Settings",
    "get_settings",
    "settings_public_summary",
    "validate_for_env",
]
