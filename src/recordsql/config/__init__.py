"""Configuration management for recordsql.

Usage:
    >>> from recordsql.config import get_settings
    >>> settings = get_settings()
    >>> settings.dialect
"""

from recordsql.config.settings import (
    SUPPORTED_DIALECTS,
    SUPPORTED_PARAMSTYLES,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "SUPPORTED_DIALECTS",
    "SUPPORTED_PARAMSTYLES",
]
