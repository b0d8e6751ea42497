"""Configuration management for the hospital charges data-access layer.

Usage:
    >>> from hospital_charges.config import get_settings
    >>> settings = get_settings()
    >>> settings.inpatient_database.describe()
"""

from hospital_charges.config.settings import (
    DatabaseSettings,
    PoolSettings,
    Settings,
    get_settings,
)

__all__ = [
    "DatabaseSettings",
    "PoolSettings",
    "Settings",
    "get_settings",
]
