"""AniBridge Configuration Module

Unified access to the configuration models and the settings loader.
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import (
    APISettings,
    CacheSettings,
    CatalogSettings,
    LoggingSettings,
    MetadataSettings,
    RetrySettings,
    Settings,
)

__all__ = [
    "APISettings",
    "CacheSettings",
    "CatalogSettings",
    "LoggingSettings",
    "MetadataSettings",
    "RetrySettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
]
