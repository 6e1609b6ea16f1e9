"""Configuration domain models."""

from .api_settings import APISettings, CatalogSettings, MetadataSettings
from .app_settings import LoggingSettings, RetrySettings
from .cache_settings import CacheSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "CacheSettings",
    "CatalogSettings",
    "LoggingSettings",
    "MetadataSettings",
    "RetrySettings",
    "Settings",
]
