"""Upstream API configuration models.

Settings for the streaming catalog (reached through the routing proxy)
and for the metadata provider.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from anibridge.shared.constants import CatalogEndpoints, MetadataEndpoints, Timeout


class CatalogSettings(BaseModel):
    """Streaming catalog configuration."""

    base_url: str = Field(
        default=CatalogEndpoints.BASE_URL,
        description="Catalog origin",
    )
    proxy_url: str = Field(
        default=CatalogEndpoints.PROXY_URL,
        description="Routing proxy prefix; the target URL is appended URL-encoded",
    )
    timeout: float = Field(
        default=Timeout.DEFAULT,
        gt=0,
        description="Request timeout in seconds",
    )


class MetadataSettings(BaseModel):
    """Metadata provider configuration."""

    base_url: str = Field(
        default=MetadataEndpoints.BASE_URL,
        description="Metadata provider API root",
    )
    timeout: float = Field(
        default=Timeout.DEFAULT,
        gt=0,
        description="Request timeout in seconds",
    )


class APISettings(BaseModel):
    """API configuration container."""

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)


__all__ = ["APISettings", "CatalogSettings", "MetadataSettings"]
