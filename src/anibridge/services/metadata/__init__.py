"""Metadata provider client and response models."""

from anibridge.services.metadata.client import MetadataProviderClient, TopFilter
from anibridge.services.metadata.models import (
    AnimeRecord,
    Genre,
    ProviderResponse,
    RecommendationEntry,
    Relation,
    RelationEntry,
)

__all__ = [
    "AnimeRecord",
    "Genre",
    "MetadataProviderClient",
    "ProviderResponse",
    "RecommendationEntry",
    "Relation",
    "RelationEntry",
    "TopFilter",
]
