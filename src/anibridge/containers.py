"""Dependency Injection container for AniBridge.

This module provides a centralized DI container using dependency-injector.

The container manages:
- Settings (Singleton)
- HTTP session and fetch clients
- Cache service (Singleton; opened once per process)
- Catalog and metadata provider clients
- Title resolver, episode service and recommendation service
"""

from __future__ import annotations

import requests
from dependency_injector import containers, providers

from anibridge.config.loader import load_settings
from anibridge.config.models import Settings
from anibridge.core.matching.engine import TitleResolver
from anibridge.core.matching.ranker import CandidateRanker
from anibridge.services.cache import CacheService, DurableCache, MemoryCache
from anibridge.services.catalog import StreamingCatalogClient
from anibridge.services.episodes import EpisodeService
from anibridge.services.http_client import ResilientFetchClient
from anibridge.services.metadata import MetadataProviderClient
from anibridge.services.recommendations import RecommendationService
from anibridge.services.retry import BackoffPolicy


def build_cache_service(config: Settings) -> CacheService | None:
    """Open both cache tiers, or return None when caching is disabled."""
    if not config.cache.enabled:
        return None

    durable = DurableCache(
        config.cache.db_path,
        namespace=config.cache.namespace,
        default_ttl=config.cache.durable_ttl,
        sweep_on_open=config.cache.sweep_on_startup,
    )
    memory = MemoryCache(default_ttl=config.cache.memory_ttl)
    return CacheService(durable, memory)


def memory_tier(cache_service: CacheService | None) -> MemoryCache | None:
    return cache_service.memory if cache_service is not None else None


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for AniBridge services.

    Example:
        >>> container = Container()
        >>> resolver = container.title_resolver()
        >>> result = resolver.resolve_with_fallback("Frieren")
    """

    # Configuration
    config = providers.Singleton(load_settings)

    # HTTP
    http_session = providers.Singleton(requests.Session)

    catalog_fetch_client = providers.Singleton(
        ResilientFetchClient,
        session=http_session,
        timeout=providers.Callable(lambda config: config.api.catalog.timeout, config=config),
        proxy_url=providers.Callable(lambda config: config.api.catalog.proxy_url, config=config),
    )

    metadata_fetch_client = providers.Singleton(
        ResilientFetchClient,
        session=http_session,
        timeout=providers.Callable(lambda config: config.api.metadata.timeout, config=config),
    )

    # Cache
    cache_service = providers.Singleton(build_cache_service, config=config)

    # Upstream clients
    catalog_client = providers.Singleton(
        StreamingCatalogClient,
        fetch_client=catalog_fetch_client,
        base_url=providers.Callable(lambda config: config.api.catalog.base_url, config=config),
    )

    metadata_client = providers.Singleton(
        MetadataProviderClient,
        fetch_client=metadata_fetch_client,
        base_url=providers.Callable(lambda config: config.api.metadata.base_url, config=config),
    )

    # Resolution and services
    ranker = providers.Factory(CandidateRanker)

    title_resolver = providers.Factory(
        TitleResolver,
        catalog=catalog_client,
        ranker=ranker,
        cache=providers.Callable(memory_tier, cache_service),
    )

    episode_service = providers.Factory(
        EpisodeService,
        catalog=catalog_client,
        cache=cache_service,
    )

    recommendation_service = providers.Factory(
        RecommendationService,
        metadata=metadata_client,
        cache=cache_service,
    )

    backoff_policy = providers.Factory(
        BackoffPolicy,
        max_attempts=providers.Callable(lambda config: config.retry.max_attempts, config=config),
        base_delay=providers.Callable(lambda config: config.retry.base_delay, config=config),
        max_delay=providers.Callable(lambda config: config.retry.max_delay, config=config),
    )
