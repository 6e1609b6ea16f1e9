"""Tests for the dependency container wiring."""

from pathlib import Path

from dependency_injector import providers

from anibridge.config import Settings
from anibridge.containers import Container
from anibridge.services.cache import CacheService


def _container(settings: Settings) -> Container:
    container = Container()
    container.config.override(providers.Object(settings))
    return container


class TestContainer:
    """Test cases for Container."""

    def test_services_share_one_cache(self, tmp_path: Path) -> None:
        container = _container(Settings(cache={"db_path": str(tmp_path / "cache.db")}))

        cache_service = container.cache_service()
        try:
            assert isinstance(cache_service, CacheService)
            assert container.title_resolver().cache is cache_service.memory
            assert container.episode_service().cache is cache_service
            assert container.recommendation_service().cache is cache_service
        finally:
            cache_service.close()

    def test_cache_can_be_disabled(self) -> None:
        container = _container(Settings(cache={"enabled": False}))

        assert container.cache_service() is None
        assert container.title_resolver().cache is None
        assert container.episode_service().cache is None

    def test_settings_flow_into_clients(self, tmp_path: Path) -> None:
        settings = Settings(
            api={"catalog": {"base_url": "https://catalog.example", "timeout": 3}},
            retry={"max_attempts": 2, "base_delay": 1.0},
            cache={"enabled": False},
        )
        container = _container(settings)

        assert container.catalog_client().base_url == "https://catalog.example"
        assert container.catalog_fetch_client().timeout == 3.0
        policy = container.backoff_policy()
        assert (policy.max_attempts, policy.base_delay) == (2, 1.0)
