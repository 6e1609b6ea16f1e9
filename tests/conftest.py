"""
Pytest configuration and shared fixtures for AniBridge tests.

No test touches the network: HTTP goes through mocked sessions and
literal HTML/JSON fixtures.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import Mock

import pytest

from anibridge.cli.common.context import clear_cli_context
from anibridge.core.matching.models import Candidate
from anibridge.services.cache import CacheService, DurableCache, MemoryCache


class FakeClock:
    """Settable time source."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRemoval:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class FakeScheduler:
    """Records scheduled removals instead of starting timer threads."""

    def __init__(self) -> None:
        self.scheduled: list[FakeRemoval] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeRemoval:
        removal = FakeRemoval(delay, callback)
        self.scheduled.append(removal)
        return removal


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None, None, None]:
    """Undo CLI context and logger configuration left behind by a test."""
    yield
    clear_cli_context()
    package_logger = logging.getLogger("anibridge")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def durable_cache(tmp_path: Path, clock: FakeClock) -> Generator[DurableCache, None, None]:
    cache = DurableCache(tmp_path / "cache.db", clock=clock)
    yield cache
    cache.close()


@pytest.fixture
def memory_cache(clock: FakeClock, scheduler: FakeScheduler) -> MemoryCache:
    return MemoryCache(scheduler=scheduler, clock=clock)


@pytest.fixture
def cache_service(durable_cache: DurableCache, memory_cache: MemoryCache) -> CacheService:
    return CacheService(durable_cache, memory_cache)


@pytest.fixture
def catalog_searcher() -> Mock:
    """Catalog searcher answering from a label -> candidates table."""
    results: dict[str, list[Candidate]] = {}
    searcher = Mock()
    searcher.results = results
    searcher.search.side_effect = lambda label: list(results.get(label, []))
    return searcher


SEARCH_PAGE_HTML = """
<div class="film_list-wrap">
  <div class="flw-item">
    <div class="film-poster">
      <a href="/attack-on-titan-112" class="film-poster-ahref" title="Attack on Titan" data-id="112"></a>
    </div>
  </div>
  <div class="flw-item">
    <div class="film-poster">
      <a href="/attack-on-titan-season-2-113" class="film-poster-ahref" title="Attack on Titan Season 2" data-id="113"></a>
    </div>
  </div>
  <div class="flw-item">
    <div class="film-poster">
      <a href="/no-id" class="film-poster-ahref" title="Missing Id"></a>
    </div>
  </div>
</div>
"""

EPISODE_FRAGMENT_HTML = """
<div class="ss-list">
  <a class="ssl-item ep-item" data-id="e2" data-number="2" href="#"><div class="ep-name">The Second</div></a>
  <a class="ssl-item ep-item" data-id="e1" data-number="1" href="#"><div class="ep-name">The First</div></a>
  <a class="ssl-item ep-item" data-id="e3" data-number="3" href="#"></a>
</div>
"""


@pytest.fixture
def search_page_html() -> str:
    return SEARCH_PAGE_HTML


@pytest.fixture
def episode_fragment_html() -> str:
    return EPISODE_FRAGMENT_HTML
