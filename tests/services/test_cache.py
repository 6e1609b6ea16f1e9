"""Tests for the cache tiers and CacheService."""

import threading
import time
from pathlib import Path
from unittest.mock import Mock

import pytest

from anibridge.services.cache import (
    CacheEntry,
    CacheService,
    CacheTier,
    DurableCache,
    MemoryCache,
    ReaperScheduler,
)
from anibridge.shared.errors import CacheError, ErrorCode


class TestCacheEntry:
    """Test cases for CacheEntry."""

    def test_boundary_is_still_fresh(self) -> None:
        entry = CacheEntry(data=1, stored_at=100.0, ttl=10)

        assert not entry.is_expired(110.0)
        assert entry.is_expired(110.01)

    def test_non_positive_ttl_is_always_expired(self) -> None:
        assert CacheEntry(data=1, stored_at=100.0, ttl=0).is_expired(100.0)
        assert CacheEntry(data=1, stored_at=100.0, ttl=-5).is_expired(100.0)

    def test_json_round_trip(self) -> None:
        entry = CacheEntry(data={"ids": [1, 2]}, stored_at=100.0, ttl=60)

        assert CacheEntry.from_json(entry.to_json()) == entry


class TestDurableCache:
    """Test cases for the SQLite tier."""

    def test_set_and_get(self, durable_cache: DurableCache) -> None:
        durable_cache.set("recommendations_1", {"recommendation_type": "top"}, ttl=60)

        assert durable_cache.get("recommendations_1") == {"recommendation_type": "top"}

    def test_missing_key(self, durable_cache: DurableCache) -> None:
        assert durable_cache.get("nope") is None

    def test_entry_expires_after_ttl(self, durable_cache: DurableCache, clock) -> None:
        """Test lazy expiry on read, with the boundary still readable."""
        durable_cache.set("k", "v", ttl=10)

        clock.advance(10)
        assert durable_cache.get("k") == "v"

        clock.advance(1)
        assert durable_cache.get("k") is None

    def test_zero_ttl_is_never_readable(self, durable_cache: DurableCache) -> None:
        durable_cache.set("k", "v", ttl=0)

        assert durable_cache.get("k") is None

    def test_overwrite_replaces_value(self, durable_cache: DurableCache) -> None:
        durable_cache.set("k", "old")
        durable_cache.set("k", "new")

        assert durable_cache.get("k") == "new"

    def test_delete(self, durable_cache: DurableCache) -> None:
        durable_cache.set("k", "v")

        assert durable_cache.delete("k") is True
        assert durable_cache.delete("k") is False
        assert durable_cache.get("k") is None

    def test_unserializable_value_raises(self, durable_cache: DurableCache) -> None:
        with pytest.raises(CacheError) as exc_info:
            durable_cache.set("k", object())

        assert exc_info.value.code is ErrorCode.CACHE_SERIALIZATION_ERROR

    def test_clear_expired_counts_removed_rows(self, durable_cache: DurableCache, clock) -> None:
        durable_cache.set("short", 1, ttl=5)
        durable_cache.set("long", 2, ttl=500)
        clock.advance(10)

        assert durable_cache.clear_expired() == 1
        assert durable_cache.get("long") == 2

    def test_persists_across_instances(self, tmp_path: Path, clock) -> None:
        db_path = tmp_path / "cache.db"
        first = DurableCache(db_path, clock=clock)
        first.set("k", [1, 2, 3], ttl=60)
        first.close()

        second = DurableCache(db_path, clock=clock)
        try:
            assert second.get("k") == [1, 2, 3]
        finally:
            second.close()

    def test_startup_sweep_purges_expired_rows(self, tmp_path: Path, clock) -> None:
        db_path = tmp_path / "cache.db"
        first = DurableCache(db_path, clock=clock)
        first.set("k", "v", ttl=5)
        first.close()
        clock.advance(60)

        second = DurableCache(db_path, clock=clock, sweep_on_open=False)
        try:
            assert second.clear_expired() == 1
        finally:
            second.close()

    def test_namespaces_are_isolated(self, tmp_path: Path, clock) -> None:
        db_path = tmp_path / "cache.db"
        v1 = DurableCache(db_path, namespace="v1_", clock=clock)
        v2 = DurableCache(db_path, namespace="v2_", clock=clock)
        try:
            v1.set("k", "one")
            v2.set("k", "two")

            assert v1.get("k") == "one"
            assert v2.clear() == 1
            assert v1.get("k") == "one"
        finally:
            v1.close()
            v2.close()

    def test_closed_cache_raises(self, tmp_path: Path) -> None:
        cache = DurableCache(tmp_path / "cache.db")
        cache.close()

        with pytest.raises(CacheError):
            cache.get("k")

    def test_in_memory_database(self) -> None:
        cache = DurableCache(":memory:")
        try:
            cache.set("k", {"a": 1})
            assert cache.get("k") == {"a": 1}
        finally:
            cache.close()


class TestMemoryCache:
    """Test cases for the in-memory tier."""

    def test_set_schedules_removal(self, memory_cache: MemoryCache, scheduler) -> None:
        memory_cache.set("k", "v", ttl=30)

        assert memory_cache.get("k") == "v"
        assert [removal.delay for removal in scheduler.scheduled] == [30]

    def test_scheduled_removal_drops_entry(self, memory_cache: MemoryCache, scheduler) -> None:
        memory_cache.set("k", "v", ttl=30)

        scheduler.scheduled[0].fire()

        assert memory_cache.get("k") is None
        assert len(memory_cache) == 0

    def test_overwrite_cancels_previous_removal(self, memory_cache: MemoryCache, scheduler) -> None:
        memory_cache.set("k", "old", ttl=30)
        memory_cache.set("k", "new", ttl=30)

        first, second = scheduler.scheduled
        assert first.cancelled
        # A stale callback must not remove the newer entry
        first.callback()
        assert memory_cache.get("k") == "new"
        assert not second.cancelled

    def test_expired_entry_is_not_served_before_timer_fires(self, memory_cache: MemoryCache, clock) -> None:
        memory_cache.set("k", "v", ttl=30)
        clock.advance(31)

        assert memory_cache.get("k") is None

    def test_zero_ttl_stores_nothing(self, memory_cache: MemoryCache, scheduler) -> None:
        memory_cache.set("k", "v", ttl=30)
        memory_cache.set("k", "v2", ttl=0)

        assert memory_cache.get("k") is None
        assert scheduler.scheduled[0].cancelled
        assert len(scheduler.scheduled) == 1

    def test_default_ttl(self, clock, scheduler) -> None:
        cache = MemoryCache(default_ttl=42, scheduler=scheduler, clock=clock)

        cache.set("k", "v")

        assert scheduler.scheduled[0].delay == 42

    def test_clear_expired_and_clear(self, memory_cache: MemoryCache, clock) -> None:
        memory_cache.set("short", 1, ttl=5)
        memory_cache.set("long", 2, ttl=500)
        clock.advance(10)

        assert memory_cache.clear_expired() == 1
        assert memory_cache.clear() == 1
        assert len(memory_cache) == 0

    def test_close_cancels_pending_removals(self, memory_cache: MemoryCache, scheduler) -> None:
        memory_cache.set("k", "v", ttl=30)

        memory_cache.close()

        assert scheduler.scheduled[0].cancelled


class TestReaperScheduler:
    """Test cases for the shared removal thread."""

    @pytest.fixture
    def reaper(self):
        reaper = ReaperScheduler(name="TestReaper")
        yield reaper
        reaper.stop()

    def test_runs_due_removal(self, reaper: ReaperScheduler) -> None:
        fired = threading.Event()

        reaper(0.0, fired.set)

        assert fired.wait(timeout=2.0)

    def test_fires_in_deadline_order(self, reaper: ReaperScheduler) -> None:
        order: list[str] = []
        done = threading.Event()

        reaper(0.2, lambda: (order.append("late"), done.set()))
        reaper(0.05, lambda: order.append("early"))

        assert done.wait(timeout=2.0)
        assert order == ["early", "late"]

    def test_cancelled_removal_never_fires(self, reaper: ReaperScheduler) -> None:
        cancelled = Mock()
        marker = threading.Event()

        reaper(0.05, cancelled).cancel()
        reaper(0.1, marker.set)

        assert marker.wait(timeout=2.0)
        cancelled.assert_not_called()

    def test_many_removals_share_one_thread(self, reaper: ReaperScheduler) -> None:
        for _ in range(200):
            reaper(60.0, lambda: None)

        workers = [thread for thread in threading.enumerate() if thread.name == "TestReaper"]
        assert len(workers) == 1
        assert reaper.pending() == 200

    def test_failing_callback_keeps_worker_alive(self, reaper: ReaperScheduler) -> None:
        fired = threading.Event()

        reaper(0.0, Mock(side_effect=RuntimeError("boom")))
        reaper(0.05, fired.set)

        assert fired.wait(timeout=2.0)

    def test_stop_drops_pending_removals(self) -> None:
        reaper = ReaperScheduler(name="StoppedReaper")
        callback = Mock()
        reaper(60.0, callback)

        reaper.stop()

        assert reaper.pending() == 0
        assert not [thread for thread in threading.enumerate() if thread.name == "StoppedReaper"]
        callback.assert_not_called()

    def test_memory_cache_expires_through_default_reaper(self) -> None:
        cache = MemoryCache()
        try:
            cache.set("k", "v", ttl=0.05)
            deadline = time.monotonic() + 2.0
            while len(cache) and time.monotonic() < deadline:
                time.sleep(0.01)

            assert len(cache) == 0
        finally:
            cache.close()


class TestCacheService:
    """Test cases for CacheService."""

    def test_tiers_are_independent(self, cache_service: CacheService) -> None:
        cache_service.set("k", "durable")
        cache_service.set("k", "memory", tier=CacheTier.MEMORY)

        assert cache_service.get("k") == "durable"
        assert cache_service.get("k", tier=CacheTier.MEMORY) == "memory"

    def test_get_or_fetch_loads_once(self, cache_service: CacheService) -> None:
        loader = Mock(return_value=[1, 2])

        first = cache_service.get_or_fetch("k", loader, CacheTier.MEMORY, ttl=60)
        second = cache_service.get_or_fetch("k", loader, CacheTier.MEMORY, ttl=60)

        assert first == second == [1, 2]
        loader.assert_called_once_with()

    def test_get_or_fetch_respects_should_cache(self, cache_service: CacheService) -> None:
        loader = Mock(return_value=[])

        cache_service.get_or_fetch("k", loader, CacheTier.MEMORY, ttl=60, should_cache=bool)
        cache_service.get_or_fetch("k", loader, CacheTier.MEMORY, ttl=60, should_cache=bool)

        assert loader.call_count == 2

    def test_loader_errors_propagate_and_store_nothing(self, cache_service: CacheService) -> None:
        loader = Mock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            cache_service.get_or_fetch("k", loader)
        assert cache_service.get("k") is None

    def test_clear_expired_sums_both_tiers(self, cache_service: CacheService, clock) -> None:
        cache_service.set("a", 1, ttl=5)
        cache_service.set("b", 2, tier=CacheTier.MEMORY, ttl=5)
        clock.advance(10)

        assert cache_service.clear_expired() == 2
