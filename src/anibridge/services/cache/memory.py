"""In-memory cache tier.

Entries live for the lifetime of the process. Each write schedules its
own removal; reads also check the deadline so an entry is never served
after it expired, even if its removal has not fired yet.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from typing import Any, Callable, Protocol

from anibridge.services.cache.models import CacheEntry
from anibridge.shared.constants import Cache

logger = logging.getLogger(__name__)


class ScheduledRemoval(Protocol):
    """Handle returned by a scheduler."""

    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], ScheduledRemoval]


class _PendingRemoval:
    __slots__ = ("callback", "cancelled")

    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ReaperScheduler:
    """Run scheduled removals from one daemon thread.

    Removals sit in a heap ordered by deadline. The worker sleeps until
    the earliest deadline, or until a new removal is pushed in front of
    it. Cancelled removals are discarded when they reach the head.

    The thread starts with the first scheduled removal and exits on
    ``stop()``; scheduling again afterwards starts a fresh one.
    """

    def __init__(self, name: str = "MemoryCacheReaper", clock: Callable[[], float] = time.monotonic) -> None:
        self.name = name
        self._clock = clock
        self._wakeup = threading.Condition(threading.Lock())
        self._heap: list[tuple[float, int, _PendingRemoval]] = []
        self._sequence = itertools.count()
        self._thread: threading.Thread | None = None
        self._stopped = False

    def __call__(self, delay: float, callback: Callable[[], None]) -> ScheduledRemoval:
        removal = _PendingRemoval(callback)
        with self._wakeup:
            heapq.heappush(self._heap, (self._clock() + delay, next(self._sequence), removal))
            self._stopped = False
            if self._thread is None or not self._thread.is_alive():
                self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
                self._thread.start()
            self._wakeup.notify()
        return removal

    def pending(self) -> int:
        """Number of scheduled removals that have not fired or been cancelled."""
        with self._wakeup:
            return sum(1 for _, _, removal in self._heap if not removal.cancelled)

    def stop(self, timeout: float = 5.0) -> None:
        """Drop pending removals and stop the worker thread."""
        with self._wakeup:
            self._stopped = True
            self._heap.clear()
            self._wakeup.notify()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def _next_due(self) -> _PendingRemoval | None:
        """Block until a removal is due. Returns None once stopped."""
        with self._wakeup:
            while not self._stopped:
                while self._heap and self._heap[0][2].cancelled:
                    heapq.heappop(self._heap)
                if not self._heap:
                    self._wakeup.wait()
                    continue
                remaining = self._heap[0][0] - self._clock()
                if remaining <= 0:
                    return heapq.heappop(self._heap)[2]
                self._wakeup.wait(remaining)
            return None

    def _run(self) -> None:
        while True:
            removal = self._next_due()
            if removal is None:
                return
            if removal.cancelled:
                continue
            try:
                removal.callback()
            except Exception:
                # Keep the worker alive for the remaining removals
                logger.exception("Scheduled cache removal failed")


class MemoryCache:
    """Process-lifetime key-value cache with scheduled expiry.

    Attributes:
        default_ttl: Lifetime used when a write passes no ttl
    """

    def __init__(
        self,
        default_ttl: float = Cache.MEMORY_TTL,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.default_ttl = default_ttl
        self._owned_reaper = ReaperScheduler() if scheduler is None else None
        self._scheduler: Scheduler = self._owned_reaper if scheduler is None else scheduler
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, CacheEntry] = {}
        self._removals: dict[str, ScheduledRemoval] = {}
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                self._remove(key)
                return None
            return entry.data

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value and schedule its removal.

        A non-positive ttl stores nothing and drops any previous value, so
        the next read misses.
        """
        lifetime = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._remove(key)
            if lifetime <= 0:
                return

            entry = CacheEntry(data=value, stored_at=self._clock(), ttl=lifetime)
            self._entries[key] = entry
            self._removals[key] = self._scheduler(
                lifetime,
                lambda: self._expire(key, entry),
            )

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._remove(key)

    def clear_expired(self) -> int:
        """Drop every entry past its deadline. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                self._remove(key)
            return len(expired)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            for key in list(self._entries):
                self._remove(key)
            return count

    def close(self) -> None:
        """Cancel pending removals, drop every entry and stop an owned reaper."""
        self.clear()
        if self._owned_reaper is not None:
            self._owned_reaper.stop()

    def _expire(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            # Overwritten entries have their own timer
            if self._entries.get(key) is entry:
                self._entries.pop(key, None)
                self._removals.pop(key, None)
                logger.debug("Memory cache entry expired: %s", key)

    def _remove(self, key: str) -> bool:
        removal = self._removals.pop(key, None)
        if removal is not None:
            removal.cancel()
        return self._entries.pop(key, None) is not None
