"""SQLite-backed durable cache tier.

Entries survive process restarts. Each row stores one namespaced key and
the orjson-serialized CacheEntry. Expiry is lazy: an expired row is
deleted when it is read, or by ``clear_expired``.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Callable

import orjson

from anibridge.services.cache.models import CacheEntry
from anibridge.shared.constants import Cache
from anibridge.shared.errors import CacheError, ErrorCode, ErrorContext
from anibridge.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    expires_at REAL NOT NULL
)
"""
_CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_cache_expires_at ON cache_entries(expires_at)"


class DurableCache:
    """Durable key-value cache on SQLite.

    Uses WAL mode and autocommit so one connection can be shared across
    threads; every operation runs under a re-entrant lock.

    Attributes:
        db_path: Path to SQLite database file
        namespace: Prefix applied to every stored key
        default_ttl: Lifetime used when a write passes no ttl

    Example:
        >>> cache = DurableCache(Path("cache.db"))
        >>> cache.set("recommendations_1", {"recommendations": []}, ttl=1800)
        >>> cache.get("recommendations_1")
        {'recommendations': []}
        >>> cache.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        namespace: str = Cache.NAMESPACE,
        default_ttl: float = Cache.DURABLE_TTL,
        *,
        sweep_on_open: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Open (and create if needed) the cache database.

        Args:
            db_path: Path to SQLite database file (``:memory:`` is accepted)
            namespace: Key prefix; bump it whenever the entry format changes
            default_ttl: Default lifetime in seconds
            sweep_on_open: Delete expired entries right after opening
            clock: Time source returning epoch seconds

        Raises:
            CacheError: If database initialization fails
        """
        self.db_path = Path(db_path) if str(db_path) != ":memory:" else db_path
        self.namespace = namespace
        self.default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.RLock()
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

        if sweep_on_open:
            try:
                purged_count = self.clear_expired()
                if purged_count > 0:
                    logger.info("Purged %d expired cache entries on startup", purged_count)
            except CacheError as e:
                logger.warning("Failed to purge expired entries on startup: %s", e)

    def _initialize_db(self) -> None:
        context = ErrorContext(
            operation="initialize_db",
            additional_data={"db_path": str(self.db_path)},
        )

        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,  # guarded by self._lock
                isolation_level=None,  # Auto-commit mode
            )
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")
            self.conn.execute(_CREATE_TABLE_SQL)
            self.conn.execute(_CREATE_INDEX_SQL)

            log_operation_success(
                logger=logger,
                operation="initialize_db",
                duration_ms=0,
                context=context.additional_data,
            )
        except (sqlite3.Error, OSError) as e:
            error = CacheError(
                code=ErrorCode.CACHE_ERROR,
                message=f"Failed to initialize SQLite cache: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_db")
            raise error from e

    def _storage_key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise CacheError(
                ErrorCode.CACHE_ERROR,
                "Cache database is closed",
                ErrorContext(operation="cache_connection"),
            )
        return self.conn

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired.

        An expired row is deleted as a side effect of the read. A row that
        cannot be deserialized is treated as absent and removed.

        Raises:
            CacheError: If the database read fails
        """
        storage_key = self._storage_key(key)
        context = ErrorContext(operation="cache_get", additional_data={"key": key})

        with self._lock:
            try:
                conn = self._connection()
                row = conn.execute(
                    "SELECT value FROM cache_entries WHERE key = ?",
                    (storage_key,),
                ).fetchone()
                if row is None:
                    return None

                try:
                    entry = CacheEntry.from_json(row[0])
                except (orjson.JSONDecodeError, KeyError, TypeError, ValueError):
                    logger.warning("Discarding unreadable cache entry: %s", key)
                    conn.execute("DELETE FROM cache_entries WHERE key = ?", (storage_key,))
                    return None

                if entry.is_expired(self._clock()):
                    logger.debug("Cache entry expired: %s", key)
                    conn.execute("DELETE FROM cache_entries WHERE key = ?", (storage_key,))
                    return None

                return entry.data
            except sqlite3.Error as e:
                error = CacheError(
                    ErrorCode.CACHE_READ_FAILED,
                    f"Failed to read cache entry: {e!s}",
                    context,
                    e,
                )
                log_operation_error(logger=logger, error=error, operation="cache_get")
                raise error from e

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value.

        Args:
            key: Logical cache key (without namespace)
            value: JSON-serializable value
            ttl: Lifetime in seconds; defaults to ``default_ttl``

        Raises:
            CacheError: If the value cannot be serialized or written
        """
        lifetime = self.default_ttl if ttl is None else ttl
        entry = CacheEntry(data=value, stored_at=self._clock(), ttl=lifetime)
        context = ErrorContext(
            operation="cache_set",
            additional_data={"key": key, "ttl": lifetime},
        )

        try:
            payload = entry.to_json().decode("utf-8")
        except (TypeError, orjson.JSONEncodeError) as e:
            raise CacheError(
                ErrorCode.CACHE_SERIALIZATION_ERROR,
                f"Value for key '{key}' is not JSON-serializable",
                context,
                e,
            ) from e

        with self._lock:
            try:
                self._connection().execute(
                    "INSERT OR REPLACE INTO cache_entries (key, value, expires_at) "
                    "VALUES (?, ?, ?)",
                    (self._storage_key(key), payload, entry.expires_at()),
                )
            except sqlite3.Error as e:
                error = CacheError(
                    ErrorCode.CACHE_WRITE_FAILED,
                    f"Failed to write cache entry: {e!s}",
                    context,
                    e,
                )
                log_operation_error(logger=logger, error=error, operation="cache_set")
                raise error from e

    def delete(self, key: str) -> bool:
        """Delete one entry. Returns True when a row was removed."""
        with self._lock:
            try:
                cursor = self._connection().execute(
                    "DELETE FROM cache_entries WHERE key = ?",
                    (self._storage_key(key),),
                )
            except sqlite3.Error as e:
                raise CacheError(
                    ErrorCode.CACHE_WRITE_FAILED,
                    f"Failed to delete cache entry: {e!s}",
                    ErrorContext(operation="cache_delete", additional_data={"key": key}),
                    e,
                ) from e
            return cursor.rowcount > 0

    def clear_expired(self) -> int:
        """Delete every expired entry in this namespace.

        Returns:
            Number of deleted entries
        """
        now = self._clock()
        prefix = self.namespace
        with self._lock:
            try:
                # substr() instead of LIKE: the namespace contains underscores
                cursor = self._connection().execute(
                    "DELETE FROM cache_entries "
                    "WHERE substr(key, 1, ?) = ? AND expires_at < ?",
                    (len(prefix), prefix, now),
                )
            except sqlite3.Error as e:
                raise CacheError(
                    ErrorCode.CACHE_WRITE_FAILED,
                    f"Failed to purge expired cache entries: {e!s}",
                    ErrorContext(operation="cache_clear_expired"),
                    e,
                ) from e
            return cursor.rowcount

    def clear(self) -> int:
        """Delete every entry in this namespace."""
        prefix = self.namespace
        with self._lock:
            try:
                cursor = self._connection().execute(
                    "DELETE FROM cache_entries WHERE substr(key, 1, ?) = ?",
                    (len(prefix), prefix),
                )
            except sqlite3.Error as e:
                raise CacheError(
                    ErrorCode.CACHE_WRITE_FAILED,
                    f"Failed to clear cache: {e!s}",
                    ErrorContext(operation="cache_clear"),
                    e,
                ) from e
            return cursor.rowcount

    def close(self) -> None:
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
                logger.debug("Closed durable cache: %s", self.db_path)
