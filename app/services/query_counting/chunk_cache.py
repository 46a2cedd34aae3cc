"""Session-local chunk cache with TTL and quota-aware eviction."""

import json
import math
import time
from collections.abc import Callable
from datetime import date
from typing import Protocol

from loguru import logger
from pydantic import ValidationError

from app.services.query_counting.chunking import split_date_range
from gsc_client import SearchAnalyticsRow
from settings import (
    CHUNK_CACHE_PREFIX,
    CHUNK_CACHE_QUOTA_BYTES,
    CHUNK_CACHE_TTL_HOURS,
    CHUNK_SIZE_DAYS,
)


class StorageQuotaExceededError(Exception):
    """A write would push the storage past its quota."""


class Storage(Protocol):
    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def keys(self) -> list[str]: ...


class LocalStorage:
    """In-memory string store with a byte quota, like a browser's localStorage."""

    def __init__(self, quota_bytes: int = CHUNK_CACHE_QUOTA_BYTES):
        self._quota = quota_bytes
        self._items: dict[str, str] = {}
        self._used = 0

    @staticmethod
    def _size(key: str, value: str) -> int:
        return len(key.encode()) + len(value.encode())

    @property
    def used_bytes(self) -> int:
        return self._used

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        old = self._size(key, self._items[key]) if key in self._items else 0
        used = self._used - old + self._size(key, value)
        if used > self._quota:
            raise StorageQuotaExceededError(f"Quota of {self._quota} bytes exceeded writing {key}")
        self._items[key] = value
        self._used = used

    def remove_item(self, key: str) -> None:
        value = self._items.pop(key, None)
        if value is not None:
            self._used -= self._size(key, value)

    def keys(self) -> list[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class ChunkCache:
    """Per-chunk row cache keyed by (site, chunk start, chunk end).

    Entries expire `ttl_hours` after they were written. A write that hits the
    storage quota evicts the oldest half of the entries and is retried once;
    a write that still fails is dropped, never raised.
    """

    def __init__(
        self,
        storage: Storage | None = None,
        ttl_hours: float = CHUNK_CACHE_TTL_HOURS,
        prefix: str = CHUNK_CACHE_PREFIX,
        clock: Callable[[], float] = time.time,
    ):
        self._storage = storage if storage is not None else LocalStorage()
        self._ttl = ttl_hours * 3600
        self._prefix = prefix
        self._clock = clock

    def key(self, site_url: str, start_date: date, end_date: date) -> str:
        return f"{self._prefix}{site_url}-{start_date.isoformat()}-{end_date.isoformat()}"

    def _own_keys(self) -> list[str]:
        return [k for k in self._storage.keys() if k.startswith(self._prefix)]

    def get(self, site_url: str, start_date: date, end_date: date) -> list[SearchAnalyticsRow] | None:
        key = self.key(site_url, start_date, end_date)
        raw = self._storage.get_item(key)
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            if self._clock() - entry["cachedAt"] >= self._ttl:
                self._storage.remove_item(key)
                return None
            return [SearchAnalyticsRow.model_validate(r) for r in entry["rows"]]
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            logger.warning("Dropping unreadable chunk cache entry {}: {}", key, e)
            self._storage.remove_item(key)
            return None

    def set(self, site_url: str, start_date: date, end_date: date, rows: list[SearchAnalyticsRow]) -> bool:
        """Store rows for a chunk. Returns False if the write was dropped."""
        key = self.key(site_url, start_date, end_date)
        value = json.dumps(
            {
                "rows": [r.model_dump() for r in rows],
                "cachedAt": self._clock(),
                "rangeKey": f"{start_date.isoformat()}..{end_date.isoformat()}",
            }
        )

        try:
            self._storage.set_item(key, value)
            return True
        except StorageQuotaExceededError:
            evicted = self.evict_oldest()
            logger.warning("Chunk cache quota hit, evicted {} entries", evicted)

        try:
            self._storage.set_item(key, value)
            return True
        except StorageQuotaExceededError as e:
            logger.warning("Chunk cache write dropped for {}: {}", key, e)
            return False

    def evict_oldest(self, fraction: float = 0.5) -> int:
        """Remove the oldest `fraction` of entries by write time."""
        entries = []
        for key in self._own_keys():
            try:
                entry = json.loads(self._storage.get_item(key) or "{}")
            except ValueError:
                entry = None
            # unreadable entries sort first and go in the first batch
            cached_at = entry.get("cachedAt", 0) if isinstance(entry, dict) else 0
            if not isinstance(cached_at, int | float):
                cached_at = 0
            entries.append((cached_at, key))
        entries.sort()

        to_remove = math.ceil(len(entries) * fraction)
        for _, key in entries[:to_remove]:
            self._storage.remove_item(key)
        return to_remove

    def invalidate(
        self,
        site_url: str,
        start_date: date,
        end_date: date,
        chunk_days: int = CHUNK_SIZE_DAYS,
    ) -> int:
        """Delete the entries of every chunk the range would be fetched as."""
        cleared = 0
        for chunk in split_date_range(start_date, end_date, chunk_days):
            key = self.key(site_url, chunk.start_date, chunk.end_date)
            if self._storage.get_item(key) is not None:
                self._storage.remove_item(key)
                cleared += 1
        logger.info("Chunk cache invalidated ({} chunks cleared)", cleared)
        return cleared

    def clear_all(self) -> int:
        keys = self._own_keys()
        for key in keys:
            self._storage.remove_item(key)
        logger.info("Cleared all chunk caches ({} items)", len(keys))
        return len(keys)

    def __len__(self) -> int:
        return len(self._own_keys())
