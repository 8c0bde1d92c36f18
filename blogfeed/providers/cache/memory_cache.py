"""In-memory per-tag post cache with lazy TTL freshness.

Unlike a TTL-evicting store, expired entries are kept: a read reports them
as found but stale, and they stay until the next successful fetch for the
same tag overwrites them.  Can be swapped for a shared backend via the
IPostCache interface.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence

import structlog

from blogfeed.interfaces.post_cache import IPostCache
from blogfeed.models.cache import CacheEntry, CacheLookup
from blogfeed.models.post import BlogPost
from blogfeed.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


class MemoryPostCache(IPostCache):
    """Process-wide tag → posts cache guarded by per-key locks.

    Each key gets its own ``threading.Lock`` so that reads and writes of
    unrelated tags never wait on each other, while two operations on the
    same tag are serialized.  Entries are frozen and swapped in whole.

    Parameters
    ----------
    ttl:
        Freshness window in seconds.  An entry is fresh while
        ``now - fetched_at < ttl``.
    clock:
        Returns the current time in epoch seconds.  Injected by tests to
        simulate the passage of time.
    """

    def __init__(self, ttl: float = 5.0, clock: Callable[[], float] = time.time) -> None:
        if ttl <= 0:
            raise ConfigurationError(message=f"Cache TTL must be positive, got {ttl}")
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        """Return the lock for *key*, creating it. Only writers call this."""
        lock = self._key_locks.get(key)
        if lock is None:
            with self._registry_lock:
                lock = self._key_locks.setdefault(key, threading.Lock())
        return lock

    def _read(self, key: str) -> CacheEntry | None:
        # A key without a lock has never been written.
        lock = self._key_locks.get(key)
        if lock is None:
            return None
        with lock:
            return self._entries.get(key)

    # ------------------------------------------------------------------
    # IPostCache implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> CacheLookup:
        """Return the stored posts for *key* and whether they are still fresh."""
        entry = self._read(key)
        if entry is None:
            logger.debug("post_cache_miss", key=key)
            return CacheLookup()

        fresh = entry.is_fresh(self._clock(), self._ttl)
        logger.debug("post_cache_hit" if fresh else "post_cache_stale", key=key)
        return CacheLookup(payload=entry.payload, found=True, fresh=fresh)

    async def put(self, key: str, payload: Sequence[BlogPost]) -> CacheEntry:
        """Store *payload* under *key*, replacing any previous entry."""
        entry = CacheEntry(key=key, fetched_at=self._clock(), payload=tuple(payload))
        with self._lock_for(key):
            self._entries[key] = entry
        logger.debug("post_cache_put", key=key, post_count=len(entry.payload))
        return entry

    def get_ttl(self) -> float:
        return self._ttl

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------

    def entry(self, key: str) -> CacheEntry | None:
        """Return the raw entry for *key* (fresh or stale), or ``None``."""
        return self._read(key)

    def __len__(self) -> int:
        return len(self._entries)
