"""Abstract base class for the per-tag post cache.

Defines the contract for the process-wide cache that maps a tag to the
decoded posts last fetched for it and the time of that fetch.  Staleness is
purely a function of time at read: there is no delete or eviction operation,
and a stale entry stays in place until the next successful fetch for the same
tag overwrites it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from blogfeed.models.cache import CacheEntry, CacheLookup
from blogfeed.models.post import BlogPost


class IPostCache(ABC):
    """Contract for the tag → posts cache shared by all concurrent requests.

    Reads and writes are async so a network-backed store (e.g. Redis) can
    implement the same contract.  Implementations must be safe to call
    concurrently, from tasks and from threads: operations on
    different keys must not block or corrupt each other, and a reader of a
    key must never observe a half-written entry.
    """

    @abstractmethod
    async def get(self, key: str) -> CacheLookup:
        """Look up *key* without mutating the cache.

        Returns
        -------
        CacheLookup
            ``payload`` is the stored posts (``None`` when absent), ``found``
            tells whether an entry exists and ``fresh`` whether its age is
            below the configured TTL.
        """

    @abstractmethod
    async def put(self, key: str, payload: Sequence[BlogPost]) -> CacheEntry:
        """Replace the entry for *key* with *payload* stamped with the current time.

        Concurrent puts for the same key are last-writer-wins; the stored
        entry is always one complete write.
        """

    @abstractmethod
    def get_ttl(self) -> float:
        """Return the freshness window in seconds."""
