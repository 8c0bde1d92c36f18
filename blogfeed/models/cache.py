"""Cache entry models for the per-tag post cache."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from blogfeed.models.post import BlogPost


class CacheEntry(BaseModel):
    """One cached provider response, already stripped of its envelope.

    Entries are replaced whole on every successful fetch and never mutated,
    so a reader always sees either the previous or the next complete entry.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    fetched_at: float
    payload: tuple[BlogPost, ...] = ()

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def is_fresh(self, now: float, ttl: float) -> bool:
        """An entry is fresh while its age is strictly below *ttl*."""
        return self.age(now) < ttl


class CacheLookup(BaseModel):
    """Result of a cache read: the payload (if any) plus presence and freshness."""

    model_config = ConfigDict(frozen=True)

    payload: tuple[BlogPost, ...] | None = None
    found: bool = False
    fresh: bool = False

    @property
    def usable(self) -> bool:
        return self.found and self.fresh
