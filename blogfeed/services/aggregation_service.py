"""Concurrent multi-tag post aggregation with a shared TTL cache.

Accepts a list of tags and a requested ordering, resolves every tag
concurrently (from the cache when fresh, otherwise from the upstream
provider), merges the successful results and sorts them.

Architecture role: **Facade / Dispatcher**
-------------------------------------------
The service owns no network or storage logic; it coordinates the injected
``IPostCache`` and ``IPostProvider``.  For one call it:

1. fans out one asyncio task per requested tag (duplicates included),
2. joins on all of them at a single point, optionally bounded by an
   overall deadline,
3. reconciles the per-tag outcomes into one merged list and one failure
   list, then sorts the merged list.

Each task returns its own immutable ``_TagOutcome``; no task ever writes
to a shared list.  The only state shared between concurrent calls is the
cache, which guards itself.

Partial failure is the normal case, not an error: a tag that cannot be
resolved becomes a :class:`TagFailure` and its siblings carry on.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from blogfeed.config.settings import Settings
from blogfeed.interfaces.post_cache import IPostCache
from blogfeed.interfaces.post_provider import IPostProvider
from blogfeed.models.aggregation import (
    AggregationRequest,
    AggregationResult,
    FailureKind,
    TagFailure,
)
from blogfeed.models.post import BlogPost, SortDirection, SortField
from blogfeed.services.post_sorter import sort_posts, validate_sort
from blogfeed.utils.concurrency import bounded, gather_with_deadline
from blogfeed.utils.errors import FetchTimeoutError, PostFetchError
from blogfeed.utils.logging import get_logger


@dataclass(frozen=True)
class _TagOutcome:
    """What one tag's task produced: posts, or a failure."""

    tag: str
    posts: tuple[BlogPost, ...] = ()
    failure: TagFailure | None = None
    from_cache: bool = False


class PostAggregationService:
    """Resolves many tags concurrently and merges their posts.

    Parameters
    ----------
    cache:
        Process-wide cache consulted before every remote lookup.
    provider:
        Upstream provider; refreshes the cache itself on success.
    fetch_timeout:
        Per-tag limit in seconds on the remote lookup.  ``None`` or ``0``
        disables it.
    deadline:
        Limit in seconds on the whole fan-out.  Tags still pending when it
        passes are reported as ``TIMEOUT``.  ``None`` or ``0`` disables it.
    max_concurrent_fetches:
        Cap on simultaneous remote lookups; ``0`` means unbounded.  Cache
        hits are never throttled.
    """

    def __init__(
        self,
        cache: IPostCache,
        provider: IPostProvider,
        fetch_timeout: float | None = None,
        deadline: float | None = None,
        max_concurrent_fetches: int = 0,
    ) -> None:
        self._cache = cache
        self._provider = provider
        self._fetch_timeout = fetch_timeout or None
        self._deadline = deadline or None
        self._semaphore = (
            asyncio.Semaphore(max_concurrent_fetches) if max_concurrent_fetches > 0 else None
        )
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        cache: IPostCache,
        provider: IPostProvider,
        settings: Settings,
    ) -> PostAggregationService:
        return cls(
            cache=cache,
            provider=provider,
            fetch_timeout=settings.fetch_timeout_seconds,
            deadline=settings.aggregate_deadline_seconds,
            max_concurrent_fetches=settings.max_concurrent_fetches,
        )

    # -- Public API -----------------------------------------------------------

    async def aggregate(
        self,
        tags: Sequence[str],
        sort_by: SortField | str = SortField.ID,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> AggregationResult:
        """Resolve every tag, merge the successful posts and sort them.

        Parameters
        ----------
        tags:
            Tags to resolve, in request order.  Duplicates are resolved
            independently and their posts are not deduplicated.
        sort_by, direction:
            Requested ordering of the merged list.

        Returns
        -------
        AggregationResult
            Sorted posts from every tag that succeeded, plus one
            :class:`TagFailure` per tag that did not.

        Raises
        ------
        InvalidSortError
            *sort_by* or *direction* is not recognised.  Checked before any
            lookup is started.
        """
        field, order = validate_sort(sort_by, direction)
        tag_list = list(tags)
        if not tag_list:
            return AggregationResult(requested_tags=0)

        started = time.perf_counter()
        raw_outcomes = await gather_with_deadline(
            [self._resolve_tag(tag) for tag in tag_list],
            deadline=self._deadline,
        )

        # Single reconciliation point: every task has finished or been cancelled.
        merged: list[BlogPost] = []
        failures: list[TagFailure] = []
        cache_hits = 0
        for tag, raw in zip(tag_list, raw_outcomes):
            outcome = self._to_outcome(tag, raw)
            if outcome.failure is not None:
                failures.append(outcome.failure)
                continue
            merged.extend(outcome.posts)
            if outcome.from_cache:
                cache_hits += 1

        posts = sort_posts(merged, field, order)

        self._logger.info(
            "aggregation_complete",
            tags=len(tag_list),
            cache_hits=cache_hits,
            failed=len(failures),
            post_count=len(posts),
            sort_by=field.value,
            direction=order.value,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return AggregationResult(posts=posts, failures=failures, requested_tags=len(tag_list))

    async def aggregate_request(self, request: AggregationRequest) -> AggregationResult:
        """Convenience wrapper taking a prepared :class:`AggregationRequest`."""
        return await self.aggregate(request.tags, request.sort_by, request.direction)

    # -- Per-tag resolution ---------------------------------------------------

    async def _resolve_tag(self, tag: str) -> _TagOutcome:
        """Serve *tag* from a fresh cache entry, else fetch it remotely.

        Never raises for a per-tag problem; the failure is returned instead.
        """
        try:
            lookup = await self._cache.get(tag)
            if lookup.usable and lookup.payload is not None:
                return _TagOutcome(tag=tag, posts=lookup.payload, from_cache=True)

            posts = await bounded(self._fetch_with_timeout(tag), self._semaphore)
        except PostFetchError as exc:
            self._logger.warning(
                "tag_fetch_failed",
                tag=tag,
                kind=exc.kind.value,
                error=str(exc),
            )
            return _TagOutcome(
                tag=tag,
                failure=TagFailure(tag=tag, kind=exc.kind, reason=exc.message),
            )
        except Exception as exc:
            # Anything outside the taxonomy still only fails this tag.
            self._logger.error(
                "tag_fetch_unexpected_error",
                tag=tag,
                error=repr(exc),
                exc_info=True,
            )
            return _TagOutcome(
                tag=tag,
                failure=TagFailure(
                    tag=tag,
                    kind=FailureKind.REMOTE_UNAVAILABLE,
                    reason=repr(exc),
                ),
            )

        return _TagOutcome(tag=tag, posts=tuple(posts))

    async def _fetch_with_timeout(self, tag: str) -> list[BlogPost]:
        if self._fetch_timeout is None:
            return await self._provider.fetch(tag)
        try:
            return await asyncio.wait_for(self._provider.fetch(tag), timeout=self._fetch_timeout)
        except asyncio.TimeoutError as exc:
            raise FetchTimeoutError(
                message=f"Lookup for tag '{tag}' exceeded {self._fetch_timeout}s",
                provider_name=self._provider.get_provider_name(),
                tag=tag,
            ) from exc

    def _to_outcome(self, tag: str, raw: _TagOutcome | BaseException) -> _TagOutcome:
        """Map a joined task result onto a ``_TagOutcome``."""
        if isinstance(raw, _TagOutcome):
            return raw

        if isinstance(raw, (asyncio.TimeoutError, asyncio.CancelledError)):
            kind = FailureKind.TIMEOUT
            reason = f"Lookup for tag '{tag}' did not finish within {self._deadline}s"
            self._logger.warning("tag_deadline_exceeded", tag=tag, deadline=self._deadline)
        else:
            kind = FailureKind.REMOTE_UNAVAILABLE
            reason = repr(raw)
            self._logger.error("tag_task_crashed", tag=tag, error=reason)
        return _TagOutcome(tag=tag, failure=TagFailure(tag=tag, kind=kind, reason=reason))
