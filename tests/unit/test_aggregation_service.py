"""Unit tests for PostAggregationService.

The provider is an in-memory fake so every scenario is deterministic;
real time only passes in the timeout and deadline cases.
"""

from __future__ import annotations

import pytest

from blogfeed.config.settings import Settings
from blogfeed.models.aggregation import AggregationRequest, FailureKind
from blogfeed.models.post import SortDirection, SortField
from blogfeed.providers.cache.memory_cache import MemoryPostCache
from blogfeed.services.aggregation_service import PostAggregationService
from blogfeed.utils.errors import InvalidSortError, PostDecodeError, RemoteUnavailableError
from tests.factories import FakeClock, FakePostProvider, make_post


def _service(cache: MemoryPostCache, provider: FakePostProvider, **kwargs) -> PostAggregationService:
    return PostAggregationService(cache=cache, provider=provider, **kwargs)


# ======================================================================
# Cache interplay
# ======================================================================


class TestCacheInterplay:
    @pytest.mark.asyncio
    async def test_empty_tag_list_makes_no_calls(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(cache)

        result = await _service(cache, provider).aggregate([])

        assert result.posts == []
        assert result.failures == []
        assert result.succeeded is True
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_fresh_entry_skips_provider(self, cache: MemoryPostCache) -> None:
        await cache.put("tech", [make_post(1), make_post(2)])
        provider = FakePostProvider(cache, {"tech": [make_post(99)]})

        result = await _service(cache, provider).aggregate(["tech"])

        assert [p.id for p in result.posts] == [1, 2]
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_stale_entry_is_refetched(
        self, cache: MemoryPostCache, clock: FakeClock
    ) -> None:
        await cache.put("tech", [make_post(1)])
        clock.advance(5.0)
        provider = FakePostProvider(cache, {"tech": [make_post(7)]})

        result = await _service(cache, provider).aggregate(["tech"])

        assert [p.id for p in result.posts] == [7]
        assert provider.calls == ["tech"]
        assert (await cache.get("tech")).usable is True

    @pytest.mark.asyncio
    async def test_second_call_within_ttl_is_served_from_cache(
        self, cache: MemoryPostCache
    ) -> None:
        provider = FakePostProvider(cache, {"tech": [make_post(1)], "health": [make_post(2)]})
        service = _service(cache, provider)

        await service.aggregate(["tech", "health"])
        await service.aggregate(["tech", "health"])

        assert sorted(provider.calls) == ["health", "tech"]

    @pytest.mark.asyncio
    async def test_failed_tag_keeps_previous_stale_entry(
        self, cache: MemoryPostCache, clock: FakeClock
    ) -> None:
        await cache.put("tech", [make_post(1)])
        clock.advance(30)
        before = cache.entry("tech")
        provider = FakePostProvider(
            cache, {"tech": RemoteUnavailableError(message="down", tag="tech")}
        )

        result = await _service(cache, provider).aggregate(["tech"])

        assert result.succeeded is False
        assert cache.entry("tech") == before


# ======================================================================
# Merge and failure reconciliation
# ======================================================================


class TestMerge:
    @pytest.mark.asyncio
    async def test_partial_failure(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(
            cache,
            {
                "tech": [make_post(1), make_post(2)],
                "broken": PostDecodeError(message="bad post", tag="broken"),
                "health": [make_post(3)],
            },
        )

        result = await _service(cache, provider).aggregate(["tech", "broken", "health"])

        assert [p.id for p in result.posts] == [1, 2, 3]
        assert result.failed_tags == ["broken"]
        assert result.failures[0].kind is FailureKind.DECODE_ERROR
        assert result.failures[0].reason == "bad post"
        assert result.is_partial is True

    @pytest.mark.asyncio
    async def test_all_tags_fail(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(
            cache,
            {
                "a": RemoteUnavailableError(message="down"),
                "b": RemoteUnavailableError(message="down"),
            },
        )

        result = await _service(cache, provider).aggregate(["a", "b"])

        assert result.posts == []
        assert result.failed_tags == ["a", "b"]
        assert result.succeeded is False

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_remote_unavailable(
        self, cache: MemoryPostCache
    ) -> None:
        provider = FakePostProvider(
            cache, {"tech": [make_post(1)], "weird": RuntimeError("boom")}
        )

        result = await _service(cache, provider).aggregate(["tech", "weird"])

        assert [p.id for p in result.posts] == [1]
        assert result.failures[0].tag == "weird"
        assert result.failures[0].kind is FailureKind.REMOTE_UNAVAILABLE
        assert "boom" in result.failures[0].reason

    @pytest.mark.asyncio
    async def test_duplicate_tags_contribute_twice(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(cache, {"tech": [make_post(1), make_post(2)]})

        result = await _service(cache, provider).aggregate(["tech", "tech"])

        assert [p.id for p in result.posts] == [1, 1, 2, 2]
        assert result.requested_tags == 2

    @pytest.mark.asyncio
    async def test_overlapping_tags_are_not_deduplicated(self, cache: MemoryPostCache) -> None:
        shared = make_post(5, tags=["tech", "health"])
        provider = FakePostProvider(
            cache, {"tech": [shared, make_post(1)], "health": [shared]}
        )

        result = await _service(cache, provider).aggregate(["tech", "health"])

        assert [p.id for p in result.posts] == [1, 5, 5]

    @pytest.mark.asyncio
    async def test_many_tags_merge_every_post(self, cache: MemoryPostCache) -> None:
        results = {
            f"tag{i}": [make_post(i * 100 + j) for j in range(i % 4)] for i in range(60)
        }
        provider = FakePostProvider(cache, results)

        for _ in range(3):
            result = await _service(cache, provider).aggregate(list(results))
            expected = [p for posts in results.values() for p in posts]
            assert len(result.posts) == len(expected)
            assert sum(p.likes for p in result.posts) == sum(p.likes for p in expected)
            assert sorted(p.id for p in result.posts) == [p.id for p in result.posts]

    @pytest.mark.asyncio
    async def test_result_is_sorted(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(
            cache,
            {
                "a": [make_post(1, likes=10), make_post(2, likes=300)],
                "b": [make_post(3, likes=200)],
            },
        )

        result = await _service(cache, provider).aggregate(
            ["a", "b"], SortField.LIKES, SortDirection.DESC
        )

        assert [p.id for p in result.posts] == [2, 3, 1]

    @pytest.mark.asyncio
    async def test_aggregate_request(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(cache, {"tech": [make_post(2), make_post(1)]})
        request = AggregationRequest(
            tags=["tech"], sort_by=SortField.ID, direction=SortDirection.DESC
        )

        result = await _service(cache, provider).aggregate_request(request)

        assert [p.id for p in result.posts] == [2, 1]


# ======================================================================
# Validation
# ======================================================================


class TestValidation:
    @pytest.mark.asyncio
    async def test_invalid_field_raises_before_any_fetch(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(cache, {"tech": [make_post(1)]})

        with pytest.raises(InvalidSortError):
            await _service(cache, provider).aggregate(["tech"], "author", "asc")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_invalid_direction_raises(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(cache)

        with pytest.raises(InvalidSortError):
            await _service(cache, provider).aggregate(["tech"], "id", "sideways")
        assert provider.calls == []


# ======================================================================
# Timeouts and throttling
# ======================================================================


class TestTimeoutsAndLimits:
    @pytest.mark.asyncio
    async def test_per_tag_timeout(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(
            cache,
            {"fast": [make_post(1)], "slow": [make_post(2)]},
            delays={"slow": 2.0},
        )
        service = _service(cache, provider, fetch_timeout=0.05)

        result = await service.aggregate(["fast", "slow"])

        assert [p.id for p in result.posts] == [1]
        assert result.failures[0].tag == "slow"
        assert result.failures[0].kind is FailureKind.TIMEOUT
        # The abandoned lookup never reaches the cache.
        assert (await cache.get("slow")).found is False

    @pytest.mark.asyncio
    async def test_overall_deadline(self, cache: MemoryPostCache) -> None:
        provider = FakePostProvider(
            cache,
            {"fast": [make_post(1)], "slow": [make_post(2)]},
            delays={"slow": 2.0},
        )
        service = _service(cache, provider, deadline=0.05)

        result = await service.aggregate(["fast", "slow"])

        assert [p.id for p in result.posts] == [1]
        assert result.failed_tags == ["slow"]
        assert result.failures[0].kind is FailureKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_unbounded_fetches_run_together(self, cache: MemoryPostCache) -> None:
        tags = [f"t{i}" for i in range(6)]
        provider = FakePostProvider(
            cache, {t: [make_post(i)] for i, t in enumerate(tags)}, delays={t: 0.01 for t in tags}
        )

        await _service(cache, provider).aggregate(tags)

        assert provider.max_in_flight == 6

    @pytest.mark.asyncio
    async def test_semaphore_caps_in_flight_fetches(self, cache: MemoryPostCache) -> None:
        tags = [f"t{i}" for i in range(6)]
        provider = FakePostProvider(
            cache, {t: [make_post(i)] for i, t in enumerate(tags)}, delays={t: 0.01 for t in tags}
        )

        result = await _service(cache, provider, max_concurrent_fetches=2).aggregate(tags)

        assert len(result.posts) == 6
        assert provider.max_in_flight == 2

    def test_from_settings(self, cache: MemoryPostCache, settings: Settings) -> None:
        provider = FakePostProvider(cache)
        service = PostAggregationService.from_settings(
            cache,
            provider,
            settings.model_copy(
                update={"fetch_timeout_seconds": 3.0, "max_concurrent_fetches": 4}
            ),
        )

        assert service._fetch_timeout == 3.0
        assert service._deadline is None
        assert service._semaphore is not None
