"""Shared pytest fixtures for the blogfeed test suite."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from blogfeed.config.settings import Settings
from blogfeed.providers.cache.memory_cache import MemoryPostCache
from tests.factories import FakeClock


@pytest.fixture
def settings() -> Settings:
    return Settings(
        posts_api_base_url="https://posts.test",
        posts_api_path="/assessment/blog/posts",
        cache_ttl_seconds=5.0,
        fetch_timeout_seconds=0,
        aggregate_deadline_seconds=0,
        max_concurrent_fetches=0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryPostCache:
    return MemoryPostCache(ttl=5.0, clock=clock)


@pytest.fixture
def sample_post_payload() -> bytes:
    """A provider envelope holding a single post."""
    return (
        b'{"posts":[{"author":"Rylee Paul","authorId":9,"id":1,"likes":960,'
        b'"popularity":0.13,"reads":50361,"tags":["tech","health"]}]}'
    )


@pytest.fixture
def mock_response() -> Callable[..., MagicMock]:
    """Factory for httpx-like response mocks with ``status_code`` and ``content``."""

    def _factory(content: bytes = b'{"posts": []}', status_code: int = 200) -> MagicMock:
        response = MagicMock(spec=httpx.Response)
        response.status_code = status_code
        response.content = content
        return response

    return _factory


@pytest.fixture
def mock_http_client() -> MagicMock:
    """AsyncClient mock whose ``get`` is an AsyncMock; set return_value/side_effect per test."""
    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    return client
