"""Hatchways blog-post provider implementing IPostProvider.

Issues one ``GET {base_url}/assessment/blog/posts?tag=<tag>`` per call,
strips the ``{"posts": [...]}`` envelope, decodes every post and refreshes
the shared cache.  Every decode step either returns a value or raises a
:class:`~blogfeed.utils.errors.PostFetchError` subclass; nothing is
silently dropped.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import ValidationError

from blogfeed.config.settings import Settings
from blogfeed.interfaces.post_cache import IPostCache
from blogfeed.interfaces.post_provider import IPostProvider
from blogfeed.models.post import BlogPost
from blogfeed.utils.errors import (
    MalformedResponseError,
    PostDecodeError,
    RemoteUnavailableError,
)
from blogfeed.utils.logging import get_logger

_ENVELOPE_KEY = "posts"
_PROVIDER_NAME = "hatchways"


def strip_envelope(
    body: bytes | str,
    provider_name: str | None = None,
    tag: str | None = None,
) -> list[Any]:
    """Return the raw post list found under the ``posts`` key of *body*.

    Element order and every field are preserved as delivered.

    Raises
    ------
    MalformedResponseError
        *body* is not JSON, not a JSON object, has no ``posts`` key, or
        ``posts`` is not an array.
    """
    try:
        document = json.loads(body)
    except ValueError as exc:
        raise MalformedResponseError(
            message=f"Response for tag '{tag}' is not valid JSON: {exc}",
            provider_name=provider_name,
            tag=tag,
        ) from exc

    if not isinstance(document, dict):
        raise MalformedResponseError(
            message=f"Response for tag '{tag}' is not a JSON object",
            provider_name=provider_name,
            tag=tag,
        )
    if _ENVELOPE_KEY not in document:
        raise MalformedResponseError(
            message=f"Response for tag '{tag}' has no '{_ENVELOPE_KEY}' key",
            provider_name=provider_name,
            tag=tag,
        )

    posts = document[_ENVELOPE_KEY]
    if not isinstance(posts, list):
        raise MalformedResponseError(
            message=f"'{_ENVELOPE_KEY}' for tag '{tag}' is not an array",
            provider_name=provider_name,
            tag=tag,
        )
    return posts


def decode_posts(
    raw_posts: list[Any],
    provider_name: str | None = None,
    tag: str | None = None,
) -> list[BlogPost]:
    """Validate each raw post into a :class:`BlogPost`.

    Raises
    ------
    PostDecodeError
        On the first element that does not match the post shape.
    """
    posts: list[BlogPost] = []
    for index, item in enumerate(raw_posts):
        try:
            posts.append(BlogPost.model_validate(item))
        except ValidationError as exc:
            raise PostDecodeError(
                message=(
                    f"Post #{index} for tag '{tag}' does not match the expected "
                    f"shape: {exc.error_count()} validation error(s)"
                ),
                provider_name=provider_name,
                tag=tag,
            ) from exc
    return posts


class HatchwaysPostProvider(IPostProvider):
    """Fetches tagged posts from the Hatchways assessment API.

    The ``httpx.AsyncClient`` is injected for testability and shared with
    the rest of the application; this class never closes it.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cache: IPostCache,
        settings: Settings,
    ) -> None:
        self._http = http_client
        self._cache = cache
        self._url = settings.posts_url
        self._logger = get_logger(__name__)

    async def fetch(self, tag: str) -> list[BlogPost]:
        """Fetch, unwrap and decode the posts for *tag*, then cache them."""
        try:
            response = await self._http.get(self._url, params={"tag": tag})
        except httpx.RequestError as exc:
            self._logger.warning("posts_request_failed", tag=tag, url=self._url, error=str(exc))
            raise RemoteUnavailableError(
                message=f"Request for tag '{tag}' failed: {exc!r}",
                provider_name=_PROVIDER_NAME,
                tag=tag,
            ) from exc

        if response.status_code >= 500:
            self._logger.warning("posts_http_error", tag=tag, status=response.status_code)
            raise RemoteUnavailableError(
                message=f"Provider returned HTTP {response.status_code} for tag '{tag}'",
                provider_name=_PROVIDER_NAME,
                tag=tag,
            )

        raw_posts = strip_envelope(response.content, provider_name=_PROVIDER_NAME, tag=tag)
        posts = decode_posts(raw_posts, provider_name=_PROVIDER_NAME, tag=tag)

        # Only a fully decoded payload may replace what is cached.
        await self._cache.put(tag, posts)

        self._logger.debug("posts_fetched", tag=tag, post_count=len(posts))
        return posts

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    @property
    def url(self) -> str:
        return self._url
