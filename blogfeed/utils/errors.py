"""Custom exception hierarchy for blogfeed.

All application exceptions inherit from :class:`BlogFeedError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream service (e.g. "hatchways") caused the failure.

The hierarchy is organized by where the failure happens:

    BlogFeedError  (base -- catch-all for any blogfeed error)
    +-- PostFetchError            (one tag's lookup failed)
    |   +-- RemoteUnavailableError  (transport could not complete)
    |   +-- MalformedResponseError  (envelope unparseable or missing "posts")
    |   +-- PostDecodeError         (one post inside the envelope is invalid)
    |   +-- FetchTimeoutError       (per-tag deadline exceeded)
    +-- InvalidSortError          (sorter called with an unknown field/direction)
    +-- ConfigurationError        (startup / invalid config)

Every :class:`PostFetchError` exposes a :class:`FailureKind` so the
aggregation service can record the failure against its tag without
inspecting exception types.
"""

from __future__ import annotations

from blogfeed.models.aggregation import FailureKind


class BlogFeedError(Exception):
    """Base exception for all blogfeed errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream service triggered the
    error.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[hatchways] connection refused``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Per-tag fetch errors
# ---------------------------------------------------------------------------


class PostFetchError(BlogFeedError):
    """Base for failures scoped to a single tag lookup."""

    kind: FailureKind = FailureKind.REMOTE_UNAVAILABLE

    def __init__(
        self,
        message: str = "Post lookup failed",
        provider_name: str | None = None,
        tag: str | None = None,
    ) -> None:
        self._tag = tag
        super().__init__(message=message, provider_name=provider_name)

    @property
    def tag(self) -> str | None:
        return self._tag


class RemoteUnavailableError(PostFetchError):
    """Raised when the provider cannot be reached (refused, DNS, timeout, 5xx)."""

    kind = FailureKind.REMOTE_UNAVAILABLE

    def __init__(
        self,
        message: str = "Post provider is unavailable",
        provider_name: str | None = None,
        tag: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, tag=tag)


class MalformedResponseError(PostFetchError):
    """Raised when the response envelope is not JSON or lacks the ``posts`` array."""

    kind = FailureKind.MALFORMED_RESPONSE

    def __init__(
        self,
        message: str = "Malformed provider response",
        provider_name: str | None = None,
        tag: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, tag=tag)


class PostDecodeError(PostFetchError):
    """Raised when an individual post does not match the expected shape."""

    kind = FailureKind.DECODE_ERROR

    def __init__(
        self,
        message: str = "Post could not be decoded",
        provider_name: str | None = None,
        tag: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, tag=tag)


class FetchTimeoutError(PostFetchError):
    """Raised when a tag's lookup exceeds its per-fetch or overall deadline."""

    kind = FailureKind.TIMEOUT

    def __init__(
        self,
        message: str = "Post lookup timed out",
        provider_name: str | None = None,
        tag: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, tag=tag)


# ---------------------------------------------------------------------------
# Programming / configuration errors
# ---------------------------------------------------------------------------


class InvalidSortError(BlogFeedError):
    """Raised when the sorter receives a field or direction it does not know."""

    def __init__(
        self,
        message: str = "Invalid sort field or direction",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(BlogFeedError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
