"""Utility modules for blogfeed.

- **errors** -- Domain exception hierarchy rooted at BlogFeedError; every
  per-tag fetch failure carries a FailureKind.
- **concurrency** -- Fan-out/join helper with an optional overall deadline,
  plus semaphore bounding for outbound requests.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from blogfeed.utils.concurrency import bounded, gather_with_deadline
from blogfeed.utils.errors import (
    BlogFeedError,
    ConfigurationError,
    FetchTimeoutError,
    InvalidSortError,
    MalformedResponseError,
    PostDecodeError,
    PostFetchError,
    RemoteUnavailableError,
)
from blogfeed.utils.logging import configure_logging, get_logger

__all__ = [
    "BlogFeedError",
    "ConfigurationError",
    "FetchTimeoutError",
    "InvalidSortError",
    "MalformedResponseError",
    "PostDecodeError",
    "PostFetchError",
    "RemoteUnavailableError",
    "bounded",
    "configure_logging",
    "gather_with_deadline",
    "get_logger",
]
