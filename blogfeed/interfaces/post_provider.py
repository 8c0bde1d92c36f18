"""Abstract base class for upstream blog-post providers.

A provider performs exactly one remote lookup per call and never consults the
cache itself; deciding whether a cached copy is good enough belongs to the
aggregation service.  On success the provider refreshes the cache so later
callers inside the TTL window skip the round trip.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from blogfeed.models.post import BlogPost


# Concrete implementation: HatchwaysPostProvider (blogfeed/providers/posts/)
class IPostProvider(ABC):
    """Contract for services that return the posts filed under a tag."""

    @abstractmethod
    async def fetch(self, tag: str) -> list[BlogPost]:
        """Fetch and decode the posts for *tag*.

        Raises
        ------
        RemoteUnavailableError
            The transport call could not be completed.
        MalformedResponseError
            The response envelope could not be parsed or lacks ``posts``.
        PostDecodeError
            A post inside the envelope does not match the expected shape.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and error messages."""
