"""Request and result models for one multi-tag aggregation.

Both models are ephemeral: an ``AggregationRequest`` is built by the HTTP
or CLI boundary, consumed by a single call to the aggregation service, and
the resulting ``AggregationResult`` is discarded once the response is sent.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from blogfeed.models.post import BlogPost, SortDirection, SortField


class FailureKind(str, Enum):  # noqa: UP042
    """Why a single tag could not contribute posts to the merged result."""

    REMOTE_UNAVAILABLE = "REMOTE_UNAVAILABLE"   # transport failure reaching the provider
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"   # envelope unparseable or missing "posts"
    DECODE_ERROR = "DECODE_ERROR"               # a post inside the envelope was invalid
    TIMEOUT = "TIMEOUT"                         # per-fetch or overall deadline exceeded


class AggregationRequest(BaseModel):
    """Tags to aggregate plus the requested ordering.

    Duplicate tags are kept: each occurrence is resolved independently.
    """

    model_config = ConfigDict(frozen=True)

    tags: list[str] = Field(default_factory=list)
    sort_by: SortField = SortField.ID
    direction: SortDirection = SortDirection.ASC


class TagFailure(BaseModel):
    """A tag that failed to resolve, with the failure kind and reason."""

    model_config = ConfigDict(frozen=True)

    tag: str
    kind: FailureKind
    reason: str = ""


class AggregationResult(BaseModel):
    """Merged, sorted posts and the tags that failed along the way."""

    model_config = ConfigDict(frozen=True)

    posts: list[BlogPost] = Field(default_factory=list)
    failures: list[TagFailure] = Field(default_factory=list)
    requested_tags: int = 0

    @property
    def failed_tags(self) -> list[str]:
        return [failure.tag for failure in self.failures]

    @property
    def is_partial(self) -> bool:
        return bool(self.failures) and len(self.failures) < self.requested_tags

    @property
    def succeeded(self) -> bool:
        """True unless every requested tag failed."""
        return self.requested_tags == 0 or len(self.failures) < self.requested_tags
