"""Pydantic request/response schemas for the blogfeed API.

These models define the public shape of every HTTP response body.  FastAPI
uses them to document the API at ``/docs``; the post list itself is
serialized with the upstream provider's camelCase field names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from blogfeed.models.aggregation import TagFailure


class PingResponse(BaseModel):
    """Liveness probe response."""

    success: bool = True


class BlogPostResponse(BaseModel):
    """One post in the merged, sorted response array."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    author: str
    author_id: int = Field(alias="authorId")
    likes: int
    popularity: float
    reads: int
    tags: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body returned for rejected requests and failed aggregations."""

    error: str
    detail: str | None = None
    failures: list[TagFailure] | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    provider_url: str
    cache_entries: int
    cache_ttl_seconds: float
