"""FastAPI routes for blogfeed.

Endpoint                 Method  Description
────────────────────────────────────────────────────────────────────
/api/ping                GET     Liveness probe
/api/posts               GET     Merge posts for ?tags=a,b, sorted by
                                 ?sortBy=id|reads|likes|popularity and
                                 ?direction=asc|desc
/api/health              GET     Cache and provider status

Query validation happens here, before the aggregation service is called.
Service dependencies are read from ``app.state`` (populated by the
lifespan in ``main.py``) through ``Depends`` with the ``Annotated`` pattern.
"""

from __future__ import annotations

from typing import Annotated
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from blogfeed.api.schemas import (
    BlogPostResponse,
    ErrorResponse,
    HealthResponse,
    PingResponse,
)
from blogfeed.models.aggregation import AggregationRequest
from blogfeed.models.post import SortDirection, SortField
from blogfeed.services.aggregation_service import PostAggregationService
from blogfeed.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")

FAILED_TAGS_HEADER = "X-Failed-Tags"

_SORT_FIELDS = frozenset(f.value for f in SortField)
_DIRECTIONS = frozenset(d.value for d in SortDirection)


def _get_aggregation_service(request: Request) -> PostAggregationService:
    return request.app.state.aggregation_service


def parse_tags(raw: str | None) -> list[str]:
    """Split a comma-separated ``tags`` parameter, keeping order and duplicates.

    Surrounding whitespace is trimmed and empty items are dropped.
    """
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
    )


@router.get(
    "/ping",
    response_model=PingResponse,
    summary="Liveness probe",
)
async def ping() -> PingResponse:
    return PingResponse(success=True)


@router.get(
    "/posts",
    response_model=list[BlogPostResponse],
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Merged posts for one or more tags",
)
async def get_posts(
    service: Annotated[PostAggregationService, Depends(_get_aggregation_service)],
    tags: Annotated[str | None, Query()] = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    direction: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """Fetch posts for every tag concurrently, merge them and sort the result.

    Tags that fail upstream are left out of the body and listed, each
    percent-encoded, in the ``X-Failed-Tags`` response header.  If every tag
    fails the response is a 502 with the per-tag failures.
    """
    tag_list = parse_tags(tags)
    if not tag_list:
        return _bad_request("Tags parameter is required")

    sort_by = sort_by or SortField.ID.value
    direction = direction or SortDirection.ASC.value
    if sort_by not in _SORT_FIELDS:
        return _bad_request("sortBy parameter is invalid")
    if direction not in _DIRECTIONS:
        return _bad_request("direction parameter is invalid")

    result = await service.aggregate_request(
        AggregationRequest(
            tags=tag_list,
            sort_by=SortField(sort_by),
            direction=SortDirection(direction),
        )
    )

    if not result.succeeded:
        _logger.warning("all_tags_failed", tags=tag_list)
        body = ErrorResponse(
            error="All tag lookups failed",
            failures=result.failures,
        )
        return JSONResponse(status_code=502, content=body.model_dump(mode="json", exclude_none=True))

    headers: dict[str, str] = {}
    if result.failures:
        # Percent-encoded: header values are latin-1 only.
        headers[FAILED_TAGS_HEADER] = ",".join(quote(tag, safe="") for tag in result.failed_tags)

    return JSONResponse(
        status_code=200,
        content=[post.to_wire() for post in result.posts],
        headers=headers,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Report cache size, TTL and the configured provider URL."""
    state = request.app.state
    cache = state.post_cache
    return HealthResponse(
        status="healthy",
        version=getattr(state, "version", "0.1.0"),
        provider_url=state.post_provider.url,
        cache_entries=len(cache),
        cache_ttl_seconds=cache.get_ttl(),
    )
