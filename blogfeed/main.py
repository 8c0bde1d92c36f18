"""blogfeed FastAPI application entry point.

Wires the shared httpx client, the process-wide post cache, the upstream
provider and the aggregation service together, stores them on
``app.state`` for the routes, and configures structured logging.

Run with ``python -m blogfeed.main`` or ``uvicorn blogfeed.main:app``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from blogfeed import __version__
from blogfeed.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from blogfeed.api.routes import router as api_router
from blogfeed.config import load_config, settings
from blogfeed.config.settings import Settings
from blogfeed.providers.cache.memory_cache import MemoryPostCache
from blogfeed.providers.posts.hatchways_provider import HatchwaysPostProvider
from blogfeed.services.aggregation_service import PostAggregationService
from blogfeed.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Dependency assembly
# ---------------------------------------------------------------------------


def _build_all(
    app_settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = http_client or httpx.AsyncClient(timeout=app_settings.http_timeout_seconds)

    # One cache per process, shared by every request.
    post_cache = MemoryPostCache(ttl=app_settings.cache_ttl_seconds)
    post_provider = HatchwaysPostProvider(
        http_client=http_client,
        cache=post_cache,
        settings=app_settings,
    )
    aggregation_service = PostAggregationService.from_settings(
        cache=post_cache,
        provider=post_provider,
        settings=app_settings,
    )

    return {
        "http_client": http_client,
        "post_cache": post_cache,
        "post_provider": post_provider,
        "aggregation_service": aggregation_service,
        "version": config.get("app", {}).get("version", __version__),
    }


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to build components from; the module-level ``settings``
        when omitted.
    http_client:
        Optional pre-built client (tests inject a mock transport).  When
        given, the caller owns it and it is not closed on shutdown.
    """
    s = app_settings or settings

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        components = _build_all(s, http_client=http_client)
        for key, value in components.items():
            setattr(application.state, key, value)

        _logger.info(
            "app_startup",
            version=components["version"],
            environment=s.app_env,
            provider_url=components["post_provider"].url,
            cache_ttl=s.cache_ttl_seconds,
        )

        yield

        if http_client is None:
            await components["http_client"].aclose()
        _logger.info("app_shutdown", message="HTTP client closed")

    application = FastAPI(
        title="blogfeed API",
        version=__version__,
        description=(
            "Fetch blog posts for several tags at once, merge them and "
            "return them sorted by id, reads, likes or popularity."
        ),
        lifespan=_lifespan,
    )

    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=s.cors_allowed_origins)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "blogfeed.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
