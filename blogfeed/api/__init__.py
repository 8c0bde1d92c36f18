"""blogfeed API layer — routes, schemas, and middleware."""

from blogfeed.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from blogfeed.api.routes import router
from blogfeed.api.schemas import (
    BlogPostResponse,
    ErrorResponse,
    HealthResponse,
    PingResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "BlogPostResponse",
    "ErrorResponse",
    "HealthResponse",
    "PingResponse",
]
