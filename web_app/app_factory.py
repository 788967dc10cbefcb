"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlink.common.logging_config import get_logger
from shortlink.errors import ShortLinkError
from .api import api_router
from .web import web_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware

logger = get_logger("web")


async def shortlink_error_handler(request: Request, exc: ShortLinkError) -> JSONResponse:
    """Turn service errors into JSON responses with their status code."""
    if exc.status_code >= 500:
        logger.error(f"Error in {request.url.path}: {exc.message} {exc.details}")
    else:
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "detail": exc.details or None},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error in {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": None},
    )


def create_app(
    db_instance,
    cache_instance,
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        db_instance: Store instance
        cache_instance: Cache instance (or None)
        service_instance: Service instance
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="shortlink",
        description="URL shortening service with click accounting",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.db = db_instance
    app.state.cache = cache_instance
    app.state.service = service_instance
    app.state.config = config

    app.add_exception_handler(ShortLinkError, shortlink_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: forwarded headers are parsed before logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ForwardedHeadersMiddleware)

    # /api first so /{code} does not shadow it
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Public"])

    return app
