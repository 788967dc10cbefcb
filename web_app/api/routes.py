"""Management API routes."""

from fastapi import APIRouter, Request, Query, Response, status
from datetime import datetime, timezone

from .schemas import (
    BatchShortenRequest,
    BatchShortenResponse,
    ShortenResponse,
    URLInfoResponse,
    URLListResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from ..request_context import short_url_for

router = APIRouter()


def _link_response(request: Request, link) -> ShortenResponse:
    return ShortenResponse(
        code=link.code,
        short_url=short_url_for(request, link.code),
        original_url=link.original_url,
        created_at=link.created_at,
    )


@router.post(
    "/shorten/batch",
    response_model=BatchShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or too many URLs"},
        503: {"model": ErrorResponse, "description": "No free short code available"},
    },
    summary="Create several short URLs",
    description="Shorten up to the configured number of URLs in one request. "
                "Nothing is stored if any URL is invalid.",
)
async def shorten_batch(request: Request, body: BatchShortenRequest):
    """Create several shortened URLs."""
    links = await request.app.state.service.create_short_urls(body.urls)
    return BatchShortenResponse(links=[_link_response(request, link) for link in links])


@router.get(
    "/urls",
    response_model=URLListResponse,
    summary="List recent URLs",
)
async def list_urls(request: Request, limit: int = Query(100, ge=1, le=1000)):
    """List recently created short URLs, newest first."""
    links = await request.app.state.service.list_recent_urls(limit)
    return URLListResponse(
        count=len(links),
        links=[_link_response(request, link) for link in links],
    )


@router.get(
    "/urls/{code}",
    response_model=URLInfoResponse,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Get URL information",
)
async def get_url_info(request: Request, code: str):
    """Get information about a shortened URL including its click count."""
    info = await request.app.state.service.get_url_info(code)
    return URLInfoResponse(short_url=short_url_for(request, code), **info)


@router.delete(
    "/urls/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Delete a short URL",
    description="Delete a short URL. Its code is retired and not reissued within the retention window.",
)
async def delete_url(request: Request, code: str):
    """Delete a shortened URL."""
    await request.app.state.service.delete_short_url(code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    stats = await request.app.state.service.get_statistics()
    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its dependencies are healthy.",
)
async def health_check(request: Request):
    """Detailed health check for monitoring."""
    health = await request.app.state.service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
