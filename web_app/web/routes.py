"""Public routes: shorten, redirect and per-code stats."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from shortlink.errors import NotFoundError
from ..api.schemas import (
    ShortenRequest,
    ShortenResponse,
    ClickResponse,
    ClickStatsResponse,
    ErrorResponse,
)
from ..request_context import short_url_for, click_labels

router = APIRouter()


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or custom code"},
        409: {"model": ErrorResponse, "description": "Custom code already exists"},
        503: {"model": ErrorResponse, "description": "No free short code available"},
    },
    summary="Create short URL",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL. Optionally provide a custom short code."""
    service = request.app.state.service

    link = await service.create_short_url(
        original_url=body.url,
        custom_code=body.custom_code,
    )

    return ShortenResponse(
        code=link.code,
        short_url=short_url_for(request, link.code),
        original_url=link.original_url,
        created_at=link.created_at,
    )


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    health = await request.app.state.service.health_check()

    if not health["overall"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Service unhealthy", "detail": health},
        )
    return {"status": "healthy"}


@router.get(
    "/stats/{code}",
    response_model=ClickStatsResponse,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Click statistics for a short code",
)
async def click_stats(request: Request, code: str):
    """Total clicks plus the most recent click events, newest first."""
    stats = await request.app.state.service.get_click_stats(code)

    return ClickStatsResponse(
        code=stats["code"],
        original_url=stats["original_url"],
        created_at=stats["created_at"],
        total_clicks=stats["total_clicks"],
        clicks=[
            ClickResponse(
                timestamp=click.timestamp,
                source=click.source_label,
                location=click.location_label,
            )
            for click in stats["clicks"]
        ],
    )


@router.get(
    "/{code}",
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Redirect to the original URL",
)
async def redirect_to_url(request: Request, code: str):
    """Redirect to the original URL and record the click."""
    source, location = click_labels(request)

    resolution = await request.app.state.service.resolve(
        code,
        source_label=source,
        location_label=location,
    )

    if not resolution.found:
        raise NotFoundError(f"Short code '{code}' not found")

    return RedirectResponse(url=resolution.original_url, status_code=status.HTTP_302_FOUND)
