"""Pydantic schemas for API requests and responses.

JSON field names are camelCase; Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The absolute http(s) URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional custom short code")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "customCode": "myrepo"},
            ]
        },
    )


class BatchShortenRequest(CamelModel):
    """Request to shorten several URLs at once."""

    urls: List[str] = Field(..., description="URLs to shorten; blank entries are ignored")


class ShortenResponse(CamelModel):
    """Response after shortening a URL."""

    code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp")


class BatchShortenResponse(CamelModel):
    """Response after shortening several URLs."""

    links: List[ShortenResponse]


class ClickResponse(CamelModel):
    """One recorded click."""

    timestamp: datetime
    source: str
    location: str


class ClickStatsResponse(CamelModel):
    """Click statistics for one short code."""

    code: str
    original_url: str
    created_at: datetime
    total_clicks: int
    clicks: List[ClickResponse]


class URLInfoResponse(CamelModel):
    """Response with URL information."""

    code: str
    short_url: str
    original_url: str
    created_at: datetime
    click_count: int


class URLListResponse(CamelModel):
    """Recently created links."""

    count: int
    links: List[ShortenResponse]


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[Dict[str, Any]] = Field(None, description="Detailed error information")


class StatisticsResponse(CamelModel):
    """Service-wide statistics."""

    total_urls: int
    total_clicks: int
    database: str
    cache_enabled: bool
    custom_codes_enabled: bool
