"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten; https:// is assumed without a scheme", min_length=1, max_length=2048)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "example.com"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    short_code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The normalized original URL")
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "aZ3kq1",
                    "short_url": "https://short.link/aZ3kq1",
                    "original_url": "https://example.com",
                    "created_at": "2024-01-01T12:00:00Z"
                }
            ]
        }
    }


class LinkResponse(BaseModel):
    """A link with its visit count."""

    short_code: str
    short_url: str
    original_url: str
    created_at: datetime
    visits: int


class LinkListResponse(BaseModel):
    """A ranked or per-owner list of links."""

    count: int = Field(..., description="Number of links returned")
    links: List[LinkResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Link store status")
    autosave: str = Field(..., description="Background saving status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_links: int
    total_visits: int
    unique_owners: int
    autosave_enabled: bool
