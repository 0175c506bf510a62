"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")
    validity: Optional[StrictInt] = Field(None, description="Lifetime in whole minutes (default 30)")
    shortcode: Optional[str] = Field(None, description="Optional custom short code (3-10 letters/digits); empty means generate one")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity": 30,
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity": 1440,
                    "shortcode": "myrepo",
                },
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    shortlink: str = Field(..., description="The complete short URL")
    shortcode: str = Field(..., description="The short code")
    expiry: datetime = Field(..., description="Expiry timestamp")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shortlink": "http://localhost:8080/abc123",
                    "shortcode": "abc123",
                    "expiry": "2024-01-01T12:30:00Z",
                }
            ]
        }
    }


class ClickResponse(CamelModel):
    """One recorded redirect."""

    timestamp: datetime
    location: Optional[str] = None
    referrer: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None


class URLStatsResponse(CamelModel):
    """Statistics for one short URL."""

    shortcode: str
    short_url: str
    original_url: str
    created_at: datetime
    expiry_date: datetime
    total_clicks: int
    clicks: List[ClickResponse]


class StatsEntry(CamelModel):
    """Summary row for the all-links statistics listing."""

    shortcode: str
    short_url: str
    original_url: str
    created_at: datetime
    expiry_time: datetime
    total_clicks: int
    clicks_count: int
    is_expired: bool


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    timestamp: datetime = Field(..., description="Check timestamp")
    total_urls: int = Field(..., description="Links currently stored")
    uptime: float = Field(..., description="Seconds since the service started")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error kind")
    detail: Optional[str] = Field(None, description="Detailed error information")
