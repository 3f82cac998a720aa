"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import datetime as dt
from datetime import date, datetime

from shortlink.database.models import UrlMapping


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A short link and its current click count."""

    short_code: str = Field(..., description="The allocated short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    owner_id: str = Field(..., description="Owner identity recorded at creation")
    click_count: int = Field(..., ge=0, description="Resolutions recorded so far")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    @classmethod
    def from_mapping(cls, mapping: UrlMapping, short_url: str) -> "LinkResponse":
        return cls(
            short_code=mapping.short_code,
            short_url=short_url,
            original_url=mapping.original_url,
            owner_id=mapping.owner_id,
            click_count=mapping.click_count,
            created_at=mapping.created_at,
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "aB3dE5gH",
                    "short_url": "https://sho.rt/aB3dE5gH",
                    "original_url": "https://example.com/very/long/path",
                    "owner_id": "user-42",
                    "click_count": 0,
                    "created_at": "2024-12-15T12:00:00Z"
                }
            ]
        }
    }


class LinkListResponse(BaseModel):
    """Links owned by the caller, newest first."""

    owner_id: str
    links: List[LinkResponse]


class DailyCountResponse(BaseModel):
    date: dt.date
    count: int


class PerUrlAnalyticsResponse(BaseModel):
    """Daily clicks for one link."""

    short_code: str
    start_date: date
    end_date: date
    zero_filled: bool
    buckets: List[DailyCountResponse]


class OwnerTotalsResponse(BaseModel):
    """Daily clicks summed over every link of an owner."""

    owner_id: str
    start_date: date
    end_date: date
    totals: Dict[date, int]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: Optional[str] = Field(None, description="Error message")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_urls: int
    total_clicks: int
    database: str
    cache_enabled: bool
