"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = {"populate_by_name": True}


class ShortenRequest(CamelModel):
    """Request to shorten a URL.

    Fields accept any JSON value. The registry checks types and contents
    itself, so every failing field is reported together.
    """

    original_url: Optional[Any] = Field(None, alias="originalUrl", description="The URL to shorten")
    validity_period: Optional[Any] = Field(None, alias="validityPeriod", description="Validity in minutes (default 30)")
    custom_shortcode: Optional[Any] = Field(None, alias="customShortcode", description="Optional custom short code")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "originalUrl": "https://example.com/very/long/path/to/resource",
                    "validityPeriod": 30,
                },
                {
                    "originalUrl": "https://github.com/user/repo",
                    "validityPeriod": 120,
                    "customShortcode": "myrepo",
                },
            ]
        },
    }


class ShortenResponse(CamelModel):
    """Response after shortening a URL."""

    success: bool = True
    shortcode: str = Field(..., description="The issued short code")
    short_url: str = Field(..., alias="shortUrl", description="The complete short URL")
    expiry_date: datetime = Field(..., alias="expiryDate", description="When the link stops resolving")


class ClickResponse(BaseModel):
    """A recorded click."""

    timestamp: datetime
    source: str


class LinkResponse(CamelModel):
    """Full information about one link."""

    id: str
    original_url: str = Field(..., alias="originalUrl")
    shortcode: str
    short_url: str = Field(..., alias="shortUrl")
    created_at: datetime = Field(..., alias="createdAt")
    expiry_date: datetime = Field(..., alias="expiryDate")
    expired: bool
    clicks: int
    click_details: List[ClickResponse] = Field(default_factory=list, alias="clickDetails")


class LinkListResponse(BaseModel):
    """All links in creation order."""

    count: int
    urls: List[LinkResponse]


class StatisticsResponse(CamelModel):
    """Registry-wide statistics."""

    total_links: int = Field(..., alias="totalLinks")
    total_clicks: int = Field(..., alias="totalClicks")
    active_links: int = Field(..., alias="activeLinks")


class LogEventRequest(CamelModel):
    """Event record accepted by the log sink."""

    event_type: str = Field(..., alias="eventType", description="Free-form event name")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event payload")
    timestamp: Optional[str] = Field(None, description="ISO-8601 timestamp (defaults to now)")


class LogEventResponse(BaseModel):
    """Log sink acknowledgment."""

    success: bool = True
    message: str = "Event logged successfully"


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    total_links: int = Field(..., alias="totalLinks")
    timestamp: datetime = Field(..., description="Check timestamp")


class ValidationErrorDetail(BaseModel):
    """Field-keyed validation errors."""

    errors: Dict[str, str] = Field(..., description="Message per failing field, e.g. originalUrl")


class ValidationErrorResponse(BaseModel):
    """Body returned when a creation request is rejected."""

    detail: ValidationErrorDetail


class ErrorResponse(BaseModel):
    """Error response."""

    detail: Any = Field(..., description="Error information")
