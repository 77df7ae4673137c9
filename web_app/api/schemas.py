"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten a URL.

    ``url`` and ``expires_in`` are validated by the shortening service so
    malformed values come back as 400 with a descriptive message.
    """

    url: str = Field(..., description="Absolute http:// or https:// URL to shorten")
    expires_in: Optional[str] = Field(
        None,
        description="Expiration for owned links: 1h, 24h, 7d, 30d or never. Ignored for anonymous links.",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "expires_in": "7d"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    target: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    expires_at: Optional[datetime] = Field(None, description="Expiration timestamp, if any")
    reused: bool = Field(False, description="True when an existing active link was returned")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "aB3_x9Q",
                    "short_url": "https://short.link/aB3_x9Q",
                    "target": "https://example.com/very/long/path",
                    "created_at": "2024-01-01T12:00:00Z",
                    "expires_at": None,
                    "reused": False,
                }
            ]
        }
    }


class StatsResponse(BaseModel):
    """Public statistics of one short link."""

    code: str
    target: str
    clicks: int
    created_at: datetime


class LinkResponse(BaseModel):
    """One of the caller's links."""

    code: str
    short_url: str
    target: str
    clicks: int
    created_at: datetime
    expires_at: Optional[datetime] = None
    active: bool


class UpdateExpiryRequest(BaseModel):
    """New expiration for an owned link; ``never`` or null clears it."""

    expires_in: Optional[str] = Field(None, description="1h, 24h, 7d, 30d or never")


class UpdateExpiryResponse(BaseModel):
    code: str
    expires_at: Optional[datetime] = None


class RegisterRequest(BaseModel):
    username: str = Field(..., description="3-32 characters of letters, numbers, '.', '_' or '-'")
    email: str
    password: str = Field(..., description="At least 8 characters")


class LoginRequest(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Machine-readable error code")
    detail: Optional[str] = Field(None, description="Human-readable error message")


class StatisticsResponse(BaseModel):
    """Service-wide statistics."""

    total_links: int
    active_links: int
    total_clicks: int
    total_users: int
    database: str
    code_length: int
