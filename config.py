"""Configuration management for URL shortener."""

import secrets
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Database settings
    database_path: str = Field(
        default="urls.db",
        description="Path of the SQLite database file"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3000,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes. 1 = single process (async handles many connections); >1 = multi-process."
    )

    # URL shortener settings
    base_url: str = Field(
        default="",
        description="Base URL for generated short URLs; derived from the request when empty"
    )

    short_code_length: int = Field(
        default=7,
        ge=4,
        le=32,
        description="Length of generated short codes"
    )

    max_allocation_attempts: int = Field(
        default=10,
        ge=1,
        description="Maximum insert attempts when a generated code collides"
    )

    # Session / credential settings
    session_secret: str = Field(
        default_factory=lambda: secrets.token_hex(32),
        description="Secret used to sign session cookies (random per process if unset)"
    )

    session_max_age_seconds: int = Field(
        default=7 * 24 * 3600,
        description="Lifetime of a login session"
    )

    session_https_only: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS"
    )

    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt cost factor for password hashing"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    def safe_dump(self) -> dict:
        """Configuration without secrets, for logging."""
        return self.model_dump(exclude={"session_secret"})


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
