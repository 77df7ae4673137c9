"""Middleware for URL shortener web app."""

from .headers import PrivacyHeadersMiddleware
from .logging import LoggingMiddleware

__all__ = ["PrivacyHeadersMiddleware", "LoggingMiddleware"]
