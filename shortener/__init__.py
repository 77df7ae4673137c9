"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import ShorteningService, ShortenResult
from .resolver import ResolutionService
from .accounts import CredentialService
from .lifecycle import Outcome, Resolution

__all__ = [
    "ShortCodeGenerator",
    "ShorteningService",
    "ShortenResult",
    "ResolutionService",
    "CredentialService",
    "Outcome",
    "Resolution",
]
