"""Privacy and security headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

PRIVACY_HEADERS = {
    # Never let intermediaries or the browser keep responses that may carry user data
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    # Visitors following a short link must not leak where they came from
    "Referrer-Policy": "no-referrer",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


class PrivacyHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds privacy headers to every response."""

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)
        for name, value in PRIVACY_HEADERS.items():
            response.headers[name] = value
        return response
