"""FastAPI application factory."""

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from .api import api_router
from .web import web_router
from .errors import register_exception_handlers
from .middleware.headers import PrivacyHeadersMiddleware
from .middleware.logging import LoggingMiddleware

SESSION_COOKIE_NAME = "shortener_session"


def create_app(
    store,
    shortening_service,
    resolution_service,
    credential_service,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store: Link store instance
        shortening_service: ShorteningService instance
        resolution_service: ResolutionService instance
        credential_service: CredentialService instance
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="Shorten URLs, redirect visitors and count clicks",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.store = store
    app.state.shortening = shortening_service
    app.state.resolution = resolution_service
    app.state.credentials = credential_service
    app.state.config = config

    register_exception_handlers(app)

    # Last added runs first: logging wraps headers wraps sessions
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie=SESSION_COOKIE_NAME,
        max_age=config.session_max_age_seconds,
        same_site="lax",
        https_only=config.session_https_only,
    )
    app.add_middleware(PrivacyHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)

    # API routes first so /api/* is never treated as a short code
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
