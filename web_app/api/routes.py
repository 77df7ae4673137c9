"""API routes implementation."""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    StatsResponse,
    LinkResponse,
    UpdateExpiryRequest,
    UpdateExpiryResponse,
    RegisterRequest,
    LoginRequest,
    UserResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from ..auth import current_owner, require_owner, start_session, end_session
from shortener.common.url_builder import build_short_url
from shortener.common.headers import build_base_url
from shortener.database.models import User
from shortener.exceptions import AuthenticationRequiredError

router = APIRouter()


def _short_url(request: Request, code: str) -> str:
    """Build the public short URL for a code as seen by this request."""
    config = request.app.state.config
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return build_short_url(short_code=code, base_url=base_url)


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL or expiration option"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a short URL. Repeating a request for an active link returns the same code.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.shortening

    result = await service.shorten(
        target=body.url,
        owner_id=current_owner(request),
        expires_in=body.expires_in,
    )

    return ShortenResponse(
        code=result.code,
        short_url=_short_url(request, result.code),
        target=result.target,
        created_at=result.created_at,
        expires_at=result.expires_at,
        reused=result.reused,
    )


@router.get(
    "/stats/{code}",
    response_model=StatsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get link statistics",
    description="Public click statistics of a short link.",
)
async def get_stats(request: Request, code: str):
    """Get statistics for a short code."""
    link = await request.app.state.shortening.get_stats(code)
    return StatsResponse(
        code=link.code,
        target=link.target,
        clicks=link.clicks,
        created_at=link.created_at,
    )


@router.get(
    "/links",
    response_model=List[LinkResponse],
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
    summary="List my links",
    description="All links of the authenticated user, newest first.",
)
async def list_links(request: Request, owner_id: int = Depends(require_owner)):
    """List the caller's links."""
    links = await request.app.state.shortening.list_links(owner_id)
    return [
        LinkResponse(
            code=link.code,
            short_url=_short_url(request, link.code),
            target=link.target,
            clicks=link.clicks,
            created_at=link.created_at,
            expires_at=link.expires_at,
            active=link.active,
        )
        for link in links
    ]


@router.delete(
    "/links/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"model": ErrorResponse, "description": "Authentication required"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Delete a link",
    description="Soft-delete one of the caller's links. Statistics are kept.",
)
async def delete_link(request: Request, code: str, owner_id: int = Depends(require_owner)):
    """Soft-delete a link owned by the caller."""
    await request.app.state.shortening.delete_link(code, owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/links/{code}",
    response_model=UpdateExpiryResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid expiration option"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Update link expiration",
)
async def update_link_expiry(
    request: Request,
    code: str,
    body: UpdateExpiryRequest,
    owner_id: int = Depends(require_owner),
):
    """Recompute the expiration of a link owned by the caller."""
    expires_at = await request.app.state.shortening.update_expiry(code, owner_id, body.expires_in)
    return UpdateExpiryResponse(code=code, expires_at=expires_at)


@router.post(
    "/auth/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid registration data"},
        409: {"model": ErrorResponse, "description": "Username or email taken"},
    },
    summary="Register",
)
async def register(request: Request, body: RegisterRequest):
    """Create an account and log the caller in."""
    user = await request.app.state.credentials.register(body.username, body.email, body.password)
    start_session(request, user)
    return _user_response(user)


@router.post(
    "/auth/login",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in",
)
async def login(request: Request, body: LoginRequest):
    """Authenticate and start a session."""
    user = await request.app.state.credentials.authenticate(body.username, body.password)
    start_session(request, user)
    return _user_response(user)


@router.post(
    "/auth/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Log out",
)
async def logout(request: Request):
    end_session(request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/auth/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
    summary="Current user",
)
async def me(request: Request, owner_id: int = Depends(require_owner)):
    user = await request.app.state.credentials.get_user(owner_id)
    if user is None:
        # Session for a user that no longer resolves
        end_session(request)
        raise AuthenticationRequiredError("Authentication required")
    return _user_response(user)


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    stats = await request.app.state.shortening.get_statistics()
    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    health = await request.app.state.shortening.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
