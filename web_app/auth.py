"""Caller identity for the web layer.

The session cookie is signed by Starlette's SessionMiddleware; this module
only reads and writes the user id stored in it.
"""

from typing import Optional

from fastapi import Request

from shortener.database.models import User
from shortener.exceptions import AuthenticationRequiredError

SESSION_USER_KEY = "user_id"


def current_owner(request: Request) -> Optional[int]:
    """Return the authenticated user id for this request, or None."""
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None
    try:
        return int(user_id)
    except (TypeError, ValueError):
        return None


def require_owner(request: Request) -> int:
    """FastAPI dependency: the caller's user id, or 401."""
    owner_id = current_owner(request)
    if owner_id is None:
        raise AuthenticationRequiredError("Authentication required")
    return owner_id


def start_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id


def end_session(request: Request) -> None:
    request.session.clear()
