"""Link lifecycle policy.

Pure decision logic: nothing in this module touches the database. Expiration
is lazy. A link whose ``expires_at`` has passed stays ``active`` in storage
until a resolution discovers it, at which point the caller persists the flip.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .database.models import Link
from .exceptions import InvalidInputError

NEVER = "never"

EXPIRY_OPTIONS = {
    "1h": timedelta(hours=1),
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    NEVER: None,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Outcome(str, enum.Enum):
    REDIRECT = "redirect"
    GONE = "gone"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Resolution:
    """Result of resolving a short code."""

    outcome: Outcome
    target: Optional[str] = None

    @classmethod
    def redirect(cls, target: str) -> "Resolution":
        return cls(Outcome.REDIRECT, target)

    @classmethod
    def gone(cls) -> "Resolution":
        return cls(Outcome.GONE)

    @classmethod
    def not_found(cls) -> "Resolution":
        return cls(Outcome.NOT_FOUND)


def is_expired(link: Link, now: datetime) -> bool:
    """True iff the link has an expiration and ``now`` is strictly past it."""
    return link.expires_at is not None and now > link.expires_at


def resolve_outcome(link: Optional[Link], now: datetime) -> Resolution:
    """Decide what a visitor of ``link`` should get.

    Absent and inactive links are NOT_FOUND before any expiry check, so a link
    that has already been flipped inactive can never report GONE again.
    """
    if link is None or not link.active:
        return Resolution.not_found()
    if is_expired(link, now):
        return Resolution.gone()
    return Resolution.redirect(link.target)


def validate_expiry_option(expires_in: Optional[str]) -> None:
    if expires_in is not None and expires_in not in EXPIRY_OPTIONS:
        allowed = ", ".join(EXPIRY_OPTIONS)
        raise InvalidInputError(f"Invalid expiration option '{expires_in}' (allowed: {allowed})")


def compute_expires_at(expires_in: Optional[str], now: datetime) -> Optional[datetime]:
    """Translate an enumerated expiry option into an absolute timestamp.

    Args:
        expires_in: One of EXPIRY_OPTIONS, or None
        now: Reference time

    Returns:
        The expiration time, or None for ``never`` / no option

    Raises:
        InvalidInputError: If the option is not recognised
    """
    validate_expiry_option(expires_in)
    if expires_in is None:
        return None
    delta = EXPIRY_OPTIONS[expires_in]
    return now + delta if delta is not None else None
