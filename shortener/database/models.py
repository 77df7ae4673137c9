"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Link:
    """Represents a short link row in the database."""

    code: str
    target: str
    created_at: datetime
    owner_id: Optional[int] = None
    expires_at: Optional[datetime] = None
    clicks: int = 0
    active: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "target": self.target,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "clicks": self.clicks,
            "active": self.active,
        }


@dataclass(frozen=True)
class User:
    """Represents a registered user."""

    id: int
    username: str
    email: str
    password_hash: str
    created_at: datetime
