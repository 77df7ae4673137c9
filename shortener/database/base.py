"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from datetime import datetime

from .models import Link, User


class LinkStoreBase(ABC):
    """Abstract base class for link and user persistence.

    Implementations must enforce code uniqueness and ownership checks with
    atomic statements (insert-or-fail, conditional update), never with a
    separate existence check followed by a write.
    """

    def __init__(self, db_config: str):
        """Initialize database connection.

        Args:
            db_config: Database location (connection string or file path)
        """
        self.db_config = db_config

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[Link]:
        """Get a link by code regardless of its lifecycle state.

        Args:
            code: The short code to lookup

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_active_by_target_and_owner(
        self,
        target: str,
        owner_id: Optional[int],
    ) -> Optional[Link]:
        """Get the active link for a (target, owner) pair.

        Args:
            target: The original URL
            owner_id: Owning user id, or None for the anonymous scope

        Returns:
            The active link if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(
        self,
        code: str,
        target: str,
        owner_id: Optional[int] = None,
        expires_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
    ) -> Link:
        """Insert a new active link.

        Returns:
            The inserted link

        Raises:
            DuplicateCodeError: If the code already exists (active or not)
            ActiveLinkExistsError: If an active link for (target, owner) exists
        """
        pass

    @abstractmethod
    async def increment_clicks(self, code: str) -> bool:
        """Atomically increment the click counter of an active link.

        Returns:
            True if a row was updated, False if the code is absent or inactive
        """
        pass

    @abstractmethod
    async def set_active(self, code: str, active: bool) -> bool:
        """Set the lifecycle flag.

        Deactivation is idempotent and returns True only for the call that
        actually performed the transition. Reactivation is never performed.
        """
        pass

    @abstractmethod
    async def deactivate_for_owner(self, code: str, owner_id: int) -> None:
        """Soft-delete a link that belongs to owner_id.

        Raises:
            LinkNotFoundError: If the code is absent, inactive or owned by someone else
        """
        pass

    @abstractmethod
    async def set_expires_at(
        self,
        code: str,
        expires_at: Optional[datetime],
        owner_id: int,
    ) -> None:
        """Replace the expiration of an active link that belongs to owner_id.

        Raises:
            LinkNotFoundError: If the code is absent, inactive or not owned by owner_id
        """
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> List[Link]:
        """List all links of an owner, most recently created first."""
        pass

    @abstractmethod
    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
    ) -> User:
        """Create a user.

        Raises:
            UserExistsError: If the username or email is taken
        """
        pass

    @abstractmethod
    async def find_user_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get database statistics.

        Returns:
            Dictionary with total_links, active_links, total_clicks, total_users
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if database is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
