"""Shortening service: allocates codes and manages owned links."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .database.base import LinkStoreBase
from .database.models import Link
from .exceptions import (
    ActiveLinkExistsError,
    AllocationExhaustedError,
    DuplicateCodeError,
    InvalidInputError,
    LinkNotFoundError,
)
from .lifecycle import compute_expires_at, is_expired, utc_now, validate_expiry_option
from .shortcode import ShortCodeGenerator
from .common.validators import is_valid_url

DEFAULT_MAX_ATTEMPTS = 10


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a shorten request."""

    code: str
    target: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    reused: bool = False

    @classmethod
    def from_link(cls, link: Link, reused: bool = False) -> "ShortenResult":
        return cls(
            code=link.code,
            target=link.target,
            created_at=link.created_at,
            expires_at=link.expires_at,
            reused=reused,
        )


class ShorteningService:
    """Service layer for shortening URLs and managing owned links."""

    def __init__(
        self,
        store: LinkStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize shortening service.

        Args:
            store: Link store instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_attempts: Maximum insert attempts before giving up on allocation
            clock: Callable returning the current aware UTC time
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_attempts = max_attempts
        self.clock = clock or utc_now

    async def shorten(
        self,
        target: str,
        owner_id: Optional[int] = None,
        expires_in: Optional[str] = None,
    ) -> ShortenResult:
        """Create (or reuse) a short link for ``target``.

        Args:
            target: Absolute http/https URL
            owner_id: Owning user, or None for an anonymous link
            expires_in: Expiry option; only applied to owned links

        Returns:
            ShortenResult with the code to share

        Raises:
            InvalidInputError: If the URL or expiry option is malformed
            AllocationExhaustedError: If no free code was found within max_attempts
        """
        # Validate URL
        is_valid, error = is_valid_url(target)
        if not is_valid:
            raise InvalidInputError(f"Invalid URL: {error}")
        validate_expiry_option(expires_in)

        now = self.clock()

        # Return the active link for (target, owner) if there is one
        existing = await self._find_reusable(target, owner_id, now)
        if existing:
            self.logger.debug(f"Reusing short code {existing.code} for owner {owner_id}")
            return ShortenResult.from_link(existing, reused=True)

        # Anonymous links never expire
        expires_at = compute_expires_at(expires_in, now) if owner_id is not None else None

        # Generate a code and insert, retrying on collisions
        for attempt in range(1, self.max_attempts + 1):
            code = self.generator.generate()
            try:
                link = await self.store.insert(
                    code,
                    target,
                    owner_id=owner_id,
                    expires_at=expires_at,
                    created_at=now,
                )
            except DuplicateCodeError:
                self.logger.warning(f"Short code collision on attempt {attempt}/{self.max_attempts}")
                continue
            except ActiveLinkExistsError:
                # A concurrent request for the same (target, owner) won the race
                winner = await self._find_reusable(target, owner_id, now)
                if winner:
                    return ShortenResult.from_link(winner, reused=True)
                continue

            self.logger.info(f"Created short code {code} for owner {owner_id} (attempt {attempt})")
            self.logger.debug(f"Short code {code} -> {target}")
            return ShortenResult.from_link(link)

        self.logger.error(
            f"Unable to allocate a short code after {self.max_attempts} attempts; "
            "code space may be saturated or the generator degenerate"
        )
        raise AllocationExhaustedError("Unable to allocate a short code")

    async def _find_reusable(
        self,
        target: str,
        owner_id: Optional[int],
        now: datetime,
    ) -> Optional[Link]:
        """Find an active, unexpired link for (target, owner).

        An active link found past its expiry is flipped inactive here, the
        same lazy transition a resolution would apply.
        """
        link = await self.store.find_active_by_target_and_owner(target, owner_id)
        if link is None:
            return None
        if is_expired(link, now):
            if await self.store.set_active(link.code, False):
                self.logger.info(f"Link {link.code} expired (found while shortening)")
            return None
        return link

    async def get_stats(self, code: str) -> Link:
        """Get a link for statistics display, whatever its lifecycle state.

        Raises:
            LinkNotFoundError: If the code was never issued
        """
        link = await self.store.find_by_code(code)
        if link is None:
            raise LinkNotFoundError(f"Short code '{code}' not found")
        return link

    async def list_links(self, owner_id: int) -> List[Link]:
        """List an owner's links, newest first."""
        return await self.store.list_by_owner(owner_id)

    async def delete_link(self, code: str, owner_id: int) -> None:
        """Soft-delete an owned link.

        Raises:
            LinkNotFoundError: If absent, already inactive or owned by someone else
        """
        await self.store.deactivate_for_owner(code, owner_id)
        self.logger.info(f"Owner {owner_id} deleted link {code}")

    async def update_expiry(
        self,
        code: str,
        owner_id: int,
        expires_in: Optional[str],
    ) -> Optional[datetime]:
        """Recompute the expiration of an owned link from an expiry option.

        ``never`` or None clears the expiration.

        Returns:
            The new expiration timestamp, or None

        Raises:
            InvalidInputError: If the option is not recognised
            LinkNotFoundError: If absent, inactive or owned by someone else
        """
        expires_at = compute_expires_at(expires_in, self.clock())
        await self.store.set_expires_at(code, expires_at, owner_id)
        self.logger.info(f"Owner {owner_id} set expiry of {code} to {expires_at}")
        return expires_at

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        db_stats = await self.store.get_statistics()
        return {
            **db_stats,
            "code_length": self.generator.default_length,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.store.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
