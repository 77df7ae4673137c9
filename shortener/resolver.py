"""Resolution service: turns a short code into a redirect."""

import logging
from datetime import datetime
from typing import Callable, Optional

from .database.base import LinkStoreBase
from .lifecycle import Outcome, Resolution, resolve_outcome, utc_now


class ResolutionService:
    """Resolve short codes, applying lazy expiry and click accounting."""

    def __init__(
        self,
        store: LinkStoreBase,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or utc_now

    async def resolve(self, code: str) -> Resolution:
        """Resolve a short code.

        A GONE result is returned only to the caller whose write flipped the
        link inactive; everyone after that gets NOT_FOUND. A REDIRECT result
        always comes with exactly one click counted.

        Args:
            code: The short code to resolve

        Returns:
            Resolution with outcome REDIRECT (and target), GONE or NOT_FOUND
        """
        link = await self.store.find_by_code(code)
        resolution = resolve_outcome(link, self.clock())

        if resolution.outcome is Outcome.GONE:
            if not await self.store.set_active(code, False):
                # Another resolver already recorded the expiry
                return Resolution.not_found()
            self.logger.info(f"Link {code} expired")
            return resolution

        if resolution.outcome is Outcome.REDIRECT:
            if not await self.store.increment_clicks(code):
                # Deactivated between lookup and increment
                return Resolution.not_found()
            self.logger.debug(f"Resolved {code}")
            return resolution

        self.logger.debug(f"Short code not found: {code}")
        return resolution
