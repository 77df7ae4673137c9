"""Credential service: registration, login and password hashing."""

import asyncio
import logging
from typing import Optional

import bcrypt

from .database.base import LinkStoreBase
from .database.models import User
from .exceptions import InvalidCredentialsError, InvalidInputError
from .common.validators import is_valid_email, is_valid_password, is_valid_username
from .lifecycle import utc_now

DEFAULT_BCRYPT_ROUNDS = 12


class CredentialService:
    """Register and authenticate users.

    bcrypt is CPU-bound, so hashing and verification run on a worker thread.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        logger: Optional[logging.Logger] = None,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
        self.bcrypt_rounds = bcrypt_rounds
        # Compared against when the username is unknown so both failure paths cost the same
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=bcrypt_rounds))

    async def register(self, username: str, email: str, password: str) -> User:
        """Create a user with a bcrypt-hashed password.

        Raises:
            InvalidInputError: If a field is malformed
            UserExistsError: If the username or email is taken
        """
        username = (username or "").strip()
        email = (email or "").strip().lower()
        for is_valid, error in (
            is_valid_username(username),
            is_valid_email(email),
            is_valid_password(password),
        ):
            if not is_valid:
                raise InvalidInputError(error)

        password_hash = await asyncio.to_thread(self._hash_password, password)
        user = await self.store.create_user(username, email, password_hash, created_at=utc_now())
        self.logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Verify a username/password pair.

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        user = await self.store.find_user_by_username((username or "").strip())
        stored_hash = user.password_hash.encode("utf-8") if user else self._dummy_hash
        matches = await asyncio.to_thread(self._check_password, password or "", stored_hash)
        if user is None or not matches:
            self.logger.info("Failed login attempt")
            raise InvalidCredentialsError("Invalid username or password")
        return user

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.store.find_user_by_id(user_id)

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _check_password(password: str, stored_hash: bytes) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored_hash)
        except ValueError:
            # Malformed stored hash or over-long password
            return False
