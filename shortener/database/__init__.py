"""Database layer for URL shortener."""

from .base import LinkStoreBase
from .sqlite import LinkStoreSQLite
from .models import Link, User

__all__ = ["LinkStoreBase", "LinkStoreSQLite", "Link", "User"]
