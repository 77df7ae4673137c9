"""SQLite implementation of the link store."""

import asyncio
import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ..exceptions import (
    ActiveLinkExistsError,
    DuplicateCodeError,
    InvalidInputError,
    LinkNotFoundError,
    StoreError,
    UserExistsError,
)
from .base import LinkStoreBase
from .models import Link, User

T = TypeVar("T")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE COLLATE NOCASE,
    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS links (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    target TEXT NOT NULL,
    owner_id INTEGER REFERENCES users(id),
    created_at TEXT NOT NULL,
    expires_at TEXT,
    clicks INTEGER NOT NULL DEFAULT 0 CHECK (clicks >= 0),
    active INTEGER NOT NULL DEFAULT 1 CHECK (active IN (0, 1))
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_links_active_owner_target
    ON links (COALESCE(owner_id, 0), target)
    WHERE active = 1;

CREATE INDEX IF NOT EXISTS idx_links_owner_created
    ON links (owner_id, created_at);
"""

LINK_COLUMNS = "code, target, owner_id, created_at, expires_at, clicks, active"
USER_COLUMNS = "id, username, email, password_hash, created_at"


def _to_db(value: Optional[datetime]) -> Optional[str]:
    """Serialize a timestamp as fixed-width UTC ISO text so it sorts lexically."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _from_db(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _row_to_link(row: sqlite3.Row) -> Link:
    return Link(
        code=row["code"],
        target=row["target"],
        owner_id=row["owner_id"],
        created_at=_from_db(row["created_at"]),
        expires_at=_from_db(row["expires_at"]),
        clicks=row["clicks"],
        active=bool(row["active"]),
    )


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=_from_db(row["created_at"]),
    )


class LinkStoreSQLite(LinkStoreBase):
    """SQLite implementation of the link store.

    Every operation opens a short-lived connection on a worker thread, runs a
    single transaction and closes it. SQLite serializes writers itself, so
    uniqueness and ownership are enforced by constraints and conditional
    UPDATE statements rather than by application-side locking.
    """

    def __init__(
        self,
        db_config: str,
        busy_timeout_seconds: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the SQLite store and create the schema if needed.

        Args:
            db_config: Path of the SQLite database file
            busy_timeout_seconds: How long a writer waits for the database lock
            logger: Optional logger instance
        """
        super().__init__(db_config)
        self.db_path = db_config
        self.busy_timeout_seconds = busy_timeout_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._closed = False
        self._init_db()

    def _init_db(self) -> None:
        """Create tables and indexes if they don't exist."""
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)
        try:
            with self._connect() as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(SCHEMA_SQL)
        except sqlite3.Error as e:
            self.logger.error(f"Error initializing database at {self.db_path}: {e}")
            raise StoreError("Database initialization failed") from e
        self.logger.debug(f"SQLite schema ready at {self.db_path}")

    @contextmanager
    def _connect(self):
        """Open a connection, commit on success, roll back on error, always close."""
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout_seconds)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    async def _run(self, operation: str, func: Callable[..., T], *args) -> T:
        """Run a blocking database function on a worker thread.

        Errors from the shortener's own hierarchy pass through; any other
        sqlite3 error is logged with its detail and re-raised as StoreError.
        """
        if self._closed:
            raise StoreError("Link store is closed")
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as e:
            self.logger.error(f"Error during {operation}: {e}")
            raise StoreError(f"Database error during {operation}") from e

    async def find_by_code(self, code: str) -> Optional[Link]:
        def _run_sync() -> Optional[Link]:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {LINK_COLUMNS} FROM links WHERE code = ?",
                    (code,),
                ).fetchone()
            return _row_to_link(row) if row else None

        return await self._run("find_by_code", _run_sync)

    async def find_active_by_target_and_owner(
        self,
        target: str,
        owner_id: Optional[int],
    ) -> Optional[Link]:
        def _run_sync() -> Optional[Link]:
            with self._connect() as conn:
                row = conn.execute(
                    f"""
                    SELECT {LINK_COLUMNS} FROM links
                    WHERE COALESCE(owner_id, 0) = ? AND target = ? AND active = 1
                    """,
                    (owner_id or 0, target),
                ).fetchone()
            return _row_to_link(row) if row else None

        return await self._run("find_active_by_target_and_owner", _run_sync)

    async def insert(
        self,
        code: str,
        target: str,
        owner_id: Optional[int] = None,
        expires_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
    ) -> Link:
        if created_at is None:
            created_at = datetime.now(timezone.utc)

        def _run_sync() -> Link:
            try:
                with self._connect() as conn:
                    conn.execute(
                        """
                        INSERT INTO links (code, target, owner_id, created_at, expires_at, clicks, active)
                        VALUES (?, ?, ?, ?, ?, 0, 1)
                        """,
                        (code, target, owner_id, _to_db(created_at), _to_db(expires_at)),
                    )
            except sqlite3.IntegrityError as e:
                message = str(e)
                if "links.code" in message:
                    raise DuplicateCodeError(f"Short code '{code}' already exists") from e
                if "FOREIGN KEY" in message:
                    raise InvalidInputError("Unknown owner") from e
                raise ActiveLinkExistsError("An active link for this URL already exists") from e
            return Link(
                code=code,
                target=target,
                owner_id=owner_id,
                created_at=_from_db(_to_db(created_at)),
                expires_at=_from_db(_to_db(expires_at)),
            )

        link = await self._run("insert", _run_sync)
        self.logger.debug(f"Inserted link {code}")
        return link

    async def increment_clicks(self, code: str) -> bool:
        def _run_sync() -> bool:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE links SET clicks = clicks + 1 WHERE code = ? AND active = 1",
                    (code,),
                )
                return cursor.rowcount == 1

        return await self._run("increment_clicks", _run_sync)

    async def set_active(self, code: str, active: bool) -> bool:
        if active:
            # one-way lifecycle: inactive rows stay inactive
            self.logger.warning(f"Refusing to reactivate link {code}")
            return False

        def _run_sync() -> bool:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE links SET active = 0 WHERE code = ? AND active = 1",
                    (code,),
                )
                return cursor.rowcount == 1

        return await self._run("set_active", _run_sync)

    async def deactivate_for_owner(self, code: str, owner_id: int) -> None:
        def _run_sync() -> None:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE links SET active = 0 WHERE code = ? AND owner_id = ? AND active = 1",
                    (code, owner_id),
                )
                if cursor.rowcount == 0:
                    raise LinkNotFoundError(f"Short code '{code}' not found")

        await self._run("deactivate_for_owner", _run_sync)

    async def set_expires_at(
        self,
        code: str,
        expires_at: Optional[datetime],
        owner_id: int,
    ) -> None:
        def _run_sync() -> None:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE links SET expires_at = ? WHERE code = ? AND owner_id = ? AND active = 1",
                    (_to_db(expires_at), code, owner_id),
                )
                if cursor.rowcount == 0:
                    raise LinkNotFoundError(f"Short code '{code}' not found")

        await self._run("set_expires_at", _run_sync)

    async def list_by_owner(self, owner_id: int) -> List[Link]:
        def _run_sync() -> List[Link]:
            with self._connect() as conn:
                rows = conn.execute(
                    f"""
                    SELECT {LINK_COLUMNS} FROM links
                    WHERE owner_id = ?
                    ORDER BY created_at DESC, id DESC
                    """,
                    (owner_id,),
                ).fetchall()
            return [_row_to_link(row) for row in rows]

        return await self._run("list_by_owner", _run_sync)

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
    ) -> User:
        if created_at is None:
            created_at = datetime.now(timezone.utc)

        def _run_sync() -> User:
            try:
                with self._connect() as conn:
                    cursor = conn.execute(
                        """
                        INSERT INTO users (username, email, password_hash, created_at)
                        VALUES (?, ?, ?, ?)
                        """,
                        (username, email, password_hash, _to_db(created_at)),
                    )
                    user_id = cursor.lastrowid
            except sqlite3.IntegrityError as e:
                raise UserExistsError("Username or email already registered") from e
            return User(
                id=user_id,
                username=username,
                email=email,
                password_hash=password_hash,
                created_at=_from_db(_to_db(created_at)),
            )

        user = await self._run("create_user", _run_sync)
        self.logger.info(f"Created user {user.id}")
        return user

    async def find_user_by_username(self, username: str) -> Optional[User]:
        def _run_sync() -> Optional[User]:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {USER_COLUMNS} FROM users WHERE username = ?",
                    (username,),
                ).fetchone()
            return _row_to_user(row) if row else None

        return await self._run("find_user_by_username", _run_sync)

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        def _run_sync() -> Optional[User]:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT {USER_COLUMNS} FROM users WHERE id = ?",
                    (user_id,),
                ).fetchone()
            return _row_to_user(row) if row else None

        return await self._run("find_user_by_id", _run_sync)

    async def get_statistics(self) -> Dict[str, Any]:
        def _run_sync() -> Dict[str, Any]:
            with self._connect() as conn:
                links = conn.execute(
                    """
                    SELECT COUNT(*) AS total_links,
                           COALESCE(SUM(active), 0) AS active_links,
                           COALESCE(SUM(clicks), 0) AS total_clicks
                    FROM links
                    """
                ).fetchone()
                users = conn.execute("SELECT COUNT(*) AS total_users FROM users").fetchone()
            return {
                "total_links": links["total_links"],
                "active_links": links["active_links"],
                "total_clicks": links["total_clicks"],
                "total_users": users["total_users"],
                "database": "sqlite",
            }

        return await self._run("get_statistics", _run_sync)

    async def health_check(self) -> bool:
        def _run_sync() -> bool:
            with self._connect() as conn:
                return conn.execute("SELECT 1").fetchone()[0] == 1

        try:
            return await self._run("health_check", _run_sync)
        except StoreError:
            return False

    async def close(self) -> None:
        self._closed = True
        self.logger.info("SQLite link store closed")
