"""Pytest configuration and fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.accounts import CredentialService
from shortener.common.logging_config import setup_logging
from shortener.database.sqlite import LinkStoreSQLite
from shortener.resolver import ResolutionService
from shortener.service import ShorteningService
from shortener.shortcode import ShortCodeGenerator
from web_app import create_app


class FakeClock:
    """Controllable clock handed to the services instead of the wall clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "shortener-test.db")


@pytest.fixture
async def store(db_path, logger) -> AsyncGenerator[LinkStoreSQLite, None]:
    """Create test database instance."""
    db = LinkStoreSQLite(db_config=db_path, logger=logger)

    yield db

    await db.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=7)


@pytest.fixture
def shortening(store, short_code_generator, logger, clock) -> ShorteningService:
    return ShorteningService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def resolution(store, logger, clock) -> ResolutionService:
    return ResolutionService(store=store, logger=logger, clock=clock)


@pytest.fixture
def credentials(store, logger) -> CredentialService:
    # Minimum bcrypt cost keeps the suite fast
    return CredentialService(store=store, logger=logger, bcrypt_rounds=4)


@pytest.fixture
async def alice(credentials):
    return await credentials.register("alice", "alice@example.com", "correct-horse")


@pytest.fixture
async def bob(credentials):
    return await credentials.register("bob", "bob@example.com", "battery-staple")


@pytest.fixture
def config(db_path):
    return Config(
        database_path=db_path,
        base_url="",
        session_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(store, shortening, resolution, credentials, config):
    """Create test FastAPI app."""
    return create_app(
        store=store,
        shortening_service=shortening,
        resolution_service=resolution,
        credential_service=credentials,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
async def other_client(app):
    """Second client with its own cookie jar."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
