"""End-to-end test of the wired-up services."""

import pytest
from httpx import ASGITransport, AsyncClient

from app import build_services
from config import Config
from shortener.common.logging_config import setup_logging
from web_app import create_app


@pytest.mark.asyncio
async def test_full_lifecycle(tmp_path):
    config = Config(
        database_path=str(tmp_path / "e2e.db"),
        base_url="https://sho.rt",
        session_secret="integration-secret",
        bcrypt_rounds=4,
        short_code_length=9,
    )
    logger = setup_logging(level="DEBUG")
    store, shortening, resolution, credentials = build_services(config, logger)
    app = create_app(
        store=store,
        shortening_service=shortening,
        resolution_service=resolution,
        credential_service=credentials,
        config=config,
    )

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            registered = await client.post("/api/auth/register", json={
                "username": "erin",
                "email": "erin@example.com",
                "password": "long-password",
            })
            assert registered.status_code == 201

            created = (await client.post(
                "/api/shorten", json={"url": "https://example.com/doc?id=1", "expires_in": "30d"}
            )).json()
            code = created["code"]
            assert len(code) == 9
            assert created["short_url"] == f"https://sho.rt/{code}"

            for _ in range(3):
                redirect = await client.get(f"/{code}")
                assert redirect.status_code == 301
                assert redirect.headers["location"] == "https://example.com/doc?id=1"

            assert (await client.get(f"/api/stats/{code}")).json()["clicks"] == 3

            assert (await client.delete(f"/api/links/{code}")).status_code == 204
            assert (await client.get(f"/{code}")).status_code == 404

            recreated = (await client.post("/api/shorten", json={"url": "https://example.com/doc?id=1"})).json()
            assert recreated["code"] != code

            listed = (await client.get("/api/links")).json()
            assert [link["code"] for link in listed] == [recreated["code"], code]
    finally:
        await shortening.close()
