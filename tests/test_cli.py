"""Tests for the command-line scripts."""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).resolve().parent.parent / "scripts"


def load_script(relative_path, name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / relative_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def cli():
    return load_script("cli/shortener_cli.py", "shortener_cli")


@pytest.fixture
def init_database():
    return load_script("database/init_database.py", "init_database")


async def run(cli, capsys, *argv):
    # Drop whatever fixtures logged so only the command's JSON is parsed
    capsys.readouterr()
    exit_code = await cli.main(list(argv))
    captured = capsys.readouterr()
    output = captured.out if exit_code == 0 else captured.err
    return exit_code, json.loads(output)


class TestShortenerCLI:

    @pytest.mark.asyncio
    async def test_shorten_resolve_stats(self, cli, capsys, db_path):
        exit_code, created = await run(cli, capsys, "--db-path", db_path, "shorten", "https://example.com/cli")
        assert exit_code == 0
        assert created["success"] is True
        code = created["code"]

        exit_code, resolved = await run(cli, capsys, "--db-path", db_path, "resolve", code)
        assert exit_code == 0
        assert resolved["target"] == "https://example.com/cli"

        exit_code, stats = await run(cli, capsys, "--db-path", db_path, "stats", code)
        assert exit_code == 0
        assert stats["clicks"] == 1

    @pytest.mark.asyncio
    async def test_invalid_url(self, cli, capsys, db_path):
        exit_code, payload = await run(cli, capsys, "--db-path", db_path, "shorten", "example.com")

        assert exit_code == 1
        assert payload["success"] is False
        assert payload["error"] == "input:invalid_input_error"

    @pytest.mark.asyncio
    async def test_resolve_unknown(self, cli, capsys, db_path):
        exit_code, payload = await run(cli, capsys, "--db-path", db_path, "resolve", "missing")

        assert exit_code == 1
        assert payload["outcome"] == "not_found"

    @pytest.mark.asyncio
    async def test_owned_links(self, cli, capsys, db_path, store, alice):
        exit_code, created = await run(
            cli, capsys, "--db-path", db_path,
            "shorten", "https://example.com/mine", "--owner-id", str(alice.id), "--expires-in", "7d",
        )
        assert exit_code == 0
        assert created["expires_at"] is not None

        exit_code, listed = await run(cli, capsys, "--db-path", db_path, "list", "--owner-id", str(alice.id))
        assert listed["count"] == 1

        exit_code, deleted = await run(
            cli, capsys, "--db-path", db_path, "delete", created["code"], "--owner-id", str(alice.id)
        )
        assert exit_code == 0
        assert not (await store.find_by_code(created["code"])).active

    @pytest.mark.asyncio
    async def test_delete_someone_elses_link(self, cli, capsys, db_path, alice, bob):
        _, created = await run(
            cli, capsys, "--db-path", db_path, "shorten", "https://example.com/mine", "--owner-id", str(alice.id)
        )

        exit_code, payload = await run(
            cli, capsys, "--db-path", db_path, "delete", created["code"], "--owner-id", str(bob.id)
        )

        assert exit_code == 1
        assert payload["error"] == "link:link_not_found_error"

    @pytest.mark.asyncio
    async def test_update_expiry(self, cli, capsys, db_path, store, alice):
        _, created = await run(
            cli, capsys, "--db-path", db_path, "shorten", "https://example.com/mine", "--owner-id", str(alice.id)
        )

        exit_code, updated = await run(
            cli, capsys, "--db-path", db_path,
            "update-expiry", created["code"], "--owner-id", str(alice.id), "--expires-in", "24h",
        )
        assert exit_code == 0
        assert updated["expires_at"] is not None
        assert (await store.find_by_code(created["code"])).expires_at is not None

        exit_code, cleared = await run(
            cli, capsys, "--db-path", db_path,
            "update-expiry", created["code"], "--owner-id", str(alice.id), "--expires-in", "never",
        )
        assert exit_code == 0
        assert cleared["expires_at"] is None

    @pytest.mark.asyncio
    async def test_update_expiry_invalid_option(self, cli, capsys, db_path, alice):
        _, created = await run(
            cli, capsys, "--db-path", db_path, "shorten", "https://example.com/mine", "--owner-id", str(alice.id)
        )

        exit_code, payload = await run(
            cli, capsys, "--db-path", db_path,
            "update-expiry", created["code"], "--owner-id", str(alice.id), "--expires-in", "1y",
        )

        assert exit_code == 1
        assert payload["error"] == "input:invalid_input_error"

    @pytest.mark.asyncio
    async def test_health(self, cli, capsys, db_path):
        exit_code, payload = await run(cli, capsys, "--db-path", db_path, "health")

        assert exit_code == 0
        assert payload["health"]["overall"] is True
        assert payload["statistics"]["database"] == "sqlite"

    @pytest.mark.asyncio
    async def test_no_command(self, cli, db_path):
        assert await cli.main(["--db-path", db_path]) == 1


class TestInitDatabase:

    @pytest.mark.asyncio
    async def test_creates_database(self, init_database, tmp_path):
        db_file = tmp_path / "fresh.db"

        assert await init_database.main(["--db-path", str(db_file)]) == 0
        assert db_file.exists()

    @pytest.mark.asyncio
    async def test_creates_missing_directories(self, init_database, tmp_path):
        db_file = tmp_path / "nested" / "dir" / "urls.db"

        assert await init_database.main(["--db-path", str(db_file)]) == 0
        assert db_file.exists()

    @pytest.mark.asyncio
    async def test_unusable_path(self, init_database, tmp_path):
        # A directory cannot be opened as a database file
        assert await init_database.main(["--db-path", str(tmp_path)]) == 1
