"""Tests for common utilities."""

import json

from shortener.common.validators import (
    is_valid_url,
    is_valid_username,
    is_valid_email,
    is_valid_password,
)
from shortener.common.headers import extract_forwarded_headers, build_base_url
from shortener.common.url_builder import build_short_url
from shortener.common.logging_config import get_logger, setup_logging


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("https://sub.example.com:8080/path?query=value#frag")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("not-a-url")
        assert not valid

        valid, error = is_valid_url("example.com/path")
        assert not valid
        assert "http" in error.lower()

        valid, error = is_valid_url("ftp://example.com")
        assert not valid
        assert "http" in error.lower()

        valid, error = is_valid_url("https://")
        assert not valid
        assert "domain" in error.lower()

        valid, error = is_valid_url("https://example.com:99999/")
        assert not valid

        valid, error = is_valid_url("https://exa mple.com")
        assert not valid

        valid, error = is_valid_url("https://example.com/" + "a" * 2048)
        assert not valid
        assert "too long" in error.lower()

    def test_usernames(self):
        assert is_valid_username("alice.b-c_1")[0]
        assert not is_valid_username("al")[0]
        assert not is_valid_username("a" * 33)[0]
        assert not is_valid_username("alice smith")[0]

    def test_emails(self):
        assert is_valid_email("alice@example.com")[0]
        assert not is_valid_email("alice")[0]
        assert not is_valid_email("alice@localhost")[0]
        assert not is_valid_email("")[0]

    def test_passwords(self):
        assert is_valid_password("long enough")[0]
        valid, error = is_valid_password("short")
        assert not valid
        assert "at least" in error
        valid, error = is_valid_password("x" * 73)
        assert not valid
        assert "at most" in error


class TestHeaders:
    """Test header utilities."""

    def test_extract_forwarded_headers(self):
        """Test forwarded header extraction."""
        headers = {
            "X-Forwarded-Proto": "https",
            "X-Forwarded-Host": "example.com",
        }

        result = extract_forwarded_headers(headers)
        assert result["forwarded_proto"] == "https"
        assert result["forwarded_host"] == "example.com"

    def test_build_base_url_prefers_configured(self):
        base_url = build_base_url(
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "proxy.example"},
            fallback_base_url="https://sho.rt/",
        )

        assert base_url == "https://sho.rt"

    def test_build_base_url_from_headers(self):
        """Test base URL building from headers."""
        headers = {
            "X-Forwarded-Proto": "https, http",
            "X-Forwarded-Host": "example.com",
        }

        base_url = build_base_url(
            headers=headers,
            fallback_base_url="",
            request_scheme="http",
            request_host="internal:3000",
        )

        assert base_url == "https://example.com"

    def test_build_base_url_from_request(self):
        base_url = build_base_url(
            headers={},
            fallback_base_url="",
            request_scheme="http",
            request_host="localhost:3000",
        )

        assert base_url == "http://localhost:3000"


class TestURLBuilder:

    def test_build_short_url(self):
        assert build_short_url("abc1234", "https://example.com/") == "https://example.com/abc1234"
        assert build_short_url("abc1234", "https://example.com") == "https://example.com/abc1234"

    def test_build_short_url_without_base(self):
        assert build_short_url("abc1234", "") == "/abc1234"


class TestLogging:

    def test_json_log_lines(self, tmp_path):
        log_file = tmp_path / "shortener.log"
        setup_logging(level="INFO", log_file=str(log_file), json_format=True)

        get_logger("web").info('GET /abc "quoted"')

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["logger"] == "shortener.web"
        assert entry["level"] == "INFO"
        assert entry["message"] == 'GET /abc "quoted"'

    def test_get_logger_namespacing(self):
        assert get_logger().name == "shortener"
        assert get_logger("shortener.db").name == "shortener.db"
        assert get_logger("web").name == "shortener.web"
