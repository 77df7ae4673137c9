"""Tests for the link lifecycle policy."""

import pytest
from datetime import datetime, timedelta, timezone

from shortener.database.models import Link
from shortener.exceptions import InvalidInputError
from shortener.lifecycle import (
    EXPIRY_OPTIONS,
    Outcome,
    compute_expires_at,
    is_expired,
    resolve_outcome,
)

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_link(**overrides) -> Link:
    fields = {
        "code": "abcdefg",
        "target": "https://example.com/a",
        "created_at": NOW - timedelta(days=1),
    }
    fields.update(overrides)
    return Link(**fields)


class TestIsExpired:

    def test_without_expiry_never_expires(self):
        assert not is_expired(make_link(), NOW + timedelta(days=10000))

    def test_before_expiry(self):
        link = make_link(expires_at=NOW + timedelta(seconds=1))
        assert not is_expired(link, NOW)

    def test_exactly_at_expiry_is_not_expired(self):
        link = make_link(expires_at=NOW)
        assert not is_expired(link, NOW)

    def test_after_expiry(self):
        link = make_link(expires_at=NOW)
        assert is_expired(link, NOW + timedelta(microseconds=1))


class TestResolveOutcome:

    def test_absent_link(self):
        assert resolve_outcome(None, NOW).outcome is Outcome.NOT_FOUND

    def test_active_link_redirects(self):
        resolution = resolve_outcome(make_link(), NOW)
        assert resolution.outcome is Outcome.REDIRECT
        assert resolution.target == "https://example.com/a"

    def test_active_expired_link_is_gone(self):
        resolution = resolve_outcome(make_link(expires_at=NOW - timedelta(minutes=1)), NOW)
        assert resolution.outcome is Outcome.GONE
        assert resolution.target is None

    def test_inactive_link_is_not_found_even_if_expired(self):
        link = make_link(active=False, expires_at=NOW - timedelta(minutes=1))
        assert resolve_outcome(link, NOW).outcome is Outcome.NOT_FOUND

    def test_inactive_link_is_not_found(self):
        assert resolve_outcome(make_link(active=False), NOW).outcome is Outcome.NOT_FOUND


class TestComputeExpiresAt:

    @pytest.mark.parametrize("option,delta", [
        ("1h", timedelta(hours=1)),
        ("24h", timedelta(hours=24)),
        ("7d", timedelta(days=7)),
        ("30d", timedelta(days=30)),
    ])
    def test_options(self, option, delta):
        assert compute_expires_at(option, NOW) == NOW + delta

    def test_never_and_none(self):
        assert compute_expires_at("never", NOW) is None
        assert compute_expires_at(None, NOW) is None

    @pytest.mark.parametrize("option", ["2h", "", "1H", "forever"])
    def test_unknown_option(self, option):
        with pytest.raises(InvalidInputError, match="Invalid expiration option"):
            compute_expires_at(option, NOW)

    def test_option_set(self):
        assert set(EXPIRY_OPTIONS) == {"1h", "24h", "7d", "30d", "never"}
