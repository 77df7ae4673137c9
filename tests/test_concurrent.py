"""Concurrency tests: many coroutines against one database file."""

import asyncio

import pytest

from shortener.lifecycle import Outcome


class TestConcurrentShortening:

    @pytest.mark.asyncio
    async def test_distinct_urls_get_unique_codes(self, shortening, store):
        urls = [f"https://example.com/page/{i}" for i in range(50)]

        results = await asyncio.gather(*(shortening.shorten(url) for url in urls))

        assert len({result.code for result in results}) == 50
        assert (await store.get_statistics())["total_links"] == 50

    @pytest.mark.asyncio
    async def test_same_target_and_owner_share_one_code(self, shortening, store, alice):
        results = await asyncio.gather(*(
            shortening.shorten("https://example.com/hot", owner_id=alice.id) for _ in range(20)
        ))

        assert len({result.code for result in results}) == 1
        assert len(await store.list_by_owner(alice.id)) == 1

    @pytest.mark.asyncio
    async def test_same_anonymous_target_shares_one_code(self, shortening, store):
        results = await asyncio.gather(*(
            shortening.shorten("https://example.com/hot") for _ in range(20)
        ))

        assert len({result.code for result in results}) == 1
        assert (await store.get_statistics())["total_links"] == 1


class TestConcurrentResolution:

    @pytest.mark.asyncio
    async def test_no_lost_clicks(self, shortening, resolution, store):
        code = (await shortening.shorten("https://example.com/a")).code

        outcomes = await asyncio.gather(*(resolution.resolve(code) for _ in range(40)))

        assert all(o.outcome is Outcome.REDIRECT for o in outcomes)
        assert (await store.find_by_code(code)).clicks == 40

    @pytest.mark.asyncio
    async def test_expiry_reported_exactly_once(self, shortening, resolution, alice, clock):
        code = (await shortening.shorten("https://example.com/a", owner_id=alice.id, expires_in="1h")).code
        clock.advance(hours=2)

        outcomes = await asyncio.gather(*(resolution.resolve(code) for _ in range(20)))

        kinds = [o.outcome for o in outcomes]
        assert kinds.count(Outcome.GONE) == 1
        assert kinds.count(Outcome.NOT_FOUND) == 19

    @pytest.mark.asyncio
    async def test_http_redirects_count_every_click(self, client, store):
        code = (await client.post("/api/shorten", json={"url": "https://example.com/a"})).json()["code"]

        responses = await asyncio.gather(*(client.get(f"/{code}") for _ in range(25)))

        assert all(r.status_code == 301 for r in responses)
        assert (await store.find_by_code(code)).clicks == 25
