"""Tests that the server handles many simultaneous requests against one registry.

The app is async and all links live in a single registry; create and resolve
are serialized by the registry lock, so concurrent requests must never issue
the same code twice or lose a click.
"""

import asyncio
import pytest


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_shorten_requests(self, client):
        """Many concurrent POST /api/shorten with different URLs; all succeed and codes are unique."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        tasks = [
            client.post("/api/shorten", json={"originalUrl": url})
            for url in urls
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        shortcodes = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code} body={r.text}"
            shortcodes.append(r.json()["shortcode"])

        assert len(shortcodes) == len(set(shortcodes)), "All shortcodes must be unique under concurrency"

    async def test_concurrent_same_custom_code(self, client):
        """Many concurrent claims on one custom code; exactly one wins."""
        tasks = [
            client.post(
                "/api/shorten",
                json={"originalUrl": f"https://example.com/claim_{i}", "customShortcode": "claimed"},
            )
            for i in range(20)
        ]
        responses = await asyncio.gather(*tasks)

        statuses = sorted(r.status_code for r in responses)
        assert statuses == [200] + [409] * 19

    async def test_concurrent_redirect_requests(self, client, registry):
        """Many concurrent redirects are all counted."""
        create_resp = await client.post(
            "/api/shorten",
            json={"originalUrl": "https://example.com/redirect-target"},
        )
        assert create_resp.status_code == 200
        shortcode = create_resp.json()["shortcode"]

        tasks = [
            client.get(f"/{shortcode}", follow_redirects=False)
            for _ in range(20)
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 302, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/redirect-target"

        stats = await client.get("/api/stats")
        assert stats.json()["totalClicks"] == 20

    async def test_concurrent_log_requests(self, client):
        """Many concurrent POST /api/log requests are all acknowledged."""
        tasks = [
            client.post("/api/log", json={"eventType": "URL_COPIED", "data": {"n": i}})
            for i in range(40)
        ]
        responses = await asyncio.gather(*tasks)

        assert all(r.status_code == 200 and r.json()["success"] for r in responses)
