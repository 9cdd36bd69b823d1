"""Tests for the worker's fetch and message handling, end to end through the registry."""

import httpx
import pytest

from app.models.http import Request
from app.models.worker import WorkerScript
from app.services.worker.events import FetchEvent
from tests.fakes import ORIGIN

CSS = f"{ORIGIN}/styles/main.css"
CDN_IMAGE = "https://cdn.sanity.io/images/foo.png"
EXAMPLE_PAGE = "https://example.com/page.html"


async def _controlled(registry, site):
    """Register the worker and open a page it controls; forget seeding traffic."""
    await registry.register("/sw.js", "/")
    client = registry.open_client("/en")
    site.requests.clear()
    return client


class TestFetch:
    @pytest.mark.asyncio
    async def test_cached_get_served_without_network(self, registry, site):
        client = await _controlled(registry, site)

        resp = await registry.fetch(Request(f"{ORIGIN}/"), client)
        assert resp.status == 200
        assert resp.read() == b"<html>home</html>"
        assert site.requests == []

    @pytest.mark.asyncio
    async def test_post_goes_to_network(self, registry, site, repo):
        client = await _controlled(registry, site)

        await registry.fetch(Request(CSS, method="POST"), client)
        await registry.fetch(Request(CSS, method="POST"), client)
        assert site.count(CSS) == 2
        assert repo.get_entry(WorkerScript().cache_name, "GET", CSS) is None
        assert repo.get_entry(WorkerScript().cache_name, "POST", CSS) is None

    @pytest.mark.asyncio
    async def test_non_http_scheme_not_intercepted(self, registry, site):
        await _controlled(registry, site)
        worker = registry.get_registration("/").active

        resp = await worker.dispatch_fetch(FetchEvent(Request("chrome-extension://abc/icon.png")))
        assert resp is None
        assert site.requests == []

    @pytest.mark.asyncio
    async def test_static_asset_cached_after_first_success(self, registry, site):
        client = await _controlled(registry, site)

        first = await registry.fetch(Request(CSS), client)
        second = await registry.fetch(Request(CSS), client)
        assert first.read() == second.read() == b"body{margin:0}"
        assert site.count(CSS) == 1

    @pytest.mark.asyncio
    async def test_non_matching_response_not_cached(self, registry, site, repo):
        client = await _controlled(registry, site)

        await registry.fetch(Request(f"{ORIGIN}/about"), client)
        await registry.fetch(Request(f"{ORIGIN}/about"), client)
        assert site.count(f"{ORIGIN}/about") == 2
        assert repo.get_entry(WorkerScript().cache_name, "GET", f"{ORIGIN}/about") is None

    @pytest.mark.asyncio
    async def test_remote_asset_host_cached(self, registry, site):
        client = await _controlled(registry, site)

        first = await registry.fetch(Request(CDN_IMAGE), client)
        assert first.type == "cors"
        await registry.fetch(Request(CDN_IMAGE), client)
        assert site.count(CDN_IMAGE) == 1

    @pytest.mark.asyncio
    async def test_other_host_page_never_cached(self, registry, site):
        client = await _controlled(registry, site)

        for _ in range(3):
            await registry.fetch(Request(EXAMPLE_PAGE), client)
        assert site.count(EXAMPLE_PAGE) == 3

    @pytest.mark.asyncio
    async def test_error_status_not_cached(self, registry, site):
        client = await _controlled(registry, site)
        url = f"{ORIGIN}/missing.png"

        resp = await registry.fetch(Request(url), client)
        assert resp.status == 404
        await registry.fetch(Request(url), client)
        assert site.count(url) == 2

    @pytest.mark.asyncio
    async def test_network_failure_propagates(self, registry, site):
        client = await _controlled(registry, site)
        site.down = True

        with pytest.raises(httpx.ConnectError):
            await registry.fetch(Request(CSS), client)

    @pytest.mark.asyncio
    async def test_cache_serves_while_offline(self, registry, site):
        client = await _controlled(registry, site)
        site.down = True

        resp = await registry.fetch(Request(f"{ORIGIN}/fr"), client)
        assert resp.read() == b"<html>fr</html>"

    @pytest.mark.asyncio
    async def test_uncontrolled_request_goes_to_network(self, registry, site):
        await registry.fetch(Request(CSS))
        await registry.fetch(Request(CSS))
        assert site.count(CSS) == 2

    @pytest.mark.asyncio
    async def test_in_scope_request_without_client(self, registry, site):
        await _controlled(registry, site)

        await registry.fetch(Request(CSS))
        await registry.fetch(Request(CSS))
        assert site.count(CSS) == 1


class TestMessage:
    @pytest.mark.asyncio
    async def test_clear_cache_deletes_all_buckets(self, registry, site, caches):
        client = await _controlled(registry, site)
        await caches.open("kilalo-cache-v0")
        await registry.fetch(Request(CSS), client)

        delivered = await registry.post_message({"type": "CLEAR_CACHE"})
        assert delivered
        assert await caches.keys() == []

        await registry.fetch(Request(f"{ORIGIN}/"), client)
        await registry.fetch(Request(CSS), client)
        assert site.count(f"{ORIGIN}/") == 1
        assert site.count(CSS) == 2

    @pytest.mark.asyncio
    async def test_other_messages_ignored(self, registry, site, caches):
        await _controlled(registry, site)

        for data in ({"type": "PING"}, "CLEAR_CACHE", None, ["CLEAR_CACHE"]):
            assert await registry.post_message(data)
        assert await caches.keys() == [WorkerScript().cache_name]

    @pytest.mark.asyncio
    async def test_no_active_worker(self, registry):
        assert not await registry.post_message({"type": "CLEAR_CACHE"})
