"""Tests for cache buckets and stored responses."""

import httpx
import pytest

from app.errors import CacheError
from app.models.http import Request, Response
from tests.fakes import ORIGIN


class TestCacheStorage:
    @pytest.mark.asyncio
    async def test_open_creates_bucket(self, caches):
        assert not await caches.has("kilalo-cache-v1")
        cache = await caches.open("kilalo-cache-v1")
        assert cache.name == "kilalo-cache-v1"
        assert await caches.has("kilalo-cache-v1")

    @pytest.mark.asyncio
    async def test_open_is_idempotent(self, caches):
        await caches.open("a")
        await caches.open("a")
        assert await caches.keys() == ["a"]

    @pytest.mark.asyncio
    async def test_keys_in_creation_order(self, caches):
        for name in ("b", "a", "c"):
            await caches.open(name)
        assert await caches.keys() == ["b", "a", "c"]

    @pytest.mark.asyncio
    async def test_delete(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/logo.png", Response(b"png"))
        assert await caches.delete("a")
        assert not await caches.has("a")
        assert not await caches.delete("a")

    @pytest.mark.asyncio
    async def test_match_oldest_bucket_first(self, caches):
        old = await caches.open("old")
        new = await caches.open("new")
        await new.put(f"{ORIGIN}/logo.png", Response(b"new"))
        await old.put(f"{ORIGIN}/logo.png", Response(b"old"))

        assert (await caches.match(f"{ORIGIN}/logo.png")).read() == b"old"
        assert (await caches.match(f"{ORIGIN}/logo.png", cache_name="new")).read() == b"new"

    @pytest.mark.asyncio
    async def test_match_missing_bucket(self, caches):
        assert await caches.match(f"{ORIGIN}/", cache_name="nope") is None
        assert not await caches.has("nope")

    @pytest.mark.asyncio
    async def test_match_relative_url(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/en", Response(b"en"))
        assert (await caches.match("/en")).read() == b"en"


class TestCache:
    @pytest.mark.asyncio
    async def test_put_and_match(self, caches):
        cache = await caches.open("a")
        await cache.put(
            Request(f"{ORIGIN}/main.css"),
            Response(b"body{}", status=200, status_text="OK", headers={"Content-Type": "text/css"}),
        )

        resp = await cache.match(f"{ORIGIN}/main.css")
        assert resp.status == 200
        assert resp.status_text == "OK"
        assert resp.headers["content-type"] == "text/css"
        assert resp.read() == b"body{}"

    @pytest.mark.asyncio
    async def test_match_ignores_fragment(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/en", Response(b"en"))
        assert await cache.match(f"{ORIGIN}/en#team") is not None

    @pytest.mark.asyncio
    async def test_match_is_exact(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/main.css", Response(b"css"))
        assert await cache.match(f"{ORIGIN}/main.css?v=2") is None

    @pytest.mark.asyncio
    async def test_match_non_get(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/form", Response(b"ok"))
        assert await cache.match(Request(f"{ORIGIN}/form", method="POST")) is None

    @pytest.mark.asyncio
    async def test_put_consumes_body(self, caches):
        cache = await caches.open("a")
        resp = Response(b"x")
        await cache.put(f"{ORIGIN}/x.png", resp)
        assert resp.body_used

    @pytest.mark.asyncio
    async def test_put_replaces(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/x.png", Response(b"one"))
        await cache.put(f"{ORIGIN}/x.png", Response(b"two"))
        assert (await cache.match(f"{ORIGIN}/x.png")).read() == b"two"
        assert len(await cache.keys()) == 1

    @pytest.mark.asyncio
    async def test_put_rejects_non_get(self, caches):
        cache = await caches.open("a")
        with pytest.raises(CacheError):
            await cache.put(Request(f"{ORIGIN}/form", method="POST"), Response(b"ok"))

    @pytest.mark.asyncio
    async def test_put_rejects_non_http(self, caches):
        cache = await caches.open("a")
        with pytest.raises(CacheError):
            await cache.put("chrome-extension://abc/icon.png", Response(b"png"))

    @pytest.mark.asyncio
    async def test_put_rejects_partial(self, caches):
        cache = await caches.open("a")
        with pytest.raises(CacheError):
            await cache.put(f"{ORIGIN}/video.webm", Response(b"part", status=206))

    @pytest.mark.asyncio
    async def test_delete_entry(self, caches):
        cache = await caches.open("a")
        await cache.put(f"{ORIGIN}/x.png", Response(b"x"))
        assert await cache.delete(f"{ORIGIN}/x.png")
        assert await cache.match(f"{ORIGIN}/x.png") is None
        assert not await cache.delete(f"{ORIGIN}/x.png")


class TestAddAll:
    @pytest.mark.asyncio
    async def test_stores_all(self, caches, site):
        cache = await caches.open("a")
        await cache.add_all(["/", "/en", "/fr"])

        keys = await cache.keys()
        assert [r.url for r in keys] == [f"{ORIGIN}/", f"{ORIGIN}/en", f"{ORIGIN}/fr"]
        assert (await cache.match(f"{ORIGIN}/fr")).read() == b"<html>fr</html>"
        assert len(site.requests) == 3

    @pytest.mark.asyncio
    async def test_failed_status_stores_nothing(self, caches):
        cache = await caches.open("a")
        with pytest.raises(CacheError):
            await cache.add_all(["/", "/missing", "/fr"])
        assert await cache.keys() == []

    @pytest.mark.asyncio
    async def test_network_error_stores_nothing(self, caches, site):
        site.down = True
        cache = await caches.open("a")
        with pytest.raises(httpx.ConnectError):
            await cache.add_all(["/", "/en"])
        assert await cache.keys() == []

    @pytest.mark.asyncio
    async def test_add_single(self, caches):
        cache = await caches.open("a")
        await cache.add("/styles/main.css")
        assert await cache.match(f"{ORIGIN}/styles/main.css") is not None
