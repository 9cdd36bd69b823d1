"""Tests for the async network client."""

import httpx
import pytest

from app.models.http import Request
from site_client import NetworkClient, strip_headers


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/down":
        raise httpx.ConnectError("connection refused", request=request)
    if request.url.path == "/missing":
        return httpx.Response(404, text="nope")
    return httpx.Response(
        200,
        content=f"{request.method} {request.url.path}".encode(),
        headers={"Content-Type": "text/plain", "Connection": "keep-alive"},
    )


def _client() -> NetworkClient:
    return NetworkClient(origin="https://kilalo.test/", transport=httpx.MockTransport(_handler))


class TestNetworkClient:
    @pytest.mark.asyncio
    async def test_same_origin_is_basic(self):
        async with _client() as client:
            resp = await client.fetch(Request("https://kilalo.test/en"))
        assert resp.status == 200
        assert resp.type == "basic"
        assert resp.read() == b"GET /en"

    @pytest.mark.asyncio
    async def test_cross_origin_is_cors(self):
        async with _client() as client:
            resp = await client.fetch(Request("https://cdn.sanity.io/images/foo.png"))
        assert resp.type == "cors"

    @pytest.mark.asyncio
    async def test_method_and_status_pass_through(self):
        async with _client() as client:
            posted = await client.fetch(Request("https://kilalo.test/form", method="POST", body=b"x"))
            missing = await client.fetch(Request("https://kilalo.test/missing"))
        assert posted.read() == b"POST /form"
        assert missing.status == 404
        assert not missing.ok

    @pytest.mark.asyncio
    async def test_hop_by_hop_headers_dropped(self):
        async with _client() as client:
            resp = await client.fetch(Request("https://kilalo.test/"))
        assert resp.headers["content-type"] == "text/plain"
        assert "connection" not in resp.headers
        assert "content-length" not in resp.headers

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        async with _client() as client:
            with pytest.raises(httpx.ConnectError):
                await client.fetch(Request("https://kilalo.test/down"))

    @pytest.mark.asyncio
    async def test_request_count(self):
        async with _client() as client:
            await client.fetch(Request("https://kilalo.test/"))
            await client.fetch(Request("https://kilalo.test/en"))
            assert client.request_count == 2


class TestStripHeaders:
    def test_lowercases_and_drops(self):
        assert strip_headers({"Transfer-Encoding": "chunked", "ETag": "abc"}) == {"etag": "abc"}
