"""Async network client - the worker's fetch()."""

import asyncio

import httpx
from loguru import logger

from app.models.http import Request, Response
from settings import API_TIMEOUT, MAX_CONNECTIONS, SITE_ORIGIN

# Connection-level headers, plus framing headers invalidated by httpx decoding the body
DROPPED_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "content-encoding",
        "content-length",
    }
)


def strip_headers(headers) -> dict[str, str]:
    """Drop hop-by-hop and framing headers."""
    return {k.lower(): v for k, v in headers.items() if k.lower() not in DROPPED_HEADERS}


class NetworkClient:
    """Async HTTP client for cache misses and seeding. Failures propagate, no retry."""

    def __init__(
        self,
        origin: str = SITE_ORIGIN,
        timeout: float = API_TIMEOUT,
        max_concurrent: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.origin = origin.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._sem = asyncio.Semaphore(max_concurrent)
        self._request_count = 0
        logger.info("{}: origin={}, max_concurrent={}", self.__class__.__name__, self.origin, max_concurrent)

    async def __aenter__(self):
        self.open()
        return self

    async def __aexit__(self, *_):
        await self.aclose()

    @property
    def request_count(self) -> int:
        return self._request_count

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=MAX_CONNECTIONS, max_keepalive_connections=20),
                transport=self._transport,
                follow_redirects=True,
            )

    async def aclose(self) -> None:
        logger.info("Total network requests: {}", self._request_count)
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, request: Request) -> Response:
        """Send the request; httpx errors propagate unchanged."""
        self.open()
        async with self._sem:
            self._request_count += 1
            resp = await self._client.request(
                request.method,
                request.url,
                headers=strip_headers(request.headers),
                content=request.body or None,
            )
        logger.debug("Network {} {} -> {}", request.method, request.url, resp.status_code)
        return self._to_response(resp)

    def _to_response(self, resp: httpx.Response) -> Response:
        url = str(resp.url)
        same_origin = Request(url).origin == Request(self.origin).origin
        return Response(
            resp.content,
            status=resp.status_code,
            status_text=resp.reason_phrase,
            headers=strip_headers(resp.headers),
            url=url,
            type="basic" if same_origin else "cors",
        )
