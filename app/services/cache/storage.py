"""Async cache storage - named buckets of request -> response."""

import asyncio
from collections.abc import Awaitable, Callable, Iterable

from loguru import logger

from app.errors import CacheError
from app.models.cache import CacheEntry
from app.models.http import Request, Response
from app.repositories.cache import CacheStorageRepository

Fetch = Callable[[Request], Awaitable[Response]]


def _to_response(entry: CacheEntry) -> Response:
    return Response(
        entry.body,
        status=entry.status,
        status_text=entry.status_text,
        headers=entry.headers,
        url=entry.url,
        type=entry.response_type,
    )


def _check_request(request: Request) -> None:
    if request.method != "GET":
        raise CacheError(f"Only GET requests can be cached, got {request.method}")
    if request.scheme not in ("http", "https"):
        raise CacheError(f"Request scheme not supported: {request.url}")


class Cache:
    """One named bucket."""

    def __init__(self, name: str, repo: CacheStorageRepository, fetch: Fetch | None = None, base_url: str = ""):
        self.name = name
        self._repo = repo
        self._fetch = fetch
        self._base_url = base_url

    def __repr__(self) -> str:
        return f"<Cache {self.name!r}>"

    def _request(self, request: Request | str) -> Request:
        if isinstance(request, Request):
            return request
        return Request.resolve(request, self._base_url)

    async def match(self, request: Request | str) -> Response | None:
        """Stored response for the exact (method, url), if any."""
        request = self._request(request)
        if request.method != "GET":
            return None
        entry = self._repo.get_entry(self.name, request.method, request.url)
        if entry is None:
            return None
        return _to_response(entry)

    async def put(self, request: Request | str, response: Response) -> None:
        """Store response under request. Consumes the response body."""
        request = self._request(request)
        _check_request(request)
        if response.status == 206:
            raise CacheError("Partial responses cannot be cached")
        body = response.read()
        self._repo.put_entry(self.name, self._entry(request, response, body))

    async def add(self, request: Request | str) -> None:
        await self.add_all([request])

    async def add_all(self, requests: Iterable[Request | str]) -> None:
        """Fetch all requests and store them together, or store nothing."""
        if self._fetch is None:
            raise CacheError("Cache has no fetch configured")

        reqs = [self._request(r) for r in requests]
        for r in reqs:
            _check_request(r)

        responses = await asyncio.gather(*(self._fetch(r) for r in reqs))
        for r, resp in zip(reqs, responses, strict=True):
            if not resp.ok:
                raise CacheError(f"Request failed: {r.url} ({resp.status})")

        entries = [self._entry(r, resp, resp.read()) for r, resp in zip(reqs, responses, strict=True)]
        self._repo.put_entries(self.name, entries)
        logger.debug("Cache {}: added {} entries", self.name, len(entries))

    async def delete(self, request: Request | str) -> bool:
        request = self._request(request)
        return self._repo.delete_entry(self.name, request.method, request.url)

    async def keys(self) -> list[Request]:
        return [Request(url=url, method=method) for method, url in self._repo.entry_keys(self.name)]

    @staticmethod
    def _entry(request: Request, response: Response, body: bytes) -> CacheEntry:
        return CacheEntry(
            method=request.method,
            url=request.url,
            status=response.status,
            status_text=response.status_text,
            headers=dict(response.headers),
            body=body,
            response_type=response.type,
        )


class CacheStorage:
    """All buckets for an origin."""

    def __init__(self, repo: CacheStorageRepository, fetch: Fetch | None = None, base_url: str = ""):
        self._repo = repo
        self._fetch = fetch
        self._base_url = base_url

    async def open(self, name: str) -> Cache:
        """Open bucket, creating it if absent."""
        if self._repo.create_bucket(name):
            logger.info("Cache bucket created: {}", name)
        return Cache(name, self._repo, self._fetch, self._base_url)

    async def has(self, name: str) -> bool:
        return self._repo.bucket_exists(name)

    async def delete(self, name: str) -> bool:
        return self._repo.delete_bucket(name)

    async def keys(self) -> list[str]:
        """Bucket names in creation order."""
        return self._repo.bucket_names()

    async def match(self, request: Request | str, cache_name: str | None = None) -> Response | None:
        """Match in one bucket, or in all buckets (oldest first)."""
        if not isinstance(request, Request):
            request = Request.resolve(request, self._base_url)
        if request.method != "GET":
            return None

        if cache_name is not None:
            if not self._repo.bucket_exists(cache_name):
                return None
            entry = self._repo.get_entry(cache_name, request.method, request.url)
        else:
            entry = self._repo.find_entry(request.method, request.url)
        return _to_response(entry) if entry else None
