"""Worker event handlers, keyed by event type.

Handlers run synchronously during dispatch. All cache work is scheduled
through ``event.wait_until`` / ``event.respond_with`` so the dispatcher
keeps the event alive until it finishes.
"""

import asyncio
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from loguru import logger

from app.models.http import Request, Response
from app.services.worker.events import ActivateEvent, FetchEvent, InstallEvent, MessageEvent
from app.services.worker.policy import should_cache, should_intercept

if TYPE_CHECKING:
    from app.services.worker.worker import WorkerGlobalScope

Handler = Callable[..., None]


# ========== Lifecycle ==========


def on_install(event: InstallEvent, scope: "WorkerGlobalScope") -> None:
    """Seed the current bucket; any failed seed fails the install."""
    logger.info("[Service Worker] Installing {}", scope.script.cache_name)
    event.wait_until(_precache(scope))
    scope.skip_waiting()


async def _precache(scope: "WorkerGlobalScope") -> None:
    cache = await scope.caches.open(scope.script.cache_name)
    logger.info("[Service Worker] Caching initial resources: {}", scope.script.precache)
    await cache.add_all(scope.script.precache)


def on_activate(event: ActivateEvent, scope: "WorkerGlobalScope") -> None:
    """Drop every bucket but the current one, then take over open clients."""
    logger.info("[Service Worker] Activating {}", scope.script.cache_name)
    event.wait_until(_delete_stale_caches(scope))
    event.wait_until(scope.clients.claim())


async def _delete_stale_caches(scope: "WorkerGlobalScope") -> None:
    stale = [name for name in await scope.caches.keys() if name != scope.script.cache_name]
    for name in stale:
        logger.info("[Service Worker] Deleting old cache: {}", name)
    await asyncio.gather(*(scope.caches.delete(name) for name in stale))


# ========== Fetch ==========


def on_fetch(event: FetchEvent, scope: "WorkerGlobalScope") -> None:
    # Non-GET and non-http(s) requests go to the network untouched
    if not should_intercept(event.request):
        return
    event.respond_with(_cache_first(event, scope))


async def _cache_first(event: FetchEvent, scope: "WorkerGlobalScope") -> Response | None:
    request = event.request
    cached = await scope.caches.match(request, cache_name=scope.script.cache_name)
    if cached is not None:
        logger.debug("[Service Worker] Serving from cache: {}", request.url)
        return cached

    response = await scope.fetch(request)
    if response is None or response.status != 200 or response.type == "error":
        return response

    # Body is single-read: the caller gets the original, the cache the copy
    to_cache = response.clone()
    if should_cache(request, scope.script):
        event.wait_until(_store(scope, request, to_cache))
    return response


async def _store(scope: "WorkerGlobalScope", request: Request, response: Response) -> None:
    cache = await scope.caches.open(scope.script.cache_name)
    logger.debug("[Service Worker] Caching new resource: {}", request.url)
    await cache.put(request, response)


# ========== Messages ==========


def on_message(event: MessageEvent, scope: "WorkerGlobalScope") -> None:
    """Clear-cache command deletes every bucket; anything else is ignored."""
    data = event.data
    if not isinstance(data, Mapping) or data.get("type") != scope.script.clear_cache_message:
        return
    logger.info("[Service Worker] Clearing all caches...")
    event.wait_until(_clear_all(scope))


async def _clear_all(scope: "WorkerGlobalScope") -> None:
    names = await scope.caches.keys()
    await asyncio.gather(*(scope.caches.delete(name) for name in names))
    logger.info("[Service Worker] Cleared {} caches", len(names))


HANDLERS: dict[str, Handler] = {
    "install": on_install,
    "activate": on_activate,
    "fetch": on_fetch,
    "message": on_message,
}
