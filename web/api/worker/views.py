"""Worker API views - thin layer over the registry and cache services."""

from typing import Any

from app.container import container
from app.services.worker.script import build_worker_script
from settings import WORKER_SCOPE, WORKER_SCRIPT_PATH
from web.api.errors import NotFoundError, validate_cache_name, validate_scope

from .schemas import (
    CacheDetailResponse,
    CacheItem,
    CachesResponse,
    ConsentResponse,
    KindItem,
    MessageResponse,
    RegistrationItem,
    StatusResponse,
)


def get_status() -> StatusResponse:
    """Get registrations with their worker states."""
    items = [RegistrationItem(**r.to_dict()) for r in container.registry.registrations()]
    return StatusResponse(items=items, cache_name=build_worker_script().cache_name)


def get_caches() -> CachesResponse:
    """Get bucket summaries."""
    current = build_worker_script().cache_name
    items = [
        CacheItem(
            name=s.name,
            entries=s.entries,
            total_bytes=s.total_bytes,
            current=s.name == current,
        )
        for s in container.stats.summaries()
    ]
    return CachesResponse(items=items, current=current)


def get_cache(name: str) -> CacheDetailResponse:
    """Get one bucket with entry URLs and per-kind totals."""
    validate_cache_name(name)
    summary = container.stats.bucket(name)
    if summary is None:
        raise NotFoundError(f"Cache not found: {name}")

    return CacheDetailResponse(
        name=summary.name,
        entries=summary.entries,
        total_bytes=summary.total_bytes,
        urls=summary.urls,
        kinds=[KindItem(**k) for k in container.stats.by_kind(name)],
    )


async def register(scope: str = WORKER_SCOPE) -> StatusResponse:
    """Register the worker script for scope."""
    validate_scope(scope)
    await container.registry.register(WORKER_SCRIPT_PATH, scope)
    return get_status()


async def unregister(scope: str = WORKER_SCOPE) -> StatusResponse:
    validate_scope(scope)
    if not await container.registry.unregister(scope):
        raise NotFoundError(f"No registration for scope {scope}")
    return get_status()


async def consent(accepted: bool) -> ConsentResponse:
    """Accept registers the worker; decline unregisters it and clears all caches."""
    if accepted:
        await container.registry.register(WORKER_SCRIPT_PATH, WORKER_SCOPE)
        return ConsentResponse(accepted=True, registered=True)

    cleared = await container.registry.revoke()
    return ConsentResponse(accepted=False, registered=False, cleared=cleared)


async def post_message(data: Any) -> MessageResponse:
    delivered = await container.registry.post_message(data)
    return MessageResponse(delivered=delivered)
