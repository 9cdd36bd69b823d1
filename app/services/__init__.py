"""Services package - service class exports."""

from app.services.cache import Cache, CacheStatsService, CacheStorage
from app.services.worker import ServiceWorker, WorkerRegistry

__all__ = [
    "Cache",
    "CacheStorage",
    "CacheStatsService",
    "ServiceWorker",
    "WorkerRegistry",
]
