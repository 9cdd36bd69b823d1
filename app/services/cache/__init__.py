"""Cache services - async bucket API and reporting."""

from app.services.cache.stats import CacheStatsService
from app.services.cache.storage import Cache, CacheStorage

__all__ = [
    "Cache",
    "CacheStorage",
    "CacheStatsService",
]
