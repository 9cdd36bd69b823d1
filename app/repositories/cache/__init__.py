"""Cache repositories."""

from app.repositories.cache.storage import CacheStorageRepository

__all__ = [
    "CacheStorageRepository",
]
