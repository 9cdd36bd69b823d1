"""Repositories package - data access layer for the cache database."""

from app.repositories.base import BaseRepository
from app.repositories.cache import CacheStorageRepository
from app.repositories.db import (
    close_db,
    connect,
    db_exists,
    get_db,
    init_tables,
)

__all__ = [
    # DB
    "get_db",
    "connect",
    "db_exists",
    "close_db",
    "init_tables",
    # Base
    "BaseRepository",
    # Cache
    "CacheStorageRepository",
]
