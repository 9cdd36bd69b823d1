"""Models package - DDL and entities for all domains."""

from app.models.cache import (
    CACHE_BUCKET_DDL,
    CACHE_BUCKET_SEQ_DDL,
    CACHE_ENTRY_DDL,
    CACHE_ENTRY_SEQ_DDL,
    BucketSummary,
    CacheEntry,
)
from app.models.common import BaseEntity
from app.models.http import Request, Response
from app.models.worker import WorkerScript, WorkerState

ALL_DDL = [
    # Cache (sequences before the tables that use them)
    CACHE_BUCKET_SEQ_DDL,
    CACHE_BUCKET_DDL,
    CACHE_ENTRY_SEQ_DDL,
    CACHE_ENTRY_DDL,
]

__all__ = [
    # Common
    "BaseEntity",
    # Cache
    "CACHE_BUCKET_SEQ_DDL",
    "CACHE_BUCKET_DDL",
    "CACHE_ENTRY_SEQ_DDL",
    "CACHE_ENTRY_DDL",
    "CacheEntry",
    "BucketSummary",
    # HTTP
    "Request",
    "Response",
    # Worker
    "WorkerScript",
    "WorkerState",
    # All DDL
    "ALL_DDL",
]
