"""Cache domain models - buckets, entries and summaries."""

from app.models.cache.bucket import CACHE_BUCKET_DDL, CACHE_BUCKET_SEQ_DDL
from app.models.cache.entities import BucketSummary, CacheEntry
from app.models.cache.entry import CACHE_ENTRY_DDL, CACHE_ENTRY_SEQ_DDL

__all__ = [
    "CACHE_BUCKET_SEQ_DDL",
    "CACHE_BUCKET_DDL",
    "CACHE_ENTRY_SEQ_DDL",
    "CACHE_ENTRY_DDL",
    "CacheEntry",
    "BucketSummary",
]
