"""Cache statistics - per bucket and per asset kind."""

import polars as pl
from loguru import logger

from app.models.cache import BucketSummary
from app.repositories.cache import CacheStorageRepository
from app.services.worker.policy import asset_kind
from settings import REMOTE_ASSET_HOST

ENTRY_SCHEMA = {
    "bucket": pl.Utf8,
    "url": pl.Utf8,
    "status": pl.Int64,
    "content_type": pl.Utf8,
    "bytes": pl.Int64,
    "stored_at": pl.Datetime,
    "kind": pl.Utf8,
}


class CacheStatsService:
    """Reporting over stored cache entries."""

    def __init__(self, repo: CacheStorageRepository, remote_host: str = REMOTE_ASSET_HOST):
        self._repo = repo
        self._remote_host = remote_host

    def summaries(self) -> list[BucketSummary]:
        return self._repo.summaries()

    def bucket(self, name: str) -> BucketSummary | None:
        """Summary for one bucket with its entry URLs."""
        summary = next((s for s in self._repo.summaries() if s.name == name), None)
        if summary is None:
            return None
        summary.urls = [url for _, url in self._repo.entry_keys(name)]
        return summary

    def frame(self, bucket: str | None = None) -> pl.DataFrame:
        rows = self._repo.entry_rows(bucket)
        for row in rows:
            row["kind"] = asset_kind(row["url"], self._remote_host)
        return pl.DataFrame(rows, schema=ENTRY_SCHEMA)

    def by_kind(self, bucket: str | None = None) -> list[dict]:
        """Entries and bytes per asset kind (image, stylesheet, script, font, remote, page)."""
        df = self.frame(bucket)
        if df.is_empty():
            return []

        result = (
            df.group_by("kind")
            .agg(
                pl.len().alias("entries"),
                pl.col("bytes").sum().alias("bytes"),
            )
            .sort("kind")
        )
        logger.debug("Cache stats: {} kinds over {} entries", result.height, df.height)
        return result.to_dicts()
