"""Cache storage repository - buckets and entries in DuckDB."""

import json
from datetime import datetime

from loguru import logger

from app.models.cache import BucketSummary, CacheEntry
from app.repositories.base import BaseRepository

_ENTRY_COLUMNS = "method, url, status, status_text, headers, body, response_type, stored_at"


def _to_entry(row) -> CacheEntry:
    method, url, status, status_text, headers, body, response_type, stored_at = row
    return CacheEntry(
        method=method,
        url=url,
        status=status,
        status_text=status_text or "",
        headers=json.loads(headers) if isinstance(headers, str) else dict(headers or {}),
        body=bytes(body),
        response_type=response_type,
        stored_at=stored_at,
    )


class CacheStorageRepository(BaseRepository):
    """Repository for named cache buckets and their stored responses."""

    # ========== Buckets ==========

    def bucket_names(self) -> list[str]:
        """Bucket names in creation order."""
        rows = self.fetchall("SELECT name FROM cache_bucket ORDER BY id")
        return [r[0] for r in rows]

    def bucket_exists(self, name: str) -> bool:
        row = self.fetchone("SELECT COUNT(*) FROM cache_bucket WHERE name = ?", [name])
        return row[0] > 0

    def create_bucket(self, name: str) -> bool:
        """Create bucket if absent. Returns True when it was created."""
        self._ensure_writable("create bucket")
        if self.bucket_exists(name):
            return False

        self.execute(
            "INSERT INTO cache_bucket (name, created_at) VALUES (?, ?)",
            [name, datetime.now()],
        )
        logger.debug("Bucket created: {}", name)
        return True

    def delete_bucket(self, name: str) -> bool:
        """Delete bucket with all its entries. Returns False if it did not exist."""
        self._ensure_writable("delete bucket")
        if not self.bucket_exists(name):
            return False

        with self.transaction():
            self.execute("DELETE FROM cache_entry WHERE bucket = ?", [name])
            self.execute("DELETE FROM cache_bucket WHERE name = ?", [name])
        logger.debug("Bucket deleted: {}", name)
        return True

    # ========== Entries ==========

    def get_entry(self, bucket: str, method: str, url: str) -> CacheEntry | None:
        row = self.fetchone(
            f"SELECT {_ENTRY_COLUMNS} FROM cache_entry WHERE bucket = ? AND method = ? AND url = ?",
            [bucket, method, url],
        )
        return _to_entry(row) if row else None

    def find_entry(self, method: str, url: str) -> CacheEntry | None:
        """First match across all buckets, oldest bucket first."""
        row = self.fetchone(
            """
            SELECT e.method, e.url, e.status, e.status_text, e.headers, e.body, e.response_type, e.stored_at
            FROM cache_entry e
            JOIN cache_bucket b ON b.name = e.bucket
            WHERE e.method = ? AND e.url = ?
            ORDER BY b.id
            LIMIT 1
            """,
            [method, url],
        )
        return _to_entry(row) if row else None

    def put_entry(self, bucket: str, entry: CacheEntry) -> None:
        self.put_entries(bucket, [entry])

    def put_entries(self, bucket: str, entries: list[CacheEntry]) -> None:
        """Store entries atomically (last write wins per key)."""
        self._ensure_writable("write cache")
        if not self.bucket_exists(bucket):
            raise RuntimeError(f"Bucket does not exist: {bucket}")

        now = datetime.now()
        with self.transaction():
            for e in entries:
                self.execute(
                    f"""
                    INSERT OR REPLACE INTO cache_entry (bucket, {_ENTRY_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        bucket,
                        e.method,
                        e.url,
                        e.status,
                        e.status_text,
                        json.dumps(e.headers),
                        e.body,
                        e.response_type,
                        e.stored_at or now,
                    ],
                )
        logger.debug("Cache saved: bucket={}, entries={}", bucket, len(entries))

    def delete_entry(self, bucket: str, method: str, url: str) -> bool:
        self._ensure_writable("delete cache entry")
        if self.get_entry(bucket, method, url) is None:
            return False

        self.execute(
            "DELETE FROM cache_entry WHERE bucket = ? AND method = ? AND url = ?",
            [bucket, method, url],
        )
        return True

    def entry_keys(self, bucket: str) -> list[tuple[str, str]]:
        """(method, url) pairs in insertion order."""
        rows = self.fetchall(
            "SELECT method, url FROM cache_entry WHERE bucket = ? ORDER BY seq",
            [bucket],
        )
        return [(r[0], r[1]) for r in rows]

    # ========== Reporting ==========

    def summaries(self) -> list[BucketSummary]:
        """Entry counts and body sizes per bucket."""
        rows = self.fetchall(
            """
            SELECT b.name, COUNT(e.url), COALESCE(SUM(octet_length(e.body)), 0), b.created_at
            FROM cache_bucket b
            LEFT JOIN cache_entry e ON e.bucket = b.name
            GROUP BY b.id, b.name, b.created_at
            ORDER BY b.id
            """
        )
        return [BucketSummary.from_row((r[0], int(r[1]), int(r[2]), r[3])) for r in rows]

    def entry_rows(self, bucket: str | None = None) -> list[dict]:
        """Flat rows for reporting: bucket, url, status, content type, bytes."""
        query = "SELECT bucket, url, status, headers, octet_length(body), stored_at FROM cache_entry"
        params = None
        if bucket:
            query += " WHERE bucket = ?"
            params = [bucket]
        query += " ORDER BY bucket, seq"

        result = []
        for b, url, status, headers, size, stored_at in self.fetchall(query, params):
            parsed = json.loads(headers) if isinstance(headers, str) else dict(headers or {})
            result.append(
                {
                    "bucket": b,
                    "url": url,
                    "status": status,
                    "content_type": parsed.get("content-type", ""),
                    "bytes": int(size),
                    "stored_at": stored_at,
                }
            )
        return result
