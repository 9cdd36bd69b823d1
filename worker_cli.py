#!/usr/bin/env python3
"""
Inspect and maintain the worker's cache storage.

Usage:
    python worker_cli.py              # Bucket summaries (same as 'caches')
    python worker_cli.py caches       # Bucket summaries
    python worker_cli.py stats [name] # Entries and bytes per asset kind
    python worker_cli.py clear        # Delete every bucket
    python worker_cli.py warm         # Register the worker and precache the shell
"""

import asyncio
import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

import duckdb
import httpx
from loguru import logger

from app.container import container
from app.repositories import CacheStorageRepository, close_db, db_exists
from app.services.cache import CacheStatsService
from settings import CACHE_NAME, DB_PATH, SITE_ORIGIN, WORKER_SCOPE, WORKER_SCRIPT_PATH
from settings.logging import setup_logging

NO_CACHES = "\n⚠️  No caches stored. Run 'python worker_cli.py warm' first.\n"


def _size(n: int) -> str:
    for unit in ("B", "KB", "MB"):
        if n < 1024:
            return f"{n:,.0f} {unit}" if unit == "B" else f"{n:,.1f} {unit}"
        n /= 1024
    return f"{n:,.1f} GB"


def _stats(repo: CacheStorageRepository | None) -> CacheStatsService | None:
    """Read-only stats over the cache DB; None when the DB was never created."""
    if repo is None:
        if not db_exists(DB_PATH):
            return None
        repo = CacheStorageRepository(read_only=True)
    return CacheStatsService(repo=repo)


def show_caches(repo: CacheStorageRepository | None = None) -> None:
    """Print one line per bucket."""
    stats = _stats(repo)
    summaries = stats.summaries() if stats else []

    if not summaries:
        print(NO_CACHES)
        return

    print("\n" + "=" * 60)
    print(f"CACHE STORAGE ({DB_PATH})")
    print("=" * 60)
    for s in summaries:
        marker = "✅" if s.name == CACHE_NAME else "🗑️ "
        print(f"\n{marker} {s.name}")
        print(f"  Entries: {s.entries:,}")
        print(f"  Size: {_size(s.total_bytes)}")
        if s.created_at:
            print(f"  Created: {s.created_at:%Y-%m-%d %H:%M}")
    print("\n" + "=" * 60 + "\n")


def show_stats(bucket: str | None = None, repo: CacheStorageRepository | None = None) -> None:
    """Print entries and bytes per asset kind."""
    stats = _stats(repo)
    if stats is None:
        print(NO_CACHES)
        return

    kinds = stats.by_kind(bucket)
    if not kinds:
        print(f"\n⚠️  No entries in {bucket or 'any cache'}.\n")
        return

    print(f"\nAsset kinds in {bucket or 'all caches'}:")
    for k in kinds:
        print(f"  {k['kind']:<12} {k['entries']:>6,} entries  {_size(k['bytes']):>10}")
    print()


def clear_caches(repo: CacheStorageRepository | None = None) -> int:
    """Delete every bucket. Returns the number deleted."""
    if repo is None:
        repo = CacheStorageRepository(read_only=False)
    deleted = sum(repo.delete_bucket(name) for name in repo.bucket_names())
    logger.info("Deleted {} cache(s)", deleted)
    return deleted


async def warm(
    conn: duckdb.DuckDBPyConnection | None = None,
    origin: str = SITE_ORIGIN,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Register the worker in-process so its install step precaches the shell."""
    container.init(conn=conn, origin=origin, transport=transport)
    try:
        registration = await container.registry.register(WORKER_SCRIPT_PATH, WORKER_SCOPE)
        active = registration.active
        logger.info(
            "Worker {} for scope {} ({})",
            active.id if active else "-",
            registration.scope,
            active.state if active else "not active",
        )
    finally:
        await container.close()


def main():
    setup_logging(level="INFO", to_file=True)
    args = sys.argv[1:]
    command = args[0] if args else "caches"

    if command == "caches":
        show_caches()
    elif command == "stats":
        show_stats(args[1] if len(args) > 1 else None)
    elif command == "clear":
        clear_caches()
        show_caches()
    elif command == "warm":
        logger.info("Warming {} from {}", CACHE_NAME, SITE_ORIGIN)
        asyncio.run(warm())
        show_caches()
    else:
        print(__doc__)
        sys.exit(1)

    close_db()


if __name__ == "__main__":
    main()
