"""DuckDB connection management."""

import threading
from pathlib import Path

import duckdb
from loguru import logger

from app.models import ALL_DDL
from settings import DB_PATH

_local = threading.local()


def db_exists(path: str = DB_PATH) -> bool:
    """Check if database file exists."""
    return path == ":memory:" or Path(path).exists()


def _tables_exist(conn: duckdb.DuckDBPyConnection) -> bool:
    """Check if cache tables already exist."""
    result = conn.execute(
        "SELECT COUNT(*) FROM information_schema.tables WHERE table_name IN ('cache_bucket', 'cache_entry')"
    ).fetchone()
    return result[0] == 2


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Initialize all tables from DDL statements (idempotent - uses IF NOT EXISTS)."""
    if _tables_exist(conn):
        return

    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.info("Cache tables initialized")


def connect(path: str = DB_PATH, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Open a connection with tables in place (read-only needs an existing DB)."""
    if read_only and not db_exists(path):
        raise FileNotFoundError(f"Cache DB not found: {path}")

    conn = duckdb.connect(path, read_only=read_only)
    if not read_only:
        init_tables(conn)
    logger.debug("DB connected: {} (read_only={})", path, read_only)
    return conn


def get_db(read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Get thread-local connection."""
    if not hasattr(_local, "conn") or _local.conn is None:
        _local.conn = connect(DB_PATH, read_only=read_only)
    return _local.conn


def close_db() -> None:
    """Close thread-local connection."""
    if hasattr(_local, "conn") and _local.conn:
        _local.conn.close()
        _local.conn = None
        logger.debug("DB connection closed")
