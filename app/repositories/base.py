"""Base repository class."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import duckdb
from loguru import logger

from app.repositories.db import get_db


class BaseRepository:
    """Base repository with common query helpers."""

    def __init__(self, conn: duckdb.DuckDBPyConnection | None = None, read_only: bool = False):
        self._db = conn if conn is not None else get_db(read_only)
        self._read_only = read_only
        logger.debug("{} initialized", self.__class__.__name__)

    def _ensure_writable(self, action: str) -> None:
        if self._read_only:
            raise RuntimeError(f"Cannot {action} in read-only mode")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run statements atomically; roll back on any error."""
        self._db.execute("BEGIN TRANSACTION")
        try:
            yield
            self._db.execute("COMMIT")
        except Exception:
            self._db.execute("ROLLBACK")
            raise

    def execute(self, query: str, params: list | None = None) -> Any:
        """Execute SQL query."""
        if params:
            return self._db.execute(query, params)
        return self._db.execute(query)

    def fetchall(self, query: str, params: list | None = None) -> list:
        """Execute and fetch all rows."""
        return self.execute(query, params).fetchall()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        """Execute and fetch one row."""
        return self.execute(query, params).fetchone()
