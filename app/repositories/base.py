"""Base repository class."""

from typing import Any

import duckdb
from loguru import logger

from app.repositories.db import get_db


class BaseRepository:
    """Thin SQL helpers over a DuckDB connection.

    Repositories built without a connection share the thread-local one.
    Read-only repositories refuse every mutating call before touching the DB.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection | None = None, read_only: bool = True):
        self._db = conn if conn is not None else get_db(read_only)
        self._read_only = read_only
        logger.debug("{} initialized (read_only={})", self.__class__.__name__, read_only)

    def _require_writable(self, action: str) -> None:
        if self._read_only:
            raise RuntimeError(f"Cannot {action} in read-only mode")

    def execute(self, query: str, params: list | None = None) -> Any:
        return self._db.execute(query, params) if params else self._db.execute(query)

    def fetchall(self, query: str, params: list | None = None) -> list:
        return self.execute(query, params).fetchall()

    def fetchone(self, query: str, params: list | None = None) -> Any:
        return self.execute(query, params).fetchone()
