"""DuckDB connection management for the durable cache."""

import threading
from pathlib import Path

import duckdb
from loguru import logger

from app.models import ALL_DDL
from settings import DB_PATH

_local = threading.local()


def init_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create the cache schema. Every statement is IF NOT EXISTS, so reruns are safe."""
    for ddl in ALL_DDL:
        conn.execute(ddl)
    logger.debug("Cache schema ready")


def connect(path: str | Path = DB_PATH, read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Open the cache database, creating the file and schema on first use."""
    path = Path(path)
    if not path.exists():
        logger.warning("Cache DB not found: {}. Creating it.", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with duckdb.connect(str(path)) as bootstrap:
            init_tables(bootstrap)

    conn = duckdb.connect(str(path), read_only=read_only)
    if not read_only:
        init_tables(conn)
    logger.debug("Cache DB connected: {} (read_only={})", path, read_only)
    return conn


def memory_db() -> duckdb.DuckDBPyConnection:
    """Throwaway in-memory cache with the full schema."""
    conn = duckdb.connect(":memory:")
    init_tables(conn)
    return conn


def get_db(read_only: bool = False) -> duckdb.DuckDBPyConnection:
    """Thread-local connection shared by repositories of the serving process."""
    conn = getattr(_local, "conn", None)
    if conn is None:
        conn = _local.conn = connect(DB_PATH, read_only=read_only)
    return conn


def close_db() -> None:
    """Close the thread-local connection, if any."""
    conn = getattr(_local, "conn", None)
    if conn is not None:
        conn.close()
        _local.conn = None
        logger.debug("Cache DB connection closed")


def get_write_connection() -> duckdb.DuckDBPyConnection:
    """Dedicated writable connection for sync and maintenance jobs."""
    return connect(DB_PATH)
