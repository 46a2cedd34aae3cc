"""Repositories package - data access layer for our database."""

from app.repositories.analytics import DataPointRepository, SiteRepository
from app.repositories.base import BaseRepository
from app.repositories.db import (
    close_db,
    connect,
    get_db,
    get_write_connection,
    init_tables,
    memory_db,
)

__all__ = [
    # DB
    "get_db",
    "close_db",
    "connect",
    "memory_db",
    "init_tables",
    "get_write_connection",
    # Base
    "BaseRepository",
    # Analytics
    "SiteRepository",
    "DataPointRepository",
]
