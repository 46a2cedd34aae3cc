"""Models package - DDL and entities."""

from app.models.analytics import (
    DATA_POINT_DDL,
    DATA_POINT_INDEXES,
    SITE_DDL,
    SITE_SEQ_DDL,
    CacheStats,
    DataPoint,
    DateChunk,
    DimensionShape,
    FetchResult,
    Site,
    WriteResult,
)
from app.models.common import BaseEntity

ALL_DDL = [
    SITE_SEQ_DDL,
    SITE_DDL,
    DATA_POINT_DDL,
    *DATA_POINT_INDEXES,
]

__all__ = [
    # Common
    "BaseEntity",
    # Analytics
    "SITE_DDL",
    "DATA_POINT_DDL",
    "DataPoint",
    "DimensionShape",
    "Site",
    "DateChunk",
    "WriteResult",
    "CacheStats",
    "FetchResult",
    # All DDL
    "ALL_DDL",
]
