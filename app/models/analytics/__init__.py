"""Analytics domain models - sites, data points, dimension shapes."""

from app.models.analytics.data_point import (
    DATA_POINT_DDL,
    DATA_POINT_INDEXES,
    DIMENSION_SLOTS,
    EMPTY,
    DataPoint,
    PageMetrics,
)
from app.models.analytics.dimensions import (
    DimensionShape,
    SlotFilter,
    UnsupportedDimensionsError,
    resolve_shape,
)
from app.models.analytics.entities import (
    CacheStats,
    DateChunk,
    FetchResult,
    QueryResult,
    Site,
    WriteResult,
)
from app.models.analytics.site import SITE_DDL, SITE_SEQ_DDL

__all__ = [
    "SITE_SEQ_DDL",
    "SITE_DDL",
    "DATA_POINT_DDL",
    "DATA_POINT_INDEXES",
    "DIMENSION_SLOTS",
    "EMPTY",
    "DataPoint",
    "PageMetrics",
    "DimensionShape",
    "SlotFilter",
    "UnsupportedDimensionsError",
    "resolve_shape",
    "Site",
    "DateChunk",
    "WriteResult",
    "CacheStats",
    "FetchResult",
    "QueryResult",
]
