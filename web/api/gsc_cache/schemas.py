"""Cache administration API response schemas."""

from datetime import date, datetime

from pydantic import BaseModel


class CacheStatsItem(BaseModel):
    """Cache statistics for a site."""

    total_data_points: int
    start_date: date | None
    end_date: date | None
    last_updated: datetime | None
    size_estimate: str


class CacheStatsResponse(BaseModel):
    """Cache statistics response; stats is None when nothing is cached."""

    site_url: str
    stats: CacheStatsItem | None


class CacheClearResponse(BaseModel):
    """Cache clear response."""

    success: bool
    rows_deleted: int
    message: str
