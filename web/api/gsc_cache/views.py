"""Cache administration API views - thin layer over services."""

from datetime import date

from app.container import container
from web.api.errors import validate_date_range, validate_site_url

from .schemas import CacheClearResponse, CacheStatsItem, CacheStatsResponse


def get_cache_stats(site_url: str) -> CacheStatsResponse:
    """Get cache statistics for a site."""
    validate_site_url(site_url)
    container.init()
    stats = container.cache_admin.stats(site_url)

    return CacheStatsResponse(
        site_url=site_url,
        stats=CacheStatsItem(**stats.to_dict()) if stats else None,
    )


def clear_cache(site_url: str, start_date: date | None = None, end_date: date | None = None) -> CacheClearResponse:
    """Clear cached data for a site, optionally within a date range."""
    validate_site_url(site_url)
    if start_date and end_date:
        validate_date_range(start_date, end_date)
    container.init()
    deleted = container.cache_admin.clear(site_url, start_date, end_date)

    return CacheClearResponse(
        success=True,
        rows_deleted=deleted,
        message=f"Cleared {deleted} cached data points",
    )
