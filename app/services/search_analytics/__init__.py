"""Search analytics - durable cache reads, writes, and orchestration."""

from app.services.search_analytics.admin import CacheAdmin, months_before
from app.services.search_analytics.cache_reader import CacheReader, aggregate_pages
from app.services.search_analytics.cache_writer import CacheWriter
from app.services.search_analytics.service import (
    SearchAnalyticsService,
    UpstreamClient,
    is_cacheable,
)

__all__ = [
    "CacheAdmin",
    "CacheReader",
    "CacheWriter",
    "SearchAnalyticsService",
    "UpstreamClient",
    "aggregate_pages",
    "is_cacheable",
    "months_before",
]
