"""Services package - service class exports."""

from app.services.search_analytics import CacheReader, CacheWriter, SearchAnalyticsService
from app.services.query_counting import AdaptiveChunkFetcher, ChunkCache, QueryCountingService

__all__ = [
    "CacheReader",
    "CacheWriter",
    "SearchAnalyticsService",
    "AdaptiveChunkFetcher",
    "ChunkCache",
    "QueryCountingService",
]
