"""Query counting - adaptive chunked fetching with a chunk cache."""

from app.services.query_counting.chunk_cache import (
    ChunkCache,
    LocalStorage,
    StorageQuotaExceededError,
)
from app.services.query_counting.chunking import days_between, split_date_range, split_in_half
from app.services.query_counting.fetcher import QUERY_COUNTING_DIMENSIONS, AdaptiveChunkFetcher
from app.services.query_counting.service import QueryCountingService

__all__ = [
    "ChunkCache",
    "LocalStorage",
    "StorageQuotaExceededError",
    "days_between",
    "split_date_range",
    "split_in_half",
    "AdaptiveChunkFetcher",
    "QUERY_COUNTING_DIMENSIONS",
    "QueryCountingService",
]
