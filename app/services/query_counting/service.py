"""Query counting service - (date, query) rows over long periods."""

from datetime import date

from loguru import logger

from app.models.analytics import DataPoint, QueryResult
from app.services.query_counting.fetcher import AdaptiveChunkFetcher
from app.services.search_analytics.cache_reader import CacheReader
from app.services.search_analytics.cache_writer import CacheWriter
from settings import QUERY_COUNTING_MAX_AGE_HOURS


class QueryCountingService:
    """Durable cache first, adaptive chunked fetch on a miss, then write back."""

    def __init__(
        self,
        fetcher: AdaptiveChunkFetcher,
        reader: CacheReader,
        writer: CacheWriter,
        max_age_hours: float = QUERY_COUNTING_MAX_AGE_HOURS,
    ):
        self._fetcher = fetcher
        self._reader = reader
        self._writer = writer
        self._max_age_hours = max_age_hours

    async def get_data(
        self,
        site_url: str,
        owner_id: str,
        start_date: date,
        end_date: date,
        force_refresh: bool = False,
    ) -> QueryResult:
        dimensions = [str(d) for d in self._fetcher.dimensions]

        if force_refresh:
            self._fetcher.invalidate(site_url, start_date, end_date)
        else:
            cached = self._reader.read(site_url, start_date, end_date, dimensions, self._max_age_hours)
            if cached is not None:
                logger.info("Query counting cache hit: {} rows", len(cached))
                return QueryResult(rows=[c.to_row(dimensions) for c in cached], cached=True)

        fetched = await self._fetcher.fetch(site_url, start_date, end_date)
        if not fetched.rows:
            return QueryResult(rows=[], cached=False, fetch=fetched)

        points = [DataPoint.from_row(r, dimensions) for r in fetched.rows]
        saved = await self._writer.write(site_url, owner_id, points)
        return QueryResult(
            rows=fetched.rows,
            cached=False,
            cache_saved=saved.success,
            cache_errors=saved.errors,
            fetch=fetched,
        )
