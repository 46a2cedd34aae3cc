"""Search analytics service - durable cache in front of the upstream API."""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from loguru import logger

from app.models.analytics import (
    DataPoint,
    QueryResult,
    UnsupportedDimensionsError,
    resolve_shape,
)
from app.services.search_analytics.cache_reader import CacheReader
from app.services.search_analytics.cache_writer import CacheWriter
from gsc_client import Dimension, SearchAnalyticsRow
from settings import DEFAULT_MAX_AGE_HOURS


class UpstreamClient(Protocol):
    """Anything that can run one search analytics query."""

    async def query(
        self,
        site_url: str,
        start_date: date,
        end_date: date,
        dimensions: list[Dimension],
        row_limit: int,
        dimension_filter_groups: list[dict] | None = None,
    ) -> list[SearchAnalyticsRow]: ...


def is_cacheable(dimensions: Sequence[str]) -> bool:
    try:
        resolve_shape(dimensions)
    except UnsupportedDimensionsError:
        return False
    return True


class SearchAnalyticsService:
    """Search analytics with durable DB caching."""

    def __init__(self, client: UpstreamClient, reader: CacheReader, writer: CacheWriter):
        self._client = client
        self._reader = reader
        self._writer = writer

    async def query(
        self,
        site_url: str,
        owner_id: str,
        start_date: date,
        end_date: date,
        dimensions: list[str],
        row_limit: int = 1000,
        dimension_filter_groups: list[dict] | None = None,
        force_refresh: bool = False,
        max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
    ) -> QueryResult:
        """Serve from cache when possible, otherwise query upstream and write back.

        Filtered requests and dimension combinations without a cache mapping
        always go upstream and are never written back. Only rows carrying a
        date key are stored.
        """
        cacheable = is_cacheable(dimensions) and not dimension_filter_groups

        if cacheable and not force_refresh:
            cached = self._reader.read(site_url, start_date, end_date, dimensions, max_age_hours)
            if cached is not None:
                return QueryResult(rows=[c.to_row(dimensions) for c in cached], cached=True)
            logger.info("Cache miss for {} {}, querying upstream", site_url, dimensions)
        elif not cacheable:
            logger.debug("Bypassing cache for {} (dimensions={})", site_url, dimensions)

        kwargs = {"dimension_filter_groups": dimension_filter_groups} if dimension_filter_groups else {}
        rows = await self._client.query(
            site_url,
            start_date,
            end_date,
            [Dimension(d) for d in dimensions],
            row_limit,
            **kwargs,
        )
        logger.info("Upstream returned {} rows for {}", len(rows), site_url)

        if not (cacheable and rows and Dimension.DATE in dimensions):
            return QueryResult(rows=rows, cached=False)

        points = [DataPoint.from_row(r, dimensions) for r in rows]
        saved = await self._writer.write(site_url, owner_id, points)
        return QueryResult(
            rows=rows,
            cached=False,
            cache_saved=saved.success,
            cache_errors=saved.errors,
        )
