"""Adaptive chunked fetching under a per-call row cap.

The upstream never says whether a response was truncated; a response holding
exactly `row_limit` rows is assumed to be. Such a chunk is halved and both
halves are fetched again until every piece fits under the cap or is a single
day.
"""

import asyncio
from datetime import date

from loguru import logger

from app.models.analytics import DateChunk, FetchResult
from app.services.query_counting.chunk_cache import ChunkCache
from app.services.query_counting.chunking import days_between, split_date_range, split_in_half
from app.services.search_analytics.service import UpstreamClient
from gsc_client import Dimension, SearchAnalyticsRow
from settings import (
    CALL_TIMEOUT,
    CHUNK_SIZE_DAYS,
    CHUNK_TIMEOUT,
    MAX_CONCURRENT,
    MAX_SPLIT_DEPTH,
    ROW_LIMIT,
)

QUERY_COUNTING_DIMENSIONS = [Dimension.DATE, Dimension.QUERY]


class AdaptiveChunkFetcher:
    """Fetch rows for wide ranges without losing rows to the cap.

    Defaults to the (date, query) pair; any dimension list that includes
    `date` splits the same way.
    """

    def __init__(
        self,
        client: UpstreamClient,
        cache: ChunkCache | None = None,
        row_limit: int = ROW_LIMIT,
        chunk_days: int = CHUNK_SIZE_DAYS,
        max_depth: int = MAX_SPLIT_DEPTH,
        max_concurrent: int = MAX_CONCURRENT,
        call_timeout: float = CALL_TIMEOUT,
        chunk_timeout: float = CHUNK_TIMEOUT,
        dimensions: list[Dimension] | None = None,
    ):
        self._client = client
        self._cache = cache
        self._row_limit = row_limit
        self._chunk_days = chunk_days
        self._max_depth = max_depth
        self._call_timeout = call_timeout
        self._chunk_timeout = chunk_timeout
        self._dimensions = list(dimensions or QUERY_COUNTING_DIMENSIONS)
        if Dimension.DATE not in self._dimensions:
            raise ValueError("Chunked fetching needs the date dimension")
        self._sem = asyncio.Semaphore(max_concurrent)
        self._call_count = 0

    @property
    def call_count(self) -> int:
        return self._call_count

    @property
    def dimensions(self) -> list[Dimension]:
        return list(self._dimensions)

    async def fetch(self, site_url: str, start_date: date, end_date: date) -> FetchResult:
        """Rows for [start_date, end_date] in chunk order."""
        if end_date < start_date:
            raise ValueError(f"end_date {end_date} is before start_date {start_date}")

        width = days_between(start_date, end_date)
        if width <= self._chunk_days:
            chunks = [DateChunk(start_date, end_date)]
            logger.info("Fetching {} days for {} as a single chunk", width, site_url)
        else:
            chunks = split_date_range(start_date, end_date, self._chunk_days)
            logger.info("Fetching {} days for {} in {} chunks", width, site_url, len(chunks))

        # gather keeps input order regardless of completion order
        results = await asyncio.gather(
            *[self._fetch_chunk(site_url, chunk, i, len(chunks)) for i, chunk in enumerate(chunks)]
        )

        merged = FetchResult()
        for result in results:
            merged.extend(result)

        hit_rate = merged.cache_hits / len(chunks) * 100
        logger.info(
            "Total rows: {} | Cache: {} hits, {} misses ({:.0f}% hit rate)",
            len(merged.rows),
            merged.cache_hits,
            merged.cache_misses,
            hit_rate,
        )
        if not merged.complete:
            logger.warning(
                "Incomplete result for {}: {} truncated days, {} gaps, {} failed chunks",
                site_url,
                len(merged.truncated_days),
                len(merged.gaps),
                len(merged.failed_chunks),
            )
        return merged

    def invalidate(self, site_url: str, start_date: date, end_date: date) -> int:
        """Drop cached chunks for a range; returns how many were cleared."""
        if self._cache is None:
            return 0
        return self._cache.invalidate(site_url, start_date, end_date, self._chunk_days)

    async def _fetch_chunk(self, site_url: str, chunk: DateChunk, index: int, total: int) -> FetchResult:
        """One outer chunk: cache first, then a recursive fetch. Never raises."""
        if self._cache is not None:
            cached = self._cache.get(site_url, chunk.start_date, chunk.end_date)
            if cached is not None:
                logger.debug("Chunk {}/{}: {} rows (cached)", index + 1, total, len(cached))
                return FetchResult(rows=cached, cache_hits=1)

        try:
            async with asyncio.timeout(self._chunk_timeout):
                result = await self._fetch_recursive(site_url, chunk, 0)
        except Exception as e:
            logger.error("Chunk {}/{} {} failed: {!r}", index + 1, total, chunk, e)
            return FetchResult(failed_chunks=[chunk], cache_misses=1)

        result.cache_misses = 1
        logger.debug("Chunk {}/{}: {} rows (fetched)", index + 1, total, len(result.rows))

        # ranges dropped at max depth would otherwise stay missing until the TTL
        if self._cache is not None and not result.gaps:
            try:
                self._cache.set(site_url, chunk.start_date, chunk.end_date, result.rows)
            except Exception as e:
                logger.warning("Chunk cache write failed for {}: {!r}", chunk, e)
        return result

    async def _fetch_recursive(self, site_url: str, chunk: DateChunk, depth: int) -> FetchResult:
        if depth > self._max_depth:
            logger.error("Max split depth reached for {}", chunk)
            return FetchResult(gaps=[chunk])

        rows = await self._call(site_url, chunk)
        if len(rows) < self._row_limit:
            return FetchResult(rows=rows)

        if chunk.days <= 1:
            logger.warning("Single day {} has {} rows - data will be incomplete", chunk.start_date, len(rows))
            return FetchResult(rows=rows, truncated_days=[chunk.start_date])

        first, second = split_in_half(chunk)
        logger.warning("Hit row limit ({} rows) for {}, splitting (depth {})", len(rows), chunk, depth + 1)

        # a failing half cancels its sibling
        async with asyncio.TaskGroup() as tg:
            first_task = tg.create_task(self._fetch_recursive(site_url, first, depth + 1))
            second_task = tg.create_task(self._fetch_recursive(site_url, second, depth + 1))

        result = first_task.result()
        result.extend(second_task.result())
        return result

    async def _call(self, site_url: str, chunk: DateChunk) -> list[SearchAnalyticsRow]:
        async with self._sem:
            self._call_count += 1
            async with asyncio.timeout(self._call_timeout):
                return await self._client.query(
                    site_url,
                    chunk.start_date,
                    chunk.end_date,
                    self.dimensions,
                    self._row_limit,
                )
