"""Main sync orchestration."""

import asyncio
from datetime import date

import duckdb
from loguru import logger

from app.models.analytics import DataPoint, WriteResult
from app.repositories.analytics import DataPointRepository, SiteRepository
from app.repositories.db import get_write_connection
from app.services.query_counting import AdaptiveChunkFetcher
from app.services.search_analytics import CacheAdmin, CacheWriter, UpstreamClient
from etl.helpers import sync_window
from etl.validation import validate_site
from gsc_client import Dimension, SearchAnalyticsClient
from settings import GSC_ACCESS_TOKEN, MAX_CONCURRENT, SYNC_DAYS

# Dashboard views kept warm: site totals, per-page series, per-query series
SYNC_DIMENSIONS = [
    [Dimension.DATE],
    [Dimension.DATE, Dimension.PAGE],
    [Dimension.DATE, Dimension.QUERY],
]


async def sync_site(
    client: UpstreamClient,
    writer: CacheWriter,
    site_url: str,
    owner_id: str,
    start_date: date,
    end_date: date,
) -> dict[str, WriteResult]:
    """Fetch every dashboard shape for a site and write it to the cache."""
    logger.info("Syncing {} {}..{}", site_url, start_date, end_date)
    results = {}

    for dimensions in SYNC_DIMENSIONS:
        name = ",".join(dimensions)
        fetcher = AdaptiveChunkFetcher(client=client, dimensions=dimensions)
        fetched = await fetcher.fetch(site_url, start_date, end_date)
        if not fetched.complete:
            logger.warning("{} [{}]: incomplete fetch", site_url, name)

        points = [DataPoint.from_row(r, dimensions) for r in fetched.rows]
        results[name] = await writer.write(site_url, owner_id, points)
        logger.info("{} [{}]: {} rows", site_url, name, results[name].written)

    return results


async def _sync_async(
    site_urls: list[str] | None,
    owner_id: str | None,
    days: int,
) -> list[dict]:
    """Async sync implementation; the write connection is closed on every exit path."""
    conn = get_write_connection()
    try:
        return await _sync_sites(conn, site_urls, owner_id, days)
    finally:
        conn.close()


async def _sync_sites(
    conn: duckdb.DuckDBPyConnection,
    site_urls: list[str] | None,
    owner_id: str | None,
    days: int,
) -> list[dict]:
    sites = SiteRepository(conn, read_only=False)
    points = DataPointRepository(conn, read_only=False)
    writer = CacheWriter(site_repo=sites, data_repo=points)

    if site_urls:
        if owner_id is None:
            raise ValueError("owner_id is required when syncing explicit sites")
        targets = [(url, owner_id) for url in site_urls]
    else:
        targets = [(s.site_url, s.owner_id) for s in sites.list_sites()]

    if not targets:
        logger.warning("No sites to sync")

    start_date, end_date = sync_window(days)
    reports = []

    async with SearchAnalyticsClient(GSC_ACCESS_TOKEN, MAX_CONCURRENT) as client:
        for url, owner in targets:
            try:
                await sync_site(client, writer, url, owner, start_date, end_date)
            except Exception as e:
                logger.error("Failed to sync {}: {}", url, e)
                continue
            reports.append(validate_site(conn, url, start_date, end_date))

    CacheAdmin(site_repo=sites, data_repo=points).cleanup_old_data()

    logger.info("Sync complete!")
    return reports


def sync_all(
    site_urls: list[str] | None = None,
    owner_id: str | None = None,
    days: int = SYNC_DAYS,
) -> list[dict]:
    """Main sync entry point."""
    return asyncio.run(_sync_async(site_urls, owner_id, days))
