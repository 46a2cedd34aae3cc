"""Idempotent writes into the durable cache."""

import asyncio
from datetime import datetime

from loguru import logger

from app.models.analytics import DataPoint, WriteResult
from app.models.common import utcnow
from app.repositories.analytics import DataPointRepository, SiteRepository
from settings import MAX_ERROR_SAMPLES, WRITE_BATCH_SIZE


class CacheWriter:
    """Upsert fetched rows by their natural key, isolating per-row failures."""

    def __init__(
        self,
        site_repo: SiteRepository,
        data_repo: DataPointRepository,
        batch_size: int = WRITE_BATCH_SIZE,
        max_error_samples: int = MAX_ERROR_SAMPLES,
    ):
        self._sites = site_repo
        self._points = data_repo
        self._batch_size = batch_size
        self._max_error_samples = max_error_samples

    async def write(
        self,
        site_url: str,
        owner_id: str,
        points: list[DataPoint],
        now: datetime | None = None,
    ) -> WriteResult:
        """Write rows for a site owned by `owner_id`. Never raises."""
        result = WriteResult()
        if not points:
            return result

        fetched_at = now or utcnow()
        try:
            site = self._sites.get_or_create(site_url, owner_id)
            self._sites.touch_synced(site.id, fetched_at)
        except Exception as e:
            logger.error("Cache write failed for {}: {}", site_url, e)
            result.failed = len(points)
            result.errors.append(f"General error: {e}")
            return result

        for i in range(0, len(points), self._batch_size):
            for offset, point in enumerate(points[i : i + self._batch_size]):
                try:
                    self._points.upsert(site.id, point, fetched_at)
                except Exception as e:
                    result.failed += 1
                    if len(result.errors) < self._max_error_samples:
                        result.errors.append(f"Row {i + offset}: {e}")
                    logger.error("Insert error for row {}: {}", i + offset, e)
                else:
                    result.written += 1
            await asyncio.sleep(0)

        logger.info("Saved {}/{} rows to cache for {} ({} errors)", result.written, len(points), site_url, result.failed)
        return result
