"""Cache administration - statistics, clearing, retention sweep."""

import calendar
from datetime import date

from loguru import logger

from app.models.analytics import CacheStats
from app.repositories.analytics import DataPointRepository, SiteRepository
from settings import RETENTION_MONTHS

BYTES_PER_ROW = 200


def months_before(day: date, months: int) -> date:
    """Same day `months` earlier, clamped to the end of a shorter month."""
    year, month = divmod(day.year * 12 + day.month - 1 - months, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def size_estimate(rows: int) -> str:
    total = rows * BYTES_PER_ROW
    if total > 1024 * 1024:
        return f"{total / (1024 * 1024):.2f} MB"
    return f"{total / 1024:.2f} KB"


class CacheAdmin:
    """Operator-facing cache maintenance."""

    def __init__(self, site_repo: SiteRepository, data_repo: DataPointRepository):
        self._sites = site_repo
        self._points = data_repo

    def stats(self, site_url: str) -> CacheStats | None:
        """Cache statistics for a site, None if nothing is cached."""
        site = self._sites.get(site_url)
        if not site:
            return None

        total, first, last, fetched = self._points.summary(site.id)
        if not total:
            return None

        return CacheStats(
            total_data_points=total,
            start_date=first,
            end_date=last,
            last_updated=fetched,
            size_estimate=size_estimate(total),
        )

    def clear(self, site_url: str, start_date: date | None = None, end_date: date | None = None) -> int:
        """Delete cached rows for a site, optionally within a date range."""
        site = self._sites.get(site_url)
        if not site:
            return 0

        count = self._points.delete_range(site.id, start_date, end_date)
        logger.info("Cleared {} rows for {}", count, site_url)
        return count

    def cleanup_old_data(self, today: date | None = None) -> int:
        """Drop rows older than the upstream retention window."""
        cutoff = months_before(today or date.today(), RETENTION_MONTHS)
        count = self._points.delete_older_than(cutoff)
        logger.info("Cleaned up {} data points older than {}", count, cutoff)
        return count
