"""Dimension-aware reads from the durable cache."""

from collections.abc import Sequence
from datetime import date, datetime

import polars as pl
from loguru import logger

from app.models.analytics import DataPoint, PageMetrics, resolve_shape
from app.models.common import utcnow
from app.repositories.analytics import DataPointRepository, SiteRepository
from settings import DEFAULT_MAX_AGE_HOURS


def aggregate_pages(points: list[DataPoint]) -> list[PageMetrics]:
    """Roll (date, page) rows up to one row per page.

    Clicks and impressions are summed, position is averaged over the rows and
    CTR is recomputed from the totals.
    """
    records = [
        {"page": p.page, "clicks": p.clicks, "impressions": p.impressions, "position": p.position}
        for p in points
        if p.page
    ]
    if not records:
        return []

    totals = (
        pl.DataFrame(records)
        .group_by("page", maintain_order=True)
        .agg(
            pl.col("clicks").sum(),
            pl.col("impressions").sum(),
            pl.col("position").mean(),
        )
    )
    return [
        PageMetrics(
            page=r["page"],
            clicks=int(r["clicks"]),
            impressions=int(r["impressions"]),
            ctr=r["clicks"] / r["impressions"] if r["impressions"] > 0 else 0.0,
            position=float(r["position"]),
        )
        for r in totals.iter_rows(named=True)
    ]


class CacheReader:
    """Serve cached rows for a dimension combination, or None on a miss.

    A window is fresh only if its most recently fetched matching row is within
    `max_age_hours`; one stale window means a miss no matter how many rows match.
    """

    def __init__(self, site_repo: SiteRepository, data_repo: DataPointRepository):
        self._sites = site_repo
        self._points = data_repo

    def read(
        self,
        site_url: str,
        start_date: date,
        end_date: date,
        dimensions: Sequence[str],
        max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
        now: datetime | None = None,
    ) -> list[DataPoint] | list[PageMetrics] | None:
        shape = resolve_shape(dimensions)

        try:
            site = self._sites.get(site_url)
            if not site:
                logger.debug("Cache miss: unknown site {}", site_url)
                return None

            latest = self._points.latest_fetched_at(site.id, start_date, end_date, shape.filters)
            if latest is None:
                logger.debug("Cache miss: no {} rows for {} {}..{}", shape, site_url, start_date, end_date)
                return None

            age_hours = ((now or utcnow()) - latest).total_seconds() / 3600
            if age_hours > max_age_hours:
                logger.info("Cache stale: {} {} is {:.1f}h old", site_url, shape, age_hours)
                return None

            points = self._points.find(site.id, start_date, end_date, shape.filters)
        except Exception as e:
            logger.error("Cache read failed for {}: {}", site_url, e)
            return None

        if not points:
            return None

        logger.info("Cache hit: {} rows of {} for {} ({:.1f}h old)", len(points), shape, site_url, age_hours)

        if shape.aggregates_pages:
            return aggregate_pages(points)
        return points
