"""Shared fixtures: in-memory store and a scripted upstream."""

import asyncio
from datetime import date, timedelta

import pytest

from app.repositories.analytics import DataPointRepository, SiteRepository
from app.repositories.db import memory_db
from app.services.search_analytics import CacheReader, CacheWriter
from gsc_client import SearchAnalyticsRow


def days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


class FakeUpstream:
    """Scripted search analytics client.

    Returns up to `per_day` distinct rows for every day in the range, capped at
    row_limit like the real API. `fail_on` days make any call covering them
    raise; `delay` maps a chunk start date to a sleep before answering.
    """

    def __init__(self, per_day: int = 2, fail_on: set[date] | None = None, delay: dict | None = None):
        self.per_day = per_day
        self.fail_on = fail_on or set()
        self.delay = delay or {}
        self.calls: list[tuple[date, date, list[str], int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def rows_for(self, start: date, end: date, dimensions: list[str]) -> list[SearchAnalyticsRow]:
        rows, seen = [], set()
        for day in days(start, end):
            for i in range(self.per_day):
                values = {"date": day.isoformat(), "query": f"q{i}", "page": f"https://example.com/p{i}"}
                keys = [values.get(str(d), "x") for d in dimensions]
                if tuple(keys) in seen:
                    continue
                seen.add(tuple(keys))
                rows.append(
                    SearchAnalyticsRow(
                        keys=keys,
                        clicks=i + 1,
                        impressions=(i + 1) * 10,
                        ctr=0.1,
                        position=float(i + 1),
                    )
                )
        return rows

    async def query(self, site_url, start_date, end_date, dimensions, row_limit, **kwargs):
        self.calls.append((start_date, end_date, [str(d) for d in dimensions], row_limit))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay.get(start_date, 0))
            if any(start_date <= d <= end_date for d in self.fail_on):
                raise RuntimeError(f"upstream error for {start_date}..{end_date}")
            return self.rows_for(start_date, end_date, dimensions)[:row_limit]
        finally:
            self.in_flight -= 1


@pytest.fixture
def conn():
    connection = memory_db()
    yield connection
    connection.close()


@pytest.fixture
def sites(conn):
    return SiteRepository(conn, read_only=False)


@pytest.fixture
def points(conn):
    return DataPointRepository(conn, read_only=False)


@pytest.fixture
def reader(sites, points):
    return CacheReader(site_repo=sites, data_repo=points)


@pytest.fixture
def writer(sites, points):
    return CacheWriter(site_repo=sites, data_repo=points)
