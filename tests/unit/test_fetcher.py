"""Tests for the adaptive chunk fetcher."""

import asyncio
from datetime import date

import pytest

from app.models.analytics import DateChunk
from app.services.query_counting import AdaptiveChunkFetcher, ChunkCache, LocalStorage
from conftest import FakeUpstream, days
from gsc_client import Dimension, SearchAnalyticsRow

SITE = "sc-domain:example.com"
JAN_1 = date(2024, 1, 1)
JAN_20 = date(2024, 1, 20)


def fetch(fetcher: AdaptiveChunkFetcher, start: date = JAN_1, end: date = JAN_20):
    return asyncio.run(fetcher.fetch(SITE, start, end))


def keys(rows) -> list[tuple]:
    return [tuple(r.keys) for r in rows]


class CappedUpstream(FakeUpstream):
    """Full row cap for any multi-day range, one under the cap for a single day."""

    async def query(self, site_url, start_date, end_date, dimensions, row_limit, **kwargs):
        self.calls.append((start_date, end_date, [str(d) for d in dimensions], row_limit))
        count = row_limit - 1 if start_date == end_date else row_limit
        return [SearchAnalyticsRow(keys=[start_date.isoformat(), f"q{i}"], clicks=1, impressions=1) for i in range(count)]


class FailingHalfUpstream(FakeUpstream):
    """Answers wide ranges at the cap, fails any narrow range covering `fail_on`."""

    async def query(self, site_url, start_date, end_date, dimensions, row_limit, **kwargs):
        self.calls.append((start_date, end_date, [str(d) for d in dimensions], row_limit))
        if (end_date - start_date).days < 4 and any(start_date <= d <= end_date for d in self.fail_on):
            raise RuntimeError("upstream error")
        await asyncio.sleep(0.01)
        return self.rows_for(start_date, end_date, dimensions)[:row_limit]


class TestCoverage:
    def test_chunked_equals_unchunked(self):
        upstream = FakeUpstream(per_day=3)
        result = fetch(AdaptiveChunkFetcher(upstream, row_limit=1000, chunk_days=7))

        direct = upstream.rows_for(JAN_1, JAN_20, [Dimension.DATE, Dimension.QUERY])
        assert result.complete
        assert keys(result.rows) == keys(direct)
        assert [(c[0], c[1]) for c in upstream.calls] == [
            (date(2024, 1, 1), date(2024, 1, 7)),
            (date(2024, 1, 8), date(2024, 1, 14)),
            (date(2024, 1, 15), date(2024, 1, 20)),
        ]

    def test_short_range_is_one_call(self):
        upstream = FakeUpstream()
        fetch(AdaptiveChunkFetcher(upstream, chunk_days=7), JAN_1, date(2024, 1, 7))
        assert len(upstream.calls) == 1

    def test_requests_date_and_query(self):
        upstream = FakeUpstream()
        fetch(AdaptiveChunkFetcher(upstream), JAN_1, JAN_1)
        assert upstream.calls[0][2] == ["date", "query"]

    def test_order_survives_completion_order(self):
        # earlier chunks answer last
        upstream = FakeUpstream(delay={JAN_1: 0.05, date(2024, 1, 8): 0.02})
        result = fetch(AdaptiveChunkFetcher(upstream, chunk_days=7))

        dates = [r.keys[0] for r in result.rows]
        assert dates == sorted(dates)
        assert {r.keys[0] for r in result.rows} == {d.isoformat() for d in days(JAN_1, JAN_20)}

    def test_needs_date_dimension(self):
        with pytest.raises(ValueError):
            AdaptiveChunkFetcher(FakeUpstream(), dimensions=[Dimension.QUERY])


class TestSplitting:
    def test_splits_until_under_cap(self):
        limit = 10
        upstream = CappedUpstream()
        result = fetch(AdaptiveChunkFetcher(upstream, row_limit=limit, chunk_days=7, max_depth=5))

        assert result.complete
        assert len(result.rows) == 20 * (limit - 1)
        assert {r.keys[0] for r in result.rows} == {d.isoformat() for d in days(JAN_1, JAN_20)}
        assert sorted(c[0] for c in upstream.calls if c[0] == c[1]) == days(JAN_1, JAN_20)

    def test_split_halves_keep_order(self):
        result = fetch(AdaptiveChunkFetcher(CappedUpstream(), row_limit=5, chunk_days=7), JAN_1, date(2024, 1, 7))
        dates = [r.keys[0] for r in result.rows]
        assert dates == sorted(dates)

    def test_single_day_at_cap_is_truncated(self):
        upstream = FakeUpstream(per_day=50)
        result = fetch(AdaptiveChunkFetcher(upstream, row_limit=10), JAN_1, JAN_1)

        assert len(result.rows) == 10
        assert result.truncated_days == [JAN_1]
        assert not result.complete
        assert len(upstream.calls) == 1

    def test_depth_limit_leaves_gaps(self):
        upstream = FakeUpstream(per_day=50)
        result = fetch(AdaptiveChunkFetcher(upstream, row_limit=10, chunk_days=7, max_depth=1), JAN_1, date(2024, 1, 7))

        assert result.rows == []
        assert sum(g.days for g in result.gaps) == 7
        assert not result.complete


class TestFailures:
    def test_failed_middle_chunk_keeps_neighbours(self):
        upstream = FakeUpstream(fail_on={date(2024, 1, 10)})
        result = fetch(AdaptiveChunkFetcher(upstream, chunk_days=7))

        returned = {r.keys[0] for r in result.rows}
        assert returned == {d.isoformat() for d in days(JAN_1, date(2024, 1, 7)) + days(date(2024, 1, 15), JAN_20)}
        assert result.failed_chunks == [DateChunk(date(2024, 1, 8), date(2024, 1, 14))]

    def test_call_timeout_fails_chunk(self):
        upstream = FakeUpstream(delay={date(2024, 1, 15): 1.0})
        result = fetch(AdaptiveChunkFetcher(upstream, chunk_days=7, call_timeout=0.05))

        assert result.failed_chunks == [DateChunk(date(2024, 1, 15), JAN_20)]
        assert len(result.rows) == 14 * upstream.per_day

    def test_failed_half_fails_whole_chunk(self):
        upstream = FailingHalfUpstream(per_day=50, fail_on={date(2024, 1, 2)})
        result = fetch(AdaptiveChunkFetcher(upstream, row_limit=100, chunk_days=7), JAN_1, date(2024, 1, 7))

        assert result.failed_chunks == [DateChunk(JAN_1, date(2024, 1, 7))]
        assert result.rows == []


class TestConcurrency:
    def test_in_flight_calls_bounded(self):
        upstream = FakeUpstream(delay={d: 0.01 for d in days(JAN_1, date(2024, 3, 31))})
        fetcher = AdaptiveChunkFetcher(upstream, chunk_days=7, max_concurrent=2)
        fetch(fetcher, JAN_1, date(2024, 3, 31))

        assert upstream.max_in_flight <= 2
        assert fetcher.call_count == len(upstream.calls) == 13


class TestChunkCacheUse:
    def test_second_fetch_served_from_cache(self):
        upstream = FakeUpstream()
        fetcher = AdaptiveChunkFetcher(upstream, cache=ChunkCache(LocalStorage()), chunk_days=7)

        first = fetch(fetcher)
        second = fetch(fetcher)

        assert first.cache_misses == 3
        assert second.cache_hits == 3
        assert len(upstream.calls) == 3
        assert keys(second.rows) == keys(first.rows)

    def test_failed_chunk_not_cached(self):
        cache = ChunkCache(LocalStorage())
        fetch(AdaptiveChunkFetcher(FakeUpstream(fail_on={date(2024, 1, 10)}), cache=cache, chunk_days=7))
        assert len(cache) == 2

    def test_gaps_not_cached(self):
        cache = ChunkCache(LocalStorage())
        fetcher = AdaptiveChunkFetcher(FakeUpstream(per_day=50), cache=cache, row_limit=10, max_depth=0)
        fetch(fetcher, JAN_1, date(2024, 1, 7))
        assert len(cache) == 0

    def test_invalidate(self):
        upstream = FakeUpstream()
        fetcher = AdaptiveChunkFetcher(upstream, cache=ChunkCache(LocalStorage()), chunk_days=7)
        fetch(fetcher)

        assert fetcher.invalidate(SITE, JAN_1, JAN_20) == 3
        fetch(fetcher)
        assert len(upstream.calls) == 6


class BrokenCache(ChunkCache):
    def set(self, *args, **kwargs):
        raise RuntimeError("storage unavailable")


class TestChunkCacheFailures:
    def test_cache_write_error_does_not_fail_fetch(self):
        upstream = FakeUpstream()
        result = fetch(AdaptiveChunkFetcher(upstream, cache=BrokenCache(LocalStorage()), chunk_days=7))

        assert result.complete
        assert len(result.rows) == 20 * upstream.per_day

    def test_quota_pressure_with_legacy_entry(self):
        storage = LocalStorage(quota_bytes=400)
        storage.set_item("qc-chunk-legacy", "[]")
        upstream = FakeUpstream(per_day=5)

        result = fetch(AdaptiveChunkFetcher(upstream, cache=ChunkCache(storage), chunk_days=7), JAN_1, date(2024, 1, 7))

        assert result.complete
        assert len(result.rows) == 35
