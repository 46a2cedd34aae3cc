"""Tests for API validation and views."""

import asyncio
from datetime import date

import pytest

from app.container import container
from app.services.search_analytics import CacheAdmin
from conftest import FakeUpstream
from web.api import errors
from web.api.errors import ValidationError
from web.api.gsc_cache import clear_cache, get_cache_stats
import web.api.search_analytics.views as views
from web.api.search_analytics import query_search_analytics
from web.api.search_analytics.schemas import SearchAnalyticsQuery

SITE = "https://example.com/"


class TestValidation:
    @pytest.mark.parametrize("site_url", [SITE, "http://example.com/", "sc-domain:example.com"])
    def test_site_url_ok(self, site_url):
        errors.validate_site_url(site_url)

    @pytest.mark.parametrize("site_url", ["", "example.com", "ftp://example.com/"])
    def test_site_url_bad(self, site_url):
        with pytest.raises(ValidationError):
            errors.validate_site_url(site_url)

    def test_date_range(self):
        with pytest.raises(ValidationError):
            errors.validate_date_range(date(2024, 1, 2), date(2024, 1, 1))

    def test_unknown_dimension(self):
        with pytest.raises(ValidationError):
            errors.validate_dimensions(["date", "searchAppearance"])

    def test_duplicate_dimension(self):
        with pytest.raises(ValidationError):
            errors.validate_dimensions(["date", "date"])

    @pytest.mark.parametrize("row_limit", [0, 25001])
    def test_row_limit(self, row_limit):
        with pytest.raises(ValidationError):
            errors.validate_row_limit(row_limit)


@pytest.fixture
def wired(monkeypatch, reader, writer, sites, points):
    """Point the global container at the in-memory store."""
    monkeypatch.setattr(container, "_initialized", True)
    monkeypatch.setattr(container, "reader", reader, raising=False)
    monkeypatch.setattr(container, "writer", writer, raising=False)
    monkeypatch.setattr(container, "cache_admin", CacheAdmin(sites, points), raising=False)
    return container


class FakeClientFactory:
    """Stands in for SearchAnalyticsClient as an async context manager."""

    def __init__(self):
        self.upstream = FakeUpstream()

    def __call__(self, *args, **kwargs):
        return self

    async def __aenter__(self):
        return self.upstream

    async def __aexit__(self, *_):
        return None


class TestSearchAnalyticsView:
    def test_miss_then_hit(self, wired, monkeypatch):
        factory = FakeClientFactory()
        monkeypatch.setattr(views, "SearchAnalyticsClient", factory)
        request = SearchAnalyticsQuery(siteUrl=SITE, startDate="2024-01-01", endDate="2024-01-03", dimensions=["date"])

        first = asyncio.run(query_search_analytics(request, "user-1", "token"))
        second = asyncio.run(query_search_analytics(request, "user-1", "token"))

        assert not first.cached
        assert first.cache_saved
        assert second.cached
        assert len(second.rows) == 3
        assert len(factory.upstream.calls) == 1

    def test_rejects_bad_request(self, wired):
        request = SearchAnalyticsQuery(siteUrl=SITE, startDate="2024-01-01", endDate="2024-01-03", rowLimit=0)
        with pytest.raises(ValidationError):
            asyncio.run(query_search_analytics(request, "user-1", "token"))


class TestCacheViews:
    def test_stats_empty(self, wired):
        response = get_cache_stats(SITE)
        assert response.site_url == SITE
        assert response.stats is None

    def test_stats_and_clear(self, wired, monkeypatch):
        monkeypatch.setattr(views, "SearchAnalyticsClient", FakeClientFactory())
        request = SearchAnalyticsQuery(siteUrl=SITE, startDate="2024-01-01", endDate="2024-01-03", dimensions=["date"])
        asyncio.run(query_search_analytics(request, "user-1", "token"))

        assert get_cache_stats(SITE).stats.total_data_points == 3

        cleared = clear_cache(SITE)
        assert cleared.success
        assert cleared.rows_deleted == 3
        assert get_cache_stats(SITE).stats is None
