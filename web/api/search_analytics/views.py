"""Search analytics API views - thin layer over services."""

from datetime import date

from app.container import container
from gsc_client import SearchAnalyticsClient
from settings import MAX_CONCURRENT
from web.api.errors import (
    validate_date_range,
    validate_dimensions,
    validate_row_limit,
    validate_site_url,
)

from .schemas import QueryCountingResult, SearchAnalyticsQuery, SearchAnalyticsResult


async def query_search_analytics(
    request: SearchAnalyticsQuery,
    owner_id: str,
    access_token: str,
) -> SearchAnalyticsResult:
    """Search analytics rows, from the cache when fresh."""
    validate_site_url(request.site_url)
    validate_date_range(request.start_date, request.end_date)
    validate_dimensions(request.dimensions)
    validate_row_limit(request.row_limit)

    async with SearchAnalyticsClient(access_token, MAX_CONCURRENT) as client:
        result = await container.search_analytics(client).query(
            site_url=request.site_url,
            owner_id=owner_id,
            start_date=request.start_date,
            end_date=request.end_date,
            dimensions=request.dimensions,
            row_limit=request.row_limit,
            dimension_filter_groups=request.dimension_filter_groups,
            force_refresh=request.force_refresh,
        )

    return SearchAnalyticsResult(
        rows=result.rows,
        cached=result.cached,
        cache_saved=result.cache_saved,
        cache_errors=result.cache_errors or None,
    )


async def get_query_counting(
    site_url: str,
    start_date: date,
    end_date: date,
    owner_id: str,
    access_token: str,
    force_refresh: bool = False,
) -> QueryCountingResult:
    """(date, query) rows for a long period."""
    validate_site_url(site_url)
    validate_date_range(start_date, end_date)

    async with SearchAnalyticsClient(access_token, MAX_CONCURRENT) as client:
        result = await container.query_counting(client).get_data(
            site_url, owner_id, start_date, end_date, force_refresh=force_refresh
        )

    fetch = result.fetch
    return QueryCountingResult(
        rows=result.rows,
        cached=result.cached,
        complete=fetch.complete if fetch else True,
        truncated_days=fetch.truncated_days if fetch else [],
        failed_chunks=[str(c) for c in fetch.failed_chunks] if fetch else [],
    )
