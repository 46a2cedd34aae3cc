"""Search analytics API client."""

from datetime import date
from urllib.parse import quote

from gsc_client.base import BaseClient
from gsc_client.search_analytics.schemas import (
    Dimension,
    SearchAnalyticsRequest,
    SearchAnalyticsResponse,
    SearchAnalyticsRow,
)


class SearchAnalyticsClient(BaseClient):
    """Client for the Search Console search analytics endpoint."""

    async def query(
        self,
        site_url: str,
        start_date: date,
        end_date: date,
        dimensions: list[Dimension],
        row_limit: int,
        dimension_filter_groups: list[dict] | None = None,
    ) -> list[SearchAnalyticsRow]:
        """POST /sites/{site}/searchAnalytics/query - rows capped at row_limit."""
        request = SearchAnalyticsRequest(
            start_date=start_date,
            end_date=end_date,
            dimensions=dimensions,
            row_limit=row_limit,
            dimension_filter_groups=dimension_filter_groups,
        )
        body = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        data = await self._post(f"sites/{quote(site_url, safe='')}/searchAnalytics/query", body)
        return SearchAnalyticsResponse.model_validate(data).rows
