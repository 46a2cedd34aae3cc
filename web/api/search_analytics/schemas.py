"""Search analytics API request/response schemas."""

from datetime import date

from pydantic import BaseModel, Field

from gsc_client import SearchAnalyticsRow


class SearchAnalyticsQuery(BaseModel):
    """Search analytics request."""

    site_url: str = Field(alias="siteUrl")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    dimensions: list[str] = []
    row_limit: int = Field(alias="rowLimit", default=1000)
    dimension_filter_groups: list[dict] | None = Field(alias="dimensionFilterGroups", default=None)
    force_refresh: bool = Field(alias="forceRefresh", default=False)

    class Config:
        populate_by_name = True


class SearchAnalyticsResult(BaseModel):
    """Search analytics response."""

    rows: list[SearchAnalyticsRow]
    cached: bool
    cache_saved: bool = False
    cache_errors: list[str] | None = None


class QueryCountingResult(BaseModel):
    """Query counting response with completeness diagnostics."""

    rows: list[SearchAnalyticsRow]
    cached: bool
    complete: bool = True
    truncated_days: list[date] = []
    failed_chunks: list[str] = []
