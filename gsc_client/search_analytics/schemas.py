"""Search analytics API schemas."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field


class Dimension(StrEnum):
    """Grouping axes accepted by the search analytics endpoint."""

    DATE = "date"
    QUERY = "query"
    PAGE = "page"
    COUNTRY = "country"
    DEVICE = "device"


class SearchAnalyticsRequest(BaseModel):
    """Body of a searchAnalytics/query call."""

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    dimensions: list[Dimension] = []
    row_limit: int = Field(alias="rowLimit", default=1000)
    dimension_filter_groups: list[dict] | None = Field(alias="dimensionFilterGroups", default=None)

    class Config:
        populate_by_name = True


class SearchAnalyticsRow(BaseModel):
    """One result row; `keys` follow the requested dimension order."""

    keys: list[str] = []
    clicks: int = 0
    impressions: int = 0
    ctr: float = 0.0
    position: float = 0.0


class SearchAnalyticsResponse(BaseModel):
    """Query response. The API omits `rows` entirely when nothing matched."""

    rows: list[SearchAnalyticsRow] = []
    response_aggregation_type: str | None = Field(alias="responseAggregationType", default=None)

    class Config:
        populate_by_name = True
