"""Search analytics data point model.

Every dimension slot holds a value; the empty string means the dimension was
not part of the grouping that produced the row. This keeps the composite key
total so "not requested" never collides with "no data".
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from app.models.common import BaseEntity
from gsc_client.search_analytics.schemas import SearchAnalyticsRow

EMPTY = ""

DIMENSION_SLOTS = ("query", "page", "country", "device")

DATA_POINT_DDL = """
CREATE TABLE IF NOT EXISTS data_point (
    site_id INTEGER NOT NULL,
    date DATE NOT NULL,
    query VARCHAR NOT NULL DEFAULT '',
    page VARCHAR NOT NULL DEFAULT '',
    country VARCHAR NOT NULL DEFAULT '',
    device VARCHAR NOT NULL DEFAULT '',
    clicks INTEGER NOT NULL,
    impressions INTEGER NOT NULL,
    ctr DOUBLE NOT NULL,
    position DOUBLE NOT NULL,
    fetched_at TIMESTAMP NOT NULL,
    PRIMARY KEY (site_id, date, query, page, country, device)
)
"""

DATA_POINT_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_data_point_fetched ON data_point(site_id, fetched_at)",
]


@dataclass
class DataPoint(BaseEntity):
    """One row of search analytics for a site and day."""

    date: date
    clicks: int
    impressions: int
    ctr: float
    position: float
    query: str = EMPTY
    page: str = EMPTY
    country: str = EMPTY
    device: str = EMPTY
    fetched_at: datetime | None = field(default=None, compare=False)

    def key(self) -> tuple:
        return (self.date, self.query, self.page, self.country, self.device)

    def dimension_value(self, name: str) -> str:
        if name == "date":
            return self.date.isoformat()
        return getattr(self, name)

    @classmethod
    def from_row(cls, row: SearchAnalyticsRow, dimensions: list[str]) -> "DataPoint":
        """Build a data point from an API row; dimensions not requested stay empty."""
        values = dict(zip((str(d) for d in dimensions), row.keys, strict=False))
        if "date" not in values:
            raise ValueError("Row has no date key; only dated rows can be stored")
        return cls(
            date=date.fromisoformat(values["date"]),
            query=values.get("query", EMPTY),
            page=values.get("page", EMPTY),
            country=values.get("country", EMPTY),
            device=values.get("device", EMPTY),
            clicks=row.clicks,
            impressions=row.impressions,
            ctr=row.ctr,
            position=row.position,
        )

    def to_row(self, dimensions: list[str]) -> SearchAnalyticsRow:
        """Project back to API row shape, keys in requested order."""
        return SearchAnalyticsRow(
            keys=[self.dimension_value(d) for d in dimensions],
            clicks=self.clicks,
            impressions=self.impressions,
            ctr=self.ctr,
            position=self.position,
        )


@dataclass
class PageMetrics(BaseEntity):
    """Per-page totals rolled up over a date range."""

    page: str
    clicks: int
    impressions: int
    ctr: float
    position: float

    def to_row(self, dimensions: list[str]) -> SearchAnalyticsRow:
        return SearchAnalyticsRow(
            keys=[self.page],
            clicks=self.clicks,
            impressions=self.impressions,
            ctr=self.ctr,
            position=self.position,
        )
