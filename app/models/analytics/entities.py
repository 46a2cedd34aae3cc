"""Analytics domain entities - sites, chunks, and operation results."""

from dataclasses import dataclass, field
from datetime import date, datetime

from app.models.common import BaseEntity
from gsc_client.search_analytics.schemas import SearchAnalyticsRow


@dataclass
class Site(BaseEntity):
    """Search Console property owned by one tenant."""

    id: int
    site_url: str
    owner_id: str
    display_name: str | None
    last_synced_at: datetime | None
    created_at: datetime


@dataclass(frozen=True)
class DateChunk:
    """Inclusive, contiguous day range fetched as one unit."""

    start_date: date
    end_date: date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def __str__(self) -> str:
        return f"{self.start_date.isoformat()}..{self.end_date.isoformat()}"


@dataclass
class WriteResult(BaseEntity):
    """Outcome of a cache write; errors holds a bounded sample."""

    written: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.written > 0


@dataclass
class CacheStats(BaseEntity):
    """Durable cache summary for one site."""

    total_data_points: int
    start_date: date | None
    end_date: date | None
    last_updated: datetime | None
    size_estimate: str


@dataclass
class FetchResult:
    """Merged rows of an adaptive fetch plus what is known to be missing.

    `truncated_days` are single days that still hit the row cap, `gaps` are
    ranges dropped after the split depth ran out, and `failed_chunks` are outer
    chunks whose upstream calls raised or timed out.
    """

    rows: list[SearchAnalyticsRow] = field(default_factory=list)
    truncated_days: list[date] = field(default_factory=list)
    gaps: list[DateChunk] = field(default_factory=list)
    failed_chunks: list[DateChunk] = field(default_factory=list)
    cache_hits: int = 0
    cache_misses: int = 0

    @property
    def complete(self) -> bool:
        return not (self.truncated_days or self.gaps or self.failed_chunks)

    def extend(self, other: "FetchResult") -> None:
        self.rows.extend(other.rows)
        self.truncated_days.extend(other.truncated_days)
        self.gaps.extend(other.gaps)
        self.failed_chunks.extend(other.failed_chunks)
        self.cache_hits += other.cache_hits
        self.cache_misses += other.cache_misses


@dataclass
class QueryResult:
    """Rows served to a caller and where they came from."""

    rows: list[SearchAnalyticsRow]
    cached: bool
    cache_saved: bool = False
    cache_errors: list[str] = field(default_factory=list)
    fetch: FetchResult | None = None
