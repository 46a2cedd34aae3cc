"""Data point repository - durable search analytics rows."""

from datetime import date, datetime

from loguru import logger

from app.models.analytics import DataPoint, SlotFilter
from app.repositories.base import BaseRepository

_COLUMNS = "date, query, page, country, device, clicks, impressions, ctr, position, fetched_at"


def _where(
    site_id: int,
    start_date: date | None,
    end_date: date | None,
    filters: dict[str, SlotFilter] | None = None,
) -> tuple[str, list]:
    """Build a WHERE clause; slot names come from a fixed set, values are bound."""
    clauses, params = ["site_id = ?"], [site_id]
    if start_date:
        clauses.append("date >= ?")
        params.append(start_date)
    if end_date:
        clauses.append("date <= ?")
        params.append(end_date)
    for slot, rule in (filters or {}).items():
        clauses.append(f"{slot} = ''" if rule is SlotFilter.EMPTY else f"{slot} <> ''")
    return " AND ".join(clauses), params


def _to_point(row: tuple) -> DataPoint:
    day, query, page, country, device, clicks, impressions, ctr, position, fetched_at = row
    return DataPoint(
        date=day,
        query=query,
        page=page,
        country=country,
        device=device,
        clicks=clicks,
        impressions=impressions,
        ctr=ctr,
        position=position,
        fetched_at=fetched_at,
    )


class DataPointRepository(BaseRepository):
    """Repository for the (site, date, dimension tuple) keyed store."""

    def latest_fetched_at(
        self,
        site_id: int,
        start_date: date,
        end_date: date,
        filters: dict[str, SlotFilter],
    ) -> datetime | None:
        """Fetch time of the most recently refreshed matching row."""
        where, params = _where(site_id, start_date, end_date, filters)
        row = self.fetchone(f"SELECT MAX(fetched_at) FROM data_point WHERE {where}", params)
        return row[0] if row else None

    def find(
        self,
        site_id: int,
        start_date: date,
        end_date: date,
        filters: dict[str, SlotFilter],
    ) -> list[DataPoint]:
        """All matching rows ordered by date."""
        where, params = _where(site_id, start_date, end_date, filters)
        rows = self.fetchall(
            f"SELECT {_COLUMNS} FROM data_point WHERE {where} ORDER BY date, query, page, country, device",
            params,
        )
        result = [_to_point(r) for r in rows]
        logger.debug("find(site={}, {}..{}): {} rows", site_id, start_date, end_date, len(result))
        return result

    def upsert(self, site_id: int, point: DataPoint, fetched_at: datetime) -> None:
        """Insert a row or refresh its metrics and fetch time (last write wins)."""
        self._require_writable("write data points")
        self.execute(
            """
            INSERT INTO data_point (site_id, date, query, page, country, device,
                                    clicks, impressions, ctr, position, fetched_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (site_id, date, query, page, country, device) DO UPDATE SET
                clicks = excluded.clicks,
                impressions = excluded.impressions,
                ctr = excluded.ctr,
                position = excluded.position,
                fetched_at = excluded.fetched_at
            """,
            [
                site_id,
                point.date,
                point.query,
                point.page,
                point.country,
                point.device,
                point.clicks,
                point.impressions,
                point.ctr,
                point.position,
                fetched_at,
            ],
        )

    def delete_range(self, site_id: int, start_date: date | None = None, end_date: date | None = None) -> int:
        """Delete a site's rows, optionally limited to a date range."""
        self._require_writable("clear cache")
        where, params = _where(site_id, start_date, end_date)
        count = self.fetchone(f"SELECT COUNT(*) FROM data_point WHERE {where}", params)[0]
        self.execute(f"DELETE FROM data_point WHERE {where}", params)
        return count

    def delete_older_than(self, cutoff: date) -> int:
        """Delete rows of every site dated before `cutoff`."""
        self._require_writable("clean up data points")
        count = self.fetchone("SELECT COUNT(*) FROM data_point WHERE date < ?", [cutoff])[0]
        self.execute("DELETE FROM data_point WHERE date < ?", [cutoff])
        return count

    def summary(self, site_id: int) -> tuple[int, date | None, date | None, datetime | None]:
        """(row count, first date, last date, last fetch) for a site."""
        return self.fetchone(
            "SELECT COUNT(*), MIN(date), MAX(date), MAX(fetched_at) FROM data_point WHERE site_id = ?",
            [site_id],
        )

