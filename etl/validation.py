"""Data validation functions."""

from datetime import date, timedelta

import duckdb

from app.models.common import utcnow


def validate_site(conn: duckdb.DuckDBPyConnection, site_url: str, start_date: date, end_date: date) -> dict:
    """Check date coverage and freshness of cached data for a site."""
    issues = []
    stats = {}

    site = conn.execute("SELECT id FROM site WHERE site_url = ?", [site_url]).fetchone()
    if not site:
        return {"site": site_url, "valid": False, "stats": stats, "issues": ["Site not found"]}
    site_id = site[0]

    row_count, last_fetch = conn.execute(
        """
        SELECT COUNT(*), MAX(fetched_at) FROM data_point
        WHERE site_id = ? AND date BETWEEN ? AND ?
        """,
        [site_id, start_date, end_date],
    ).fetchone()
    stats["rows"] = row_count
    if row_count == 0:
        issues.append("No data points in range")

    # Site totals (no dimension slots set) should exist for every day
    dates = conn.execute(
        """
        SELECT DISTINCT date FROM data_point
        WHERE site_id = ? AND date BETWEEN ? AND ?
          AND query = '' AND page = '' AND country = '' AND device = ''
        """,
        [site_id, start_date, end_date],
    ).fetchall()
    covered = {r[0] for r in dates}
    expected = [start_date + timedelta(days=i) for i in range((end_date - start_date).days + 1)]
    missing = [d for d in expected if d not in covered]
    stats["days"] = len(expected)
    stats["missing_days"] = len(missing)
    if missing:
        issues.append(f"{len(missing)} days have no site totals (first: {missing[0].isoformat()})")

    query_rows = conn.execute(
        """
        SELECT COUNT(*) FROM data_point
        WHERE site_id = ? AND date BETWEEN ? AND ? AND query <> '' AND page = ''
        """,
        [site_id, start_date, end_date],
    ).fetchone()[0]
    stats["query_rows"] = query_rows

    stats["age_hours"] = round((utcnow() - last_fetch).total_seconds() / 3600, 1) if last_fetch else None
    stats["coverage_pct"] = round(len(covered) / len(expected) * 100, 1) if expected else 0

    return {
        "site": site_url,
        "valid": len(issues) == 0,
        "stats": stats,
        "issues": issues,
    }
