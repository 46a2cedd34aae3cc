"""ETL helper functions."""

from datetime import date, timedelta

from settings import SYNC_LAG_DAYS


def sync_window(days: int, today: date | None = None) -> tuple[date, date]:
    """Last `days` days that the upstream has settled."""
    end = (today or date.today()) - timedelta(days=SYNC_LAG_DAYS)
    return end - timedelta(days=days - 1), end
