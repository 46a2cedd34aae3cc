"""API errors and validation helpers."""

from datetime import date

from app.models.analytics import UnsupportedDimensionsError
from gsc_client import Dimension


class ValidationError(Exception):
    """Validation error."""

    def __init__(self, message: str = "Validation error"):
        self.message = message
        super().__init__(self.message)


# Upstream row cap per call
MAX_ROW_LIMIT = 25000


def validate_site_url(site_url: str) -> None:
    """Site must be a URL-prefix or domain property."""
    if not site_url or not (site_url.startswith(("http://", "https://", "sc-domain:"))):
        raise ValidationError(f"Invalid siteUrl: {site_url!r}")


def validate_date_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValidationError(f"endDate {end_date} is before startDate {start_date}")


def validate_dimensions(dimensions: list[str]) -> None:
    known = {d.value for d in Dimension}
    unknown = [d for d in dimensions if d not in known]
    if unknown:
        raise ValidationError(str(UnsupportedDimensionsError(dimensions)))
    if len(set(dimensions)) != len(dimensions):
        raise ValidationError(f"Duplicate dimensions: {dimensions}")


def validate_row_limit(row_limit: int) -> None:
    if not 1 <= row_limit <= MAX_ROW_LIMIT:
        raise ValidationError(f"Invalid rowLimit: {row_limit}. Must be between 1 and {MAX_ROW_LIMIT}")
