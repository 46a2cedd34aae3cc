"""Date range chunking."""

from datetime import date, timedelta

from app.models.analytics import DateChunk
from settings import CHUNK_SIZE_DAYS


def days_between(start_date: date, end_date: date) -> int:
    """Inclusive number of days in [start_date, end_date]."""
    return (end_date - start_date).days + 1


def split_date_range(start_date: date, end_date: date, chunk_days: int = CHUNK_SIZE_DAYS) -> list[DateChunk]:
    """Tile [start_date, end_date] with fixed-width chunks; the last one is cut at end_date."""
    if end_date < start_date:
        raise ValueError(f"end_date {end_date} is before start_date {start_date}")
    if chunk_days < 1:
        raise ValueError("chunk_days must be positive")

    chunks = []
    current = start_date
    while current <= end_date:
        chunk_end = min(current + timedelta(days=chunk_days - 1), end_date)
        chunks.append(DateChunk(current, chunk_end))
        current = chunk_end + timedelta(days=1)
    return chunks


def split_in_half(chunk: DateChunk) -> tuple[DateChunk, DateChunk]:
    """Split at the floor midpoint into two adjacent chunks."""
    if chunk.days < 2:
        raise ValueError(f"Cannot split single-day chunk {chunk}")
    mid = chunk.start_date + timedelta(days=(chunk.end_date - chunk.start_date).days // 2)
    return DateChunk(chunk.start_date, mid), DateChunk(mid + timedelta(days=1), chunk.end_date)
