"""Supported dimension combinations and the slot filters they imply.

A stored row carries every dimension slot, but a caller asks for only some of
them. Each supported combination maps to an explicit filter per slot so a read
never mixes rows produced by different groupings.
"""

from collections.abc import Iterable
from enum import StrEnum

from app.models.analytics.data_point import DIMENSION_SLOTS
from gsc_client.search_analytics.schemas import Dimension


class UnsupportedDimensionsError(ValueError):
    """Requested dimension combination has no cache mapping."""

    def __init__(self, dimensions: Iterable[str]):
        self.dimensions = list(dimensions)
        super().__init__(f"Unsupported dimension combination: {self.dimensions}")


class SlotFilter(StrEnum):
    """Constraint on one dimension slot."""

    EMPTY = "empty"
    PRESENT = "present"


class DimensionShape(StrEnum):
    """Closed set of dimension combinations served from the durable cache."""

    DATE = "date"
    DATE_PAGE = "date,page"
    DATE_QUERY = "date,query"
    DATE_QUERY_PAGE = "date,query,page"
    DATE_COUNTRY = "date,country"
    DATE_DEVICE = "date,device"
    QUERY_PAGE = "query,page"
    PAGE = "page"

    @property
    def dimensions(self) -> frozenset[Dimension]:
        return frozenset(Dimension(d) for d in self.value.split(","))

    @property
    def filters(self) -> dict[str, SlotFilter]:
        return _FILTERS[self]

    @property
    def aggregates_pages(self) -> bool:
        """Page-only reads are rolled up from (date, page) rows."""
        return self is DimensionShape.PAGE


def _slots(**present: bool) -> dict[str, SlotFilter]:
    return {s: SlotFilter.PRESENT if present.get(s) else SlotFilter.EMPTY for s in DIMENSION_SLOTS}


_FILTERS: dict[DimensionShape, dict[str, SlotFilter]] = {
    DimensionShape.DATE: _slots(),
    DimensionShape.DATE_PAGE: _slots(page=True),
    DimensionShape.DATE_QUERY: _slots(query=True),
    DimensionShape.DATE_QUERY_PAGE: _slots(query=True, page=True),
    DimensionShape.DATE_COUNTRY: _slots(country=True),
    DimensionShape.DATE_DEVICE: _slots(device=True),
    DimensionShape.QUERY_PAGE: _slots(query=True, page=True),
    DimensionShape.PAGE: _slots(page=True),
}

_missing = set(DimensionShape) - set(_FILTERS)
if _missing:
    raise RuntimeError(f"Dimension shapes without slot filters: {sorted(_missing)}")

_BY_DIMENSIONS = {shape.dimensions: shape for shape in DimensionShape}


def resolve_shape(dimensions: Iterable[str]) -> DimensionShape:
    """Map a requested dimension list to its shape, or raise."""
    requested = list(dimensions)
    try:
        key = frozenset(Dimension(d) for d in requested)
    except ValueError as e:
        raise UnsupportedDimensionsError(requested) from e

    shape = _BY_DIMENSIONS.get(key)
    if shape is None:
        raise UnsupportedDimensionsError(requested)
    return shape
