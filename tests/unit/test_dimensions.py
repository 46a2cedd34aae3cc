"""Tests for dimension shapes."""

import pytest

from app.models.analytics import DimensionShape, SlotFilter, UnsupportedDimensionsError, resolve_shape


class TestResolveShape:
    @pytest.mark.parametrize(
        "dimensions,shape",
        [
            (["date"], DimensionShape.DATE),
            (["date", "page"], DimensionShape.DATE_PAGE),
            (["query", "date"], DimensionShape.DATE_QUERY),
            (["date", "query", "page"], DimensionShape.DATE_QUERY_PAGE),
            (["date", "country"], DimensionShape.DATE_COUNTRY),
            (["date", "device"], DimensionShape.DATE_DEVICE),
            (["page", "query"], DimensionShape.QUERY_PAGE),
            (["page"], DimensionShape.PAGE),
        ],
    )
    def test_supported(self, dimensions, shape):
        assert resolve_shape(dimensions) is shape

    @pytest.mark.parametrize("dimensions", [["query"], ["country"], ["date", "query", "device"], ["bogus"], []])
    def test_unsupported(self, dimensions):
        with pytest.raises(UnsupportedDimensionsError):
            resolve_shape(dimensions)

    def test_unsupported_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_shape(["device"])


class TestFilters:
    def test_every_shape_constrains_every_slot(self):
        for shape in DimensionShape:
            assert set(shape.filters) == {"query", "page", "country", "device"}

    def test_date_only_requires_empty_slots(self):
        assert set(DimensionShape.DATE.filters.values()) == {SlotFilter.EMPTY}

    def test_date_query(self):
        filters = DimensionShape.DATE_QUERY.filters
        assert filters["query"] is SlotFilter.PRESENT
        assert filters["page"] is SlotFilter.EMPTY

    def test_only_page_aggregates(self):
        assert [s for s in DimensionShape if s.aggregates_pages] == [DimensionShape.PAGE]
