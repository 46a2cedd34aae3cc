"""Search analytics API."""

from web.api.search_analytics.views import get_query_counting, query_search_analytics

__all__ = [
    "query_search_analytics",
    "get_query_counting",
]
