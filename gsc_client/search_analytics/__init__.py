"""Search analytics API client."""

from gsc_client.search_analytics.client import SearchAnalyticsClient
from gsc_client.search_analytics.schemas import (
    Dimension,
    SearchAnalyticsRequest,
    SearchAnalyticsResponse,
    SearchAnalyticsRow,
)

__all__ = [
    "SearchAnalyticsClient",
    "Dimension",
    "SearchAnalyticsRequest",
    "SearchAnalyticsResponse",
    "SearchAnalyticsRow",
]
