"""Search Console API client package."""

from gsc_client.base import BaseClient
from gsc_client.search_analytics import (
    Dimension,
    SearchAnalyticsClient,
    SearchAnalyticsRow,
)

__all__ = [
    # Base
    "BaseClient",
    # Clients
    "SearchAnalyticsClient",
    # Schemas
    "Dimension",
    "SearchAnalyticsRow",
]
