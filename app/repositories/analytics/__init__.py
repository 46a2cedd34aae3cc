"""Analytics repositories."""

from app.repositories.analytics.data_point import DataPointRepository
from app.repositories.analytics.site import SiteRepository

__all__ = [
    "DataPointRepository",
    "SiteRepository",
]
