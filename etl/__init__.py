"""ETL package - scheduled sync from the Search Console API to the cache."""

from etl.sync import sync_all, sync_site

__all__ = [
    "sync_all",
    "sync_site",
]
