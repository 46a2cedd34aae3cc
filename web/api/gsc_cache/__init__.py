"""Cache administration API."""

from web.api.gsc_cache.views import clear_cache, get_cache_stats

__all__ = [
    "get_cache_stats",
    "clear_cache",
]
