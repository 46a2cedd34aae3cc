"""Dependency Injection container - initialized at app startup."""

from app.repositories.analytics import DataPointRepository, SiteRepository
from app.services.query_counting import AdaptiveChunkFetcher, ChunkCache, QueryCountingService
from app.services.search_analytics import (
    CacheAdmin,
    CacheReader,
    CacheWriter,
    SearchAnalyticsService,
    UpstreamClient,
)


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(self) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        # Repositories (singletons)
        self._site_repo = SiteRepository(read_only=False)
        self._data_repo = DataPointRepository(read_only=False)

        # Cache layers
        self.reader = CacheReader(site_repo=self._site_repo, data_repo=self._data_repo)
        self.writer = CacheWriter(site_repo=self._site_repo, data_repo=self._data_repo)
        self.chunk_cache = ChunkCache()
        self.cache_admin = CacheAdmin(site_repo=self._site_repo, data_repo=self._data_repo)

        self._initialized = True

    def search_analytics(self, client: UpstreamClient) -> SearchAnalyticsService:
        """Search analytics service bound to an open upstream client."""
        self.init()
        return SearchAnalyticsService(
            client=client,
            reader=self.reader,
            writer=self.writer,
        )

    def query_counting(self, client: UpstreamClient) -> QueryCountingService:
        """Query counting service bound to an open upstream client."""
        self.init()
        fetcher = AdaptiveChunkFetcher(client=client, cache=self.chunk_cache)
        return QueryCountingService(fetcher=fetcher, reader=self.reader, writer=self.writer)


# Global container instance
container = Container()
