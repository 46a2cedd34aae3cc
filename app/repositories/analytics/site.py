"""Site repository - Search Console properties and their owners."""

from datetime import datetime

from loguru import logger

from app.models.analytics import Site
from app.models.common import utcnow
from app.repositories.base import BaseRepository

_COLUMNS = "id, site_url, owner_id, display_name, last_synced_at, created_at"


class SiteRepository(BaseRepository):
    """Repository for site records."""

    def get(self, site_url: str) -> Site | None:
        """Look up a site by its property URL."""
        row = self.fetchone(f"SELECT {_COLUMNS} FROM site WHERE site_url = ?", [site_url])
        return Site(*row) if row else None

    def list_sites(self) -> list[Site]:
        rows = self.fetchall(f"SELECT {_COLUMNS} FROM site ORDER BY site_url")
        return [Site(*r) for r in rows]

    def get_or_create(self, site_url: str, owner_id: str) -> Site:
        """Return the site, creating it for `owner_id` if it does not exist yet."""
        site = self.get(site_url)
        if site:
            if site.owner_id != owner_id:
                logger.warning("Site {} belongs to {}, not {}", site_url, site.owner_id, owner_id)
            return site

        self._require_writable("create site")
        self.execute(
            """
            INSERT INTO site (site_url, owner_id, display_name, created_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (site_url) DO NOTHING
            """,
            [site_url, owner_id, site_url, utcnow()],
        )
        logger.info("Site created: {} (owner={})", site_url, owner_id)
        return self.get(site_url)

    def touch_synced(self, site_id: int, at: datetime | None = None) -> None:
        """Bump the last-synced timestamp."""
        self._require_writable("update site")
        self.execute(
            "UPDATE site SET last_synced_at = ? WHERE id = ?",
            [at or utcnow(), site_id],
        )
