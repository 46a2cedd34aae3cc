#!/usr/bin/env python3
"""
Sync Search Console data into the cache and maintain it.

Usage:
    python sync_data.py                               # Sync all known sites
    python sync_data.py https://example.com/ --owner alice
    python sync_data.py --days 90                     # Longer look-back
    python sync_data.py --validate                    # Check date coverage
    python sync_data.py --cleanup                     # Retention sweep only
    python sync_data.py --clear https://example.com/  # Drop a site's cache
"""

import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from loguru import logger

from app.repositories import DataPointRepository, SiteRepository, connect, get_write_connection
from app.services.search_analytics import CacheAdmin
from etl import sync_all
from etl.helpers import sync_window
from etl.validation import validate_site
from settings import DB_PATH, MAX_CONCURRENT, SYNC_DAYS
from settings.logging import setup_logging


def _option(args: list[str], name: str) -> str | None:
    """Value following `name` in args, if present."""
    if name in args:
        i = args.index(name)
        if i + 1 < len(args) and not args[i + 1].startswith("--"):
            return args[i + 1]
    return None


def print_reports(reports: list[dict]) -> bool:
    """Print validation reports; True if all are valid."""
    if not reports:
        print("\n⚠️  No synced sites found. Run 'python sync_data.py <site> --owner <id>' first.\n")
        return True

    print("\n" + "=" * 60)
    print("DATA VALIDATION REPORT")
    print("=" * 60)

    all_valid = True
    for result in reports:
        status = "✅" if result["valid"] else "❌"
        stats = result["stats"]
        print(f"\n{result['site']} {status}")
        print(f"  Rows: {stats.get('rows', 0):,}")
        print(f"  Query rows: {stats.get('query_rows', 0):,}")
        print(f"  Coverage: {stats.get('coverage_pct', 0)}%")
        print(f"  Age: {stats.get('age_hours')}h")
        if result["issues"]:
            all_valid = False
            for issue in result["issues"]:
                print(f"  ⚠️  {issue}")

    print("\n" + "=" * 60)
    print("✅ All data valid!" if all_valid else "❌ Some issues found. Run sync again to fix.")
    print("=" * 60 + "\n")
    return all_valid


def run_validation(days: int) -> bool:
    """Validate every site in the database."""
    conn = connect(DB_PATH, read_only=True)
    start_date, end_date = sync_window(days)
    sites = [r[0] for r in conn.execute("SELECT site_url FROM site ORDER BY site_url").fetchall()]
    reports = [validate_site(conn, s, start_date, end_date) for s in sites]
    conn.close()
    return print_reports(reports)


def run_maintenance(clear_site: str | None) -> None:
    conn = get_write_connection()
    admin = CacheAdmin(
        site_repo=SiteRepository(conn, read_only=False),
        data_repo=DataPointRepository(conn, read_only=False),
    )
    if clear_site:
        admin.clear(clear_site)
    else:
        admin.cleanup_old_data()
    conn.close()


def main(argv: list[str] | None = None):
    args = sys.argv[1:] if argv is None else argv
    days = int(_option(args, "--days") or SYNC_DAYS)
    owner_id = _option(args, "--owner")

    if "--validate" in args or args == ["validate"]:
        run_validation(days)
        return

    if "--clear" in args:
        clear_site = _option(args, "--clear")
        if not clear_site:
            print("--clear needs a site URL.\n")
            print(__doc__)
            sys.exit(1)
        run_maintenance(clear_site)
        return

    if "--cleanup" in args:
        run_maintenance(None)
        return

    values = {_option(args, "--days"), owner_id}
    site_urls = [a for a in args if not a.startswith("--") and a not in values]

    if site_urls and not owner_id:
        print(__doc__)
        sys.exit(1)

    if site_urls:
        logger.info("Syncing sites: {} (owner={})", site_urls, owner_id)
    else:
        logger.info("Syncing ALL known sites")
    logger.info("Look-back: {} days, throttling: {} concurrent", days, MAX_CONCURRENT)

    reports = sync_all(site_urls=site_urls or None, owner_id=owner_id, days=days)
    print_reports(reports)


if __name__ == "__main__":
    setup_logging(to_file=True)
    main()
