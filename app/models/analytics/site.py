"""Site (Search Console property) model."""

SITE_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS site_id_seq START 1"

SITE_DDL = """
CREATE TABLE IF NOT EXISTS site (
    id INTEGER PRIMARY KEY DEFAULT nextval('site_id_seq'),
    site_url VARCHAR NOT NULL UNIQUE,
    owner_id VARCHAR NOT NULL,
    display_name VARCHAR,
    last_synced_at TIMESTAMP,
    created_at TIMESTAMP NOT NULL
)
"""
