"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("GSC_DB_PATH", "gsc_cache.duckdb")

# Logging
LOG_DIR = Path(os.getenv("GSC_LOG_DIR", "logs"))
LOG_LEVEL = os.getenv("GSC_LOG_LEVEL", "INFO")

# API
API_BASE_URL = "https://www.googleapis.com/webmasters/v3"
API_TIMEOUT = 60
GSC_ACCESS_TOKEN = os.getenv("GSC_ACCESS_TOKEN", "")
MAX_CONCURRENT = int(os.getenv("GSC_MAX_CONCURRENT", "8"))

# Chunked fetching
ROW_LIMIT = 25000  # hard cap per upstream call
CHUNK_SIZE_DAYS = 7
MAX_SPLIT_DEPTH = 5
CALL_TIMEOUT = float(os.getenv("GSC_CALL_TIMEOUT", "90"))
CHUNK_TIMEOUT = float(os.getenv("GSC_CHUNK_TIMEOUT", "600"))

# Durable cache
DEFAULT_MAX_AGE_HOURS = 168
QUERY_COUNTING_MAX_AGE_HOURS = 24
WRITE_BATCH_SIZE = 100
MAX_ERROR_SAMPLES = 5
RETENTION_MONTHS = 16  # upstream keeps 16 months of history

# Client-side chunk cache
CHUNK_CACHE_TTL_HOURS = 24
CHUNK_CACHE_PREFIX = "qc-chunk-"
CHUNK_CACHE_QUOTA_BYTES = 5 * 1024 * 1024

# Sync
SYNC_DAYS = 30
SYNC_LAG_DAYS = 2  # upstream data settles ~2 days later
