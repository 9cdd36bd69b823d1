"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("KILALO_CACHE_DB_PATH", "kilalo_cache.duckdb")

# Logging
LOG_DIR = Path("logs")

# Network
SITE_ORIGIN = os.getenv("KILALO_SITE_ORIGIN", "http://localhost:3000")
API_TIMEOUT = 30
MAX_CONNECTIONS = 100

# Locales (default first)
LOCALES = ("en", "fr")

# Worker
CACHE_VERSION = os.getenv("KILALO_CACHE_VERSION", "v1")
CACHE_NAME = f"kilalo-cache-{CACHE_VERSION}"
CACHE_URLS = ["/", *(f"/{locale}" for locale in LOCALES)]
STATIC_EXTENSIONS = (
    # Images
    "jpg",
    "jpeg",
    "png",
    "gif",
    "webp",
    "avif",
    "svg",
    # Styles / scripts
    "css",
    "js",
    # Fonts
    "woff",
    "woff2",
    "ttf",
)
REMOTE_ASSET_HOST = "cdn.sanity.io"
CLEAR_CACHE_MESSAGE = "CLEAR_CACHE"
WORKER_SCRIPT_PATH = "/sw.js"
WORKER_SCOPE = "/"

# Dashboard
DASHBOARD_API_URL = os.getenv("KILALO_DASHBOARD_API_URL", "http://localhost:8000")
