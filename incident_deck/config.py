# ---
# File: incident_deck/config.py
# Purpose: Environment-driven configuration for the incident API client,
#          dashboard paging and search debounce
# ---

import logging
import os

# ---
# Incident API connection
#   - INCIDENT_API_URL: Base URL of the incident API (paths are appended to it)
#   - INCIDENT_API_TIMEOUT_SECONDS: Transport timeout for every request
# ---
API_BASE_URL = os.environ.get("INCIDENT_API_URL", "http://localhost:3000/api").strip().rstrip("/")
API_TIMEOUT_SECONDS = float(os.environ.get("INCIDENT_API_TIMEOUT_SECONDS", "10"))

# ---
# Dashboard paging
#   - INCIDENT_PAGE_SIZE_OPTIONS: Comma separated list of allowed page sizes
#   - INCIDENT_DEFAULT_PAGE_SIZE: Page size used when the dashboard opens
# ---
page_size_env = os.environ.get("INCIDENT_PAGE_SIZE_OPTIONS", "10,20,40")
PAGE_SIZE_OPTIONS = tuple(int(size.strip()) for size in page_size_env.split(",") if size.strip())
DEFAULT_PAGE_SIZE = int(os.environ.get("INCIDENT_DEFAULT_PAGE_SIZE", str(PAGE_SIZE_OPTIONS[0])))

# Quiet period of search input before it counts as a filter change
SEARCH_DEBOUNCE_MS = int(os.environ.get("INCIDENT_SEARCH_DEBOUNCE_MS", "500"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
