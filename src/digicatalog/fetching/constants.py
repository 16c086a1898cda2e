"""
Constants for the digicatalog fetching infrastructure.

This module defines the upstream endpoint, timeout values, page sizes and
image cache limits used across the catalog client.
"""

# Upstream API
DEFAULT_BASE_URL = "https://digi-api.com/api/v1"
DIGIMON_PATH = "/digimon"
DEFAULT_USER_AGENT = "digicatalog/0.3 (+https://digi-api.com)"

# Timeout constants (in seconds)
EXTERNAL_API_TIMEOUT = 30  # For the Digi-API and image hosts

# Pagination constants
DEFAULT_PAGE_SIZE = 8          # Items per page on the list screen
SEARCH_FETCH_SIZE = 50         # Items requested per field during a search fan-out

# Fields the upstream API can filter on, in merge order
SEARCH_FIELDS = ('name', 'type', 'attribute', 'level', 'field')

# Parallel fetching constants
DEFAULT_MAX_WORKERS = len(SEARCH_FIELDS)  # One worker per search field

# Image cache limits
IMAGE_CACHE_COUNT_LIMIT = 100                  # Maximum number of cached images
IMAGE_CACHE_SIZE_LIMIT = 50 * 1024 * 1024      # 50 MiB of image bytes

# Catalog implementation types
CATALOG_TYPE_DIGIAPI = "digiapi"
CATALOG_TYPE_DUMMY = "dummy"

# HTTP status codes worth retrying besides 5xx
RETRYABLE_CLIENT_STATUS_CODES = [408, 429]
