"""
Digicatalog Fetching Package

This package provides the common infrastructure for talking to the Digi-API
and to image hosts: HTTP access, error classification, typed results and the
bounded image cache.

Components:
- constants: Endpoint, timeout, page size and cache limit constants
- errors: Closed set of fetch error kinds
- result: FetchResult value carrying a payload or an error
- cache_manager: Thread-safe bounded image cache
- http_client: Request-and-decode primitive with error classification
- image_loader: Cache-backed image download
"""

from .constants import (
    DEFAULT_BASE_URL,
    EXTERNAL_API_TIMEOUT,
    DEFAULT_PAGE_SIZE,
    SEARCH_FETCH_SIZE,
    SEARCH_FIELDS,
    IMAGE_CACHE_COUNT_LIMIT,
    IMAGE_CACHE_SIZE_LIMIT
)

from .errors import (
    FetchError,
    NoConnectivityError,
    TransportError,
    InvalidResponseError,
    ServerError,
    NoDataError,
    DecodingError
)
from .result import FetchResult
from .cache_manager import ImageCacheManager, normalize_key
from .http_client import HttpClientManager, build_url
from .image_loader import ImageLoader

__all__ = [
    'DEFAULT_BASE_URL',
    'EXTERNAL_API_TIMEOUT',
    'DEFAULT_PAGE_SIZE',
    'SEARCH_FETCH_SIZE',
    'SEARCH_FIELDS',
    'IMAGE_CACHE_COUNT_LIMIT',
    'IMAGE_CACHE_SIZE_LIMIT',
    'FetchError',
    'NoConnectivityError',
    'TransportError',
    'InvalidResponseError',
    'ServerError',
    'NoDataError',
    'DecodingError',
    'FetchResult',
    'ImageCacheManager',
    'normalize_key',
    'HttpClientManager',
    'build_url',
    'ImageLoader'
]
