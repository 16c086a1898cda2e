"""
Application scoped catalog service.

Owns the shared infrastructure (HTTP client, image cache, thread pool) and
the configured catalog, and exposes the operations the presentation layer
depends on. Create one instance at startup and pass it to consumers.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from .catalog.catalog import Catalog
from .catalog.catalog_interface import CatalogInterface
from .catalog.models import CatalogPage, DigimonDetail
from .fetching.cache_manager import ImageCacheManager
from .fetching.constants import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_USER_AGENT,
    EXTERNAL_API_TIMEOUT,
    IMAGE_CACHE_COUNT_LIMIT,
    IMAGE_CACHE_SIZE_LIMIT,
    SEARCH_FIELDS
)
from .fetching.http_client import HttpClientManager
from .fetching.image_loader import ImageLoader
from .fetching.result import FetchResult
from .pager import CatalogPager

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Entry point for catalog queries, detail lookups and image loading.

    Manages shared resources and provides:
    - query_page / fetch_detail through the configured catalog
    - load_image through the bounded image cache
    - pagers for list screens
    - statistics and graceful shutdown
    """

    def __init__(
        self,
        catalog: Optional[CatalogInterface] = None,
        http_client: Optional[HttpClientManager] = None,
        cache: Optional[ImageCacheManager] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        page_size: int = DEFAULT_PAGE_SIZE,
        catalog_config: Optional[dict] = None
    ):
        self.http_client = http_client if http_client is not None else HttpClientManager()
        self.cache = cache if cache is not None else ImageCacheManager()
        self.page_size = page_size
        self.max_workers = max_workers
        self._thread_pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="catalog_"
        )
        if catalog is None:
            catalog = Catalog.create_catalog(catalog_config or {}, self.http_client, self._thread_pool)
        self.catalog = catalog
        self.image_loader = ImageLoader(self.http_client, self.cache)
        self._shutdown = False
        logger.info(f"Initialized CatalogService with {max_workers} workers "
                    f"(catalog: {type(catalog).__name__})")

    @classmethod
    def from_config(cls, config: dict) -> 'CatalogService':
        """
        Build a service from the 'catalog' section of a loaded config.

        Raises:
            RuntimeError: If a config value is invalid
        """
        catalog_config = dict(config.get('catalog') or {})
        cache_config = catalog_config.get('image_cache') or {}

        try:
            timeout = float(catalog_config.get('timeout', EXTERNAL_API_TIMEOUT))
            search_fields = catalog_config.get('search_fields', SEARCH_FIELDS)
            max_workers = int(catalog_config.get(
                'max_workers', max(DEFAULT_MAX_WORKERS, len(search_fields))))
            page_size = int(catalog_config.get('page_size', DEFAULT_PAGE_SIZE))
            count_limit = int(cache_config.get('count_limit', IMAGE_CACHE_COUNT_LIMIT))
            size_limit = int(float(cache_config.get('size_limit_mb', IMAGE_CACHE_SIZE_LIMIT / (1024 * 1024)))
                             * 1024 * 1024)
        except (TypeError, ValueError) as e:
            raise RuntimeError(f'Invalid catalog configuration: {e}') from e

        if timeout <= 0 or max_workers <= 0 or page_size <= 0:
            raise RuntimeError('catalog timeout, max_workers and page_size must be positive')
        if not search_fields:
            raise RuntimeError('catalog search_fields must not be empty')
        if max_workers < len(search_fields):
            # Fewer workers than fields would run the search fan-out in batches
            raise RuntimeError(
                f'catalog max_workers ({max_workers}) must be at least the number of '
                f'search_fields ({len(search_fields)})')
        if count_limit <= 0 or size_limit <= 0:
            raise RuntimeError('image_cache count_limit and size_limit_mb must be positive')

        http_client = HttpClientManager(
            timeout=timeout,
            user_agent=catalog_config.get('user_agent', DEFAULT_USER_AGENT)
        )
        cache = ImageCacheManager(count_limit=count_limit, size_limit=size_limit)
        return cls(
            http_client=http_client,
            cache=cache,
            max_workers=max_workers,
            page_size=page_size,
            catalog_config=catalog_config
        )

    def _check_running(self):
        if self._shutdown:
            raise RuntimeError("CatalogService is shut down")

    def query_page(self, page_index: int, page_size: Optional[int] = None,
                   search_text: Optional[str] = None) -> FetchResult[CatalogPage]:
        self._check_running()
        if page_size is None:
            page_size = self.page_size
        return self.catalog.query_page(page_index, page_size, search_text)

    def fetch_detail(self, digimon_id: int) -> FetchResult[DigimonDetail]:
        self._check_running()
        return self.catalog.fetch_detail(digimon_id)

    def load_image(self, url: str) -> FetchResult[bytes]:
        self._check_running()
        return self.image_loader.load(url)

    def new_pager(self, page_size: Optional[int] = None) -> CatalogPager:
        return CatalogPager(self.catalog, page_size if page_size is not None else self.page_size)

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics of the shared infrastructure."""
        return {
            'http_client': self.http_client.get_stats(),
            'image_cache': self.cache.get_stats()
        }

    def shutdown(self):
        """Shut down the thread pool and release network resources."""
        if self._shutdown:
            return
        self._shutdown = True
        logger.info("Shutting down CatalogService")
        self.catalog.shutdown()
        self._thread_pool.shutdown(wait=True)
        self.http_client.close()
        logger.info("CatalogService shutdown complete")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
