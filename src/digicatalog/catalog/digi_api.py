"""
Digi-API catalog implementation.

Combines the query aggregator and the detail fetcher behind the
CatalogInterface, talking to https://digi-api.com/api/v1 (or any server with
the same endpoints).
"""
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional, Sequence
import logging

from ..fetching.constants import DEFAULT_BASE_URL, SEARCH_FETCH_SIZE, SEARCH_FIELDS
from ..fetching.http_client import HttpClientManager
from ..fetching.result import FetchResult
from .aggregator import CatalogQueryAggregator
from .catalog_interface import CatalogInterface
from .detail import DetailFetcher
from .models import CatalogPage, DigimonDetail

logger = logging.getLogger(__name__)


class DigiApiCatalog(CatalogInterface):
    """ Catalog backed by the Digi-API REST service """

    def __init__(
        self,
        http_client: HttpClientManager,
        executor: Optional[Executor] = None,
        base_url: str = DEFAULT_BASE_URL,
        search_fields: Sequence[str] = SEARCH_FIELDS,
        search_fetch_size: int = SEARCH_FETCH_SIZE
    ):
        self._owns_executor = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(
                max_workers=len(search_fields),
                thread_name_prefix="catalog_"
            )
        self.executor = executor
        self.aggregator = CatalogQueryAggregator(
            http_client,
            executor,
            base_url=base_url,
            search_fields=search_fields,
            search_fetch_size=search_fetch_size
        )
        self.detail_fetcher = DetailFetcher(http_client, base_url=base_url)
        logger.info('Digi-API catalog at %s (search fields: %s)',
                    base_url, ', '.join(search_fields))

    def query_page(self, page_index: int, page_size: int,
                   search_text: Optional[str] = None) -> FetchResult[CatalogPage]:
        return self.aggregator.query_page(page_index, page_size, search_text)

    def fetch_detail(self, digimon_id: int) -> FetchResult[DigimonDetail]:
        return self.detail_fetcher.fetch_detail(digimon_id)

    def shutdown(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)
            logger.debug('Digi-API catalog thread pool shut down')
