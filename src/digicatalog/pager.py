"""
Incremental paging over a catalog.

Keeps the state a list screen needs: accumulated entries, the next page to
request, whether more pages exist and whether a load is running. Every reset
(for example new search text) starts a new generation; a response that
arrives for an older generation is dropped so only the latest request can
change the list.
"""
import logging
import threading
from typing import List, Optional

from .catalog.catalog_interface import CatalogInterface
from .catalog.models import CatalogPage, Digimon
from .fetching.constants import DEFAULT_PAGE_SIZE
from .fetching.errors import FetchError, TransportError
from .fetching.result import FetchResult

logger = logging.getLogger(__name__)


class CatalogPager:
    """ Accumulates catalog pages for one search text at a time """

    def __init__(self, catalog: CatalogInterface, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive (got {page_size})")
        self.catalog = catalog
        self.page_size = page_size
        self._lock = threading.Lock()
        self._generation = 0
        self._items: List[Digimon] = []
        self._seen_ids = set()
        self.search_text: Optional[str] = None
        self.current_page = 0
        self.has_more_pages = True
        self.is_loading = False
        self.last_error: Optional[FetchError] = None

    @property
    def items(self) -> List[Digimon]:
        with self._lock:
            return list(self._items)

    @property
    def generation(self) -> int:
        return self._generation

    def reset(self, search_text: Optional[str] = None):
        """Start over from page 0, optionally with new search text."""
        with self._lock:
            self._generation += 1
            self._items = []
            self._seen_ids = set()
            self.search_text = search_text
            self.current_page = 0
            self.has_more_pages = True
            self.is_loading = False
            self.last_error = None
            logger.debug('Pager reset (generation %d, search: %r)', self._generation, search_text)

    def load_next(self) -> Optional[FetchResult[CatalogPage]]:
        """
        Request the next page and append it.

        Returns:
            The FetchResult of the request, or None when a load is already
            running or no more pages exist
        """
        with self._lock:
            if self.is_loading or not self.has_more_pages:
                return None
            self.is_loading = True
            generation = self._generation
            page_index = self.current_page
            search_text = self.search_text

        try:
            result = self.catalog.query_page(page_index, self.page_size, search_text)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error('Loading page %d failed: %s', page_index, e, exc_info=True)
            result = FetchResult.failure(TransportError(e))
        self._apply(generation, result)
        return result

    def _apply(self, generation: int, result: FetchResult[CatalogPage]) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.debug('Dropping stale page for generation %d (current %d)',
                             generation, self._generation)
                return False

            self.is_loading = False
            if not result.ok:
                self.last_error = result.error
                return True

            page = result.value
            for entry in page.items:
                if entry.id not in self._seen_ids:
                    self._seen_ids.add(entry.id)
                    self._items.append(entry)
            self.has_more_pages = page.has_more_pages
            self.current_page += 1
            self.last_error = None
            return True
