"""
Catalog query aggregation.

Without search text a page request maps onto one listing request. With
search text the upstream API can only filter one field at a time, so one
request per candidate field is fanned out on a thread pool, all of them are
joined, and the successful result sets are merged:

1. union in candidate field order
2. deduplicate by id, first occurrence wins
3. sort by name, then id
4. cut the requested page window out of the merged list

The merged page is synthesized: it has no pageable and never reports more
pages. If every field request fails, the first failure in field order is
returned; a single success (even an empty one) makes the whole search a
success.
"""

from concurrent.futures import Executor, Future, wait, ALL_COMPLETED
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import time

from ..fetching.constants import DEFAULT_BASE_URL, DIGIMON_PATH, SEARCH_FETCH_SIZE, SEARCH_FIELDS
from ..fetching.errors import TransportError
from ..fetching.http_client import HttpClientManager, build_url
from ..fetching.result import FetchResult
from .models import CatalogPage, Digimon, DigimonListResponse

logger = logging.getLogger(__name__)


def dedupe_by_id(entries: Iterable[Digimon]) -> List[Digimon]:
    """Drop entries whose id was already seen, keeping the first one."""
    seen = set()
    unique = []
    for entry in entries:
        if entry.id not in seen:
            seen.add(entry.id)
            unique.append(entry)
    return unique


def sort_entries(entries: Iterable[Digimon]) -> List[Digimon]:
    """Sort by name (case-insensitive, then exact) with id as tie-break."""
    return sorted(entries, key=lambda entry: (entry.name.casefold(), entry.name, entry.id))


def merge_search_results(result_sets: Sequence[Sequence[Digimon]],
                         page_index: int, page_size: int) -> CatalogPage:
    """
    Merge per-field result sets into one synthesized page.

    Args:
        result_sets: Successful result sets in candidate field order
        page_index: Zero based page to cut from the merged list
        page_size: Maximum number of entries in the page

    Returns:
        CatalogPage without pageable
    """
    merged = sort_entries(dedupe_by_id(entry for entries in result_sets for entry in entries))
    start = page_index * page_size
    return CatalogPage(
        items=tuple(merged[start:start + page_size]),
        page_size=page_size,
        pageable=None,
        synthesized=True
    )


def validate_page_request(page_index: int, page_size: int):
    """Reject page arguments no request could be built from."""
    if page_index < 0:
        raise ValueError(f"page_index must not be negative (got {page_index})")
    if page_size <= 0:
        raise ValueError(f"page_size must be positive (got {page_size})")


class CatalogQueryAggregator:
    """
    Turns page and search requests into one or more listing fetches.

    The aggregator keeps no per-request state on the instance, so results of
    superseded calls can complete at any time without affecting newer ones.
    """

    def __init__(
        self,
        http_client: HttpClientManager,
        executor: Executor,
        base_url: str = DEFAULT_BASE_URL,
        search_fields: Sequence[str] = SEARCH_FIELDS,
        search_fetch_size: int = SEARCH_FETCH_SIZE
    ):
        if not search_fields:
            raise ValueError("At least one search field is required")
        self.http_client = http_client
        self.executor = executor
        self.base_url = base_url
        self.search_fields = tuple(search_fields)
        self.search_fetch_size = search_fetch_size

    def listing_url(self, **params) -> str:
        return build_url(self.base_url, DIGIMON_PATH, params)

    def query_page(self, page_index: int, page_size: int,
                   search_text: Optional[str] = None) -> FetchResult[CatalogPage]:
        """
        Get one page of the catalog.

        Args:
            page_index: Zero based page number
            page_size: Entries per page
            search_text: Optional text matched against every search field;
                empty or blank text behaves like no text

        Returns:
            FetchResult with a CatalogPage or the FetchError to show
        """
        validate_page_request(page_index, page_size)
        text = (search_text or '').strip()
        if not text:
            return self._fetch_listing(page_index, page_size)
        return self._search(text, page_index, page_size)

    def _fetch_listing(self, page_index: int, page_size: int) -> FetchResult[CatalogPage]:
        url = self.listing_url(page=page_index, pageSize=page_size)
        result = self.http_client.fetch(url, DigimonListResponse)
        if not result.ok:
            return FetchResult.failure(result.error)

        response = result.value
        items = dedupe_by_id(response.content)
        if len(items) != len(response.content):
            logger.warning(f"Listing page {page_index} contained "
                           f"{len(response.content) - len(items)} duplicate ids")
        return FetchResult.success(CatalogPage(
            items=tuple(items),
            page_size=page_size,
            pageable=response.pageable
        ))

    def _fetch_field(self, field: str, text: str) -> FetchResult[DigimonListResponse]:
        params = {'page': 0, 'pageSize': self.search_fetch_size, field: text}
        return self.http_client.fetch(self.listing_url(**params), DigimonListResponse)

    def _search(self, text: str, page_index: int, page_size: int) -> FetchResult[CatalogPage]:
        start_time = time.time()

        # Submit every field before waiting on any of them
        futures: List[Tuple[str, Future]] = [
            (field, self.executor.submit(self._fetch_field, field, text))
            for field in self.search_fields
        ]
        logger.debug(f"Submitted {len(futures)} search requests for '{text}'")
        wait([future for _, future in futures], return_when=ALL_COMPLETED)

        outcomes: List[FetchResult[DigimonListResponse]] = []
        for field, future in futures:
            try:
                outcome = future.result()
            except Exception as e:
                logger.error(f"Search on field '{field}' raised unexpectedly: {e}", exc_info=True)
                outcome = FetchResult.failure(TransportError(e))
            if not outcome.ok:
                logger.warning(f"Search on field '{field}' failed: {outcome.error}")
            outcomes.append(outcome)

        successes = [outcome.value.content for outcome in outcomes if outcome.ok]
        duration = time.time() - start_time
        logger.info(f"Search for '{text}' completed: {len(successes)}/{len(outcomes)} "
                    f"fields successful in {duration:.2f}s")

        if not successes:
            return FetchResult.failure(outcomes[0].error)

        return FetchResult.success(merge_search_results(successes, page_index, page_size))
