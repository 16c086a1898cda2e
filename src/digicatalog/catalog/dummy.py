import logging
from typing import Dict, List, Optional, Sequence

from ..fetching.constants import SEARCH_FIELDS
from ..fetching.errors import FetchError, ServerError
from ..fetching.result import FetchResult
from .aggregator import dedupe_by_id, merge_search_results, validate_page_request
from .catalog_interface import CatalogInterface
from .models import CatalogPage, Digimon, DigimonDetail, Pageable

logger = logging.getLogger(__name__)

# Dummy catalog for offline use and tests.
# Serves a small static data set from memory with the same paging and search
# semantics as the Digi-API catalog. Failures can be injected per search
# field or for every request.

SAMPLE_DIGIMON = [
    {'id': 1, 'name': 'Agumon', 'level': 'Child', 'type': 'Reptile',
     'attribute': 'Vaccine', 'field': 'Dragon\'s Roar'},
    {'id': 2, 'name': 'Gabumon', 'level': 'Child', 'type': 'Reptile',
     'attribute': 'Data', 'field': 'Nature Spirits'},
    {'id': 3, 'name': 'Biyomon', 'level': 'Child', 'type': 'Bird',
     'attribute': 'Vaccine', 'field': 'Wind Guardians'},
    {'id': 4, 'name': 'Tentomon', 'level': 'Child', 'type': 'Insectoid',
     'attribute': 'Vaccine', 'field': 'Jungle Troopers'},
    {'id': 5, 'name': 'Palmon', 'level': 'Child', 'type': 'Vegetation',
     'attribute': 'Data', 'field': 'Jungle Troopers'},
    {'id': 6, 'name': 'Gomamon', 'level': 'Child', 'type': 'Sea Animal',
     'attribute': 'Vaccine', 'field': 'Deep Savers'},
    {'id': 7, 'name': 'Greymon', 'level': 'Adult', 'type': 'Dinosaur',
     'attribute': 'Vaccine', 'field': 'Dragon\'s Roar'},
    {'id': 8, 'name': 'Garurumon', 'level': 'Adult', 'type': 'Beast',
     'attribute': 'Data', 'field': 'Nature Spirits'},
    {'id': 9, 'name': 'MetalGreymon', 'level': 'Perfect', 'type': 'Cyborg',
     'attribute': 'Vaccine', 'field': 'Nightmare Soldiers'},
    {'id': 10, 'name': 'WarGreymon', 'level': 'Ultimate', 'type': 'Dragon Man',
     'attribute': 'Vaccine', 'field': 'Dragon\'s Roar'},
    {'id': 11, 'name': 'Devimon', 'level': 'Adult', 'type': 'Fallen Angel',
     'attribute': 'Virus', 'field': 'Nightmare Soldiers'},
    {'id': 12, 'name': 'Angemon', 'level': 'Adult', 'type': 'Angel',
     'attribute': 'Vaccine', 'field': 'Virus Busters'},
]


def _matches(record: dict, field: str, text: str) -> bool:
    value = record.get(field)
    if value is None:
        return False
    if field == 'name':
        return text.casefold() in str(value).casefold()
    return str(value).casefold() == text.casefold()


class DummyCatalog(CatalogInterface):
    """ In-memory catalog with injectable failures """

    def __init__(self, records: Optional[List[dict]] = None,
                 search_fields: Sequence[str] = SEARCH_FIELDS,
                 image_base_url: str = 'https://digi-api.com/images/digimon/w/'):
        self.records = sorted(records if records is not None else SAMPLE_DIGIMON,
                              key=lambda record: record['id'])
        self.search_fields = tuple(search_fields)
        self.image_base_url = image_base_url
        self.field_failures: Dict[str, FetchError] = {}
        self.failure: Optional[FetchError] = None
        self.requests_made = 0
        logger.info('Dummy catalog initialized with %d entries', len(self.records))

    def _entry(self, record: dict) -> Digimon:
        return Digimon(
            id=record['id'],
            name=record['name'],
            href=f"https://digi-api.com/api/v1/digimon/{record['id']}",
            image=f"{self.image_base_url}{record['name']}.png"
        )

    def _search_field(self, field: str, text: str) -> FetchResult[List[Digimon]]:
        self.requests_made += 1
        if self.failure is not None:
            return FetchResult.failure(self.failure)
        if field in self.field_failures:
            return FetchResult.failure(self.field_failures[field])
        return FetchResult.success(
            [self._entry(record) for record in self.records if _matches(record, field, text)])

    def query_page(self, page_index: int, page_size: int,
                   search_text: Optional[str] = None) -> FetchResult[CatalogPage]:
        validate_page_request(page_index, page_size)
        text = (search_text or '').strip()
        if text:
            outcomes = [self._search_field(field, text) for field in self.search_fields]
            successes = [outcome.value for outcome in outcomes if outcome.ok]
            if not successes:
                return FetchResult.failure(outcomes[0].error)
            return FetchResult.success(merge_search_results(successes, page_index, page_size))

        self.requests_made += 1
        if self.failure is not None:
            return FetchResult.failure(self.failure)
        start = page_index * page_size
        items = dedupe_by_id(self._entry(record) for record in self.records[start:start + page_size])
        total_pages = -(-len(self.records) // page_size)
        return FetchResult.success(CatalogPage(
            items=tuple(items),
            page_size=page_size,
            pageable=Pageable(
                current_page=page_index,
                elements_on_page=len(items),
                total_elements=len(self.records),
                total_pages=total_pages
            )
        ))

    def fetch_detail(self, digimon_id: int) -> FetchResult[DigimonDetail]:
        self.requests_made += 1
        if self.failure is not None:
            return FetchResult.failure(self.failure)
        for record in self.records:
            if record['id'] == digimon_id:
                return FetchResult.success(DigimonDetail.model_validate({
                    'id': record['id'],
                    'name': record['name'],
                    'xAntibody': False,
                    'images': [{'href': f"{self.image_base_url}{record['name']}.png",
                                'transparent': False}],
                    'levels': [{'level': record['level']}],
                    'types': [{'type': record['type']}],
                    'attributes': [{'attribute': record['attribute']}],
                    'fields': [{'field': record['field']}],
                }))
        return FetchResult.failure(ServerError(404))
