""" Factory for catalog implementations """
from concurrent.futures import Executor
from typing import Optional

from ..fetching.constants import (
    CATALOG_TYPE_DIGIAPI,
    CATALOG_TYPE_DUMMY,
    DEFAULT_BASE_URL,
    SEARCH_FETCH_SIZE,
    SEARCH_FIELDS
)
from ..fetching.http_client import HttpClientManager
from .catalog_interface import CatalogInterface


class Catalog:
    """ Factory for catalog implementations """

    @staticmethod
    def create_catalog(config: dict, http_client: HttpClientManager,
                       executor: Optional[Executor] = None) -> CatalogInterface:
        """ Select and configure a catalog based on the given configuration """
        catalog_type = config.get('type', CATALOG_TYPE_DIGIAPI).lower()
        search_fields = config.get('search_fields', SEARCH_FIELDS)

        if catalog_type == CATALOG_TYPE_DIGIAPI:
            from .digi_api import DigiApiCatalog
            return DigiApiCatalog(
                http_client,
                executor,
                base_url=config.get('base_url', DEFAULT_BASE_URL),
                search_fields=search_fields,
                search_fetch_size=config.get('search_fetch_size', SEARCH_FETCH_SIZE)
            )
        if catalog_type == CATALOG_TYPE_DUMMY:
            from .dummy import DummyCatalog
            return DummyCatalog(search_fields=search_fields)

        raise RuntimeError(f'[Catalog] Unknown catalog type {config["type"]}')
