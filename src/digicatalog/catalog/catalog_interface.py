""" Interface for catalog classes """

from abc import ABC, abstractmethod
from typing import Optional

from ..fetching.result import FetchResult
from .models import CatalogPage, DigimonDetail


class CatalogInterface(ABC):
    """ Interface for catalog data sources """

    @abstractmethod
    def query_page(self, page_index: int, page_size: int,
                   search_text: Optional[str] = None) -> FetchResult[CatalogPage]:
        """ Get one page of entries, optionally filtered by search text """

    @abstractmethod
    def fetch_detail(self, digimon_id: int) -> FetchResult[DigimonDetail]:
        """ Get the full detail of one entry """

    def shutdown(self) -> None:
        """ Release resources held by the catalog """
