from .models import (
    CatalogPage,
    Digimon,
    DigimonDetail,
    DigimonListResponse,
    Evolution,
    Pageable
)
from .catalog_interface import CatalogInterface
from .aggregator import CatalogQueryAggregator
from .detail import DetailFetcher
from .catalog import Catalog

__all__ = [
    'CatalogPage',
    'Digimon',
    'DigimonDetail',
    'DigimonListResponse',
    'Evolution',
    'Pageable',
    'CatalogInterface',
    'CatalogQueryAggregator',
    'DetailFetcher',
    'Catalog'
]
