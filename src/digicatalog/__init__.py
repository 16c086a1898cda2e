from .__pkginfo__ import __version__

from .fetching import (
    FetchError,
    FetchResult,
    HttpClientManager,
    ImageCacheManager,
    ImageLoader
)
from .catalog import (
    Catalog,
    CatalogInterface,
    CatalogPage,
    Digimon,
    DigimonDetail
)
from .pager import CatalogPager
from .service import CatalogService

__all__ = [
    '__version__',
    'FetchError',
    'FetchResult',
    'HttpClientManager',
    'ImageCacheManager',
    'ImageLoader',
    'Catalog',
    'CatalogInterface',
    'CatalogPage',
    'Digimon',
    'DigimonDetail',
    'CatalogPager',
    'CatalogService',
]
