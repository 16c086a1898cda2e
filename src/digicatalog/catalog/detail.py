""" Single entry lookup by id """
import logging

from ..fetching.constants import DEFAULT_BASE_URL, DIGIMON_PATH
from ..fetching.http_client import HttpClientManager, build_url
from ..fetching.result import FetchResult
from .models import DigimonDetail

logger = logging.getLogger(__name__)


class DetailFetcher:
    """ Fetches GET /digimon/{id}; one id, one request, one result """

    def __init__(self, http_client: HttpClientManager, base_url: str = DEFAULT_BASE_URL):
        self.http_client = http_client
        self.base_url = base_url

    def detail_url(self, digimon_id: int) -> str:
        return build_url(self.base_url, f"{DIGIMON_PATH}/{int(digimon_id)}")

    def fetch_detail(self, digimon_id: int) -> FetchResult[DigimonDetail]:
        result = self.http_client.fetch(self.detail_url(digimon_id), DigimonDetail)
        if not result.ok:
            logger.warning('Detail for id %s not available: %s', digimon_id, result.error)
        return result
