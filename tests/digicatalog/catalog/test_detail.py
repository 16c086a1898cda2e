"""Tests for the detail fetcher and the Digi-API catalog"""

from concurrent.futures import ThreadPoolExecutor

import pytest
import requests

from digicatalog.catalog.detail import DetailFetcher
from digicatalog.catalog.digi_api import DigiApiCatalog
from digicatalog.fetching.errors import DecodingError, NoDataError, ServerError, TransportError
from digicatalog.fetching.http_client import HttpClientManager


def detail_handler(make_response):
    def handler(path, query):
        if path.endswith('/digimon/289'):
            return make_response(200, {
                'id': 289, 'name': 'Agumon', 'xAntibody': False,
                'levels': [{'id': 3, 'level': 'Child'}],
                'nextEvolutions': [{'id': 400, 'digimon': 'Greymon'}]
            })
        if path.endswith('/digimon/7'):
            return make_response(200, b'')
        if path.endswith('/digimon/8'):
            return make_response(200, {'unexpected': True})
        return make_response(404, {'error': 'Digimon not found'})
    return handler


class TestDetailFetcher:

    @pytest.fixture
    def fetcher_and_session(self, fake_session, make_response, base_url):
        session = fake_session(detail_handler(make_response))
        return DetailFetcher(HttpClientManager(session=session), base_url=base_url), session

    def test_fetch_detail(self, fetcher_and_session, base_url):
        fetcher, session = fetcher_and_session

        result = fetcher.fetch_detail(289)

        assert result.ok
        assert result.value.name == 'Agumon'
        assert result.value.levels[0].level == 'Child'
        assert result.value.next_evolutions[0].digimon == 'Greymon'
        assert session.calls == [f'{base_url}/digimon/289']

    @pytest.mark.parametrize('digimon_id', [-1, 99999])
    def test_unknown_id_is_not_found(self, fetcher_and_session, digimon_id):
        fetcher, session = fetcher_and_session

        result = fetcher.fetch_detail(digimon_id)

        assert result.error == ServerError(404)
        assert len(session.calls) == 1

    def test_empty_body(self, fetcher_and_session):
        fetcher, _ = fetcher_and_session
        assert isinstance(fetcher.fetch_detail(7).error, NoDataError)

    def test_schema_mismatch(self, fetcher_and_session):
        fetcher, _ = fetcher_and_session
        assert isinstance(fetcher.fetch_detail(8).error, DecodingError)

    def test_no_caching(self, fetcher_and_session):
        fetcher, session = fetcher_and_session
        fetcher.fetch_detail(289)
        fetcher.fetch_detail(289)
        assert len(session.calls) == 2

    def test_unexpected_exception_is_transport_error(self, fake_session, base_url):
        def handler(path, query):
            raise RuntimeError('bug in transport')

        fetcher = DetailFetcher(HttpClientManager(session=fake_session(handler)), base_url=base_url)
        result = fetcher.fetch_detail(289)

        assert isinstance(result.error, TransportError)
        assert isinstance(result.error.cause, RuntimeError)
        assert result.error.retryable


class TestDigiApiCatalog:

    def test_delegates_and_owns_executor(self, fake_session, make_response, listing, base_url):
        def handler(path, query):
            if path.endswith('/digimon/289'):
                return detail_handler(make_response)(path, query)
            if query.get('name') == 'Agumon':
                return make_response(200, listing((289, 'Agumon')))
            return make_response(200, listing())

        catalog = DigiApiCatalog(HttpClientManager(session=fake_session(handler)), base_url=base_url)
        try:
            page = catalog.query_page(0, 8, 'Agumon')
            detail = catalog.fetch_detail(page.value.items[0].id)
        finally:
            catalog.shutdown()

        assert page.value.ids == (289,)
        assert detail.value.name == 'Agumon'
        assert catalog.executor._shutdown

    def test_shared_executor_not_shut_down(self, fake_session, make_response):
        executor = ThreadPoolExecutor(max_workers=2)
        catalog = DigiApiCatalog(
            HttpClientManager(session=fake_session(lambda path, query: make_response(500, b''))),
            executor
        )
        catalog.shutdown()
        assert executor.submit(lambda: 42).result() == 42
        executor.shutdown()

    def test_connection_error_passes_through(self, fake_session):
        def handler(path, query):
            raise requests.exceptions.ConnectionError('offline')

        catalog = DigiApiCatalog(HttpClientManager(session=fake_session(handler)))
        try:
            result = catalog.fetch_detail(1)
        finally:
            catalog.shutdown()

        assert result.error.kind == 'no_connectivity'
        assert result.error.retryable
