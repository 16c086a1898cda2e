"""Tests for the HTTP fetch primitive and its error classification"""

from unittest.mock import Mock

import pytest
import requests
import urllib3

from digicatalog.catalog.models import DigimonListResponse
from digicatalog.fetching.errors import (
    NoConnectivityError,
    TransportError,
    InvalidResponseError,
    ServerError,
    NoDataError,
    DecodingError
)
from digicatalog.fetching.http_client import HttpClientManager, build_url, classify_exception


class TestBuildUrl:
    """Tests for URL building"""

    def test_joins_base_and_path(self):
        assert build_url('https://digi-api.com/api/v1/', '/digimon/7') == \
            'https://digi-api.com/api/v1/digimon/7'

    def test_percent_encodes_query_values(self):
        url = build_url('https://digi-api.com/api/v1', '/digimon',
                        {'page': 0, 'pageSize': 50, 'field': "Dragon's Roar & Co"})
        assert url == ('https://digi-api.com/api/v1/digimon?page=0&pageSize=50'
                       '&field=Dragon%27s%20Roar%20%26%20Co')


class TestClassifyException:
    """Tests for mapping requests exceptions to error kinds"""

    def test_connection_error(self):
        assert isinstance(classify_exception(requests.exceptions.ConnectionError('down')),
                          NoConnectivityError)

    def test_timeout(self):
        assert isinstance(classify_exception(requests.exceptions.ReadTimeout('slow')), TransportError)

    def test_connect_timeout_is_transport_error(self):
        assert isinstance(classify_exception(requests.exceptions.ConnectTimeout('slow')), TransportError)

    def test_ssl_error(self):
        assert isinstance(classify_exception(requests.exceptions.SSLError('bad cert')), TransportError)

    def test_protocol_error(self):
        exc = requests.exceptions.ConnectionError(
            urllib3.exceptions.ProtocolError('Connection aborted.'))
        assert isinstance(classify_exception(exc), InvalidResponseError)

    def test_chunked_encoding_error(self):
        assert isinstance(classify_exception(requests.exceptions.ChunkedEncodingError('broken')),
                          InvalidResponseError)

    def test_other_request_exception(self):
        error = classify_exception(requests.exceptions.TooManyRedirects('loop'))
        assert isinstance(error, TransportError)
        assert isinstance(error.cause, requests.exceptions.TooManyRedirects)


class TestHttpClientManager:
    """Tests for fetch and fetch_bytes"""

    @pytest.fixture
    def session(self):
        return Mock(spec=requests.Session)

    @pytest.fixture
    def client(self, session):
        return HttpClientManager(session=session, timeout=5, user_agent='tests/1.0')

    def test_fetch_decodes_model(self, client, session, make_response, listing):
        session.get.return_value = make_response(200, listing((1, 'Agumon'), (2, 'Gabumon')))

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert result.ok
        assert [entry.name for entry in result.value.content] == ['Agumon', 'Gabumon']
        session.get.assert_called_once()
        _, kwargs = session.get.call_args
        assert kwargs['timeout'] == 5
        assert kwargs['headers']['User-Agent'] == 'tests/1.0'

    def test_fetch_single_call_no_retry(self, client, session, make_response):
        session.get.return_value = make_response(503, b'unavailable')

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert result.error == ServerError(503)
        assert result.error.retryable
        assert session.get.call_count == 1

    def test_fetch_not_found(self, client, session, make_response):
        session.get.return_value = make_response(404, {'error': 'not found'})

        result = client.fetch('http://test/digimon/-1', DigimonListResponse)

        assert isinstance(result.error, ServerError)
        assert result.error.status_code == 404

    def test_fetch_empty_body(self, client, session, make_response):
        session.get.return_value = make_response(200, b'')

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert isinstance(result.error, NoDataError)

    def test_fetch_invalid_json(self, client, session, make_response):
        session.get.return_value = make_response(200, b'<html>oops</html>')

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert isinstance(result.error, DecodingError)
        assert result.error.retryable is False

    def test_fetch_schema_mismatch(self, client, session, make_response):
        session.get.return_value = make_response(200, {'content': [{'name': 'no id'}]})

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert isinstance(result.error, DecodingError)

    def test_fetch_no_connectivity(self, client, session):
        session.get.side_effect = requests.exceptions.ConnectionError('Name or service not known')

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert isinstance(result.error, NoConnectivityError)
        assert client.get_stats()['requests_failed'] == 1

    def test_fetch_unexpected_exception(self, client, session):
        session.get.side_effect = RuntimeError('adapter blew up')

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert isinstance(result.error, TransportError)
        assert isinstance(result.error.cause, RuntimeError)
        assert client.get_stats()['requests_failed'] == 1

    def test_fetch_missing_status(self, client, session):
        session.get.return_value = Mock(status_code=None)

        result = client.fetch('http://test/digimon', DigimonListResponse)

        assert isinstance(result.error, InvalidResponseError)

    def test_fetch_bytes(self, client, session, make_response):
        session.get.return_value = make_response(200, b'\x89PNG\r\n\x1a\nrest')

        result = client.fetch_bytes('http://images/agumon.png')

        assert result.value == b'\x89PNG\r\n\x1a\nrest'
        assert client.get_stats()['bytes_received'] == len(result.value)

    def test_stats(self, client, session, make_response):
        session.get.side_effect = [make_response(200, b'abc'), make_response(500, b'')]

        client.fetch_bytes('http://images/a.png')
        client.fetch_bytes('http://images/b.png')

        stats = client.get_stats()
        assert stats['requests_made'] == 1
        assert stats['requests_failed'] == 1
        assert stats['success_rate'] == 50.0

        client.reset_stats()
        assert client.get_stats()['requests_made'] == 0

    def test_close(self, client, session):
        client.close()
        session.close.assert_called_once()
