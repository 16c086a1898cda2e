"""Pytest fixtures for HTTP-level tests of the catalog client."""

import json
import threading
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

BASE_URL = 'http://test.example.com/api/v1'


def _make_response(status_code=200, body=b''):
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    if not isinstance(body, (bytes, bytearray)):
        body = json.dumps(body).encode('utf-8')
    response._content = bytes(body)
    return response


def _listing(*entries):
    """JSON body of a listing response for (id, name) pairs."""
    return {
        'content': [
            {'id': digimon_id, 'name': name,
             'href': f'{BASE_URL}/digimon/{digimon_id}',
             'image': f'http://images.example.com/{name}.png'}
            for digimon_id, name in entries
        ],
        'pageable': None
    }


class FakeSession:
    """Stand-in for requests.Session routing GET requests to a handler.

    The handler receives the request path and the decoded query dict and
    returns a Response or raises an exception.
    """

    def __init__(self, handler):
        self.handler = handler
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, headers=None, timeout=None):
        with self._lock:
            self.calls.append(url)
        parts = urlsplit(url)
        query = {key: values[0] for key, values in parse_qs(parts.query).items()}
        return self.handler(parts.path, query)

    def close(self):
        self.closed = True


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def fake_session():
    """Factory building a FakeSession around a handler."""
    return FakeSession


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def listing():
    return _listing
