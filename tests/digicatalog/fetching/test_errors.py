"""Tests for the fetch error taxonomy and FetchResult"""

import pytest
from digicatalog.fetching.errors import (
    FetchError,
    NoConnectivityError,
    TransportError,
    InvalidResponseError,
    ServerError,
    NoDataError,
    DecodingError
)
from digicatalog.fetching.result import FetchResult


class TestErrorKinds:
    """Tests for kinds, messages and retryability"""

    def test_all_kinds_are_fetch_errors(self):
        errors = [
            NoConnectivityError(),
            TransportError(OSError('reset')),
            InvalidResponseError(),
            ServerError(500),
            NoDataError(),
            DecodingError(ValueError('bad'))
        ]
        assert all(isinstance(error, FetchError) for error in errors)
        assert len({error.kind for error in errors}) == 6

    @pytest.mark.parametrize('error', [
        NoConnectivityError(),
        TransportError(OSError('reset')),
        InvalidResponseError(),
        NoDataError(),
    ])
    def test_retryable_kinds(self, error):
        assert error.retryable is True

    def test_decoding_error_not_retryable(self):
        assert DecodingError(ValueError('bad')).retryable is False

    @pytest.mark.parametrize('status_code, retryable', [
        (500, True),
        (503, True),
        (429, True),
        (404, False),
        (400, False),
    ])
    def test_server_error_retryable_by_status(self, status_code, retryable):
        assert ServerError(status_code).retryable is retryable

    def test_server_error_message_and_equality(self):
        error = ServerError(404)
        assert error.status_code == 404
        assert error.message == 'Server error with code: 404'
        assert error == ServerError(404)
        assert error != ServerError(500)
        assert error != NoDataError()

    def test_cause_is_kept(self):
        cause = ValueError('unexpected token')
        error = DecodingError(cause)
        assert error.cause is cause
        assert 'unexpected token' in error.message


class TestFetchResult:
    """Tests for FetchResult"""

    def test_success(self):
        result = FetchResult.success(b'data')
        assert result.ok
        assert result.value == b'data'
        assert result.error is None
        assert result.unwrap() == b'data'

    def test_failure(self):
        error = ServerError(500)
        result = FetchResult.failure(error)
        assert not result.ok
        assert result.error is error
        with pytest.raises(ServerError):
            result.unwrap()

    def test_requires_exactly_one_side(self):
        with pytest.raises(ValueError):
            FetchResult()
        with pytest.raises(ValueError):
            FetchResult(value=1, error=NoDataError())
