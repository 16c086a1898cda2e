"""
Error taxonomy for the fetching layer.

Every failure produced by the HTTP client, the catalog aggregator and the
detail fetcher is one of the classes below. They are returned inside a
FetchResult rather than raised, so callers can render a single error path
regardless of which request failed.

Kinds:
- NoConnectivityError: network unreachable (retryable)
- TransportError: other low-level I/O failure (retryable)
- InvalidResponseError: not a well-formed HTTP response (retryable)
- ServerError: non-2xx status (retryable for 5xx, 408 and 429)
- NoDataError: 2xx with an empty body (retryable)
- DecodingError: body did not match the expected schema (not retryable)
"""

from typing import Optional

from .constants import RETRYABLE_CLIENT_STATUS_CODES


class FetchError(Exception):
    """
    Base class for all fetch failures.

    Attributes:
        kind: Stable identifier of the error kind
        retryable: True if re-issuing the same request may succeed
        message: Human readable explanation
    """

    kind = 'fetch_error'
    retryable = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))


class NoConnectivityError(FetchError):
    """Raised when the network or host is unreachable."""

    kind = 'no_connectivity'

    def __init__(self, message: str = "No internet connection. Please check your network settings."):
        super().__init__(message)


class TransportError(FetchError):
    """Low-level I/O failure other than missing connectivity."""

    kind = 'transport_error'

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class InvalidResponseError(FetchError):
    """The response is not a well-formed HTTP response."""

    kind = 'invalid_response'

    def __init__(self, message: str = "Invalid response from server."):
        super().__init__(message)


class ServerError(FetchError):
    """
    The server answered with a non-2xx status code.

    Server side failures (5xx) and throttling are retryable, other 4xx
    responses are left to the caller's judgment and reported as not
    retryable.
    """

    kind = 'server_error'

    def __init__(self, status_code: int):
        super().__init__(f"Server error with code: {status_code}")
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.status_code >= 500 or self.status_code in RETRYABLE_CLIENT_STATUS_CODES


class NoDataError(FetchError):
    """A 2xx response arrived without a body."""

    kind = 'no_data'

    def __init__(self, message: str = "No data received from server."):
        super().__init__(message)


class DecodingError(FetchError):
    """The body could not be decoded into the expected payload shape."""

    kind = 'decoding_error'
    retryable = False

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to parse data: {cause}")
        self.cause = cause
