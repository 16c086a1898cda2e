"""
HTTP client manager with unified timeout handling and error classification.

This module provides the single request-and-decode primitive used by the
catalog. Every call performs exactly one network request and returns a
FetchResult; failures are classified into the error taxonomy of
digicatalog.fetching.errors instead of being raised.
"""

import time
import threading
from typing import Any, Dict, Mapping, Optional, Type, TypeVar
from urllib.parse import quote, urlencode
import logging

import requests
import urllib3
from pydantic import BaseModel, ValidationError

from .constants import EXTERNAL_API_TIMEOUT, DEFAULT_USER_AGENT
from .errors import (
    FetchError,
    NoConnectivityError,
    TransportError,
    InvalidResponseError,
    ServerError,
    NoDataError,
    DecodingError
)
from .result import FetchResult

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


def build_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Join base URL and path and append percent-encoded query parameters.

    Spaces are encoded as %20, reserved characters in values are escaped.
    """
    url = base_url.rstrip('/') + '/' + path.lstrip('/')
    if params:
        url = f"{url}?{urlencode(params, quote_via=quote)}"
    return url


def classify_exception(exc: requests.exceptions.RequestException) -> FetchError:
    """Map a requests exception onto the fetch error taxonomy."""
    if isinstance(exc, requests.exceptions.Timeout):
        return TransportError(exc)
    if isinstance(exc, (requests.exceptions.ChunkedEncodingError,
                        requests.exceptions.ContentDecodingError,
                        requests.exceptions.InvalidHeader)):
        return InvalidResponseError(f"Invalid response from server: {exc}")
    if isinstance(exc, (requests.exceptions.SSLError, requests.exceptions.ProxyError)):
        return TransportError(exc)
    if isinstance(exc, requests.exceptions.ConnectionError):
        # Server hung up mid-response, the connection itself worked
        reason = exc.args[0] if exc.args else None
        if isinstance(reason, urllib3.exceptions.ProtocolError):
            return InvalidResponseError(f"Invalid response from server: {reason}")
        return NoConnectivityError()
    return TransportError(exc)


class HttpClientManager:
    """
    Centralized HTTP client for the catalog and image loading.

    Features:
    - One shared requests.Session (connection pooling across threads)
    - Configurable timeout and User-Agent
    - Typed decoding of JSON bodies into pydantic models
    - Request logging and metrics
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = EXTERNAL_API_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent
        self._stats_lock = threading.Lock()
        self._stats = {
            'requests_made': 0,
            'requests_failed': 0,
            'bytes_received': 0
        }

    def _count(self, name: str, amount: int = 1):
        with self._stats_lock:
            self._stats[name] += amount

    def _get(self, url: str, accept: str) -> FetchResult[bytes]:
        """
        Perform one GET request and return the raw body.

        Returns:
            FetchResult holding the body bytes, or the classified error
        """
        headers = {
            'Accept': accept,
            'User-Agent': self.user_agent
        }
        start_time = time.time()
        try:
            logger.debug(f"Making GET request to {url} (timeout: {self.timeout}s)")
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            duration = time.time() - start_time
            self._count('requests_failed')
            error = classify_exception(e)
            logger.error(f"Request to {url} failed after {duration:.2f}s: {e} ({error.kind})")
            return FetchResult.failure(error)
        except Exception as e:  # pylint: disable=broad-exception-caught
            # Anything else raised by the transport stack still becomes a typed error
            duration = time.time() - start_time
            self._count('requests_failed')
            logger.error(f"Unexpected error requesting {url} after {duration:.2f}s: {e}", exc_info=True)
            return FetchResult.failure(TransportError(e))

        duration = time.time() - start_time
        status_code = getattr(response, 'status_code', None)
        if not isinstance(status_code, int):
            self._count('requests_failed')
            logger.error(f"Request to {url} returned no HTTP status")
            return FetchResult.failure(InvalidResponseError())

        logger.info(f"Request to {url} completed in {duration:.2f}s (status: {status_code})")

        if not 200 <= status_code <= 299:
            self._count('requests_failed')
            return FetchResult.failure(ServerError(status_code))

        self._count('requests_made')
        body = response.content
        if not body:
            return FetchResult.failure(NoDataError())

        self._count('bytes_received', len(body))
        return FetchResult.success(body)

    def fetch(self, url: str, model: Type[ModelT]) -> FetchResult[ModelT]:
        """
        Fetch a JSON document and decode it into the given model.

        Args:
            url: Fully built request URL
            model: pydantic model class describing the expected payload

        Returns:
            FetchResult with the decoded model or a FetchError
        """
        raw = self._get(url, 'application/json')
        if not raw.ok:
            return FetchResult.failure(raw.error)

        try:
            return FetchResult.success(model.model_validate_json(raw.value))
        except ValidationError as e:
            logger.warning(f"Failed to decode {model.__name__} from {url}: {e.error_count()} errors")
            return FetchResult.failure(DecodingError(e))

    def fetch_bytes(self, url: str) -> FetchResult[bytes]:
        """Fetch a raw binary payload such as an image."""
        return self._get(url, 'image/*,*/*;q=0.8')

    def close(self):
        """Close the underlying session and its pooled connections."""
        self.session.close()

    def get_stats(self) -> Dict[str, Any]:
        """Get HTTP client statistics."""
        with self._stats_lock:
            total_requests = self._stats['requests_made'] + self._stats['requests_failed']
            success_rate = (self._stats['requests_made'] / total_requests * 100) if total_requests > 0 else 0

            return {
                **self._stats,
                'success_rate': success_rate
            }

    def reset_stats(self):
        """Reset HTTP client statistics."""
        with self._stats_lock:
            self._stats = {
                'requests_made': 0,
                'requests_failed': 0,
                'bytes_received': 0
            }
