"""
Image loading through the bounded image cache.

Checks the cache first, on a miss downloads the bytes, verifies that they
look like an image and stores them under the normalized URL.
"""

from typing import Callable, Optional
import logging

from .cache_manager import ImageCacheManager, normalize_key
from .errors import DecodingError, TransportError
from .http_client import HttpClientManager
from .result import FetchResult

logger = logging.getLogger(__name__)

_IMAGE_SIGNATURES = (
    b'\x89PNG\r\n\x1a\n',
    b'\xff\xd8\xff',     # JPEG
    b'GIF87a',
    b'GIF89a',
    b'BM',               # BMP
)


def looks_like_image(blob: bytes) -> bool:
    """Check the leading bytes for a known image format signature."""
    if blob[:4] == b'RIFF' and blob[8:12] == b'WEBP':
        return True
    return any(blob.startswith(signature) for signature in _IMAGE_SIGNATURES)


class ImageLoader:
    """ Loads remote images, serving repeated requests from the cache """

    def __init__(
        self,
        http_client: HttpClientManager,
        cache: ImageCacheManager,
        validator: Optional[Callable[[bytes], bool]] = looks_like_image
    ):
        self.http_client = http_client
        self.cache = cache
        self.validator = validator

    def load(self, url: Optional[str]) -> FetchResult[bytes]:
        """
        Return the image bytes for a URL.

        Args:
            url: Image URL as embedded in a catalog or detail payload, may be None

        Returns:
            FetchResult with the image bytes or a FetchError
        """
        if not url or not url.strip():
            logger.warning("Image requested without a URL")
            return FetchResult.failure(TransportError(ValueError("Invalid URL: empty")))
        try:
            key = normalize_key(url)
        except ValueError as e:
            logger.warning(f"Cannot load image from malformed URL {url!r}: {e}")
            return FetchResult.failure(TransportError(ValueError(f"Invalid URL {url!r}: {e}")))

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Image cache hit for {key}")
            return FetchResult.success(cached)

        result = self.http_client.fetch_bytes(url)
        if not result.ok:
            return result

        if self.validator is not None and not self.validator(result.value):
            logger.warning(f"Payload from {url} is not a recognized image")
            return FetchResult.failure(DecodingError(ValueError(f"{url} did not return image data")))

        self.cache.put(key, result.value)
        return result
