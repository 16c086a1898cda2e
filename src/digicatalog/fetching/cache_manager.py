"""
Thread-safe image cache for downloaded image bytes.

This module provides a bounded in-memory cache keyed by normalized image URL.
The cache is limited both by number of entries and by the total byte size of
the stored blobs; least recently used entries are evicted first.
"""

import threading
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit
import logging

from cachetools import LRUCache

from .constants import IMAGE_CACHE_COUNT_LIMIT, IMAGE_CACHE_SIZE_LIMIT

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {'http': 80, 'https': 443}


def normalize_key(url: str) -> str:
    """
    Normalize an image URL into a cache key.

    Scheme and host are lowercased, default ports and fragments are dropped.
    Path and query are kept as they are, they are case sensitive on most hosts.
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    netloc = (parts.hostname or '').lower()
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{parts.port}"
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit((scheme, netloc, parts.path, parts.query, ''))


class ImageCacheManager:
    """
    Thread-safe bounded cache for image bytes.

    Features:
    - Entry count limit (default 100)
    - Total byte size limit (default 50 MiB)
    - LRU eviction via cachetools, sized by the blob length
    - Hit/miss/eviction metrics for monitoring
    """

    def __init__(self, count_limit: int = IMAGE_CACHE_COUNT_LIMIT,
                 size_limit: int = IMAGE_CACHE_SIZE_LIMIT):
        if count_limit <= 0 or size_limit <= 0:
            raise ValueError(
                f"Cache limits must be positive (count: {count_limit}, size: {size_limit})")
        self.count_limit = count_limit
        self.size_limit = size_limit
        self._cache: LRUCache = LRUCache(maxsize=size_limit, getsizeof=len)
        self._lock = threading.Lock()
        self._stats = {
            'hits': 0,
            'misses': 0,
            'stores': 0,
            'evictions': 0,
            'rejected': 0
        }

    def get(self, key: str) -> Optional[bytes]:
        """
        Get cached bytes for a key.

        Args:
            key: Cache key, usually a normalized image URL

        Returns:
            Cached bytes if available, None otherwise
        """
        with self._lock:
            blob = self._cache.get(key)
            if blob is None:
                self._stats['misses'] += 1
                return None
            self._stats['hits'] += 1
            return blob

    def put(self, key: str, blob: bytes):
        """
        Store bytes under a key, evicting older entries as needed.

        A blob larger than the whole byte limit is not stored.
        """
        size = len(blob)
        with self._lock:
            if size > self.size_limit:
                self._stats['rejected'] += 1
                logger.warning(f"Not caching {key}: {size} bytes exceeds limit of {self.size_limit}")
                return

            entries_before = len(self._cache)
            if key in self._cache:
                del self._cache[key]
                entries_before -= 1

            # LRUCache evicts until the byte limit holds
            self._cache[key] = blob
            while len(self._cache) > self.count_limit:
                self._cache.popitem()

            evicted = entries_before + 1 - len(self._cache)
            self._stats['stores'] += 1
            self._stats['evictions'] += evicted
            logger.debug(f"Cached {size} bytes for key: {key} (evicted: {evicted})")

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()
            logger.info("Image cache cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    @property
    def total_bytes(self) -> int:
        """Sum of the sizes of all cached blobs."""
        with self._lock:
            return self._cache.currsize

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total_requests = self._stats['hits'] + self._stats['misses']
            hit_rate = (self._stats['hits'] / total_requests * 100) if total_requests > 0 else 0

            return {
                **self._stats,
                'hit_rate': hit_rate,
                'cache_size': len(self._cache),
                'total_bytes': self._cache.currsize
            }

    def reset_stats(self):
        """Reset cache statistics."""
        with self._lock:
            self._stats = {'hits': 0, 'misses': 0, 'stores': 0, 'evictions': 0, 'rejected': 0}
