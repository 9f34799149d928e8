"""
ChromaLab Result Cache
In-memory LRU cache with TTL, and the keyed extraction cache built on it.
"""
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from threading import Lock
from typing import Any, Dict, Optional

from loguru import logger

from chromalab.config import config
from chromalab.services.fingerprint import extraction_cache_key


class CacheBackend(ABC):
    """Abstract base class for cache backends."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value in cache with TTL."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key from cache."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if key exists."""

    @abstractmethod
    def clear(self) -> bool:
        """Clear all cache entries."""


class InMemoryLRUCache(CacheBackend):
    """Thread-safe in-memory LRU cache with per-entry expiry."""

    def __init__(self, max_size: int = 1000):
        self.max_size = max(1, max_size)
        self._cache: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get value and mark it most recently used."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if entry["expires"] <= time.time():
                del self._cache[key]
                return None
            self._cache.move_to_end(key)
            return entry["value"]

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Set value with TTL, evicting the least recently used entry at capacity."""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug(f"Evicted LRU cache entry {evicted}")
            self._cache[key] = {"value": value, "expires": time.time() + ttl}
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        """Check if non-expired key exists."""
        return self.get(key) is not None

    def clear(self) -> bool:
        with self._lock:
            self._cache.clear()
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class ExtractionCache:
    """Extraction results keyed by image content hash and run parameters."""

    def __init__(self, backend: Optional[CacheBackend] = None, ttl: Optional[int] = None):
        self.backend = backend or InMemoryLRUCache(config.CACHE_MAX_SIZE)
        self.ttl = config.CACHE_TTL if ttl is None else ttl
        self.hits = 0
        self.misses = 0

    def get(self, sha256: str, k: int, stride: int, seed: Optional[int], max_edge: int) -> Optional[Any]:
        value = self.backend.get(extraction_cache_key(sha256, k, stride, seed, max_edge))
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def set(self, sha256: str, k: int, stride: int, seed: Optional[int], max_edge: int, value: Any) -> bool:
        return self.backend.set(extraction_cache_key(sha256, k, stride, seed, max_edge), value, self.ttl)

    def clear(self) -> bool:
        self.hits = 0
        self.misses = 0
        return self.backend.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total else 0.0,
        }


# Global cache instance
_extraction_cache: Optional[ExtractionCache] = None


def get_extraction_cache() -> ExtractionCache:
    """Get or create the global extraction cache."""
    global _extraction_cache
    if _extraction_cache is None:
        _extraction_cache = ExtractionCache()
    return _extraction_cache
