"""In-memory metadata cache with lazy TTL expiry.

There is no background sweep: expired entries stay stored until they are
overwritten, invalidated or cleared, but ``get`` never returns them.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

from wxpaint.core.caching.models import CacheEntry

V = TypeVar("V")

logger = logging.getLogger(__name__)


class MemoryCache(Generic[V]):
    """
    Thread-safe in-memory cache.

    Guarded by a re-entrant lock so concurrent readers and writers never see
    a torn entry; concurrent ``set`` calls for one key are last-writer-wins.

    Args:
        clock: Monotonic time source in seconds (injectable for tests)

    Example:
        >>> cache: MemoryCache[list[str]] = MemoryCache()
        >>> cache.set("models:https://api.example.com", ["flux"], ttl_s=3600)
        >>> cache.get("models:https://api.example.com")
        ['flux']
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            logger.debug("Cache entry expired: %s", key)
            return None
        return entry.value

    def set(self, key: str, value: V, ttl_s: float) -> None:
        if ttl_s < 0:
            raise ValueError(f"ttl_s must be >= 0, got {ttl_s}")
        entry = CacheEntry(value=value, expires_at=self._clock() + ttl_s)
        with self._lock:
            self._entries[key] = entry

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        """Physical entry count, expired entries included."""
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None


_shared_cache: MemoryCache | None = None
_shared_lock = threading.Lock()


def shared_metadata_cache() -> MemoryCache:
    """Process-wide cache shared by every provider client that is not given one."""
    global _shared_cache
    with _shared_lock:
        if _shared_cache is None:
            _shared_cache = MemoryCache()
        return _shared_cache
