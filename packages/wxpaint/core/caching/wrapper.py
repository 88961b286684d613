"""Read-through helper over a MetadataCache."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from wxpaint.core.caching.protocols import MetadataCache

V = TypeVar("V")

logger = logging.getLogger(__name__)


async def cached_value(
    cache: MetadataCache[V],
    key: str,
    ttl_s: float,
    compute: Callable[[], Awaitable[V]],
    *,
    force: bool = False,
) -> V:
    """Return the cached value for ``key`` or compute and store it.

    Concurrent callers missing on the same key may each compute; the last
    one to finish wins the slot. Failures from ``compute`` propagate and
    nothing is stored.

    Args:
        cache: Cache backend
        key: Cache key
        ttl_s: TTL applied when storing a freshly computed value
        compute: Async factory invoked on a miss
        force: Skip the lookup and recompute (still stores)

    Returns:
        Cached or freshly computed value
    """
    if not force:
        hit = cache.get(key)
        if hit is not None:
            logger.debug("Cache hit: %s", key)
            return hit

    logger.debug("Cache miss: %s", key)
    value = await compute()
    cache.set(key, value, ttl_s)
    return value
