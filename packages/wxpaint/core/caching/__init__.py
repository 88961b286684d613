"""Short-lived metadata caching for wxpaint.

Keeps provider metadata (the model catalog) in memory so repeated lookups
don't hit the network:
- Lazy expiry on read, no background eviction
- Thread-safe, last-writer-wins on concurrent stores
- Read-through helper for async producers
"""

from wxpaint.core.caching.backends import MemoryCache, NullCache, shared_metadata_cache
from wxpaint.core.caching.models import CacheEntry
from wxpaint.core.caching.protocols import MetadataCache
from wxpaint.core.caching.wrapper import cached_value

__all__ = [
    # Core
    "MetadataCache",
    "CacheEntry",
    # Backends
    "MemoryCache",
    "NullCache",
    "shared_metadata_cache",
    # Helpers
    "cached_value",
]
