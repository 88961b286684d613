"""Metadata cache backends."""

from wxpaint.core.caching.backends.memory import MemoryCache, shared_metadata_cache
from wxpaint.core.caching.backends.null import NullCache

__all__ = ["MemoryCache", "NullCache", "shared_metadata_cache"]
