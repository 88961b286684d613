"""Protocol for metadata cache backends."""

from typing import Protocol, TypeVar

V = TypeVar("V")


class MetadataCache(Protocol[V]):
    """
    Time-expiring key -> value store for provider metadata.

    All implementations must support:
    - Lazy expiry: ``get`` hides entries whose TTL has elapsed
    - Unconditional overwrite on ``set`` (resets the TTL)
    - Concurrent use from several callers (last writer wins)

    No I/O is performed; operations are synchronous.
    """

    def get(self, key: str) -> V | None:
        """
        Look up a live entry.

        Args:
            key: Cache key

        Returns:
            The stored value, or None if missing or expired
        """
        ...

    def set(self, key: str, value: V, ttl_s: float) -> None:
        """
        Store a value, replacing any existing entry.

        Args:
            key: Cache key
            value: Value to store
            ttl_s: Seconds until the entry stops being visible
        """
        ...

    def invalidate(self, key: str) -> None:
        """Drop an entry if present."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...
