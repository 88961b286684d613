"""No-op cache for development/testing.

Always reports a miss, discards all stores.
"""

from typing import Generic, TypeVar

V = TypeVar("V")


class NullCache(Generic[V]):
    """
    No-op metadata cache.

    Useful to force every catalog lookup through to the provider.
    """

    def get(self, key: str) -> V | None:
        """Always returns None."""
        return None

    def set(self, key: str, value: V, ttl_s: float) -> None:
        """Discard."""

    def invalidate(self, key: str) -> None:
        """No-op."""

    def clear(self) -> None:
        """No-op."""
