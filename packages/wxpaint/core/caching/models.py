"""Models for the metadata cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[V]):
    """A cached value and the instant it stops being visible.

    ``expires_at`` is on the owning cache's clock (monotonic seconds by
    default), not wall-clock time.
    """

    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
