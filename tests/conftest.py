"""Shared pytest fixtures for wxpaint tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from wxpaint.core.api.http import RetryPolicy
from wxpaint.core.api.paintings import PaintingsClient
from wxpaint.core.artifacts import ArtifactFetcher
from wxpaint.core.caching import MemoryCache
from wxpaint.core.io import FakeFileStorage

API_HOST = "https://api.example.test"
API_KEY = "sk-test"

Handler = Callable[[httpx.Request], Any]

# ============================================================================
# Helpers
# ============================================================================


def envelope(data: Any = None, *, success: bool = True, message: str | None = None) -> dict:
    """Build a provider response envelope."""
    body: dict[str, Any] = {"success": success}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body


def no_retry() -> RetryPolicy:
    return RetryPolicy(max_attempts=1, base_delay_s=0.0, jitter=0.0)


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def storage() -> FakeFileStorage:
    """Provide fresh in-memory storage."""
    return FakeFileStorage()


@pytest.fixture
def models_cache() -> MemoryCache:
    """Provide an isolated catalog cache (never the process-wide one)."""
    return MemoryCache()


@pytest.fixture
async def make_client(models_cache: MemoryCache):
    """Factory for PaintingsClient instances backed by an httpx.MockTransport."""
    clients: list[PaintingsClient] = []

    def _make(handler: Handler, **kwargs: Any) -> PaintingsClient:
        kwargs.setdefault("cache", models_cache)
        client = PaintingsClient(
            API_HOST, API_KEY, transport=httpx.MockTransport(handler), **kwargs
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
async def make_fetcher(storage: FakeFileStorage):
    """Factory for ArtifactFetcher instances backed by an httpx.MockTransport."""
    fetchers: list[ArtifactFetcher] = []

    def _make(handler: Handler, **kwargs: Any) -> ArtifactFetcher:
        kwargs.setdefault("retry_policy", no_retry())
        fetcher = ArtifactFetcher(
            kwargs.pop("storage", storage), transport=httpx.MockTransport(handler), **kwargs
        )
        fetchers.append(fetcher)
        return fetcher

    yield _make

    for fetcher in fetchers:
        await fetcher.aclose()
