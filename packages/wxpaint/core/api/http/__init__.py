"""Async HTTPX wrapper used by the provider client and artifact downloads.

Exposes a small, ergonomic surface:
- AsyncApiClient: high-level client with retries and cancellation
- HttpClientConfig / RetryPolicy: configuration
- BearerAuth: static bearer credential
- Exceptions: ApiError and subclasses
"""

from wxpaint.core.api.http.auth import BearerAuth
from wxpaint.core.api.http.client import AsyncApiClient
from wxpaint.core.api.http.config import HttpClientConfig
from wxpaint.core.api.http.errors import (
    ApiError,
    AuthError,
    ClientError,
    DecodeError,
    InvalidURLError,
    NetworkError,
    RateLimitError,
    ServerError,
    TimeoutError,
    UnexpectedStatusError,
)
from wxpaint.core.api.http.retry import RetryPolicy

__all__ = [
    "AsyncApiClient",
    "HttpClientConfig",
    "RetryPolicy",
    "BearerAuth",
    "ApiError",
    "NetworkError",
    "InvalidURLError",
    "TimeoutError",
    "DecodeError",
    "RateLimitError",
    "AuthError",
    "ClientError",
    "ServerError",
    "UnexpectedStatusError",
]
