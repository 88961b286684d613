from __future__ import annotations

from pydantic import BaseModel, Field


class ApiErrorData(BaseModel):
    """Structured data for HTTP transport errors.

    Args:
        message: Human-readable error description
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        status_code: HTTP status code (if a response was received)
        request_id: Request ID for tracing
        response_body_snippet: Truncated response body for debugging
        cause: Original exception that caused this error
    """

    model_config = {"arbitrary_types_allowed": True}

    message: str
    method: str
    url: str
    status_code: int | None = None
    request_id: str | None = None
    response_body_snippet: str | None = None
    cause: BaseException | None = Field(default=None, repr=False)


class ApiError(Exception):
    """Base exception for transport-level HTTP failures.

    Provider clients translate these into domain errors at their boundary;
    nothing above the provider layer should need to catch ApiError.
    """

    def __init__(
        self,
        *,
        message: str,
        method: str,
        url: str,
        status_code: int | None = None,
        request_id: str | None = None,
        response_body_snippet: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.data = ApiErrorData(
            message=message,
            method=method,
            url=url,
            status_code=status_code,
            request_id=request_id,
            response_body_snippet=response_body_snippet,
            cause=cause,
        )
        super().__init__(str(self))

    @property
    def message(self) -> str:
        return self.data.message

    @property
    def method(self) -> str:
        return self.data.method

    @property
    def url(self) -> str:
        return self.data.url

    @property
    def status_code(self) -> int | None:
        return self.data.status_code

    @property
    def request_id(self) -> str | None:
        return self.data.request_id

    @property
    def response_body_snippet(self) -> str | None:
        return self.data.response_body_snippet

    @property
    def cause(self) -> BaseException | None:
        return self.data.cause

    def __str__(self) -> str:
        parts = [self.data.message, f"{self.data.method} {self.data.url}"]
        if self.data.status_code is not None:
            parts.append(f"status={self.data.status_code}")
        if self.data.request_id:
            parts.append(f"request_id={self.data.request_id}")
        return " | ".join(parts)


class NetworkError(ApiError):
    """Network-level error (DNS, connection reset, etc.)."""


class InvalidURLError(NetworkError):
    """Request URL could not be built (control characters, bad encoding)."""


class TimeoutError(ApiError):
    """Request timed out."""


class DecodeError(ApiError):
    """Failed to decode response body (JSON/schema)."""


class RateLimitError(ApiError):
    """HTTP 429 rate limit error."""


class AuthError(ApiError):
    """HTTP 401/403 authentication or authorization error."""


class ClientError(ApiError):
    """HTTP 4xx client error (excluding auth and rate limit)."""


class ServerError(ApiError):
    """HTTP 5xx server error."""


class UnexpectedStatusError(ApiError):
    """Non-2xx status that doesn't match a more specific category."""


def error_for_status(status_code: int) -> type[ApiError]:
    """Map an HTTP status code to the matching error class."""
    if status_code in (401, 403):
        return AuthError
    if status_code == 429:
        return RateLimitError
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return UnexpectedStatusError
