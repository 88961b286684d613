"""Async HTTP client wrapper built on HTTPX.

Provides:
- Idempotent-only retries with exponential backoff
- Structured error handling (ApiError family)
- Request/response logging with credential redaction
- Cooperative cancellation via CancelToken
- Pydantic response parsing
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from wxpaint.core.api.http.config import HttpClientConfig
from wxpaint.core.api.http.errors import (
    ApiError,
    DecodeError,
    InvalidURLError,
    NetworkError,
    TimeoutError,
    error_for_status,
)
from wxpaint.core.api.http.logging_utils import (
    RequestLogContext,
    log_request,
    log_response,
    log_retry,
)
from wxpaint.core.api.http.retry import RetryPolicy, parse_retry_after_seconds
from wxpaint.core.api.http.utils import get_request_id, join_url, safe_snippet
from wxpaint.core.utils.cancellation import CancelToken

M = TypeVar("M", bound=BaseModel)


def _default_request_id() -> str:
    return f"req_{int(time.time() * 1000)}"


def _is_json_response(resp: httpx.Response) -> bool:
    ctype = resp.headers.get("content-type", "")
    return "application/json" in ctype or "+json" in ctype


class AsyncApiClient:
    """Asynchronous HTTP API client.

    Built on httpx.AsyncClient with retries, structured errors and
    cancellation support.

    Args:
        config: Client configuration
        auth: Optional authentication handler (e.g. BearerAuth)
        retry_policy: Default retry policy; individual calls may override it
        transport: Optional custom transport (useful for testing)

    Example:
        >>> config = HttpClientConfig(base_url="https://api.example.com")
        >>> async with AsyncApiClient(config, auth=BearerAuth("sk-...")) as client:
        ...     resp = await client.get("/v1/images/models")
        ...     data = client.json(resp)
    """

    def __init__(
        self,
        config: HttpClientConfig,
        *,
        auth: httpx.Auth | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.retry_policy = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={"User-Agent": config.user_agent, **config.headers},
            timeout=config.timeout,
            limits=config.limits,
            follow_redirects=config.follow_redirects,
            auth=auth,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncApiClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _error(
        self,
        exc_type: type[ApiError],
        message: str,
        *,
        method: str,
        url: str,
        response: httpx.Response | None = None,
        request_id: str | None = None,
        cause: BaseException | None = None,
    ) -> ApiError:
        status_code: int | None = None
        snippet: str | None = None
        if response is not None:
            status_code = response.status_code
            snippet = safe_snippet(response.content or b"", self.config.max_response_body_for_error)
            request_id = get_request_id(response.headers) or request_id
        return exc_type(
            message=message,
            method=method,
            url=url,
            status_code=status_code,
            request_id=request_id,
            response_body_snippet=snippet,
            cause=cause,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        timeout: httpx.Timeout | None = None,
        expected_status: Sequence[int] | None = None,
        retry_policy: RetryPolicy | None = None,
        cancel_token: CancelToken | None = None,
    ) -> httpx.Response:
        """Send a request, retrying per policy and honouring cancellation.

        Args:
            method: HTTP method
            path: Path relative to base_url, or an absolute URL
            params: Query parameters
            headers: Extra headers for this request
            json_body: JSON-serializable request body
            timeout: Per-call timeout override
            expected_status: Accepted status codes (default: any 2xx/3xx)
            retry_policy: Per-call retry policy override
            cancel_token: Token aborting the in-flight call when fired

        Returns:
            HTTP response

        Raises:
            ApiError: On HTTP or transport failure once retries are exhausted
            Cancelled: If ``cancel_token`` fires first
        """
        method_u = method.upper()
        url = join_url(self.config.base_url, path)
        policy = retry_policy or self.retry_policy
        token = cancel_token or CancelToken()

        merged_headers = dict(headers or {})
        req_id = merged_headers.setdefault("X-Request-Id", _default_request_id())

        attempt = 0
        while True:
            attempt += 1
            ctx = RequestLogContext(method=method_u, url=url, attempt=attempt, request_id=req_id)
            start = log_request(
                ctx, {**self._client.headers, **merged_headers}, self.config.redact_headers
            )

            try:
                resp = await token.guard(
                    self._client.request(
                        method_u,
                        url,
                        params=params,
                        headers=merged_headers,
                        json=json_body,
                        timeout=timeout or self.config.timeout,
                    )
                )
            except (httpx.InvalidURL, UnicodeError) as e:
                # A malformed URL fails the same way on every attempt.
                raise self._error(
                    InvalidURLError,
                    f"Invalid request URL: {e}",
                    method=method_u,
                    url=url,
                    request_id=req_id,
                    cause=e,
                ) from e
            except httpx.TimeoutException as e:
                if not policy.should_retry(method_u, attempt):
                    raise self._error(
                        TimeoutError,
                        "Request timed out",
                        method=method_u,
                        url=url,
                        request_id=req_id,
                        cause=e,
                    ) from e
                delay = policy.compute_delay(attempt)
                log_retry(ctx, "timeout", delay)
                await token.sleep(delay)
                continue
            except httpx.RequestError as e:
                if not policy.should_retry(method_u, attempt):
                    raise self._error(
                        NetworkError,
                        "Network error while sending request",
                        method=method_u,
                        url=url,
                        request_id=req_id,
                        cause=e,
                    ) from e
                delay = policy.compute_delay(attempt)
                log_retry(ctx, type(e).__name__, delay)
                await token.sleep(delay)
                continue

            log_response(ctx, resp.status_code, time.perf_counter() - start)

            if expected_status is not None:
                ok = resp.status_code in expected_status
            else:
                ok = resp.status_code < 400
            if ok:
                return resp

            if policy.should_retry(method_u, attempt, resp.status_code):
                retry_after = parse_retry_after_seconds(resp.headers.get("Retry-After"))
                delay = retry_after if retry_after is not None else policy.compute_delay(attempt)
                log_retry(ctx, f"status {resp.status_code}", delay)
                await token.sleep(delay)
                continue

            raise self._error(
                error_for_status(resp.status_code),
                "HTTP error response",
                method=method_u,
                url=url,
                response=resp,
                request_id=req_id,
            )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform async GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform async POST request."""
        return await self.request("POST", path, **kwargs)

    def json(self, response: httpx.Response) -> Any:
        """Decode a JSON response.

        Raises:
            DecodeError: If the response is not JSON or fails to parse
        """
        method = response.request.method
        url = str(response.request.url)
        if response.status_code == 204 or not response.content:
            return None
        if not _is_json_response(response):
            raise self._error(
                DecodeError,
                "Response is not JSON (content-type mismatch)",
                method=method,
                url=url,
                response=response,
            )
        try:
            return response.json()
        except ValueError as e:
            raise self._error(
                DecodeError,
                "Failed to parse JSON response",
                method=method,
                url=url,
                response=response,
                cause=e,
            ) from e

    def parse_pydantic(self, response: httpx.Response, model: type[M]) -> M:
        """Decode and validate a JSON response with a pydantic model.

        Raises:
            DecodeError: If JSON parsing or validation fails
        """
        data = self.json(response)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise self._error(
                DecodeError,
                "Failed to validate response with Pydantic model",
                method=response.request.method,
                url=str(response.request.url),
                response=response,
                cause=e,
            ) from e
