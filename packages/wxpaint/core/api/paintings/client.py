"""Client for the image-generation provider API.

Endpoints:
- GET  /v1/images/models
- POST /v1/images/generations
- GET  /v1/images/generations/{id}

Every response is wrapped in ``{success, data?, message?}``. All failures
(HTTP status, transport, envelope) surface as ``RequestFailed``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from wxpaint.core.api.http import (
    ApiError,
    AsyncApiClient,
    BearerAuth,
    DecodeError,
    HttpClientConfig,
    NetworkError,
    RetryPolicy,
    TimeoutError,
)
from wxpaint.core.api.http.utils import extract_error_message
from wxpaint.core.api.paintings.models import (
    ApiEnvelope,
    GenerationJob,
    GenerationRequest,
    ImageModel,
)
from wxpaint.core.caching import MetadataCache, cached_value, shared_metadata_cache
from wxpaint.core.errors import RequestFailed
from wxpaint.core.utils.cancellation import CancelToken

logger = logging.getLogger(__name__)

MODELS_PATH = "/v1/images/models"
GENERATIONS_PATH = "/v1/images/generations"
DEFAULT_MODELS_TTL_S = 60 * 60.0


def _request_failed(error: ApiError, default_message: str) -> RequestFailed:
    """Translate a transport error into the domain error."""
    if isinstance(error, DecodeError):
        return RequestFailed(f"{default_message}: invalid response", status_code=error.status_code)
    if isinstance(error, (NetworkError, TimeoutError)):
        return RequestFailed(f"{default_message}: {error.message}")
    message = extract_error_message(error.response_body_snippet)
    return RequestFailed(
        message or f"HTTP {error.status_code}: Request failed",
        status_code=error.status_code,
    )


class PaintingsClient:
    """Provider client bound to one host and one bearer credential.

    Args:
        host: Provider base URL (e.g. ``https://api.example.com``)
        api_key: Bearer credential
        cache: Metadata cache for the model catalog (process-wide by default)
        models_ttl_s: Lifetime of a cached catalog
        http_config: Transport settings; ``base_url`` is replaced by ``host``
        transport: Optional HTTPX transport (tests use ``httpx.MockTransport``)

    Example:
        >>> async with PaintingsClient("https://api.example.com", "sk-...") as client:
        ...     models = await client.list_models()
        ...     job_id = await client.submit_job(GenerationRequest.build("flux", "a fox"))
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        *,
        cache: MetadataCache[list[ImageModel]] | None = None,
        models_ttl_s: float = DEFAULT_MODELS_TTL_S,
        http_config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not host:
            raise ValueError("Provider host is required")
        self.host = host.rstrip("/")
        self._cache: MetadataCache[list[ImageModel]] = (
            cache if cache is not None else shared_metadata_cache()
        )
        self._models_ttl_s = models_ttl_s

        config = (http_config or HttpClientConfig()).model_copy(update={"base_url": self.host})
        self._http = AsyncApiClient(config, auth=BearerAuth(api_key), transport=transport)

    @property
    def models_cache_key(self) -> str:
        return f"models:{self.host}"

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> PaintingsClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _call(
        self,
        method: str,
        path: str,
        envelope_type: type[ApiEnvelope[Any]],
        default_message: str,
        *,
        json_body: Any = None,
        retry_policy: RetryPolicy | None = None,
        cancel_token: CancelToken | None = None,
    ) -> Any:
        """Issue one call and unwrap the ``data`` field of its envelope."""
        headers = {"Content-Type": "application/json"} if json_body is not None else None
        try:
            response = await self._http.request(
                method,
                path,
                headers=headers,
                json_body=json_body,
                retry_policy=retry_policy,
                cancel_token=cancel_token,
            )
            envelope = self._http.parse_pydantic(response, envelope_type)
        except ApiError as e:
            raise _request_failed(e, default_message) from e

        if not envelope.success or envelope.data is None:
            raise RequestFailed(
                envelope.message or default_message, status_code=response.status_code
            )
        return envelope.data

    async def list_models(
        self, *, force_refresh: bool = False, cancel_token: CancelToken | None = None
    ) -> list[ImageModel]:
        """Fetch the model catalog, served from cache while fresh.

        Args:
            force_refresh: Bypass the cached copy (the fresh result is stored)
            cancel_token: Token aborting the in-flight call

        Returns:
            Models offered by the provider

        Raises:
            RequestFailed: On HTTP failure or an unsuccessful envelope
        """

        async def fetch() -> list[ImageModel]:
            models: list[ImageModel] = await self._call(
                "GET",
                MODELS_PATH,
                ApiEnvelope[list[ImageModel]],
                "Failed to fetch models",
                cancel_token=cancel_token,
            )
            logger.debug("Fetched %d models from %s", len(models), self.host)
            return models

        return await cached_value(
            self._cache, self.models_cache_key, self._models_ttl_s, fetch, force=force_refresh
        )

    async def submit_job(
        self, request: GenerationRequest, cancel_token: CancelToken | None = None
    ) -> str:
        """Create a generation job. Never retried.

        Returns:
            Provider-issued job id

        Raises:
            RequestFailed: On HTTP failure, an unsuccessful envelope or a missing id
            Cancelled: If ``cancel_token`` fires before the call completes
        """
        data: dict[str, Any] = await self._call(
            "POST",
            GENERATIONS_PATH,
            ApiEnvelope[dict[str, Any]],
            "Failed to create generation",
            json_body=request.to_payload(),
            retry_policy=RetryPolicy.single_attempt(),
            cancel_token=cancel_token,
        )
        job_id = data.get("id")
        if not isinstance(job_id, str) or not job_id:
            raise RequestFailed("Failed to create generation: response carried no job id")
        logger.info("Submitted generation %s (model=%s)", job_id, request.model)
        return job_id

    async def fetch_job_status(
        self, job_id: str, cancel_token: CancelToken | None = None
    ) -> GenerationJob:
        """Fetch one status snapshot.

        A ``failed`` or ``cancelled`` job is a normal return value. The call
        is made exactly once; callers own any retry budget.

        Raises:
            RequestFailed: On HTTP failure or an unsuccessful envelope
            Cancelled: If ``cancel_token`` fires before the call completes
        """
        job: GenerationJob = await self._call(
            "GET",
            f"{GENERATIONS_PATH}/{job_id}",
            ApiEnvelope[GenerationJob],
            "Failed to get generation",
            retry_policy=RetryPolicy.single_attempt(),
            cancel_token=cancel_token,
        )
        return job
