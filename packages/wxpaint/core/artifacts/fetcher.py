"""Download result images and persist them through the storage collaborator."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence

import httpx

from wxpaint.core.api.http import ApiError, AsyncApiClient, HttpClientConfig, RetryPolicy
from wxpaint.core.artifacts.models import ArtifactDescriptor
from wxpaint.core.io import FileStorage
from wxpaint.core.utils.cancellation import CancelToken

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "png"

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def extension_for(content_type: str | None) -> str:
    """Map a Content-Type header to a file extension.

    Examples:
        >>> extension_for("image/jpeg; charset=binary")
        'jpg'
        >>> extension_for(None)
        'png'
    """
    if not content_type:
        return DEFAULT_EXTENSION
    mime = content_type.split(";", 1)[0].strip().lower()
    return _EXTENSIONS.get(mime, DEFAULT_EXTENSION)


def unique_file_name(extension: str) -> str:
    """``wxpaint_{epoch_ms}_{random}.{ext}``"""
    return f"wxpaint_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.{extension}"


class ArtifactFetcher:
    """Materializes result URLs into stored files.

    Downloads are sequential and order-preserving. A URL that fails (HTTP
    status, transport error, storage error) is logged and skipped; the rest
    of the batch still runs.

    Args:
        storage: Where downloaded bytes are saved
        http_client: Client used for downloads; one is created (and owned)
            when omitted. Image hosts never receive the provider credential.
        retry_policy: Per-download transport retry policy
        http_config: Transport settings for the owned client
        transport: Optional HTTPX transport for the owned client
        name_factory: Builds a unique file name from an extension
    """

    def __init__(
        self,
        storage: FileStorage,
        *,
        http_client: AsyncApiClient | None = None,
        retry_policy: RetryPolicy | None = None,
        http_config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        name_factory: Callable[[str], str] = unique_file_name,
    ) -> None:
        self._storage = storage
        self._owns_http = http_client is None
        self._http = http_client or AsyncApiClient(
            http_config or HttpClientConfig(), transport=transport
        )
        self._retry_policy = retry_policy or RetryPolicy(max_attempts=2)
        self._name_factory = name_factory

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> ArtifactFetcher:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def materialize(
        self, urls: Sequence[str], cancel_token: CancelToken | None = None
    ) -> list[ArtifactDescriptor]:
        """Download and store every URL that can be fetched.

        Args:
            urls: Image URLs, in result order
            cancel_token: Token aborting the batch

        Returns:
            One descriptor per successful URL, in input order. Empty when
            every URL failed.

        Raises:
            Cancelled: If ``cancel_token`` fires; this is not a per-item failure
        """
        token = cancel_token or CancelToken()
        descriptors: list[ArtifactDescriptor] = []
        for url in urls:
            token.raise_if_cancelled()
            try:
                descriptor = await self._fetch_one(url, token)
            except (ApiError, OSError, ValueError) as e:
                logger.warning("Failed to download image %s: %s", url, e)
                continue
            descriptors.append(descriptor)

        if urls and not descriptors:
            logger.warning("No images could be downloaded (%d urls)", len(urls))
        return descriptors

    async def _fetch_one(self, url: str, token: CancelToken) -> ArtifactDescriptor:
        response = await self._http.get(
            url, retry_policy=self._retry_policy, cancel_token=token
        )
        data = response.content
        extension = extension_for(response.headers.get("content-type"))
        name = self._name_factory(extension)

        path = await self._storage.save(name, data)
        size = await self._storage.stat_size(path)

        logger.debug("Stored %s from %s", path, url)
        return ArtifactDescriptor(
            id=uuid.uuid4().hex,
            display_name=name,
            storage_path=str(path),
            byte_size=size or len(data),
            extension=extension,
            source_url=url,
        )
