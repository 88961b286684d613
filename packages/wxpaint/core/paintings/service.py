"""Facade composing the provider client, controller and fetcher."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from wxpaint.core.api.http import RetryPolicy
from wxpaint.core.api.paintings import GenerationRequest, ImageModel, JobStatus, PaintingsClient
from wxpaint.core.artifacts import ArtifactFetcher
from wxpaint.core.caching import MetadataCache
from wxpaint.core.config.models import AppConfig
from wxpaint.core.errors import Cancelled, PaintingError
from wxpaint.core.generation import GenerationController, PollOptions, StatusCallback, StatusUpdate
from wxpaint.core.io import FileStorage, LocalFileStorage
from wxpaint.core.paintings.models import GenerationResult, Painting
from wxpaint.core.utils.cancellation import CancelToken

logger = logging.getLogger(__name__)

PaintingCallback = Callable[[Painting], None]


class PaintingService:
    """Single entry point for listing models and running generations.

    Args:
        client: Provider client
        fetcher: Artifact downloader
        poll_options: Default polling budget
        clock: Monotonic clock handed to each controller
    """

    def __init__(
        self,
        client: PaintingsClient,
        fetcher: ArtifactFetcher,
        *,
        poll_options: PollOptions | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._fetcher = fetcher
        self._poll_options = poll_options or PollOptions()
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        storage: FileStorage | None = None,
        cache: MetadataCache[list[ImageModel]] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PaintingService:
        """Wire a service from application config.

        Raises:
            ValueError: If the provider host or key is missing
        """
        host, api_key = config.require_credentials()
        http_config = config.http.to_client_config()
        client = PaintingsClient(
            host,
            api_key,
            cache=cache,
            models_ttl_s=config.models_cache_ttl_s,
            http_config=http_config,
            transport=transport,
        )
        fetcher = ArtifactFetcher(
            storage or LocalFileStorage(config.output_dir),
            retry_policy=RetryPolicy(max_attempts=config.http.download_attempts),
            http_config=http_config,
            transport=transport,
        )
        return cls(client, fetcher, poll_options=config.polling.to_options())

    async def aclose(self) -> None:
        await self._client.aclose()
        await self._fetcher.aclose()

    async def __aenter__(self) -> PaintingService:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def list_models(self, *, force_refresh: bool = False) -> list[ImageModel]:
        return await self._client.list_models(force_refresh=force_refresh)

    async def generate_and_wait(
        self,
        request: GenerationRequest,
        *,
        cancel_token: CancelToken | None = None,
        on_status_update: StatusCallback | None = None,
        options: PollOptions | None = None,
    ) -> GenerationResult:
        """Run one generation to completion and download its images.

        Status updates are emitted in phase order: ``{job_id}``, one
        ``{status}`` per poll, then ``{files, urls, status}`` once images
        are stored.

        Raises:
            RequestFailed: Submission or polling failed
            GenerationTerminated: Provider reported failed/cancelled
            GenerationTimedOut: Budget ran out
            Cancelled: ``cancel_token`` fired
        """
        token = cancel_token or CancelToken()
        controller = GenerationController(
            self._client,
            options or self._poll_options,
            cancel_token=token,
            on_status_update=on_status_update,
            clock=self._clock,
        )
        job = await controller.run(request)

        urls = job.urls
        if not urls:
            logger.warning("Generation %s succeeded without images", job.id)
            return GenerationResult(job=job, urls=[], files=[])

        files = await self._fetcher.materialize(urls, cancel_token=token)
        if on_status_update is not None:
            on_status_update(StatusUpdate(files=files, urls=urls, status=JobStatus.SUCCEEDED))
        return GenerationResult(job=job, urls=urls, files=files)

    async def generate_painting(
        self,
        painting: Painting,
        prompt: str | None = None,
        params: dict[str, Any] | None = None,
        *,
        cancel_token: CancelToken | None = None,
        on_update: PaintingCallback | None = None,
        options: PollOptions | None = None,
    ) -> Painting:
        """Generate into a painting slot, merging every update into it.

        Args:
            painting: Slot to fill; its ``model`` must be set
            prompt: Prompt text (defaults to the painting's own prompt)
            params: Extra model inputs
            cancel_token: Token aborting the run
            on_update: Receives the merged painting after every update
            options: Polling budget override

        Returns:
            The succeeded painting with ``urls`` and ``files`` filled in

        Raises:
            ValueError: No model selected or blank prompt
            PaintingError: The run failed (the painting was marked ``failed``)
            Cancelled: The run was cancelled (the painting was marked ``cancelled``)
        """
        text = (prompt if prompt is not None else painting.prompt).strip()
        if not painting.model:
            raise ValueError("No model selected")
        if not text:
            raise ValueError("Prompt must not be blank")

        request = GenerationRequest.build(painting.model, text, params)
        current = painting

        def apply(update: StatusUpdate) -> None:
            nonlocal current
            current = current.apply(update)
            if on_update is not None:
                on_update(current)

        apply(
            StatusUpdate(
                model=painting.model,
                prompt=text,
                input_params=dict(request.input),
                status=JobStatus.PROCESSING,
            )
        )
        try:
            await self.generate_and_wait(
                request, cancel_token=cancel_token, on_status_update=apply, options=options
            )
        except Cancelled:
            apply(StatusUpdate(status=JobStatus.CANCELLED))
            raise
        except PaintingError:
            apply(StatusUpdate(status=JobStatus.FAILED))
            raise
        return current
