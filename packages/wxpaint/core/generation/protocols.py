"""Provider surface the generation controller depends on."""

from typing import Protocol

from wxpaint.core.api.paintings.models import GenerationJob, GenerationRequest
from wxpaint.core.utils.cancellation import CancelToken


class JobClient(Protocol):
    """Submit and poll generation jobs (implemented by ``PaintingsClient``)."""

    async def submit_job(
        self, request: GenerationRequest, cancel_token: CancelToken | None = None
    ) -> str: ...

    async def fetch_job_status(
        self, job_id: str, cancel_token: CancelToken | None = None
    ) -> GenerationJob: ...
