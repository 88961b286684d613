"""Submit -> poll -> resolve state machine for one generation run.

The controller issues the submission once, then polls the job status until
the provider reports a terminal status, the attempt budget or the wall-clock
deadline runs out, or the cancel token fires. Exactly one outcome is
reported per run: the succeeded job, or one raised exception.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from wxpaint.core.api.paintings.models import GenerationJob, GenerationRequest, JobStatus
from wxpaint.core.errors import (
    Cancelled,
    GenerationTerminated,
    GenerationTimedOut,
    InvalidTransition,
    PaintingError,
    RequestFailed,
)
from wxpaint.core.generation.models import (
    ALLOWED_TRANSITIONS,
    GenerationState,
    PollOptions,
    StatusCallback,
    StatusUpdate,
)
from wxpaint.core.generation.protocols import JobClient
from wxpaint.core.utils.cancellation import CancelToken
from wxpaint.core.utils.logging import get_logger

logger = logging.getLogger(__name__)

_REMOTE_TERMINAL_STATES = {
    JobStatus.FAILED: GenerationState.FAILED,
    JobStatus.CANCELLED: GenerationState.CANCELLED,
}


class GenerationController:
    """Drives a single generation run.

    Create one controller per run; ``run`` may only be called once.

    Args:
        client: Provider client used to submit and poll
        options: Polling budget (defaults: 10 attempts, 120s, 2s interval)
        cancel_token: Token shared with every I/O call of this run
        on_status_update: Synchronous sink for phase updates, called in order
        clock: Monotonic time source for the deadline (injectable for tests)

    Example:
        >>> controller = GenerationController(client, PollOptions(max_attempts=3))
        >>> job = await controller.run(GenerationRequest.build("flux", "a fox"))
        >>> job.urls
        ['https://cdn.example.com/1.png']
    """

    def __init__(
        self,
        client: JobClient,
        options: PollOptions | None = None,
        *,
        cancel_token: CancelToken | None = None,
        on_status_update: StatusCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._options = options or PollOptions()
        self._token = cancel_token or CancelToken()
        self._on_status_update = on_status_update
        self._clock = clock

        self._state = GenerationState.IDLE
        self._job: GenerationJob | None = None
        self._attempts = 0
        self._log: logging.Logger | logging.LoggerAdapter = logger

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def job(self) -> GenerationJob | None:
        """Latest job snapshot, once submitted."""
        return self._job

    @property
    def attempts(self) -> int:
        """Status polls made so far, failed ones included."""
        return self._attempts

    @property
    def cancel_token(self) -> CancelToken:
        return self._token

    def _transition(self, new_state: GenerationState) -> None:
        allowed = ALLOWED_TRANSITIONS.get(self._state, frozenset())
        if new_state not in allowed:
            raise InvalidTransition(f"Cannot move from {self._state.value} to {new_state.value}")
        self._log.debug("Generation state %s -> %s", self._state.value, new_state.value)
        self._state = new_state

    def _emit(self, update: StatusUpdate) -> None:
        if self._on_status_update is not None:
            self._on_status_update(update)

    async def run(self, request: GenerationRequest) -> GenerationJob:
        """Submit ``request`` and wait for the job to succeed.

        Returns:
            The succeeded job snapshot (carrying the result image URLs)

        Raises:
            RequestFailed: Submission failed, or the last poll failed with the
                attempt budget exhausted
            GenerationTerminated: Provider reported ``failed`` or ``cancelled``
            GenerationTimedOut: Budget ran out without a terminal status
            Cancelled: The cancel token fired
            InvalidTransition: The controller was already used
        """
        if self._state is not GenerationState.IDLE:
            raise InvalidTransition("GenerationController.run may only be called once")

        try:
            job_id = await self._submit(request)
            return await self._poll(job_id)
        except Cancelled:
            if not self._state.is_terminal:
                self._transition(GenerationState.CANCELLED)
            self._log.info("Generation cancelled")
            raise

    async def _submit(self, request: GenerationRequest) -> str:
        self._transition(GenerationState.SUBMITTING)
        self._token.raise_if_cancelled()
        try:
            job_id = await self._client.submit_job(request, cancel_token=self._token)
        except PaintingError as e:
            self._transition(GenerationState.FAILED)
            self._log.error("Generation submission failed: %s", e)
            raise

        self._job = GenerationJob(id=job_id)
        self._log = get_logger(__name__, job_id=job_id)
        self._emit(StatusUpdate(job_id=job_id))
        self._transition(GenerationState.POLLING)
        return job_id

    def _budget_remaining(self, deadline: float) -> bool:
        return self._attempts < self._options.max_attempts and self._clock() < deadline

    async def _poll(self, job_id: str) -> GenerationJob:
        options = self._options
        started = self._clock()
        deadline = started + options.timeout_s
        last_error: RequestFailed | None = None

        while True:
            self._token.raise_if_cancelled()
            try:
                snapshot = await self._client.fetch_job_status(job_id, cancel_token=self._token)
            except RequestFailed as e:
                self._attempts += 1
                last_error = e
                if self._attempts >= options.max_attempts:
                    self._transition(GenerationState.FAILED)
                    self._log.error(
                        "Status polling failed after %d attempts: %s", self._attempts, e
                    )
                    raise
                self._log.warning(
                    "Status poll %d/%d failed: %s", self._attempts, options.max_attempts, e
                )
            else:
                self._attempts += 1
                last_error = None
                job = self._advance(snapshot)
                self._emit(StatusUpdate(status=job.status))

                # Success is checked before the budget so it wins any tie.
                if job.status is JobStatus.SUCCEEDED:
                    self._transition(GenerationState.SUCCEEDED)
                    self._log.info("Generation succeeded after %d polls", self._attempts)
                    return job
                if job.status in _REMOTE_TERMINAL_STATES:
                    self._transition(_REMOTE_TERMINAL_STATES[job.status])
                    self._log.warning("Generation ended remotely: %s", job.status.value)
                    raise GenerationTerminated(job.status.value, job_id=job_id)

            if not self._budget_remaining(deadline):
                break
            await self._token.sleep(options.interval_s)
            if self._clock() >= deadline:
                break

        elapsed = self._clock() - started
        self._transition(GenerationState.TIMED_OUT)
        self._log.warning(
            "Generation timed out after %d polls (%.1fs)", self._attempts, elapsed
        )
        raise GenerationTimedOut(self._attempts, elapsed, job_id=job_id) from last_error

    def _advance(self, snapshot: GenerationJob) -> GenerationJob:
        assert self._job is not None
        self._job = self._job.advance(snapshot)
        return self._job
