"""Tests for GenerationController.

The provider is replaced by a scripted fake so every poll outcome, the clock
and cancellation can be controlled precisely.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from tests.conftest import envelope
from wxpaint.core.api.paintings import GenerationImage, GenerationJob, GenerationRequest, JobStatus
from wxpaint.core.errors import (
    Cancelled,
    GenerationTerminated,
    GenerationTimedOut,
    InvalidTransition,
    RequestFailed,
)
from wxpaint.core.generation import (
    GenerationController,
    GenerationState,
    PollOptions,
    StatusUpdate,
)
from wxpaint.core.utils.cancellation import CancelToken

JOB_ID = "job-1"
REQUEST = GenerationRequest.build("flux-dev", "a red fox")
FAST = PollOptions(max_attempts=10, timeout_s=120.0, interval_s=0.0)


def job(status: JobStatus, *urls: str) -> GenerationJob:
    images = [GenerationImage(url=u) for u in urls] if urls else None
    return GenerationJob(id=JOB_ID, status=status, images=images)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class ScriptedClient:
    """Fake JobClient replaying scripted poll outcomes.

    The last script item repeats once the script runs out.
    """

    def __init__(
        self,
        script: list[GenerationJob | Exception],
        *,
        submit_error: Exception | None = None,
        on_fetch: Callable[[], None] | None = None,
    ) -> None:
        self.script = list(script)
        self.submit_error = submit_error
        self.on_fetch = on_fetch
        self.submit_calls = 0
        self.fetch_calls = 0

    async def submit_job(self, request, cancel_token=None) -> str:
        self.submit_calls += 1
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        if self.submit_error is not None:
            raise self.submit_error
        return JOB_ID

    async def fetch_job_status(self, job_id, cancel_token=None) -> GenerationJob:
        self.fetch_calls += 1
        if self.on_fetch is not None:
            self.on_fetch()
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def updates() -> list[StatusUpdate]:
    return []


def make_controller(client, updates, options=FAST, **kwargs) -> GenerationController:
    return GenerationController(client, options, on_status_update=updates.append, **kwargs)


class TestSuccess:
    """Tests for the success path."""

    async def test_returns_succeeded_job(self, updates):
        client = ScriptedClient([job(JobStatus.PROCESSING), job(JobStatus.SUCCEEDED, "u1")])
        controller = make_controller(client, updates)

        result = await controller.run(REQUEST)

        assert result.status is JobStatus.SUCCEEDED
        assert result.urls == ["u1"]
        assert controller.state is GenerationState.SUCCEEDED
        assert controller.attempts == 2

    async def test_updates_emitted_in_phase_order(self, updates):
        client = ScriptedClient([job(JobStatus.PROCESSING), job(JobStatus.SUCCEEDED, "u1")])
        await make_controller(client, updates).run(REQUEST)

        assert [u.changes() for u in updates] == [
            {"job_id": JOB_ID},
            {"status": JobStatus.PROCESSING},
            {"status": JobStatus.SUCCEEDED},
        ]

    async def test_success_on_last_permitted_attempt(self, updates):
        client = ScriptedClient(
            [job(JobStatus.PROCESSING), job(JobStatus.PROCESSING), job(JobStatus.SUCCEEDED)]
        )
        options = PollOptions(max_attempts=3, interval_s=0.0)

        result = await make_controller(client, updates, options).run(REQUEST)

        assert result.status is JobStatus.SUCCEEDED
        assert client.fetch_calls == 3

    async def test_success_wins_over_elapsed_deadline(self, updates):
        """A succeeded snapshot observed after the deadline still counts."""
        clock = FakeClock()

        def jump() -> None:
            clock.now += 500.0

        client = ScriptedClient([job(JobStatus.SUCCEEDED, "u1")], on_fetch=jump)
        options = PollOptions(max_attempts=1, timeout_s=1.0, interval_s=0.0)

        result = await make_controller(client, updates, options, clock=clock).run(REQUEST)

        assert result.status is JobStatus.SUCCEEDED

    async def test_stale_status_does_not_regress(self, updates):
        client = ScriptedClient(
            [job(JobStatus.PROCESSING), job(JobStatus.STARTING), job(JobStatus.SUCCEEDED)]
        )
        await make_controller(client, updates).run(REQUEST)

        statuses = [u.status for u in updates if u.status is not None]
        assert statuses == [JobStatus.PROCESSING, JobStatus.PROCESSING, JobStatus.SUCCEEDED]

    async def test_transient_errors_then_success(self, updates):
        client = ScriptedClient(
            [RequestFailed("blip", 502), RequestFailed("blip", 502), job(JobStatus.SUCCEEDED)]
        )
        controller = make_controller(client, updates, PollOptions(max_attempts=3, interval_s=0))

        result = await controller.run(REQUEST)

        assert result.status is JobStatus.SUCCEEDED
        assert controller.attempts == 3


class TestSubmissionFailure:
    async def test_zero_polls_after_submit_failure(self, updates):
        client = ScriptedClient(
            [job(JobStatus.SUCCEEDED)], submit_error=RequestFailed("bad model", 400)
        )
        controller = make_controller(client, updates)

        with pytest.raises(RequestFailed, match="bad model"):
            await controller.run(REQUEST)

        assert client.submit_calls == 1
        assert client.fetch_calls == 0
        assert controller.state is GenerationState.FAILED
        assert updates == []


class TestBudgets:
    """Tests for attempt and wall-clock exhaustion."""

    async def test_times_out_after_exactly_max_attempts(self, updates):
        client = ScriptedClient([job(JobStatus.PROCESSING)])
        options = PollOptions(max_attempts=3, timeout_s=120.0, interval_s=0.01)
        controller = make_controller(client, updates, options)

        with pytest.raises(GenerationTimedOut) as exc_info:
            await controller.run(REQUEST)

        assert client.fetch_calls == 3
        assert exc_info.value.attempts == 3
        assert controller.state is GenerationState.TIMED_OUT

    async def test_wall_clock_deadline(self, updates):
        clock = FakeClock()

        def tick() -> None:
            clock.now += 100.0

        client = ScriptedClient([job(JobStatus.PROCESSING)], on_fetch=tick)
        options = PollOptions(max_attempts=10, timeout_s=150.0, interval_s=0.0)
        controller = make_controller(client, updates, options, clock=clock)

        with pytest.raises(GenerationTimedOut) as exc_info:
            await controller.run(REQUEST)

        assert client.fetch_calls == 2
        assert exc_info.value.elapsed_s == pytest.approx(200.0)
        assert controller.state is GenerationState.TIMED_OUT

    async def test_transient_errors_exhaust_budget(self, updates):
        client = ScriptedClient([RequestFailed("HTTP 500: Request failed", 500)])
        controller = make_controller(client, updates, PollOptions(max_attempts=3, interval_s=0))

        with pytest.raises(RequestFailed) as exc_info:
            await controller.run(REQUEST)

        assert exc_info.value.status_code == 500
        assert client.fetch_calls == 3
        assert controller.state is GenerationState.FAILED


class TestRemoteTermination:
    @pytest.mark.parametrize(
        ("status", "state"),
        [
            (JobStatus.FAILED, GenerationState.FAILED),
            (JobStatus.CANCELLED, GenerationState.CANCELLED),
        ],
    )
    async def test_terminal_status_escalates_immediately(self, updates, status, state):
        client = ScriptedClient([job(JobStatus.PROCESSING), job(status)])
        controller = make_controller(client, updates)

        with pytest.raises(GenerationTerminated) as exc_info:
            await controller.run(REQUEST)

        assert exc_info.value.status == status.value
        assert exc_info.value.job_id == JOB_ID
        assert client.fetch_calls == 2
        assert controller.state is state


class TestCancellation:
    """Cancellation overrides every other budget."""

    async def test_cancelled_before_start_issues_no_calls(self, updates):
        token = CancelToken()
        token.cancel()
        client = ScriptedClient([job(JobStatus.SUCCEEDED)])
        controller = make_controller(client, updates, cancel_token=token)

        with pytest.raises(Cancelled):
            await controller.run(REQUEST)

        assert client.submit_calls == 0
        assert client.fetch_calls == 0
        assert controller.state is GenerationState.CANCELLED

    async def test_cancel_during_polling_stops_further_polls(self, updates):
        token = CancelToken()
        client = ScriptedClient([job(JobStatus.PROCESSING)])

        def on_update(update: StatusUpdate) -> None:
            updates.append(update)
            if update.status is JobStatus.PROCESSING:
                token.cancel("user")

        controller = GenerationController(
            client,
            PollOptions(max_attempts=10, interval_s=5.0),
            cancel_token=token,
            on_status_update=on_update,
        )

        with pytest.raises(Cancelled):
            await controller.run(REQUEST)

        assert client.fetch_calls == 1
        assert controller.state is GenerationState.CANCELLED

    async def test_cancel_during_transient_retry_sleep(self, updates):
        token = CancelToken()

        def fail_then_cancel() -> None:
            token.cancel()

        client = ScriptedClient([RequestFailed("blip", 502)], on_fetch=fail_then_cancel)
        controller = make_controller(
            client, updates, PollOptions(max_attempts=5, interval_s=5.0), cancel_token=token
        )

        with pytest.raises(Cancelled):
            await controller.run(REQUEST)

        assert client.fetch_calls == 1
        assert controller.state is GenerationState.CANCELLED


class TestStateMachine:
    async def test_run_only_once(self, updates):
        client = ScriptedClient([job(JobStatus.SUCCEEDED)])
        controller = make_controller(client, updates)
        await controller.run(REQUEST)

        with pytest.raises(InvalidTransition):
            await controller.run(REQUEST)

    def test_starts_idle(self, updates):
        controller = make_controller(ScriptedClient([job(JobStatus.SUCCEEDED)]), updates)
        assert controller.state is GenerationState.IDLE
        assert controller.job is None
        assert controller.attempts == 0


class TestCancellationInFlight:
    """Cancellation against a real client aborts the pending HTTP call."""

    async def test_cancel_during_submission(self, make_client, updates):
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            await asyncio.sleep(10)
            return httpx.Response(200, json=envelope({"id": JOB_ID}))

        token = CancelToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)
        controller = make_controller(make_client(handler), updates, cancel_token=token)

        with pytest.raises(Cancelled):
            await controller.run(REQUEST)

        assert controller.state is GenerationState.CANCELLED
        assert controller.attempts == 0
        assert [r.method for r in seen] == ["POST"]
        assert updates == []
