"""Controller state, polling options and status updates."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wxpaint.core.api.paintings.models import JobStatus
from wxpaint.core.artifacts.models import ArtifactDescriptor


class GenerationState(str, Enum):
    """Lifecycle of one generation run."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        GenerationState.SUCCEEDED,
        GenerationState.FAILED,
        GenerationState.CANCELLED,
        GenerationState.TIMED_OUT,
    }
)

ALLOWED_TRANSITIONS: dict[GenerationState, frozenset[GenerationState]] = {
    GenerationState.IDLE: frozenset({GenerationState.SUBMITTING}),
    GenerationState.SUBMITTING: frozenset(
        {GenerationState.POLLING, GenerationState.FAILED, GenerationState.CANCELLED}
    ),
    GenerationState.POLLING: _TERMINAL_STATES,
}


class PollOptions(BaseModel):
    """Polling budget.

    Polls and transient poll failures draw from the same attempt budget.
    The wall-clock deadline starts when polling starts.
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=10, ge=1)
    timeout_s: float = Field(default=120.0, gt=0.0)
    interval_s: float = Field(default=2.0, ge=0.0)


class StatusUpdate(BaseModel):
    """Partial painting update emitted at each phase boundary.

    Only the fields passed to the constructor are meaningful; consumers
    merge ``model_fields_set`` into their own record.
    """

    model_config = ConfigDict(frozen=True)

    job_id: str | None = None
    status: JobStatus | None = None
    urls: list[str] | None = None
    files: list[ArtifactDescriptor] | None = None
    model: str | None = None
    prompt: str | None = None
    input_params: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set on this update."""
        return {name: getattr(self, name) for name in self.model_fields_set}


StatusCallback = Callable[[StatusUpdate], None]
