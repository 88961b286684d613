"""Generation lifecycle: submit, poll, resolve."""

from wxpaint.core.generation.controller import GenerationController
from wxpaint.core.generation.models import (
    GenerationState,
    PollOptions,
    StatusCallback,
    StatusUpdate,
)
from wxpaint.core.generation.protocols import JobClient

__all__ = [
    "GenerationController",
    "GenerationState",
    "JobClient",
    "PollOptions",
    "StatusCallback",
    "StatusUpdate",
]
