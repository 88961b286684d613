"""Domain error taxonomy for the generation lifecycle.

Every user-reportable failure derives from ``PaintingError``. Cancellation is
not a failure and lives in ``wxpaint.core.utils.cancellation.Cancelled``.
"""

from __future__ import annotations

from wxpaint.core.utils.cancellation import Cancelled


class PaintingError(Exception):
    """Base class for failures that should be surfaced to the user."""


class RequestFailed(PaintingError):
    """Provider call failed: non-2xx status or an envelope with success=false.

    Attributes:
        status_code: HTTP status code, when a response was received
        message: Human-readable description
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"RequestFailed(status_code={self.status_code!r}, message={self.message!r})"


class GenerationTerminated(PaintingError):
    """The provider reported the job as failed or cancelled."""

    def __init__(self, status: str, job_id: str | None = None) -> None:
        self.status = status
        self.job_id = job_id
        super().__init__(f"Generation {status}")


class GenerationTimedOut(PaintingError):
    """Attempt or wall-clock budget ran out before a terminal status."""

    def __init__(self, attempts: int, elapsed_s: float, job_id: str | None = None) -> None:
        self.attempts = attempts
        self.elapsed_s = elapsed_s
        self.job_id = job_id
        super().__init__(
            f"Generation timeout or max retries exceeded "
            f"(attempts={attempts}, elapsed={elapsed_s:.1f}s)"
        )


class InvalidTransition(PaintingError):
    """A state machine was asked to leave a terminal state or skip a step."""


__all__ = [
    "Cancelled",
    "GenerationTerminated",
    "GenerationTimedOut",
    "InvalidTransition",
    "PaintingError",
    "RequestFailed",
]
