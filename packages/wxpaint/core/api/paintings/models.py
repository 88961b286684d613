"""Wire and domain models for the image-generation provider API."""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wxpaint.core.errors import InvalidTransition

T = TypeVar("T")


class JobStatus(str, Enum):
    """Provider-side job status."""

    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED)

    @property
    def rank(self) -> int:
        """Position along starting -> processing -> terminal."""
        if self is JobStatus.STARTING:
            return 0
        if self is JobStatus.PROCESSING:
            return 1
        return 2


class GenerationImage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str


class GenerationJob(BaseModel):
    """Snapshot of a provider job.

    Attributes:
        id: Opaque job identifier issued by the provider
        status: Current status
        images: Result images, present once the job succeeds
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    status: JobStatus = JobStatus.STARTING
    images: list[GenerationImage] | None = None

    @property
    def urls(self) -> list[str]:
        return [image.url for image in self.images or []]

    def advance(self, snapshot: GenerationJob) -> GenerationJob:
        """Fold a freshly polled snapshot into this job.

        Status only moves forward: a stale lower-ranked status (e.g.
        ``starting`` after ``processing``) is ignored, and a terminal job
        refuses any different status.

        Args:
            snapshot: Latest snapshot from the provider

        Returns:
            New job reflecting the snapshot

        Raises:
            InvalidTransition: If the job is terminal and the snapshot disagrees
        """
        if self.status.is_terminal:
            if snapshot.status is not self.status:
                raise InvalidTransition(
                    f"Job {self.id} is {self.status.value}; cannot move to {snapshot.status.value}"
                )
            return self
        if snapshot.status.rank < self.status.rank:
            return self
        return self.model_copy(
            update={
                "status": snapshot.status,
                "images": snapshot.images if snapshot.images is not None else self.images,
            }
        )


class GenerationRequest(BaseModel):
    """Immutable request body for a new generation.

    ``input`` always carries a non-blank ``prompt``.
    """

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    input: dict[str, Any]

    @field_validator("input")
    @classmethod
    def validate_prompt(cls, v: dict[str, Any]) -> dict[str, Any]:
        prompt = v.get("prompt")
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValueError("input must contain a non-blank 'prompt'")
        return v

    @classmethod
    def build(
        cls, model: str, prompt: str, params: dict[str, Any] | None = None
    ) -> GenerationRequest:
        """Merge free-form parameters with the prompt; the explicit prompt wins."""
        # A "prompt" key in params never replaces the prompt argument.
        return cls(model=model, input={**(params or {}), "prompt": prompt})

    @property
    def prompt(self) -> str:
        return str(self.input["prompt"])

    def to_payload(self) -> dict[str, Any]:
        return {"model": self.model, "input": dict(self.input)}


class InputSchema(BaseModel):
    """JSON-schema-like description of the parameters a model accepts."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ImageModel(BaseModel):
    """Catalog entry for a generation model."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    provider: str = Field(default="", alias="model_provider")
    description: str = ""
    tags: frozenset[str] = Field(default_factory=frozenset)
    pricing: Any = None
    input_schema: InputSchema = Field(default_factory=InputSchema)


class ApiEnvelope(BaseModel, Generic[T]):
    """``{success, data?, message?}`` wrapper used by every endpoint."""

    model_config = ConfigDict(extra="ignore")

    success: bool = False
    data: T | None = None
    message: str | None = None
