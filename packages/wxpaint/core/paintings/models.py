"""The caller-side record of one generation slot."""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wxpaint.core.api.paintings.models import GenerationJob, JobStatus
from wxpaint.core.artifacts.models import ArtifactDescriptor
from wxpaint.core.generation.models import StatusUpdate


class Painting(BaseModel):
    """A painting slot and its latest generation state.

    Immutable; ``apply`` returns an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    model: str = ""
    prompt: str = ""
    input_params: dict[str, Any] = Field(default_factory=dict)
    status: JobStatus = JobStatus.STARTING
    job_id: str | None = None
    urls: list[str] = Field(default_factory=list)
    files: list[ArtifactDescriptor] = Field(default_factory=list)

    def apply(self, update: StatusUpdate) -> Painting:
        """Merge the fields carried by ``update``; None values are ignored."""
        changes = {k: v for k, v in update.changes().items() if v is not None}
        if not changes:
            return self
        return self.model_copy(update=changes)


class GenerationResult(BaseModel):
    """Outcome of a successful ``generate_and_wait``.

    ``files`` may be shorter than ``urls`` (or empty) when downloads failed.
    """

    model_config = ConfigDict(frozen=True)

    job: GenerationJob
    urls: list[str]
    files: list[ArtifactDescriptor]


def new_painting(model_id: str = "") -> Painting:
    """Fresh painting slot, optionally preselecting a model."""
    return Painting(model=model_id)
