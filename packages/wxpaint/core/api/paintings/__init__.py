"""Image-generation provider API client and models."""

from wxpaint.core.api.paintings.client import DEFAULT_MODELS_TTL_S, PaintingsClient
from wxpaint.core.api.paintings.models import (
    ApiEnvelope,
    GenerationImage,
    GenerationJob,
    GenerationRequest,
    ImageModel,
    InputSchema,
    JobStatus,
)

__all__ = [
    "PaintingsClient",
    "DEFAULT_MODELS_TTL_S",
    "ApiEnvelope",
    "GenerationImage",
    "GenerationJob",
    "GenerationRequest",
    "ImageModel",
    "InputSchema",
    "JobStatus",
]
