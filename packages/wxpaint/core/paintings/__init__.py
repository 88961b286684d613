"""Painting records and the generation facade."""

from wxpaint.core.paintings.models import GenerationResult, Painting, new_painting
from wxpaint.core.paintings.service import PaintingCallback, PaintingService

__all__ = [
    "GenerationResult",
    "Painting",
    "PaintingCallback",
    "PaintingService",
    "new_painting",
]
