"""Result artifact download and persistence."""

from wxpaint.core.artifacts.fetcher import ArtifactFetcher, extension_for, unique_file_name
from wxpaint.core.artifacts.models import ArtifactDescriptor

__all__ = [
    "ArtifactDescriptor",
    "ArtifactFetcher",
    "extension_for",
    "unique_file_name",
]
