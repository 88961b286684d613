"""Descriptor for a downloaded, locally persisted image."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class ArtifactDescriptor(BaseModel):
    """One successfully downloaded artifact.

    Attributes:
        id: Unique identifier
        display_name: File name shown to users
        storage_path: Absolute path returned by the storage collaborator
        byte_size: Size in bytes
        extension: File extension without the dot (e.g. ``png``)
        media_type: Coarse media kind (always ``image`` here)
        created_at: When the artifact was stored (UTC)
        source_url: URL the bytes were fetched from
    """

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    storage_path: str
    byte_size: int = Field(ge=0)
    extension: str = "png"
    media_type: str = "image"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source_url: str
