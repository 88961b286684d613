"""Models for the file storage layer.

Provides a type-safe absolute path wrapper and write result type.
"""

from pathlib import Path
from typing import NewType

from pydantic import BaseModel, Field

AbsolutePath = NewType("AbsolutePath", Path)


def absolute_path(path: str | Path) -> AbsolutePath:
    """
    Resolve and wrap a path as absolute.

    Args:
        path: String or Path object; relative paths resolve against the CWD

    Returns:
        AbsolutePath instance

    Example:
        >>> p = absolute_path("/tmp/paintings")
        >>> assert Path(p).is_absolute()
    """
    return AbsolutePath(Path(path).expanduser().resolve())


class WriteResult(BaseModel):
    """Result of a storage write.

    Attributes:
        path: Final path written
        bytes_written: Number of bytes written
        duration_ms: Operation duration in milliseconds
    """

    path: str = Field(description="Final path written")
    bytes_written: int = Field(description="Number of bytes written", ge=0)
    duration_ms: float = Field(description="Operation duration in milliseconds", ge=0.0)
