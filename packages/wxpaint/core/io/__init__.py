"""File storage abstraction for downloaded artifacts.

Example:
    >>> from wxpaint.core.io import LocalFileStorage
    >>> storage = LocalFileStorage("data/paintings")
    >>> path = await storage.save("wxpaint_1700000000000_ab12cd34.png", image_bytes)
    >>> size = await storage.stat_size(path)
"""

from .impl_fake import FakeFileStorage
from .impl_real import LocalFileStorage
from .models import AbsolutePath, WriteResult, absolute_path
from .protocols import FileStorage
from .utils import sanitize_path_component

__all__ = [
    # Path types and constructors
    "AbsolutePath",
    "absolute_path",
    # Result types
    "WriteResult",
    # Protocols
    "FileStorage",
    # Implementations
    "LocalFileStorage",
    "FakeFileStorage",
    # Utilities
    "sanitize_path_component",
]
