"""Protocol for the local file-storage collaborator used by artifact downloads."""

from typing import Protocol

from .models import AbsolutePath


class FileStorage(Protocol):
    """
    Async storage for downloaded artifacts.

    Implementations own a root directory; every saved file lands directly
    under it. Writes are atomic: readers never observe a partial file.
    """

    @property
    def root(self) -> AbsolutePath:
        """Directory files are saved into."""
        ...

    async def save(self, name: str, data: bytes) -> AbsolutePath:
        """
        Persist bytes under ``name``.

        Args:
            name: File name (a single path component)
            data: File contents

        Returns:
            Absolute path of the stored file

        Raises:
            ValueError: If ``name`` would escape the root
            OSError: On write failure
        """
        ...

    async def stat_size(self, path: AbsolutePath) -> int | None:
        """
        Size in bytes of a stored file.

        Returns:
            Size, or None if the storage cannot report it
        """
        ...

    async def exists(self, path: AbsolutePath) -> bool:
        """Check whether a stored file exists."""
        ...

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read a stored file back.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        ...
