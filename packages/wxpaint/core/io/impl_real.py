"""Local disk storage using aiofiles for async I/O.

Provides atomic writes via temp file + os.replace().
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from tempfile import NamedTemporaryFile

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, WriteResult, absolute_path
from .utils import sanitize_path_component

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """
    Stores artifacts as files under a root directory.

    Args:
        root: Target directory (created on first write)
    """

    def __init__(self, root: str | Path) -> None:
        self._root = absolute_path(root)

    @property
    def root(self) -> AbsolutePath:
        return self._root

    def _resolve(self, name: str) -> AbsolutePath:
        """Map a file name to a path under root (sync - no I/O)."""
        result = (Path(self._root) / sanitize_path_component(name)).resolve()
        try:
            result.relative_to(Path(self._root))
        except ValueError as e:
            raise ValueError(f"Path traversal detected: {name!r} escapes {self._root}") from e
        return AbsolutePath(result)

    async def write_bytes(self, name: str, data: bytes) -> WriteResult:
        """Atomically write ``data`` to ``root/name``."""
        start = time.perf_counter()
        target = self._resolve(name)
        await aiofiles.os.makedirs(self._root, exist_ok=True)

        loop = asyncio.get_running_loop()

        def create_temp_file() -> str:
            tmp = NamedTemporaryFile(mode="wb", dir=self._root, suffix=".part", delete=False)
            tmp.close()
            return tmp.name

        tmp_path = await loop.run_in_executor(None, create_temp_file)
        try:
            async with aiofiles.open(tmp_path, mode="wb") as f:
                await f.write(data)
            await loop.run_in_executor(None, os.replace, tmp_path, str(target))
        except BaseException:
            try:
                await aiofiles.os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise

        return WriteResult(
            path=str(target),
            bytes_written=len(data),
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    async def save(self, name: str, data: bytes) -> AbsolutePath:
        result = await self.write_bytes(name, data)
        logger.debug(
            "Saved %s (%d bytes in %.1fms)", result.path, result.bytes_written, result.duration_ms
        )
        return AbsolutePath(Path(result.path))

    async def stat_size(self, path: AbsolutePath) -> int | None:
        try:
            stat = await aiofiles.os.stat(path)
        except FileNotFoundError:
            return None
        return int(stat.st_size)

    async def exists(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.exists(path))

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        async with aiofiles.open(path, mode="rb") as f:
            content: bytes = await f.read()
            return content
