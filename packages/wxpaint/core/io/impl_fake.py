"""In-memory storage for fast, isolated testing.

Simulates storage operations without disk I/O.
"""

from pathlib import Path

from .models import AbsolutePath
from .utils import sanitize_path_component


class FakeFileStorage:
    """
    In-memory artifact storage.

    Args:
        root: Pretend root directory
        report_sizes: When False, ``stat_size`` returns None (storage that
            cannot report sizes)
        fail_names: File names whose ``save`` raises OSError

    Not thread-safe (use per-test instance).
    """

    def __init__(
        self,
        root: str = "/paintings",
        *,
        report_sizes: bool = True,
        fail_names: set[str] | None = None,
    ) -> None:
        self._root = AbsolutePath(Path(root))
        self._files: dict[str, bytes] = {}
        self.report_sizes = report_sizes
        self.fail_names = set(fail_names or ())

    @property
    def root(self) -> AbsolutePath:
        return self._root

    @property
    def files(self) -> dict[str, bytes]:
        """Snapshot of stored files keyed by path string."""
        return dict(self._files)

    async def save(self, name: str, data: bytes) -> AbsolutePath:
        if name in self.fail_names:
            raise OSError(f"Simulated write failure: {name}")
        path = Path(self._root) / sanitize_path_component(name)
        self._files[str(path)] = bytes(data)
        return AbsolutePath(path)

    async def stat_size(self, path: AbsolutePath) -> int | None:
        if not self.report_sizes:
            return None
        data = self._files.get(str(Path(path)))
        return None if data is None else len(data)

    async def exists(self, path: AbsolutePath) -> bool:
        return str(Path(path)) in self._files

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]
