"""Tests for LocalFileStorage and FakeFileStorage."""

from __future__ import annotations

from pathlib import Path

import pytest

from wxpaint.core.io import FakeFileStorage, LocalFileStorage, sanitize_path_component


@pytest.fixture
def local(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "paintings")


class TestLocalFileStorage:
    """Tests for the aiofiles-backed storage."""

    async def test_save_creates_root_and_file(self, local: LocalFileStorage):
        path = await local.save("a.png", b"data")

        assert Path(path).parent == Path(local.root)
        assert Path(path).read_bytes() == b"data"

    async def test_stat_size(self, local: LocalFileStorage):
        path = await local.save("a.png", b"12345")
        assert await local.stat_size(path) == 5

    async def test_stat_size_missing_file_is_none(self, local: LocalFileStorage):
        missing = Path(local.root) / "missing.png"
        assert await local.stat_size(missing) is None  # type: ignore[arg-type]

    async def test_read_back_and_exists(self, local: LocalFileStorage):
        path = await local.save("a.png", b"bytes")
        assert await local.exists(path)
        assert await local.read_bytes(path) == b"bytes"

    async def test_overwrite_is_atomic_and_leaves_no_temp_files(self, local: LocalFileStorage):
        await local.save("a.png", b"first")
        path = await local.save("a.png", b"second")

        assert Path(path).read_bytes() == b"second"
        assert sorted(p.name for p in Path(local.root).iterdir()) == ["a.png"]

    async def test_write_result_reports_bytes(self, local: LocalFileStorage):
        result = await local.write_bytes("a.png", b"abc")
        assert result.bytes_written == 3
        assert result.duration_ms >= 0

    async def test_separators_cannot_escape_root(self, local: LocalFileStorage):
        path = await local.save("../escape.png", b"x")
        assert Path(path).parent == Path(local.root)

    async def test_dot_names_rejected(self, local: LocalFileStorage):
        with pytest.raises(ValueError):
            await local.save("..", b"x")


class TestFakeFileStorage:
    async def test_round_trip(self):
        storage = FakeFileStorage()
        path = await storage.save("a.png", b"abc")

        assert await storage.exists(path)
        assert await storage.read_bytes(path) == b"abc"
        assert await storage.stat_size(path) == 3

    async def test_can_hide_sizes(self):
        storage = FakeFileStorage(report_sizes=False)
        path = await storage.save("a.png", b"abc")
        assert await storage.stat_size(path) is None

    async def test_simulated_failure(self):
        storage = FakeFileStorage(fail_names={"bad.png"})
        with pytest.raises(OSError):
            await storage.save("bad.png", b"abc")

    async def test_read_missing_raises(self):
        with pytest.raises(FileNotFoundError):
            await FakeFileStorage().read_bytes(Path("/paintings/none.png"))  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("wxpaint_1_ab.png", "wxpaint_1_ab.png"),
        ("../etc/passwd", ".._etc_passwd"),
        ("a b:c.png", "a_b_c.png"),
    ],
)
def test_sanitize_path_component(raw: str, expected: str):
    assert sanitize_path_component(raw) == expected


@pytest.mark.parametrize("raw", ["", ".", ".."])
def test_sanitize_rejects_unusable(raw: str):
    with pytest.raises(ValueError):
        sanitize_path_component(raw)
