"""Unit tests for local evidence storage"""

import pytest

from incident_report_service.infrastructure.storage import LocalStorage, StorageError


async def _read_all(storage: LocalStorage, handle: str) -> bytes:
    return b"".join([chunk async for chunk in storage.open_stream(handle)])


@pytest.mark.unit
class TestLocalStorage:

    async def test_acquire_and_stream(self, storage):
        content = b"x" * (200 * 1024)
        handle = await storage.acquire("photo.png", content, "image/png")

        assert handle.endswith("_photo.png")
        assert await storage.is_live(handle) is True
        assert await _read_all(storage, handle) == content

    async def test_same_name_gets_distinct_handles(self, storage):
        first = await storage.acquire("a.png", b"1")
        second = await storage.acquire("a.png", b"2")

        assert first != second
        assert await _read_all(storage, first) == b"1"

    async def test_release_exactly_once(self, storage):
        handle = await storage.acquire("a.pdf", b"pdf")

        assert await storage.release(handle) is True
        assert await storage.release(handle) is False
        assert await storage.is_live(handle) is False
        with pytest.raises(FileNotFoundError):
            await _read_all(storage, handle)

    async def test_release_all_counts_live_handles(self, storage):
        handles = [await storage.acquire(f"{i}.txt", b"data") for i in range(3)]
        await storage.release(handles[0])

        assert await storage.release_all(handles) == 2
        assert storage.live_handles == set()

    async def test_directory_parts_stripped_from_filename(self, storage, tmp_path):
        handle = await storage.acquire("../../etc/passwd", b"nope")

        assert handle.endswith("_passwd")
        assert (tmp_path / "evidence" / handle).exists()

    async def test_foreign_handle_rejected(self, storage):
        with pytest.raises(StorageError):
            storage._path_for("../outside.txt")

    async def test_health_check(self, storage):
        assert await storage.health_check() is True
