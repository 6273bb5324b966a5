"""Local Evidence Storage

Keeps evidence bytes in a per-process directory. Handles are generated here
(`<uuid>_<filename>`) and tracked in memory, so a handle that was released
stays dead even if a file with the same name reappears on disk.
"""

import logging
from pathlib import Path
from typing import AsyncGenerator, Optional, Set
from uuid import uuid4

import aiofiles
import aiofiles.os

from incident_report_service.infrastructure.storage.provider import StorageError, StorageProvider

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class LocalStorage(StorageProvider):
    """Evidence storage on the local filesystem via aiofiles."""

    def __init__(self, base_path: Optional[str] = None):
        """
        Args:
            base_path: Directory evidence is written to (default: ./data/session-evidence)
        """
        self.base_path = Path(base_path or "./data/session-evidence").resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._live: Set[str] = set()
        logger.info(f"Evidence storage at: {self.base_path}")

    @property
    def live_handles(self) -> Set[str]:
        return set(self._live)

    def _path_for(self, handle: str) -> Path:
        # Uploaded filenames are user input; keep every handle inside base_path
        path = (self.base_path / handle).resolve()
        if path.parent != self.base_path:
            logger.error(f"Rejected evidence handle outside storage root: {handle}")
            raise StorageError("Invalid evidence handle")
        return path

    async def acquire(self, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        safe_name = Path(filename).name or "unnamed"
        handle = f"{uuid4()}_{safe_name}"
        path = self._path_for(handle)

        try:
            async with aiofiles.open(path, "wb") as out_file:
                for offset in range(0, len(content), CHUNK_SIZE):
                    await out_file.write(content[offset:offset + CHUNK_SIZE])
        except OSError as e:
            logger.error(f"Failed to store evidence {filename}: {e}")
            raise StorageError(f"Could not store {filename}: {e}") from e

        self._live.add(handle)
        logger.info(f"Acquired evidence {handle} ({content_type or 'unknown type'}, {len(content)} bytes)")
        return handle

    async def open_stream(self, handle: str) -> AsyncGenerator[bytes, None]:
        if handle not in self._live:
            raise FileNotFoundError(handle)

        async with aiofiles.open(self._path_for(handle), "rb") as in_file:
            while chunk := await in_file.read(CHUNK_SIZE):
                yield chunk

    async def release(self, handle: str) -> bool:
        if handle not in self._live:
            logger.warning(f"Release of unknown or already released handle: {handle}")
            return False

        self._live.discard(handle)
        try:
            await aiofiles.os.remove(self._path_for(handle))
        except FileNotFoundError:
            logger.warning(f"Evidence file already missing on release: {handle}")
        except OSError as e:
            # Handle is dead either way; the file is just left behind
            logger.error(f"Failed to remove evidence file {handle}: {e}")
        logger.info(f"Released evidence {handle}")
        return True

    async def is_live(self, handle: str) -> bool:
        return handle in self._live

    async def health_check(self) -> bool:
        probe = self.base_path / ".health_check"
        try:
            probe.touch()
            probe.unlink()
            return True
        except OSError as e:
            logger.error(f"Evidence storage not writable: {e}")
            return False
