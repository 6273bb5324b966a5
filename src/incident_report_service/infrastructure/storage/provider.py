"""Evidence Storage Interface

Evidence content lives only as long as the report session. Uploading a file
acquires a handle; the handle is released exactly once, either when the
evidence entry is removed or when the session restarts.
"""

from abc import ABC, abstractmethod
from typing import AsyncGenerator, Optional


class StorageError(Exception):
    """Raised when evidence content cannot be stored or read"""


class StorageProvider(ABC):
    """Session-scoped store behind evidence handles."""

    @abstractmethod
    async def acquire(self, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        """Store content and hand back a new handle.

        Raises:
            StorageError: If the content cannot be written
        """

    @abstractmethod
    def open_stream(self, handle: str) -> AsyncGenerator[bytes, None]:
        """Stream the content behind a live handle.

        Raises:
            FileNotFoundError: If the handle was released or never acquired
        """

    @abstractmethod
    async def release(self, handle: str) -> bool:
        """Release a handle. Returns False if it was not live."""

    @abstractmethod
    async def is_live(self, handle: str) -> bool:
        pass

    async def release_all(self, handles) -> int:
        """Release every handle given; returns how many were actually live"""
        released = 0
        for handle in handles:
            if await self.release(handle):
                released += 1
        return released

    @abstractmethod
    async def health_check(self) -> bool:
        pass
