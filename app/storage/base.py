from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class StoredObject:
    """Object bytes with the content-type hint recorded at put time."""

    data: bytes = field(repr=False)
    content_type: str


class BaseObjectStore(ABC):
    """Contract for all object store adapters.

    Keys are opaque strings produced by ``app.storage.keys``. Implementations
    raise ``StorageError`` on infrastructure failures.
    """

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store ``data`` under ``key`` with a content-type hint."""

    @abstractmethod
    async def get(
        self,
        key: str,
        byte_range: tuple[int, int] | None = None,
    ) -> StoredObject | None:
        """Return the object, or ``None`` when the key does not exist.

        Args:
            key: Storage key.
            byte_range: Optional inclusive ``(start, end)`` offsets.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete ``key``. Deleting a missing key is not an error."""

    async def iter_chunks(self, key: str, chunk_size: int = 1024 * 1024) -> AsyncIterator[bytes]:
        """Stream an object in chunks. Yields nothing for a missing key."""
        stored = await self.get(key)
        if stored is None:
            return
        for offset in range(0, len(stored.data), chunk_size):
            yield stored.data[offset : offset + chunk_size]


def slice_range(data: bytes, byte_range: tuple[int, int] | None) -> bytes:
    """Apply inclusive ``(start, end)`` offsets the way an HTTP Range header does."""
    if byte_range is None:
        return data
    start, end = byte_range
    if start < 0 or end < start:
        raise ValueError(f"Invalid byte range: {byte_range}")
    return data[start : end + 1]
