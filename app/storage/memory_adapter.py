from app.storage.base import BaseObjectStore, StoredObject, slice_range


class MemoryObjectStore(BaseObjectStore):
    """Keeps objects in a dict. For tests and local development only."""

    def __init__(self) -> None:
        self._objects: dict[str, StoredObject] = {}

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self._objects[key] = StoredObject(data=bytes(data), content_type=content_type)

    async def get(
        self,
        key: str,
        byte_range: tuple[int, int] | None = None,
    ) -> StoredObject | None:
        stored = self._objects.get(key)
        if stored is None:
            return None
        return StoredObject(data=slice_range(stored.data, byte_range), content_type=stored.content_type)

    async def delete(self, key: str) -> None:
        self._objects.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._objects)
