import asyncio

from app.storage.memory_adapter import MemoryObjectStore


async def _collect(store: MemoryObjectStore, key: str, chunk_size: int) -> list[bytes]:
    return [chunk async for chunk in store.iter_chunks(key, chunk_size)]


class TestMemoryObjectStore:
    def test_put_then_get_preserves_bytes_and_content_type(self) -> None:
        store = MemoryObjectStore()
        asyncio.run(store.put("t/a.pdf", b"%PDF-1", "application/pdf"))

        stored = asyncio.run(store.get("t/a.pdf"))

        assert stored is not None
        assert stored.data == b"%PDF-1"
        assert stored.content_type == "application/pdf"

    def test_get_missing_key_returns_none(self) -> None:
        assert asyncio.run(MemoryObjectStore().get("missing")) is None

    def test_get_byte_range_is_inclusive(self) -> None:
        store = MemoryObjectStore()
        asyncio.run(store.put("k", b"0123456789", "text/plain"))

        stored = asyncio.run(store.get("k", byte_range=(2, 5)))

        assert stored is not None
        assert stored.data == b"2345"

    def test_delete_is_idempotent(self) -> None:
        store = MemoryObjectStore()
        asyncio.run(store.put("k", b"x", "text/plain"))

        asyncio.run(store.delete("k"))
        asyncio.run(store.delete("k"))

        assert store.keys() == []

    def test_iter_chunks_streams_whole_object(self) -> None:
        store = MemoryObjectStore()
        asyncio.run(store.put("k", b"abcdefg", "text/plain"))

        chunks = asyncio.run(_collect(store, "k", 3))

        assert chunks == [b"abc", b"def", b"g"]

    def test_iter_chunks_for_missing_key_yields_nothing(self) -> None:
        assert asyncio.run(_collect(MemoryObjectStore(), "missing", 3)) == []
