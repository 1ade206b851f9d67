import asyncio
from pathlib import Path

import pytest

from app.ingestion.exceptions import StorageError
from app.storage.local_adapter import LocalObjectStore


class TestLocalObjectStore:
    def test_writes_object_under_key_path(self, tmp_path: Path) -> None:
        store = LocalObjectStore(tmp_path)

        asyncio.run(store.put("t1/personas/1-a-photo.png", b"\x89PNG", "image/png"))

        assert (tmp_path / "t1" / "personas" / "1-a-photo.png").read_bytes() == b"\x89PNG"

    def test_get_returns_recorded_content_type(self, tmp_path: Path) -> None:
        store = LocalObjectStore(tmp_path)
        asyncio.run(store.put("t1/examples/doc.pdf", b"%PDF", "application/pdf"))

        stored = asyncio.run(store.get("t1/examples/doc.pdf"))

        assert stored is not None
        assert stored.data == b"%PDF"
        assert stored.content_type == "application/pdf"

    def test_get_without_sidecar_defaults_content_type(self, tmp_path: Path) -> None:
        (tmp_path / "raw.bin").write_bytes(b"raw")
        stored = asyncio.run(LocalObjectStore(tmp_path).get("raw.bin"))

        assert stored is not None
        assert stored.content_type == "application/octet-stream"

    def test_get_missing_returns_none(self, tmp_path: Path) -> None:
        assert asyncio.run(LocalObjectStore(tmp_path).get("nope/file.txt")) is None

    def test_get_byte_range(self, tmp_path: Path) -> None:
        store = LocalObjectStore(tmp_path)
        asyncio.run(store.put("k.txt", b"hello world", "text/plain"))

        stored = asyncio.run(store.get("k.txt", byte_range=(6, 10)))

        assert stored is not None
        assert stored.data == b"world"

    def test_delete_removes_object_and_sidecar(self, tmp_path: Path) -> None:
        store = LocalObjectStore(tmp_path)
        asyncio.run(store.put("a/b.txt", b"x", "text/plain"))

        asyncio.run(store.delete("a/b.txt"))
        asyncio.run(store.delete("a/b.txt"))

        assert list((tmp_path / "a").iterdir()) == []

    @pytest.mark.parametrize("key", ["../escape.txt", "a/../../escape.txt", "/etc/passwd", ""])
    def test_rejects_keys_outside_root(self, tmp_path: Path, key: str) -> None:
        store = LocalObjectStore(tmp_path)
        with pytest.raises(StorageError, match="Invalid storage key"):
            asyncio.run(store.put(key, b"x", "text/plain"))

    def test_wraps_os_errors(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        store = LocalObjectStore(tmp_path)

        with pytest.raises(StorageError, match="Failed to write"):
            asyncio.run(store.put("blocker/child.txt", b"x", "text/plain"))
