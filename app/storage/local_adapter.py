"""Filesystem-backed object store used when no bucket is configured."""

import asyncio
import json
from pathlib import Path, PurePosixPath

from app.ingestion.exceptions import StorageError
from app.storage.base import BaseObjectStore, StoredObject, slice_range

_META_SUFFIX = ".meta.json"
_DEFAULT_CONTENT_TYPE = "application/octet-stream"


class LocalObjectStore(BaseObjectStore):
    """Stores each object as a file under ``base_path``; the content type lives
    in a ``<file>.meta.json`` sidecar."""

    def __init__(self, base_path: Path | str = "./local_storage") -> None:
        self._base_path = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._resolve_path(key)
        try:
            await asyncio.to_thread(self._write, path, data, content_type)
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc

    async def get(
        self,
        key: str,
        byte_range: tuple[int, int] | None = None,
    ) -> StoredObject | None:
        path = self._resolve_path(key)
        try:
            stored = await asyncio.to_thread(self._read, path)
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc
        if stored is None:
            return None
        return StoredObject(data=slice_range(stored.data, byte_range), content_type=stored.content_type)

    async def delete(self, key: str) -> None:
        path = self._resolve_path(key)
        try:
            await asyncio.to_thread(self._remove, path)
        except OSError as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        parts = PurePosixPath(key).parts
        if not key or key.startswith("/") or ".." in parts:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._base_path.joinpath(*parts)

    @staticmethod
    def _write(path: Path, data: bytes, content_type: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        _meta_path(path).write_text(json.dumps({"content_type": content_type}), encoding="utf-8")

    @staticmethod
    def _read(path: Path) -> StoredObject | None:
        if not path.is_file():
            return None
        content_type = _DEFAULT_CONTENT_TYPE
        meta_path = _meta_path(path)
        if meta_path.is_file():
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
            content_type = meta.get("content_type") or _DEFAULT_CONTENT_TYPE
        return StoredObject(data=path.read_bytes(), content_type=content_type)

    @staticmethod
    def _remove(path: Path) -> None:
        path.unlink(missing_ok=True)
        _meta_path(path).unlink(missing_ok=True)


def _meta_path(path: Path) -> Path:
    return path.with_name(path.name + _META_SUFFIX)
