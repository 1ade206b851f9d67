from collections.abc import Callable
from typing import ClassVar

from app.config.settings import Settings
from app.storage.base import BaseObjectStore
from app.storage.local_adapter import LocalObjectStore
from app.storage.memory_adapter import MemoryObjectStore
from app.storage.s3_adapter import S3ObjectStore


def _create_local(settings: Settings) -> BaseObjectStore:
    return LocalObjectStore(base_path=settings.local_storage_root)


def _create_s3(settings: Settings) -> BaseObjectStore:
    return S3ObjectStore(
        bucket_name=settings.s3_bucket_name,
        region=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
        access_key_id=settings.s3_access_key_id,
        secret_access_key=settings.s3_secret_access_key,
        timeout_seconds=settings.s3_timeout_seconds,
        upload_url_expiry_seconds=settings.s3_upload_url_expiry_seconds,
        download_url_expiry_seconds=settings.s3_download_url_expiry_seconds,
    )


def _create_memory(settings: Settings) -> BaseObjectStore:
    _ = settings
    return MemoryObjectStore()


class ObjectStoreFactory:
    """Creates the object store adapter selected by ``storage_backend``."""

    BACKENDS: ClassVar[dict[str, Callable[[Settings], BaseObjectStore]]] = {
        "local": _create_local,
        "s3": _create_s3,
        "memory": _create_memory,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        builder = cls.BACKENDS.get(backend)
        if builder is None:
            raise ValueError(
                f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return builder(settings)
