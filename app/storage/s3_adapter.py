"""S3-compatible object store (AWS S3, Cloudflare R2, MinIO) built on boto3."""

import asyncio
import threading
from collections.abc import AsyncIterator
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.ingestion.exceptions import StorageError
from app.storage.base import BaseObjectStore, StoredObject

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
_DEFAULT_CONTENT_TYPE = "application/octet-stream"


class S3ObjectStore(BaseObjectStore):
    """Object store adapter for any S3-compatible endpoint.

    The boto3 client is created on first use. All blocking SDK calls run in a
    worker thread so the event loop is never blocked.
    """

    def __init__(
        self,
        *,
        bucket_name: str,
        region: str = "auto",
        endpoint_url: str | None = None,
        access_key_id: str = "",
        secret_access_key: str = "",
        timeout_seconds: int = 30,
        upload_url_expiry_seconds: int = 300,
        download_url_expiry_seconds: int = 3600,
    ) -> None:
        if not bucket_name:
            raise ValueError("s3_bucket_name is required for storage_backend=s3")
        self._bucket_name = bucket_name
        self._region = region
        self._endpoint_url = endpoint_url or None
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._timeout_seconds = timeout_seconds
        self._upload_url_expiry_seconds = upload_url_expiry_seconds
        self._download_url_expiry_seconds = download_url_expiry_seconds
        self._client: Any = None
        self._client_lock = threading.Lock()

    def _get_client(self) -> Any:
        with self._client_lock:
            if self._client is None:
                kwargs: dict[str, Any] = {
                    "region_name": self._region,
                    "endpoint_url": self._endpoint_url,
                    "config": Config(
                        signature_version="s3v4",
                        connect_timeout=self._timeout_seconds,
                        read_timeout=self._timeout_seconds,
                        retries={"max_attempts": 3, "mode": "standard"},
                    ),
                }
                if self._access_key_id:
                    kwargs["aws_access_key_id"] = self._access_key_id
                    kwargs["aws_secret_access_key"] = self._secret_access_key
                self._client = boto3.client("s3", **kwargs)
            return self._client

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await asyncio.to_thread(
                self._get_client().put_object,
                Bucket=self._bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 put failed for {key}: {exc}") from exc

    async def get(
        self,
        key: str,
        byte_range: tuple[int, int] | None = None,
    ) -> StoredObject | None:
        params: dict[str, Any] = {"Bucket": self._bucket_name, "Key": key}
        if byte_range is not None:
            start, end = byte_range
            if start < 0 or end < start:
                raise ValueError(f"Invalid byte range: {byte_range}")
            params["Range"] = f"bytes={start}-{end}"
        try:
            return await asyncio.to_thread(self._get_object, params)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 get failed for {key}: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(
                self._get_client().delete_object,
                Bucket=self._bucket_name,
                Key=key,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 delete failed for {key}: {exc}") from exc

    async def iter_chunks(self, key: str, chunk_size: int = 1024 * 1024) -> AsyncIterator[bytes]:
        try:
            response = await asyncio.to_thread(
                self._get_client().get_object,
                Bucket=self._bucket_name,
                Key=key,
            )
        except ClientError as exc:
            if _is_missing_key(exc):
                return
            raise StorageError(f"S3 get failed for {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"S3 get failed for {key}: {exc}") from exc

        body = response["Body"]
        try:
            while True:
                chunk = await asyncio.to_thread(body.read, chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            body.close()

    def generate_upload_url(
        self, key: str, content_type: str, expires_in: int | None = None
    ) -> str:
        """Presigned PUT URL for direct browser uploads."""
        if expires_in is None:
            expires_in = self._upload_url_expiry_seconds
        return self._get_client().generate_presigned_url(
            "put_object",
            Params={"Bucket": self._bucket_name, "Key": key, "ContentType": content_type},
            ExpiresIn=expires_in,
        )

    def generate_download_url(self, key: str, expires_in: int | None = None) -> str:
        """Presigned GET URL for downloads."""
        if expires_in is None:
            expires_in = self._download_url_expiry_seconds
        return self._get_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": self._bucket_name, "Key": key},
            ExpiresIn=expires_in,
        )

    def _get_object(self, params: dict[str, Any]) -> StoredObject | None:
        try:
            response = self._get_client().get_object(**params)
        except ClientError as exc:
            if _is_missing_key(exc):
                return None
            raise
        body = response["Body"]
        try:
            data = body.read()
        finally:
            body.close()
        return StoredObject(
            data=data,
            content_type=response.get("ContentType") or _DEFAULT_CONTENT_TYPE,
        )


def _is_missing_key(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code", "")) in _MISSING_KEY_CODES
