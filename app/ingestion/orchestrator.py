"""End-to-end upload flow: validate, store, then derive thumbnail and text.

Only validation and the primary object write can fail an ingestion. The
thumbnail and text extraction are best effort; their failures are logged and
reported through ``IngestionResult`` without touching the stored object.
"""

import asyncio
from collections.abc import Callable

from app.config.settings import Settings
from app.extraction.factory import ConversionClientFactory
from app.extraction.text_extractor import TextExtractor
from app.ingestion.constants import MAX_EXTRACTED_TEXT_LENGTH
from app.ingestion.exceptions import ObjectNotFoundError
from app.ingestion.models import FileRecordFields, IngestionResult, OwnerType, UploadRequest
from app.ingestion.outcomes import Produced
from app.ingestion.pipeline import IngestionContext, IngestionStep
from app.ingestion.steps import (
    ExtractTextStep,
    GenerateKeyStep,
    SanitizeFilenameStep,
    StorePrimaryStep,
    ThumbnailStep,
    ValidateStep,
)
from app.logging.logger import Log
from app.storage.base import BaseObjectStore, StoredObject
from app.storage.factory import ObjectStoreFactory
from app.storage.keys import new_disambiguator
from app.thumbnail.codecs import ImageCodecs
from app.thumbnail.generator import ThumbnailGenerator

_IMAGE_EXTENSION_MIME_TYPES = {"jpg": "image/jpeg", "jpeg": "image/jpeg"}

# Codecs initialize once per process; every default-built orchestrator shares them.
_PROCESS_CODECS = ImageCodecs.create()


class IngestionOrchestrator:
    """Runs uploads through the ingestion steps."""

    def __init__(
        self,
        *,
        store: BaseObjectStore,
        thumbnail_generator: ThumbnailGenerator,
        text_extractor: TextExtractor,
        thumbnail_max_width: int | None = None,
        disambiguator: Callable[[], str] = new_disambiguator,
    ) -> None:
        self._store = store
        self._disambiguator = disambiguator
        thumbnail_step = ThumbnailStep(thumbnail_generator, store, thumbnail_max_width)
        self._upload_steps: list[IngestionStep] = [
            ValidateStep(),
            SanitizeFilenameStep(),
            GenerateKeyStep(disambiguator),
            StorePrimaryStep(store),
            thumbnail_step,
            ExtractTextStep(text_extractor, store),
        ]
        self._generated_image_steps: list[IngestionStep] = [
            SanitizeFilenameStep(),
            GenerateKeyStep(disambiguator),
            StorePrimaryStep(store),
            thumbnail_step,
        ]

    @property
    def store(self) -> BaseObjectStore:
        return self._store

    async def ingest(
        self,
        request: UploadRequest,
        abort: asyncio.Event | None = None,
    ) -> IngestionResult:
        """Ingest one uploaded file.

        ``abort`` is checked before the primary write and before each derived
        step. Once the file is stored it is never rolled back.

        Raises:
            ValidationError: if size, MIME type or filename is rejected.
            StorageError: if the primary object write fails.
            IngestionAbortedError: if ``abort`` was set before the write.
        """
        Log.info(
            f"Ingesting {request.filename}",
            tenant=request.tenant_id,
            owner_type=_owner_type_value(request.owner_type),
            size_bytes=request.size_bytes,
        )
        context = await self._run(IngestionContext(request=request, abort=abort), self._upload_steps)
        return self._build_result(context)

    async def ingest_generated_image(
        self,
        tenant_id: str,
        image_bytes: bytes,
        extension: str,
        abort: asyncio.Event | None = None,
    ) -> IngestionResult:
        """Store an AI-generated image under ``contentImage`` with a thumbnail."""
        extension = extension.lower().lstrip(".")
        mime_type = _IMAGE_EXTENSION_MIME_TYPES.get(extension, f"image/{extension}")
        request = UploadRequest(
            filename=f"generated-{self._disambiguator()}.{extension}",
            mime_type=mime_type,
            size_bytes=len(image_bytes),
            owner_type=OwnerType.CONTENT_IMAGE,
            owner_id="",
            tenant_id=tenant_id,
            content=image_bytes,
        )
        context = await self._run(
            IngestionContext(request=request, abort=abort),
            self._generated_image_steps,
        )
        return self._build_result(context)

    async def download(self, storage_key: str) -> StoredObject:
        """Fetch a stored object.

        Raises:
            ObjectNotFoundError: if nothing is stored under the key.
        """
        stored = await self._store.get(storage_key)
        if stored is None:
            raise ObjectNotFoundError(f"File not found: {storage_key}")
        return stored

    async def delete_file_objects(
        self,
        storage_key: str,
        thumbnail_storage_key: str | None = None,
    ) -> None:
        """Delete the primary object and its thumbnail when an owner is deleted.

        Extracted text lives only in the caller's file record and is not touched.
        """
        await self._store.delete(storage_key)
        if thumbnail_storage_key:
            await self._store.delete(thumbnail_storage_key)
        Log.info("Deleted file objects", key=storage_key, thumbnail_key=thumbnail_storage_key)

    @staticmethod
    async def _run(context: IngestionContext, steps: list[IngestionStep]) -> IngestionContext:
        for step in steps:
            context = await step.run(context)
        return context

    @staticmethod
    def _build_result(context: IngestionContext) -> IngestionResult:
        request = context.request
        extracted_text = None
        if isinstance(context.extraction_outcome, Produced):
            extracted_text = context.extraction_outcome.value.text
        extraction_failed = (
            context.extraction_info is not None and context.extraction_info.extraction_failed
        )
        record = FileRecordFields(
            owner_type=_owner_type_value(request.owner_type),
            owner_id=request.owner_id,
            filename=context.sanitized_filename,
            mime_type=request.mime_type,
            size_bytes=request.size_bytes,
            storage_key=context.storage_key,
            thumbnail_storage_key=context.thumbnail_storage_key,
            extracted_text=extracted_text,
        )
        return IngestionResult(
            storage_key=context.storage_key,
            file_record=record,
            thumbnail_storage_key=context.thumbnail_storage_key,
            extracted_text=extracted_text,
            extraction_failed=extraction_failed,
            extraction_info=context.extraction_info,
            thumbnail_outcome=context.thumbnail_outcome,
            extraction_outcome=context.extraction_outcome,
        )


def _owner_type_value(owner_type: OwnerType | str) -> str:
    return owner_type.value if isinstance(owner_type, OwnerType) else owner_type


def build_orchestrator(
    settings: Settings,
    codecs: ImageCodecs | None = None,
) -> IngestionOrchestrator:
    """Build an IngestionOrchestrator with all required adapters."""
    store = ObjectStoreFactory.create(settings)
    conversion_client = ConversionClientFactory.create(settings)
    max_text_length = min(settings.max_extracted_text_length, MAX_EXTRACTED_TEXT_LENGTH)
    text_extractor = TextExtractor(conversion_client, max_length=max_text_length)
    thumbnail_generator = ThumbnailGenerator(
        codecs or _PROCESS_CODECS,
        jpeg_quality=settings.thumbnail_jpeg_quality,
        default_max_width=settings.thumbnail_max_width,
    )
    return IngestionOrchestrator(
        store=store,
        thumbnail_generator=thumbnail_generator,
        text_extractor=text_extractor,
        thumbnail_max_width=settings.thumbnail_max_width,
    )
