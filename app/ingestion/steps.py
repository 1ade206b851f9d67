from collections.abc import Callable

from app.extraction.text_extractor import TextExtractor
from app.ingestion.constants import THUMBNAIL_CONTENT_TYPE
from app.ingestion.exceptions import IngestionAbortedError, StorageError
from app.ingestion.models import ExtractionInfo
from app.ingestion.outcomes import Failed, Produced, Skipped
from app.ingestion.pipeline import IngestionContext, IngestionStep
from app.ingestion.sanitizer import sanitize_filename
from app.ingestion.validator import validate_file_for_upload
from app.logging.logger import Log
from app.storage.base import BaseObjectStore
from app.storage.keys import generate_key, new_disambiguator, thumbnail_key_for
from app.thumbnail.generator import ThumbnailGenerator


class ValidateStep(IngestionStep):
    async def run(self, context: IngestionContext) -> IngestionContext:
        request = context.request
        validate_file_for_upload(request.filename, request.mime_type, request.size_bytes)
        return context


class SanitizeFilenameStep(IngestionStep):
    async def run(self, context: IngestionContext) -> IngestionContext:
        context.sanitized_filename = sanitize_filename(context.request.filename)
        return context


class GenerateKeyStep(IngestionStep):
    def __init__(self, disambiguator: Callable[[], str] = new_disambiguator) -> None:
        self._disambiguator = disambiguator

    async def run(self, context: IngestionContext) -> IngestionContext:
        request = context.request
        context.storage_key = generate_key(
            request.tenant_id,
            request.owner_type,
            context.sanitized_filename,
            disambiguator=self._disambiguator,
        )
        return context


class StorePrimaryStep(IngestionStep):
    """Writes the uploaded bytes. The only I/O step whose failure is fatal."""

    def __init__(self, store: BaseObjectStore) -> None:
        self._store = store

    async def run(self, context: IngestionContext) -> IngestionContext:
        if context.aborted:
            raise IngestionAbortedError("Ingestion aborted before the file was stored")
        request = context.request
        try:
            await self._store.put(context.storage_key, request.content, request.mime_type)
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError(f"Failed to store {context.storage_key}: {exc}") from exc
        Log.info(
            f"Stored {len(request.content)} bytes",
            key=context.storage_key,
            mime_type=request.mime_type,
        )
        return context


class ThumbnailStep(IngestionStep):
    """Best effort: generate and store a thumbnail for image uploads."""

    def __init__(
        self,
        generator: ThumbnailGenerator,
        store: BaseObjectStore,
        max_width: int | None = None,
    ) -> None:
        self._generator = generator
        self._store = store
        self._max_width = max_width

    async def run(self, context: IngestionContext) -> IngestionContext:
        request = context.request
        if not request.mime_type.startswith("image/"):
            context.thumbnail_outcome = Skipped("not an image")
            return context
        if context.aborted:
            context.thumbnail_outcome = Skipped("aborted")
            return context

        try:
            outcome = await self._generator.create_thumbnail(
                request.content, request.mime_type, self._max_width
            )
            if not isinstance(outcome, Produced):
                context.thumbnail_outcome = outcome
                return context
            thumbnail_key = thumbnail_key_for(context.storage_key)
            await self._store.put(thumbnail_key, outcome.value, THUMBNAIL_CONTENT_TYPE)
        except Exception as exc:
            Log.error(
                f"Thumbnail generation failed for file {context.storage_key}",
                exc=exc,
            )
            context.thumbnail_outcome = Failed(f"{type(exc).__name__}: {exc}")
            return context

        context.thumbnail_storage_key = thumbnail_key
        context.thumbnail_outcome = Produced(thumbnail_key)
        Log.info("Stored thumbnail", key=thumbnail_key)
        return context


class ExtractTextStep(IngestionStep):
    """Best effort: re-read the stored object and extract bounded text."""

    def __init__(self, extractor: TextExtractor, store: BaseObjectStore) -> None:
        self._extractor = extractor
        self._store = store

    async def run(self, context: IngestionContext) -> IngestionContext:
        request = context.request
        if not self._extractor.is_extractable(request.mime_type):
            context.extraction_outcome = Skipped(f"{request.mime_type} is not extractable")
            return context
        if context.aborted:
            context.extraction_outcome = Skipped("aborted")
            return context

        key = context.storage_key
        try:
            stored = await self._store.get(key)
            if stored is None:
                Log.error(f"Failed to fetch stored file for text extraction: {key}")
                outcome = Failed("stored object not found")
            else:
                outcome = await self._extractor.extract_and_truncate(
                    stored.data, request.mime_type, context.sanitized_filename
                )
        except Exception as exc:
            Log.error(f"Text extraction failed for file {key}", exc=exc)
            outcome = Failed(f"{type(exc).__name__}: {exc}")

        context.extraction_outcome = outcome
        if isinstance(outcome, Produced):
            context.extraction_info = ExtractionInfo(
                was_truncated=outcome.value.was_truncated,
                extraction_failed=False,
            )
            if outcome.value.was_truncated:
                Log.info(f"Text extraction truncated for file {key}: exceeded character limit")
            Log.info(f"Extracted {len(outcome.value.text)} chars", key=key)
        elif isinstance(outcome, Failed):
            Log.warning(f"Text extraction failed for file {key}: {outcome.error}")
            context.extraction_info = ExtractionInfo(was_truncated=False, extraction_failed=True)
        return context
