"""Plain-text extraction for uploaded files with a bounded output size."""

from app.extraction.base import BaseConversionClient, ConversionItem
from app.ingestion.constants import (
    CONVERTIBLE_MIME_TYPES,
    EXTRACTABLE_MIME_TYPES,
    MAX_EXTRACTED_TEXT_LENGTH,
)
from app.ingestion.models import ExtractionResult
from app.ingestion.outcomes import ArtifactOutcome, Failed, Produced, Skipped
from app.logging.logger import Log

DEFAULT_DOCUMENT_NAME = "document"


def truncate(text: str, max_length: int = MAX_EXTRACTED_TEXT_LENGTH) -> ExtractionResult:
    """Cut ``text`` to at most ``max_length`` characters.

    ``was_truncated`` is true only when the input was longer than the limit.
    """
    if len(text) <= max_length:
        return ExtractionResult(text=text, was_truncated=False)
    return ExtractionResult(text=text[:max_length], was_truncated=True)


def is_extractable(mime_type: str) -> bool:
    return mime_type in EXTRACTABLE_MIME_TYPES


class TextExtractor:
    """Turns uploaded bytes into text.

    ``text/plain`` is decoded in-process; other supported formats go to the
    conversion client. Failures are returned as ``Failed`` and never raised.
    """

    def __init__(
        self,
        client: BaseConversionClient,
        max_length: int = MAX_EXTRACTED_TEXT_LENGTH,
    ) -> None:
        self._client = client
        self._max_length = max_length

    @staticmethod
    def is_extractable(mime_type: str) -> bool:
        return is_extractable(mime_type)

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        filename: str | None = None,
    ) -> ArtifactOutcome[str]:
        if mime_type == "text/plain":
            return Produced(data.decode("utf-8", errors="replace"))
        if mime_type not in CONVERTIBLE_MIME_TYPES:
            Log.warning(f"Text extraction not supported for MIME type: {mime_type}")
            return Skipped(f"text extraction not supported for {mime_type}")

        name = filename or DEFAULT_DOCUMENT_NAME
        try:
            results = await self._client.convert(
                [ConversionItem(name=name, data=data, mime_type=mime_type)]
            )
        except Exception as exc:
            Log.error(f"Document conversion failed for {name}", exc=exc)
            return Failed(f"{type(exc).__name__}: {exc}")

        if not results:
            Log.error(f"Document conversion returned no result for {name}")
            return Failed("conversion returned no result")
        result = results[0]
        if result.error is not None or result.data is None:
            Log.error(f"Document conversion error for {name}: {result.error}")
            return Failed(result.error or "conversion returned no text")
        return Produced(result.data)

    async def extract_or_none(
        self,
        data: bytes,
        mime_type: str,
        filename: str | None = None,
    ) -> str | None:
        """Like ``extract`` but collapses skipped and failed into ``None``."""
        return (await self.extract(data, mime_type, filename)).value_or_none()

    async def extract_and_truncate(
        self,
        data: bytes,
        mime_type: str,
        filename: str | None = None,
    ) -> ArtifactOutcome[ExtractionResult]:
        outcome = await self.extract(data, mime_type, filename)
        if not isinstance(outcome, Produced):
            return outcome
        Log.debug(f"Extracted {len(outcome.value)} chars from {filename or DEFAULT_DOCUMENT_NAME}")
        return Produced(truncate(outcome.value, self._max_length))
