from dataclasses import dataclass, field
from enum import Enum

from app.ingestion.outcomes import ArtifactOutcome, Skipped


class OwnerType(str, Enum):
    """Entity kinds a file can be attached to."""

    BRAND_VOICE = "brandVoice"
    PERSONA = "persona"
    KNOWLEDGE_BASE_ITEM = "knowledgeBaseItem"
    EXAMPLE = "example"
    CONTENT_PIECE = "contentPiece"
    CONTENT_IMAGE = "contentImage"


@dataclass(frozen=True)
class UploadRequest:
    """One uploaded file, as received from the route handler."""

    filename: str
    mime_type: str
    size_bytes: int
    owner_type: OwnerType | str
    owner_id: str
    tenant_id: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class ExtractionResult:
    """Extracted text bounded by the truncation limit."""

    text: str
    was_truncated: bool


@dataclass(frozen=True)
class ExtractionInfo:
    was_truncated: bool
    extraction_failed: bool


@dataclass(frozen=True)
class FileRecordFields:
    """Fields the caller persists as the file record once ingestion returns."""

    owner_type: str
    owner_id: str
    filename: str
    mime_type: str
    size_bytes: int
    storage_key: str
    thumbnail_storage_key: str | None = None
    extracted_text: str | None = None


@dataclass(frozen=True)
class IngestionResult:
    """Output of a completed ingestion.

    ``thumbnail_storage_key`` and ``extracted_text`` are absent when the
    artifact was skipped or failed. ``extraction_failed`` is only true when
    extraction was attempted and did not succeed.
    """

    storage_key: str
    file_record: FileRecordFields
    thumbnail_storage_key: str | None = None
    extracted_text: str | None = None
    extraction_failed: bool = False
    extraction_info: ExtractionInfo | None = None
    thumbnail_outcome: ArtifactOutcome[str] = Skipped("not attempted")
    extraction_outcome: ArtifactOutcome[ExtractionResult] = Skipped("not attempted")
