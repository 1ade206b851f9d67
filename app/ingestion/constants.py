"""Limits and allow-lists shared by the ingestion pipeline and its callers."""

MAX_FILE_SIZE_BYTES = 15728640
MAX_FILENAME_LENGTH = 255
MAX_EXTRACTED_TEXT_LENGTH = 50000

DEFAULT_THUMBNAIL_MAX_WIDTH = 300
THUMBNAIL_JPEG_QUALITY = 80
THUMBNAIL_CONTENT_TYPE = "image/jpeg"

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MIME_TYPES: tuple[str, ...] = (
    "text/plain",
    "application/pdf",
    "application/msword",
    DOCX_MIME_TYPE,
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
)

# Sent to the conversion capability; text/plain is decoded in-process.
CONVERTIBLE_MIME_TYPES: frozenset[str] = frozenset(
    {
        "application/pdf",
        "application/msword",
        DOCX_MIME_TYPE,
        "image/jpeg",
        "image/png",
        "image/webp",
    }
)

EXTRACTABLE_MIME_TYPES: frozenset[str] = CONVERTIBLE_MIME_TYPES | {"text/plain"}

THUMBNAILABLE_MIME_TYPES: frozenset[str] = frozenset({"image/jpeg", "image/jpg", "image/png"})
