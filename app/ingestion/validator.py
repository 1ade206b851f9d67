"""Upload metadata checks that run before any object store I/O."""

from app.ingestion.constants import ALLOWED_MIME_TYPES, MAX_FILE_SIZE_BYTES
from app.ingestion.exceptions import ValidationError, ValidationErrorKind

_BYTES_PER_MB = 1024 * 1024


def validate(size_bytes: int, mime_type: str) -> None:
    """Validate file size and MIME type.

    Raises:
        ValidationError: with the kind of the first failed check.
    """
    validate_file_size(size_bytes)
    validate_mime_type(mime_type)


def validate_file_size(size_bytes: int) -> None:
    if size_bytes <= 0:
        raise ValidationError(
            ValidationErrorKind.EMPTY_OR_NEGATIVE_SIZE,
            "File cannot be empty or have negative size",
        )
    if size_bytes > MAX_FILE_SIZE_BYTES:
        max_size_mb = MAX_FILE_SIZE_BYTES // _BYTES_PER_MB
        raise ValidationError(
            ValidationErrorKind.FILE_TOO_LARGE,
            f"File size exceeds maximum allowed limit of {max_size_mb}MB",
        )


def validate_mime_type(mime_type: str) -> None:
    if not mime_type or not mime_type.strip():
        raise ValidationError(ValidationErrorKind.MIME_TYPE_REQUIRED, "MIME type is required")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            ValidationErrorKind.MIME_TYPE_NOT_ALLOWED,
            f'File type "{mime_type}" is not allowed. '
            f"Allowed types: {', '.join(ALLOWED_MIME_TYPES)}",
        )


def validate_file_for_upload(filename: str, mime_type: str, size_bytes: int) -> None:
    """Run the size and MIME checks, then require a non-blank filename."""
    validate(size_bytes, mime_type)
    if not filename or not filename.strip():
        raise ValidationError(ValidationErrorKind.FILENAME_REQUIRED, "Filename is required")
