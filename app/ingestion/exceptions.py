from enum import Enum


class IngestionError(Exception):
    """Base exception for all ingestion-related errors."""


class ValidationErrorKind(str, Enum):
    EMPTY_OR_NEGATIVE_SIZE = "EmptyOrNegativeSize"
    FILE_TOO_LARGE = "FileTooLarge"
    MIME_TYPE_REQUIRED = "MimeTypeRequired"
    MIME_TYPE_NOT_ALLOWED = "MimeTypeNotAllowed"
    FILENAME_REQUIRED = "FilenameRequired"


class ValidationError(IngestionError):
    """Raised when upload metadata is rejected before any I/O.

    The message is safe to show to the end user verbatim.
    """

    def __init__(self, kind: ValidationErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class StorageError(IngestionError):
    """Raised when the object store fails to put, get or delete an object."""


class ObjectNotFoundError(StorageError):
    """Raised when a downloaded key does not exist in the object store."""


class ConversionError(IngestionError):
    """Raised when the document-to-text capability cannot be reached."""


class CodecUnavailableError(IngestionError):
    """Raised when a native image codec fails to initialize."""


class IngestionAbortedError(IngestionError):
    """Raised when the caller aborts ingestion before the primary write."""
