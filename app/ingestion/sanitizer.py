"""Normalizes user-supplied filenames into storage-friendly names."""

import re

from app.ingestion.constants import MAX_FILENAME_LENGTH

FALLBACK_BASE_NAME = "unnamed_file"

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RUN = re.compile(r"\s+")
_DOT_RUN = re.compile(r"\.+")
_EDGE_DOTS_AND_SPACE = re.compile(r"^[.\s]+|[.\s]+$")


def sanitize_filename(filename: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """Return a safe, length-bounded version of ``filename``.

    Never fails: an empty or fully stripped base name becomes ``unnamed_file``.
    The extension (text from the last dot) is preserved when truncating.
    """
    base_name, extension = _split_extension(filename or "")

    base_name = _UNSAFE_CHARS.sub("", base_name)
    base_name = _WHITESPACE_RUN.sub("_", base_name)
    base_name = _DOT_RUN.sub(".", base_name)
    base_name = _EDGE_DOTS_AND_SPACE.sub("", base_name)
    if not base_name:
        base_name = FALLBACK_BASE_NAME

    extension = _UNSAFE_CHARS.sub("", extension)

    sanitized = base_name + extension
    if len(sanitized) <= max_length:
        return sanitized

    max_base_length = max_length - len(extension)
    if max_base_length < 1:
        # No room for a base name; keep as much of the combined name as fits.
        return sanitized[:max_length]
    truncated_base = base_name[:max_base_length].rstrip(".")
    return truncated_base + extension


def _split_extension(filename: str) -> tuple[str, str]:
    last_dot = filename.rfind(".")
    if last_dot > 0:
        return filename[:last_dot], filename[last_dot:]
    if last_dot == 0:
        return "", filename
    return filename, ""
