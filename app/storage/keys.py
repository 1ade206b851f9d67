"""Storage key layout: ``{tenant_id}/{owner_folder}/{disambiguator}-{filename}``."""

import time
import uuid
from collections.abc import Callable

from app.ingestion.models import OwnerType

OWNER_FOLDERS: dict[str, str] = {
    OwnerType.BRAND_VOICE.value: "brand-voices",
    OwnerType.PERSONA.value: "personas",
    OwnerType.KNOWLEDGE_BASE_ITEM.value: "knowledge-base",
    OwnerType.EXAMPLE.value: "examples",
}
FALLBACK_FOLDER = "misc"
THUMBNAIL_SUFFIX = "_thumb.jpg"


def owner_folder(owner_type: OwnerType | str) -> str:
    value = owner_type.value if isinstance(owner_type, OwnerType) else owner_type
    return OWNER_FOLDERS.get(value, FALLBACK_FOLDER)


def new_disambiguator() -> str:
    """Millisecond timestamp plus a random token.

    The timestamp keeps keys roughly time-ordered; the token keeps two uploads
    of the same filename within one millisecond from colliding.
    """
    return f"{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:12]}"


def generate_key(
    tenant_id: str,
    owner_type: OwnerType | str,
    sanitized_filename: str,
    disambiguator: Callable[[], str] = new_disambiguator,
) -> str:
    """Build a unique storage key for one upload. Never fails."""
    return f"{tenant_id}/{owner_folder(owner_type)}/{disambiguator()}-{sanitized_filename}"


def thumbnail_key_for(storage_key: str) -> str:
    """Derive the thumbnail key: ``a/1-x.png`` -> ``a/1-x_thumb.jpg``."""
    last_dot = storage_key.rfind(".")
    last_slash = storage_key.rfind("/")
    if last_dot == -1 or last_dot < last_slash:
        return f"{storage_key}{THUMBNAIL_SUFFIX}"
    return f"{storage_key[:last_dot]}{THUMBNAIL_SUFFIX}"
