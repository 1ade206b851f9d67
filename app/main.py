"""Ingest a single local file: ``python -m app.main PATH --tenant-id ... ``."""

import argparse
import asyncio
import json
import mimetypes
import sys
from dataclasses import asdict
from pathlib import Path

from app.config.settings import Settings
from app.ingestion.exceptions import StorageError, ValidationError
from app.ingestion.models import IngestionResult, OwnerType, UploadRequest
from app.ingestion.orchestrator import build_orchestrator
from app.logging.logger import Log


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate, store and index one uploaded file")
    parser.add_argument("path", type=Path, help="File to ingest")
    parser.add_argument("--tenant-id", required=True)
    parser.add_argument(
        "--owner-type",
        default=OwnerType.KNOWLEDGE_BASE_ITEM.value,
        choices=[owner.value for owner in OwnerType],
    )
    parser.add_argument("--owner-id", required=True)
    parser.add_argument("--mime-type", help="Defaults to a guess from the file extension")
    return parser.parse_args(argv)


def result_to_dict(result: IngestionResult) -> dict[str, object]:
    return {
        "storage_key": result.storage_key,
        "thumbnail_storage_key": result.thumbnail_storage_key,
        "extraction_failed": result.extraction_failed,
        "extraction_info": asdict(result.extraction_info) if result.extraction_info else None,
        "thumbnail": type(result.thumbnail_outcome).__name__.lower(),
        "extraction": type(result.extraction_outcome).__name__.lower(),
        "file_record": asdict(result.file_record),
    }


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build orchestrator -> ingest one file."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    content = args.path.read_bytes()
    mime_type = args.mime_type or mimetypes.guess_type(args.path.name)[0] or ""
    request = UploadRequest(
        filename=args.path.name,
        mime_type=mime_type,
        size_bytes=len(content),
        owner_type=args.owner_type,
        owner_id=args.owner_id,
        tenant_id=args.tenant_id,
        content=content,
    )

    orchestrator = build_orchestrator(settings)
    try:
        result = asyncio.run(orchestrator.ingest(request))
    except ValidationError as exc:
        Log.error(f"Upload rejected ({exc.kind.value}): {exc}")
        return 2
    except StorageError as exc:
        Log.error(f"Upload failed: {exc}")
        return 1

    print(json.dumps(result_to_dict(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
