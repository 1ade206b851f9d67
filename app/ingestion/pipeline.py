import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.ingestion.models import ExtractionInfo, ExtractionResult, UploadRequest
from app.ingestion.outcomes import ArtifactOutcome, Skipped


@dataclass(slots=True)
class IngestionContext:
    request: UploadRequest
    abort: asyncio.Event | None = None
    sanitized_filename: str = ""
    storage_key: str = ""
    thumbnail_storage_key: str | None = None
    thumbnail_outcome: ArtifactOutcome[str] = Skipped("not attempted")
    extraction_outcome: ArtifactOutcome[ExtractionResult] = Skipped("not attempted")
    extraction_info: ExtractionInfo | None = None

    @property
    def aborted(self) -> bool:
        return self.abort is not None and self.abort.is_set()


class IngestionStep(ABC):
    @abstractmethod
    async def run(self, context: IngestionContext) -> IngestionContext:
        raise NotImplementedError
