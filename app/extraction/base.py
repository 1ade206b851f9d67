from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConversionItem:
    """One named binary blob sent for document-to-text conversion."""

    name: str
    data: bytes = field(repr=False)
    mime_type: str


@dataclass(frozen=True)
class ConversionOutcome:
    """Per-item conversion result: exactly one of ``data`` / ``error`` is set."""

    name: str
    data: str | None = None
    error: str | None = None


class BaseConversionClient(ABC):
    """Contract for document-to-markdown/text conversion providers."""

    @abstractmethod
    async def convert(self, items: list[ConversionItem]) -> list[ConversionOutcome]:
        """Convert a batch of blobs, returning one outcome per item in order.

        Raises:
            ConversionError: when the provider cannot be reached at all.
        """
