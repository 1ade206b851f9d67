"""Result values for best-effort derived artifacts (thumbnails, extracted text)."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Produced(Generic[T]):
    """The artifact was generated."""

    value: T

    def value_or_none(self) -> T:
        return self.value


@dataclass(frozen=True)
class Skipped:
    """The artifact was intentionally not generated (unsupported format, small image)."""

    reason: str

    def value_or_none(self) -> None:
        return None


@dataclass(frozen=True)
class Failed:
    """Generation was attempted and failed; ``error`` describes why."""

    error: str

    def value_or_none(self) -> None:
        return None


ArtifactOutcome = Union[Produced[T], Skipped, Failed]
