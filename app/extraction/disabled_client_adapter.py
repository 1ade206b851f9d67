from app.extraction.base import BaseConversionClient, ConversionItem, ConversionOutcome


class DisabledConversionClient(BaseConversionClient):
    """Reports every item as an error. Plain text extraction still works."""

    async def convert(self, items: list[ConversionItem]) -> list[ConversionOutcome]:
        return [ConversionOutcome(name=item.name, error="conversion disabled") for item in items]
