from app.config.settings import Settings
from app.extraction.base import BaseConversionClient
from app.extraction.disabled_client_adapter import DisabledConversionClient
from app.extraction.http_client_adapter import HttpConversionClient
from app.extraction.local_client_adapter import LocalConversionClient


class ConversionClientFactory:
    """Creates the configured document-to-text conversion client."""

    PROVIDERS = ("local", "http", "disabled")

    @classmethod
    def create(cls, settings: Settings) -> BaseConversionClient:
        provider = settings.conversion_provider.lower()
        if provider == "local":
            return LocalConversionClient(pdf_engine=settings.pdf_engine)
        if provider == "http":
            return HttpConversionClient(
                base_url=settings.conversion_base_url,
                api_key=settings.conversion_api_key,
                timeout_seconds=settings.conversion_timeout_seconds,
            )
        if provider == "disabled":
            return DisabledConversionClient()
        raise ValueError(
            f"Unknown conversion provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
