import httpx

from app.extraction.base import BaseConversionClient, ConversionItem, ConversionOutcome
from app.ingestion.exceptions import ConversionError


class HttpConversionClient(BaseConversionClient):
    """Conversion client for a remote ``/tomarkdown`` endpoint.

    The endpoint accepts multipart ``files`` and answers with a JSON list of
    ``{"name", "format": "markdown", "data"}`` or
    ``{"name", "format": "error", "error"}`` objects, one per file.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        timeout_seconds: int = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("conversion_base_url is required for conversion_provider=http")
        self._endpoint = f"{base_url.rstrip('/')}/tomarkdown"
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def convert(self, items: list[ConversionItem]) -> list[ConversionOutcome]:
        if not items:
            return []
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        files = [("files", (item.name, item.data, item.mime_type)) for item in items]
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self._endpoint, files=files, headers=headers)
        except httpx.HTTPError as exc:
            raise ConversionError(f"Conversion service network error: {exc}") from exc

        if response.status_code not in (200, 201):
            raise ConversionError(
                f"Conversion service error: {response.status_code} {response.text[:200]}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ConversionError(f"Conversion service returned invalid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise ConversionError("Conversion service response must be a list")

        return [
            self._parse_item(item, payload[index] if index < len(payload) else None)
            for index, item in enumerate(items)
        ]

    @staticmethod
    def _parse_item(item: ConversionItem, raw: object) -> ConversionOutcome:
        if not isinstance(raw, dict):
            return ConversionOutcome(name=item.name, error="no result returned for item")
        name = str(raw.get("name") or item.name)
        if raw.get("format") == "error" or raw.get("error"):
            return ConversionOutcome(name=name, error=str(raw.get("error") or "unknown error"))
        data = raw.get("data")
        if not isinstance(data, str):
            return ConversionOutcome(name=name, error="result has no text data")
        return ConversionOutcome(name=name, data=data)
