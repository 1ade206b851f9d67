import asyncio

import pytest

from app.extraction.base import ConversionItem
from app.extraction.local_client_adapter import LocalConversionClient
from app.ingestion.constants import DOCX_MIME_TYPE


def _convert_one(client: LocalConversionClient, item: ConversionItem):
    return asyncio.run(client.convert([item]))[0]


class TestLocalConversionClient:
    @pytest.mark.parametrize("engine", ["pdfplumber", "pymupdf"])
    def test_pdf_text(self, engine: str, sample_pdf_bytes: bytes) -> None:
        client = LocalConversionClient(pdf_engine=engine)
        outcome = _convert_one(client, ConversionItem("a.pdf", sample_pdf_bytes, "application/pdf"))

        assert outcome.error is None
        assert "Hello PDF World" in outcome.data

    @pytest.mark.parametrize("engine", ["pdfplumber", "pymupdf"])
    def test_multi_page_pdf_keeps_page_order(self, engine: str, multi_page_pdf_bytes: bytes) -> None:
        client = LocalConversionClient(pdf_engine=engine)
        outcome = _convert_one(client, ConversionItem("b.pdf", multi_page_pdf_bytes, "application/pdf"))

        assert outcome.data.index("Page one content") < outcome.data.index("Page two content")

    def test_docx_paragraphs_and_tables(self, sample_docx_bytes: bytes) -> None:
        client = LocalConversionClient()
        outcome = _convert_one(client, ConversionItem("voice.docx", sample_docx_bytes, DOCX_MIME_TYPE))

        assert outcome.data == "Brand voice guidelines\n\nBe warm and concise.\n\nTone | Friendly"

    def test_image_is_reported_as_unsupported(self) -> None:
        outcome = _convert_one(LocalConversionClient(), ConversionItem("x.png", b"png", "image/png"))

        assert outcome.data is None
        assert outcome.error == "Local conversion does not support image/png"

    def test_corrupt_pdf_becomes_item_error(self) -> None:
        outcome = _convert_one(
            LocalConversionClient(), ConversionItem("bad.pdf", b"not a pdf", "application/pdf")
        )

        assert outcome.data is None
        assert outcome.error

    def test_batch_preserves_order(self, sample_pdf_bytes: bytes) -> None:
        items = [
            ConversionItem("one.png", b"png", "image/png"),
            ConversionItem("two.pdf", sample_pdf_bytes, "application/pdf"),
        ]

        outcomes = asyncio.run(LocalConversionClient().convert(items))

        assert [o.name for o in outcomes] == ["one.png", "two.pdf"]

    def test_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            LocalConversionClient(pdf_engine="tesseract")
