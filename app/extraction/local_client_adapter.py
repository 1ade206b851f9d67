"""In-process conversion for PDF and OOXML Word documents."""

import asyncio
import io
from collections.abc import Callable
from typing import ClassVar

import docx
import pdfplumber
import pymupdf

from app.extraction.base import BaseConversionClient, ConversionItem, ConversionOutcome
from app.ingestion.constants import DOCX_MIME_TYPE
from app.logging.logger import Log


def _pdf_text_pdfplumber(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def _pdf_text_pymupdf(data: bytes) -> str:
    with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
        pages = [page.get_text() for page in doc]
    return "\n".join(pages).strip()


def _docx_text(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    blocks = [para.text for para in document.paragraphs if para.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                blocks.append(" | ".join(cells))
    return "\n\n".join(blocks)


class LocalConversionClient(BaseConversionClient):
    """Converts documents without a network call.

    Legacy ``.doc`` files and images need a remote converter (OCR); they are
    reported as per-item errors.
    """

    PDF_ENGINES: ClassVar[dict[str, Callable[[bytes], str]]] = {
        "pdfplumber": _pdf_text_pdfplumber,
        "pymupdf": _pdf_text_pymupdf,
    }

    def __init__(self, pdf_engine: str = "pdfplumber") -> None:
        engine = pdf_engine.lower()
        pdf_converter = self.PDF_ENGINES.get(engine)
        if pdf_converter is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(self.PDF_ENGINES)}"
            )
        self._converters: dict[str, Callable[[bytes], str]] = {
            "application/pdf": pdf_converter,
            DOCX_MIME_TYPE: _docx_text,
        }

    async def convert(self, items: list[ConversionItem]) -> list[ConversionOutcome]:
        return [await asyncio.to_thread(self._convert_one, item) for item in items]

    def _convert_one(self, item: ConversionItem) -> ConversionOutcome:
        converter = self._converters.get(item.mime_type)
        if converter is None:
            return ConversionOutcome(
                name=item.name,
                error=f"Local conversion does not support {item.mime_type}",
            )
        try:
            return ConversionOutcome(name=item.name, data=converter(item.data))
        except Exception as exc:
            Log.debug(f"Local conversion failed for {item.name}: {exc}")
            return ConversionOutcome(name=item.name, error=f"{type(exc).__name__}: {exc}")
