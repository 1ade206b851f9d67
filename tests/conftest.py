import io
from collections.abc import Callable

import docx
import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.thumbnail.codecs import ImageCodecs


def make_image_bytes(width: int, height: int, fmt: str = "JPEG", mode: str = "RGB") -> bytes:
    """Encode a solid-color image of the given size."""
    buf = io.BytesIO()
    color = (200, 30, 30, 255)[: len(mode)] if mode != "L" else 128
    Image.new(mode, (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def make_image() -> Callable[..., bytes]:
    return make_image_bytes


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Generate a Word document with two paragraphs and a small table."""
    document = docx.Document()
    document.add_paragraph("Brand voice guidelines")
    document.add_paragraph("Be warm and concise.")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Tone"
    table.rows[0].cells[1].text = "Friendly"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def large_jpeg_bytes() -> bytes:
    """1200x800 JPEG, wider than the default thumbnail width."""
    return make_image_bytes(1200, 800, "JPEG")


@pytest.fixture()
def large_png_bytes() -> bytes:
    """900x450 RGBA PNG."""
    return make_image_bytes(900, 450, "PNG", mode="RGBA")


@pytest.fixture()
def small_jpeg_bytes() -> bytes:
    """200x100 JPEG, narrower than the default thumbnail width."""
    return make_image_bytes(200, 100, "JPEG")


@pytest.fixture(scope="session")
def image_codecs() -> ImageCodecs:
    """One codec bundle per test session, mirroring one per process."""
    return ImageCodecs.create()
