import io

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfgen import canvas

from receipt_ingest.preview.models import UploadedFile


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page letter PDF with a receipt line."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Uber Trip to Airport  450.00")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page A4 PDF."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 30), color=(200, 10, 10)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def jpeg_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (64, 48), color=(10, 200, 10)).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture()
def pdf_upload(sample_pdf_bytes: bytes) -> UploadedFile:
    return UploadedFile(name="receipt.pdf", media_type="application/pdf", data=sample_pdf_bytes)


@pytest.fixture()
def png_upload(png_bytes: bytes) -> UploadedFile:
    return UploadedFile(name="receipt.png", media_type="image/png", data=png_bytes)
