import io

import pdfplumber

from receipt_ingest.preview.base import BaseDocumentRasterizer
from receipt_ingest.preview.exceptions import PreviewRenderError
from receipt_ingest.preview.models import RasterImage

_POINTS_PER_INCH = 72


class PdfPlumberRasterizer(BaseDocumentRasterizer):
    """Rasterizes the first document page using pdfplumber."""

    def rasterize_first_page(self, document_bytes: bytes, target_width: int) -> RasterImage:
        try:
            with pdfplumber.open(io.BytesIO(document_bytes)) as pdf:
                if not pdf.pages:
                    raise PreviewRenderError("Document has no pages")
                page = pdf.pages[0]
                scale = target_width / float(page.width)
                page_image = page.to_image(resolution=_POINTS_PER_INCH * scale)
                surface = page_image.original
                try:
                    buf = io.BytesIO()
                    surface.save(buf, format="PNG")
                    width, height = surface.size
                finally:
                    surface.close()
            return RasterImage(data=buf.getvalue(), width=max(1, width), height=max(1, height))
        except PreviewRenderError:
            raise
        except Exception as exc:
            raise PreviewRenderError(f"pdfplumber rasterization failed: {exc}") from exc
