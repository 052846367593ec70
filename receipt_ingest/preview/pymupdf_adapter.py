import pymupdf

from receipt_ingest.preview.base import BaseDocumentRasterizer
from receipt_ingest.preview.exceptions import PreviewRenderError
from receipt_ingest.preview.models import RasterImage


class PyMuPdfRasterizer(BaseDocumentRasterizer):
    """Rasterizes the first document page using PyMuPDF."""

    def rasterize_first_page(self, document_bytes: bytes, target_width: int) -> RasterImage:
        try:
            with pymupdf.open(stream=document_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count < 1:
                    raise PreviewRenderError("Document has no pages")
                page = doc.load_page(0)
                return self._encode_page(page, target_width / page.rect.width)
        except PreviewRenderError:
            raise
        except Exception as exc:
            raise PreviewRenderError(f"pymupdf rasterization failed: {exc}") from exc

    @staticmethod
    def _encode_page(page: pymupdf.Page, scale: float) -> RasterImage:
        # The pixmap owns the pixel buffer; only the PNG bytes leave this frame.
        pix = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
        png = pix.tobytes("png")
        width, height = pix.width, pix.height
        del pix
        return RasterImage(data=png, width=max(1, width), height=max(1, height))
