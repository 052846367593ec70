from abc import ABC, abstractmethod

from receipt_ingest.preview.models import RasterImage


class BaseDocumentRasterizer(ABC):
    """Contract for all paginated document rasterization adapters."""

    @abstractmethod
    def rasterize_first_page(self, document_bytes: bytes, target_width: int) -> RasterImage:
        """Render page 1 of a document to a PNG of the given width.

        The scale factor is target_width divided by the page's native width
        at scale 1. Any surface allocated for rendering is released before
        returning, on both success and failure.

        Args:
            document_bytes: Raw document file content.
            target_width: Desired raster width in pixels.

        Returns:
            RasterImage holding PNG bytes and the raster dimensions.

        Raises:
            PreviewRenderError: if parsing or rasterization fails for any reason.
        """
