from typing import ClassVar

from receipt_ingest.config.settings import Settings
from receipt_ingest.preview.base import BaseDocumentRasterizer
from receipt_ingest.preview.pdfplumber_adapter import PdfPlumberRasterizer
from receipt_ingest.preview.pymupdf_adapter import PyMuPdfRasterizer
from receipt_ingest.preview.renderer import PreviewRenderer


class RasterizerFactory:
    """Builds the preview pipeline around the configured PDF engine."""

    ENGINES: ClassVar[dict[str, type[BaseDocumentRasterizer]]] = {
        "pdfplumber": PdfPlumberRasterizer,
        "pymupdf": PyMuPdfRasterizer,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentRasterizer:
        engine = settings.pdf_engine.strip().lower()
        rasterizer_cls = cls.ENGINES.get(engine)
        if rasterizer_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {sorted(cls.ENGINES)}"
            )
        return rasterizer_cls()

    @classmethod
    def create_renderer(cls, settings: Settings) -> PreviewRenderer:
        if settings.preview_target_width < 1:
            raise ValueError(
                f"preview_target_width must be positive, got {settings.preview_target_width}"
            )
        return PreviewRenderer(cls.create(settings), target_width=settings.preview_target_width)
