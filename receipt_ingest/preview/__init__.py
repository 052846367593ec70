from receipt_ingest.preview.factory import RasterizerFactory
from receipt_ingest.preview.models import (
    FallbackIcon,
    FileKind,
    IconKind,
    Pending,
    PreviewResult,
    RasterImage,
    UploadedFile,
)
from receipt_ingest.preview.renderer import PreviewRenderer

__all__ = [
    "FallbackIcon",
    "FileKind",
    "IconKind",
    "Pending",
    "PreviewRenderer",
    "PreviewResult",
    "RasterImage",
    "RasterizerFactory",
    "UploadedFile",
]
