"""Asynchronous preview rendering with stale-result suppression."""

import asyncio

from receipt_ingest.logging.logger import Log
from receipt_ingest.preview.base import BaseDocumentRasterizer
from receipt_ingest.preview.exceptions import PreviewRenderError
from receipt_ingest.preview.generation import GenerationToken
from receipt_ingest.preview.image_decoder import decode_image
from receipt_ingest.preview.models import (
    FallbackIcon,
    FileKind,
    IconKind,
    Pending,
    PreviewResult,
    UploadedFile,
)

DEFAULT_TARGET_WIDTH = 160


class PreviewRenderer:
    """Turns an uploaded file into a PreviewResult.

    Decoding runs in a worker thread. When a token is given it is checked
    after every suspension point; once it is no longer current the render
    returns None and its result must not be displayed. A superseded render
    still runs to completion, its output is just dropped.

    Decode failures never propagate: images fall back to a generic icon and
    documents to a PDF icon.
    """

    def __init__(
        self,
        rasterizer: BaseDocumentRasterizer,
        target_width: int = DEFAULT_TARGET_WIDTH,
    ) -> None:
        self._rasterizer = rasterizer
        self._target_width = target_width

    @property
    def target_width(self) -> int:
        return self._target_width

    async def render(
        self,
        file: UploadedFile,
        token: GenerationToken | None = None,
    ) -> PreviewResult | None:
        if file.kind is FileKind.RASTER_IMAGE:
            result = await self._render_image(file)
        elif file.kind is FileKind.PAGINATED_DOCUMENT:
            result = await self._render_document(file)
        else:
            Log.debug(f"No preview for {file.name} ({file.media_type})")
            return Pending()

        if token is not None and not token.is_current:
            Log.debug(f"Discarding stale preview for {file.name} (generation {token.generation})")
            return None
        return result

    async def _render_image(self, file: UploadedFile) -> PreviewResult:
        try:
            return await asyncio.to_thread(decode_image, file.data, file.media_type)
        except PreviewRenderError as exc:
            Log.warning(f"Image preview failed for {file.name}: {exc}")
            return FallbackIcon(IconKind.GENERIC)

    async def _render_document(self, file: UploadedFile) -> PreviewResult:
        try:
            return await asyncio.to_thread(
                self._rasterizer.rasterize_first_page,
                file.data,
                self._target_width,
            )
        except PreviewRenderError as exc:
            Log.warning(f"PDF thumbnail failed for {file.name}: {exc}")
            return FallbackIcon(IconKind.PDF)
