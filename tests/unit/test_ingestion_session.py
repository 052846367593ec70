import asyncio
import threading
from unittest.mock import MagicMock

import pytest

from receipt_ingest.categorization.classifier import KeywordClassifier
from receipt_ingest.categorization.models import CategorySuggestion, ExpenseCategory
from receipt_ingest.ingestion.exceptions import IngestionError
from receipt_ingest.ingestion.session import IngestionSession
from receipt_ingest.ocr.base import BaseOcrDriver, StageReporter
from receipt_ingest.ocr.exceptions import OcrNetworkError
from receipt_ingest.ocr.models import ExtractedFields
from receipt_ingest.preview.base import BaseDocumentRasterizer
from receipt_ingest.preview.exceptions import PreviewRenderError
from receipt_ingest.preview.models import (
    FallbackIcon,
    IconKind,
    Pending,
    RasterImage,
    UploadedFile,
)
from receipt_ingest.preview.renderer import PreviewRenderer
from receipt_ingest.tracking.stages import OcrStage, StageStatus


class GatedRasterizer(BaseDocumentRasterizer):
    def __init__(self) -> None:
        self.gates: dict[bytes, threading.Event] = {}

    def gate(self, data: bytes) -> threading.Event:
        return self.gates.setdefault(data, threading.Event())

    def rasterize_first_page(self, document_bytes: bytes, target_width: int) -> RasterImage:
        assert self.gate(document_bytes).wait(timeout=5)
        return RasterImage(data=document_bytes, width=target_width, height=1)


class ScriptedDriver(BaseOcrDriver):
    """Reports the given updates, then returns fields or raises."""

    def __init__(
        self,
        updates: list[tuple[OcrStage, int]],
        fields: ExtractedFields | None = None,
        error: Exception | None = None,
    ) -> None:
        self._updates = updates
        self._fields = fields
        self._error = error

    async def extract(self, file: UploadedFile, report: StageReporter) -> ExtractedFields:
        for stage, progress in self._updates:
            report(stage, progress, None)
            await asyncio.sleep(0)
        if self._error is not None:
            raise self._error
        assert self._fields is not None
        return self._fields


_FULL_RUN = [
    (OcrStage.UPLOADING, 20),
    (OcrStage.ANALYZING, 60),
    (OcrStage.EXTRACTING, 90),
    (OcrStage.COMPLETE, 100),
]


def _pdf(name: str) -> UploadedFile:
    return UploadedFile(name=name, media_type="application/pdf", data=name.encode())


def _make_session(
    rasterizer: BaseDocumentRasterizer | None = None,
    driver: BaseOcrDriver | None = None,
) -> IngestionSession:
    if rasterizer is None:
        rasterizer = MagicMock(spec=BaseDocumentRasterizer)
        rasterizer.rasterize_first_page.side_effect = lambda data, width: RasterImage(
            data=data, width=width, height=1
        )
    return IngestionSession(
        renderer=PreviewRenderer(rasterizer),
        classifier=KeywordClassifier(),
        driver=driver,
    )


class TestStartUpload:
    def test_renders_preview(self) -> None:
        session = _make_session()

        async def scenario() -> None:
            await session.start_upload(_pdf("a"))

        asyncio.run(scenario())
        assert session.preview == RasterImage(data=b"a", width=160, height=1)

    def test_unsupported_file_has_no_preview(self) -> None:
        session = _make_session()
        upload = UploadedFile(name="notes.txt", media_type="text/plain", data=b"x")

        async def scenario() -> None:
            await session.start_upload(upload)

        asyncio.run(scenario())
        assert session.preview == Pending()

    def test_corrupt_pdf_shows_pdf_icon(self) -> None:
        rasterizer = MagicMock(spec=BaseDocumentRasterizer)
        rasterizer.rasterize_first_page.side_effect = PreviewRenderError("broken")
        session = _make_session(rasterizer)

        async def scenario() -> None:
            await session.start_upload(_pdf("a"))

        asyncio.run(scenario())
        assert session.preview == FallbackIcon(IconKind.PDF)

    def test_resets_tracker(self) -> None:
        session = _make_session()
        session.on_stage_update(OcrStage.ERROR, 10, "old failure")

        async def scenario() -> None:
            await session.start_upload(_pdf("a"))

        asyncio.run(scenario())
        assert session.tracker.stage is OcrStage.IDLE
        assert session.tracker.error is None


class TestPreviewSupersession:
    def test_later_file_wins_when_earlier_resolves_last(self) -> None:
        rasterizer = GatedRasterizer()
        session = _make_session(rasterizer)

        async def scenario() -> None:
            task_a = session.start_upload(_pdf("a"))
            task_b = session.start_upload(_pdf("b"))
            rasterizer.gate(b"b").set()
            await task_b
            rasterizer.gate(b"a").set()
            assert await task_a is None

        asyncio.run(scenario())
        assert isinstance(session.preview, RasterImage)
        assert session.preview.data == b"b"

    def test_later_file_wins_when_earlier_resolves_first(self) -> None:
        rasterizer = GatedRasterizer()
        session = _make_session(rasterizer)

        async def scenario() -> None:
            task_a = session.start_upload(_pdf("a"))
            task_b = session.start_upload(_pdf("b"))
            rasterizer.gate(b"a").set()
            await task_a
            assert session.preview == Pending()
            rasterizer.gate(b"b").set()
            await task_b

        asyncio.run(scenario())
        assert isinstance(session.preview, RasterImage)
        assert session.preview.data == b"b"


class TestCategorySuggestion:
    def test_suggests_when_category_unset(self) -> None:
        session = _make_session()
        suggestion = session.on_vendor_extracted("Uber Trip to Airport")
        assert suggestion == CategorySuggestion(ExpenseCategory.TRAVEL, "uber")
        assert session.suggestion == suggestion

    def test_no_suggestion_when_category_set(self) -> None:
        session = _make_session()
        session.set_category(ExpenseCategory.FOOD)
        assert session.on_vendor_extracted("Uber") is None

    def test_accepting_clears_and_does_not_reoffer(self) -> None:
        session = _make_session()
        session.on_vendor_extracted("Uber Trip to Airport")
        assert session.accept_suggestion() is ExpenseCategory.TRAVEL
        assert session.category is ExpenseCategory.TRAVEL
        assert session.suggestion is None
        assert session.on_vendor_extracted("Uber Trip to Airport") is None

    def test_manual_category_clears_suggestion(self) -> None:
        session = _make_session()
        session.on_vendor_extracted("Hotel Taj")
        session.set_category("office")
        assert session.suggestion is None
        assert session.category is ExpenseCategory.OFFICE

    def test_vendor_change_recomputes(self) -> None:
        session = _make_session()
        session.on_vendor_extracted("Hotel Taj")
        suggestion = session.on_vendor_extracted("Zomato")
        assert suggestion is not None
        assert suggestion.category is ExpenseCategory.FOOD

    def test_vendor_change_without_match_clears(self) -> None:
        session = _make_session()
        session.on_vendor_extracted("Hotel Taj")
        assert session.on_vendor_extracted("Acme Corp") is None
        assert session.suggestion is None

    def test_accept_without_suggestion_raises(self) -> None:
        with pytest.raises(IngestionError, match="no category suggestion"):
            _make_session().accept_suggestion()


class TestRunOcr:
    def test_requires_upload(self) -> None:
        session = _make_session(driver=ScriptedDriver(_FULL_RUN, ExtractedFields()))
        with pytest.raises(IngestionError, match="No upload"):
            asyncio.run(session.run_ocr())

    def test_requires_driver(self) -> None:
        session = _make_session()
        with pytest.raises(IngestionError, match="No OCR driver"):
            asyncio.run(session.run_ocr())

    def test_success_feeds_tracker_and_classifier(self) -> None:
        driver = ScriptedDriver(_FULL_RUN, ExtractedFields(vendor="Swiggy"))
        session = _make_session(driver=driver)
        snapshot = asyncio.run(session.ingest(_pdf("a")))
        assert snapshot.stage is OcrStage.COMPLETE
        assert snapshot.progress == 100
        assert snapshot.vendor == "Swiggy"
        assert snapshot.suggestion is not None
        assert snapshot.suggestion.category is ExpenseCategory.FOOD
        assert isinstance(snapshot.preview, RasterImage)

    def test_failure_sets_error_stage_and_keeps_state(self) -> None:
        driver = ScriptedDriver(
            [(OcrStage.UPLOADING, 20)],
            error=OcrNetworkError("Rate limit exceeded. Please try again later."),
        )
        session = _make_session(driver=driver)
        session.set_category(ExpenseCategory.LODGING)
        snapshot = asyncio.run(session.ingest(_pdf("a")))
        assert snapshot.stage is OcrStage.ERROR
        assert snapshot.error == "Rate limit exceeded. Please try again later."
        assert snapshot.progress is None
        assert snapshot.headline == "OCR Failed"
        assert snapshot.category is ExpenseCategory.LODGING
        assert isinstance(snapshot.preview, RasterImage)
        assert all(status is not StageStatus.CURRENT for _, status in snapshot.stage_statuses)

    def test_retry_after_error(self) -> None:
        session = _make_session()
        failing = ScriptedDriver([(OcrStage.UPLOADING, 20)], error=OcrNetworkError("down"))
        working = ScriptedDriver(_FULL_RUN, ExtractedFields(vendor="Oyo Rooms"))

        async def scenario() -> None:
            await session.start_upload(_pdf("a"))
            await session.run_ocr(failing)
            assert session.tracker.stage is OcrStage.ERROR
            await session.start_upload(_pdf("a"))
            await session.run_ocr(working)

        asyncio.run(scenario())
        assert session.tracker.stage is OcrStage.COMPLETE
        assert session.suggestion is not None
        assert session.suggestion.category is ExpenseCategory.LODGING

    def test_retry_on_same_upload_after_error(self) -> None:
        session = _make_session()
        failing = ScriptedDriver([(OcrStage.UPLOADING, 20)], error=OcrNetworkError("down"))
        working = ScriptedDriver(_FULL_RUN, ExtractedFields(vendor="Oyo Rooms"))

        async def scenario() -> ExtractedFields | None:
            await session.start_upload(_pdf("a"))
            assert await session.run_ocr(failing) is None
            assert session.tracker.stage is OcrStage.ERROR
            return await session.run_ocr(working)

        fields = asyncio.run(scenario())
        assert fields == ExtractedFields(vendor="Oyo Rooms")
        assert session.tracker.stage is OcrStage.COMPLETE
        assert session.tracker.error is None
        assert session.suggestion is not None
        assert session.suggestion.category is ExpenseCategory.LODGING
        assert isinstance(session.preview, RasterImage)

    def test_rerun_after_complete(self) -> None:
        session = _make_session()

        async def scenario() -> None:
            await session.start_upload(_pdf("a"))
            await session.run_ocr(ScriptedDriver(_FULL_RUN, ExtractedFields(vendor="Uber")))
            await session.run_ocr(ScriptedDriver(_FULL_RUN, ExtractedFields(vendor="Zomato")))

        asyncio.run(scenario())
        assert session.tracker.stage is OcrStage.COMPLETE
        assert session.suggestion is not None
        assert session.suggestion.category is ExpenseCategory.FOOD

    def test_backwards_progress_becomes_error_stage(self) -> None:
        driver = ScriptedDriver(
            [(OcrStage.ANALYZING, 60), (OcrStage.UPLOADING, 20)],
            ExtractedFields(vendor="Uber"),
        )
        session = _make_session(driver=driver)
        snapshot = asyncio.run(session.ingest(_pdf("a")))
        assert snapshot.stage is OcrStage.ERROR
        assert snapshot.error is not None
        assert "Progress cannot decrease" in snapshot.error
        assert session.tracker.progress == 60
        assert snapshot.vendor == ""
        assert snapshot.suggestion is None
        assert isinstance(snapshot.preview, RasterImage)

    def test_out_of_range_progress_becomes_error_stage(self) -> None:
        driver = ScriptedDriver([(OcrStage.UPLOADING, 150)], ExtractedFields(vendor="Uber"))
        session = _make_session(driver=driver)
        snapshot = asyncio.run(session.ingest(_pdf("a")))
        assert snapshot.stage is OcrStage.ERROR
        assert snapshot.error is not None
        assert "0-100" in snapshot.error

    def test_superseded_ocr_is_dropped(self) -> None:
        release = asyncio.Event()

        class SlowDriver(BaseOcrDriver):
            async def extract(self, file: UploadedFile, report: StageReporter) -> ExtractedFields:
                report(OcrStage.UPLOADING, 20, None)
                await release.wait()
                report(OcrStage.COMPLETE, 100, None)
                return ExtractedFields(vendor="Uber")

        session = _make_session()

        async def scenario() -> object:
            await session.start_upload(_pdf("a"))
            ocr_task = asyncio.create_task(session.run_ocr(SlowDriver()))
            await asyncio.sleep(0)
            await session.start_upload(_pdf("b"))
            release.set()
            return await ocr_task

        result = asyncio.run(scenario())
        assert result is None
        assert session.tracker.stage is OcrStage.IDLE
        assert session.suggestion is None


class TestSnapshot:
    def test_initial_snapshot(self) -> None:
        snapshot = _make_session().snapshot()
        assert snapshot.file_name is None
        assert snapshot.preview == Pending()
        assert snapshot.stage is OcrStage.IDLE
        assert snapshot.progress is None
        assert [status for _, status in snapshot.stage_statuses] == [StageStatus.PENDING] * 4
