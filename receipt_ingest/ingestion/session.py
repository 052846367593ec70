"""Upload session: ties preview rendering, OCR progress and category suggestion."""

import asyncio

from receipt_ingest.categorization.classifier import KeywordClassifier
from receipt_ingest.categorization.keywords import load_keyword_table
from receipt_ingest.categorization.models import CategorySuggestion, ExpenseCategory
from receipt_ingest.config.settings import Settings
from receipt_ingest.ingestion.exceptions import IngestionError
from receipt_ingest.ingestion.models import SessionSnapshot
from receipt_ingest.logging.logger import Log
from receipt_ingest.ocr.base import BaseOcrDriver
from receipt_ingest.ocr.exceptions import OcrError
from receipt_ingest.ocr.factory import OcrDriverFactory
from receipt_ingest.ocr.models import ExtractedFields
from receipt_ingest.preview.factory import RasterizerFactory
from receipt_ingest.preview.generation import GenerationCounter, GenerationToken
from receipt_ingest.preview.models import Pending, PreviewResult, UploadedFile
from receipt_ingest.preview.renderer import PreviewRenderer
from receipt_ingest.tracking.exceptions import StageTransitionError
from receipt_ingest.tracking.stages import OcrStage
from receipt_ingest.tracking.tracker import StageTracker


class IngestionSession:
    """Owns all mutable state for one receipt upload form.

    Only the most recently started upload may write the preview or the OCR
    stage; results and callbacks from superseded uploads are dropped.
    """

    def __init__(
        self,
        renderer: PreviewRenderer,
        classifier: KeywordClassifier,
        driver: BaseOcrDriver | None = None,
    ) -> None:
        self._renderer = renderer
        self._classifier = classifier
        self._driver = driver
        self._generations = GenerationCounter()
        self._active: GenerationToken | None = None
        self._file: UploadedFile | None = None
        self._preview: PreviewResult = Pending()
        self._tracker = StageTracker()
        self._vendor = ""
        self._category: ExpenseCategory | None = None
        self._suggestion: CategorySuggestion | None = None

    @property
    def preview(self) -> PreviewResult:
        return self._preview

    @property
    def tracker(self) -> StageTracker:
        return self._tracker

    @property
    def category(self) -> ExpenseCategory | None:
        return self._category

    @property
    def suggestion(self) -> CategorySuggestion | None:
        return self._suggestion

    def start_upload(self, file: UploadedFile) -> "asyncio.Task[PreviewResult | None]":
        """Select a new file and start rendering its preview.

        Must be called from a running event loop. Any in-flight render for a
        previous file becomes stale immediately.
        """
        token = self._generations.next()
        self._active = token
        self._file = file
        self._preview = Pending()
        self._tracker.reset()
        Log.info(f"Upload started: {file.name} ({file.media_type}), generation {token.generation}")
        return asyncio.create_task(self._render_preview(file, token))

    def on_stage_update(self, stage: OcrStage, progress: int, error: str | None = None) -> None:
        self._tracker.update(stage, progress, error)

    def on_vendor_extracted(self, vendor: str) -> CategorySuggestion | None:
        """Record extracted vendor text and suggest a category if none is set."""
        if vendor != self._vendor:
            self._vendor = vendor
            self._suggestion = None
        if self._category is None and self._suggestion is None:
            self._suggestion = self._classifier.suggest(vendor)
            if self._suggestion is not None:
                Log.info(
                    f"Suggested category {self._suggestion.category.value} "
                    f"(keyword {self._suggestion.keyword!r})"
                )
        return self._suggestion

    def set_category(self, category: ExpenseCategory | str | None) -> None:
        self._category = ExpenseCategory(category) if category is not None else None
        self._suggestion = None

    def accept_suggestion(self) -> ExpenseCategory:
        if self._suggestion is None:
            raise IngestionError("There is no category suggestion to accept")
        category = self._suggestion.category
        self.set_category(category)
        return category

    async def run_ocr(self, driver: BaseOcrDriver | None = None) -> ExtractedFields | None:
        """Run one OCR attempt for the current upload and feed its results into the session.

        Every attempt starts from the idle stage, so calling this again after
        an error or a completed run is a retry. OCR failures, and stage
        reports that break the tracker contract, become the error stage.
        Returns None on failure or when a newer upload superseded this one.
        """
        driver = driver or self._driver
        if driver is None:
            raise IngestionError("No OCR driver configured")
        if self._file is None or self._active is None:
            raise IngestionError("No upload in progress")
        file, token = self._file, self._active
        self._tracker.reset()

        def report(stage: OcrStage, progress: int, error: str | None) -> None:
            if not token.is_current:
                return
            try:
                self.on_stage_update(stage, progress, error)
            except StageTransitionError as exc:
                raise OcrError(f"Invalid stage update from OCR driver: {exc}") from exc

        try:
            fields = await driver.extract(file, report)
        except OcrError as exc:
            Log.error(f"OCR failed for {file.name}: {exc}")
            report(OcrStage.ERROR, self._tracker.progress, str(exc))
            return None

        if not token.is_current:
            Log.debug(f"Discarding OCR result for superseded upload {file.name}")
            return None
        self.on_vendor_extracted(fields.vendor)
        return fields

    async def ingest(self, file: UploadedFile) -> SessionSnapshot:
        """Render the preview and run OCR for a file concurrently."""
        preview_task = self.start_upload(file)
        await asyncio.gather(preview_task, self.run_ocr())
        return self.snapshot()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            file_name=self._file.name if self._file is not None else None,
            preview=self._preview,
            stage=self._tracker.stage,
            progress=self._tracker.display_progress,
            headline=self._tracker.headline,
            stage_statuses=self._tracker.statuses(),
            error=self._tracker.error,
            vendor=self._vendor,
            category=self._category,
            suggestion=self._suggestion,
        )

    async def _render_preview(
        self,
        file: UploadedFile,
        token: GenerationToken,
    ) -> PreviewResult | None:
        result = await self._renderer.render(file, token)
        if result is None or not token.is_current:
            return None
        self._preview = result
        Log.info(f"Preview ready for {file.name}: {type(result).__name__}")
        return result


def build_session(settings: Settings) -> IngestionSession:
    """Build an IngestionSession with all adapters chosen by settings."""
    renderer = RasterizerFactory.create_renderer(settings)
    classifier = KeywordClassifier(load_keyword_table(settings.category_keywords_path))
    driver = OcrDriverFactory.create(settings)
    return IngestionSession(renderer=renderer, classifier=classifier, driver=driver)
