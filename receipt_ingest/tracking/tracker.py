from receipt_ingest.logging.logger import Log
from receipt_ingest.tracking.exceptions import StageTransitionError
from receipt_ingest.tracking.stages import (
    STAGE_ANCHORS,
    TERMINAL_STAGES,
    OcrStage,
    StageAnchor,
    StageStatus,
    anchor_progress,
    derive_stage_statuses,
)

DEFAULT_ERROR_MESSAGE = "OCR failed"


class StageTracker:
    """Holds OCR progress for one upload attempt.

    Progress values are supplied by the caller. They may lag the stage
    anchors but must stay within 0-100 and never move backwards within an
    attempt. Updating to idle starts a new attempt at any time.
    """

    def __init__(self, stages: tuple[StageAnchor, ...] = STAGE_ANCHORS) -> None:
        self._stages = stages
        self._stage = OcrStage.IDLE
        self._progress = 0
        self._error: str | None = None

    @property
    def stage(self) -> OcrStage:
        return self._stage

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_terminal(self) -> bool:
        return self._stage in TERMINAL_STAGES

    @property
    def visible(self) -> bool:
        return self._stage is not OcrStage.IDLE

    @property
    def display_progress(self) -> int | None:
        """Progress bar value; hidden while idle and after an error."""
        if self._stage in (OcrStage.IDLE, OcrStage.ERROR):
            return None
        return self._progress

    @property
    def headline(self) -> str:
        if self._stage is OcrStage.ERROR:
            return "OCR Failed"
        if self._stage is OcrStage.COMPLETE:
            return "OCR Complete"
        return "Processing Receipt"

    def reset(self) -> None:
        self._stage = OcrStage.IDLE
        self._progress = 0
        self._error = None

    def update(self, stage: OcrStage, progress: int, error: str | None = None) -> None:
        """Apply an external (stage, progress, error) update.

        Raises:
            StageTransitionError: if the update breaks the transition contract.
        """
        stage = OcrStage(stage)
        if not 0 <= progress <= 100:
            raise StageTransitionError(f"Progress must be within 0-100, got {progress}")
        if stage is OcrStage.IDLE:
            self.reset()
            return
        if stage is OcrStage.ERROR:
            self._fail(progress, error)
            return
        if error is not None:
            raise StageTransitionError(
                f"Error message is only valid with the error stage, got {stage.value}"
            )
        if self.is_terminal:
            raise StageTransitionError(
                f"Cannot move from terminal stage {self._stage.value} to {stage.value} "
                "without a reset"
            )
        if progress < self._progress:
            raise StageTransitionError(
                f"Progress cannot decrease within an attempt ({self._progress} -> {progress})"
            )
        anchor = anchor_progress(stage, self._stages)
        if anchor is not None and progress < anchor:
            Log.debug(f"Progress {progress} is below the {stage.value} anchor {anchor}")
        self._stage = stage
        self._progress = progress
        Log.info(f"OCR stage {stage.value} ({progress}%)")

    def statuses(self) -> list[tuple[StageAnchor, StageStatus]]:
        return derive_stage_statuses(self._stages, self._stage, self._progress)

    def _fail(self, progress: int, error: str | None) -> None:
        self._stage = OcrStage.ERROR
        self._progress = progress
        self._error = error or DEFAULT_ERROR_MESSAGE
        Log.warning(f"OCR stage error at {progress}%: {self._error}")
