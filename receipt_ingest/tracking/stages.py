"""OCR pipeline stages and the per-stage status derivation."""

from dataclasses import dataclass
from enum import Enum


class OcrStage(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    EXTRACTING = "extracting"
    COMPLETE = "complete"
    ERROR = "error"


class StageStatus(str, Enum):
    PAST = "past"
    CURRENT = "current"
    PENDING = "pending"
    COMPLETE = "complete"


@dataclass(frozen=True)
class StageAnchor:
    """A displayed pipeline stage with its canonical progress percentage."""

    stage: OcrStage
    label: str
    progress: int


STAGE_ANCHORS: tuple[StageAnchor, ...] = (
    StageAnchor(OcrStage.UPLOADING, "Uploading file...", 20),
    StageAnchor(OcrStage.ANALYZING, "Analyzing receipt...", 60),
    StageAnchor(OcrStage.EXTRACTING, "Extracting data...", 90),
    StageAnchor(OcrStage.COMPLETE, "Complete!", 100),
)

TERMINAL_STAGES = frozenset({OcrStage.COMPLETE, OcrStage.ERROR})


def anchor_progress(stage: OcrStage, stages: tuple[StageAnchor, ...] = STAGE_ANCHORS) -> int | None:
    """Return the anchor percentage for a stage, or None if it has no anchor."""
    for anchor in stages:
        if anchor.stage is stage:
            return anchor.progress
    return None


def derive_stage_statuses(
    stages: tuple[StageAnchor, ...],
    current_stage: OcrStage,
    current_progress: int,
) -> list[tuple[StageAnchor, StageStatus]]:
    """Compute the display status of every anchor from the tracker state.

    An anchor is past when its progress is below the current progress, and
    current when it is the active stage (except for the complete stage, which
    reports complete once reached). Everything else is pending.
    """
    result: list[tuple[StageAnchor, StageStatus]] = []
    for anchor in stages:
        is_active = anchor.stage is current_stage
        if anchor.progress < current_progress:
            status = StageStatus.PAST
        elif is_active and current_stage is OcrStage.COMPLETE:
            status = StageStatus.COMPLETE
        elif is_active:
            status = StageStatus.CURRENT
        else:
            status = StageStatus.PENDING
        result.append((anchor, status))
    return result
