from dataclasses import dataclass, field

from receipt_ingest.categorization.models import CategorySuggestion, ExpenseCategory
from receipt_ingest.preview.models import PreviewResult
from receipt_ingest.tracking.stages import OcrStage, StageAnchor, StageStatus


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a display needs about one upload session."""

    file_name: str | None
    preview: PreviewResult
    stage: OcrStage
    progress: int | None
    headline: str
    stage_statuses: list[tuple[StageAnchor, StageStatus]] = field(default_factory=list)
    error: str | None = None
    vendor: str = ""
    category: ExpenseCategory | None = None
    suggestion: CategorySuggestion | None = None
