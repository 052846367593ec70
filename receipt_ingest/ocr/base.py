from abc import ABC, abstractmethod
from collections.abc import Callable

from receipt_ingest.ocr.models import ExtractedFields
from receipt_ingest.preview.models import UploadedFile
from receipt_ingest.tracking.stages import OcrStage

StageReporter = Callable[[OcrStage, int, str | None], None]


class BaseOcrDriver(ABC):
    """Contract for receipt OCR drivers."""

    @abstractmethod
    async def extract(self, file: UploadedFile, report: StageReporter) -> ExtractedFields:
        """Read expense fields from a receipt file.

        Args:
            file: The uploaded receipt.
            report: Called with (stage, progress, error) as the driver advances.

        Returns:
            ExtractedFields read from the receipt.

        Raises:
            OcrError: on any failure.
        """
