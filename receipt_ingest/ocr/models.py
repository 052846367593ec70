from dataclasses import dataclass

from receipt_ingest.categorization.models import ExpenseCategory


@dataclass(frozen=True)
class ExtractedFields:
    """Fields read off a receipt by the OCR driver."""

    vendor: str = ""
    amount: float | None = None
    date: str | None = None
    category: ExpenseCategory | None = None
