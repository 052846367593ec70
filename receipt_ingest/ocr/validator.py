"""Validates the parsed OCR reply and builds ExtractedFields."""

from datetime import datetime
from typing import Any

from receipt_ingest.categorization.models import ExpenseCategory
from receipt_ingest.ocr.exceptions import OcrValidationError
from receipt_ingest.ocr.models import ExtractedFields

_DATE_FORMAT = "%Y-%m-%d"


def validate_and_build(data: dict[str, Any]) -> ExtractedFields:
    """Build ExtractedFields from a parsed reply.

    Missing keys are tolerated. Unknown categories map to 'other'.

    Raises:
        OcrValidationError: when a present field has the wrong shape.
    """
    return ExtractedFields(
        vendor=_build_vendor(data.get("vendor")),
        amount=_build_amount(data.get("amount")),
        date=_build_date(data.get("date")),
        category=_build_category(data.get("category")),
    )


def _build_vendor(raw: Any) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise OcrValidationError("'vendor' must be a string")
    return raw.strip()


def _build_amount(raw: Any) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise OcrValidationError("'amount' must be a number")
    if isinstance(raw, str):
        try:
            raw = float(raw.replace(",", "").strip())
        except ValueError as exc:
            raise OcrValidationError(f"'amount' must be a number, got {raw!r}") from exc
    if not isinstance(raw, (int, float)):
        raise OcrValidationError("'amount' must be a number")
    if raw < 0:
        raise OcrValidationError(f"'amount' must not be negative, got {raw}")
    return float(raw)


def _build_date(raw: Any) -> str | None:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise OcrValidationError("'date' must be a string or null")
    try:
        datetime.strptime(raw, _DATE_FORMAT)
    except ValueError as exc:
        raise OcrValidationError(f"'date' must be YYYY-MM-DD, got {raw!r}") from exc
    return raw


def _build_category(raw: Any) -> ExpenseCategory | None:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise OcrValidationError("'category' must be a string or null")
    try:
        return ExpenseCategory(raw.strip().lower())
    except ValueError:
        return ExpenseCategory.OTHER
