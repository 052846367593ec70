"""Loading of the static category -> keywords table."""

import json
from pathlib import Path
from typing import Any

from receipt_ingest.categorization.exceptions import KeywordTableError
from receipt_ingest.categorization.models import ExpenseCategory

KeywordTable = dict[ExpenseCategory, tuple[str, ...]]

_DEFAULT_TABLE_PATH = Path(__file__).parent / "data" / "category_keywords.json"


def load_keyword_table(path: Path | None = None) -> KeywordTable:
    """Load a keyword table from a JSON object file.

    Key order in the file is the matching order. Keywords are lower-cased.

    Args:
        path: JSON file to read. Defaults to the bundled category_keywords.json.

    Raises:
        KeywordTableError: if the file cannot be read or fails validation.
    """
    if path is None:
        path = _DEFAULT_TABLE_PATH
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise KeywordTableError(f"Failed to read keyword table: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise KeywordTableError(f"Invalid keyword table JSON: {exc}") from exc
    return build_keyword_table(raw)


def build_keyword_table(raw: Any) -> KeywordTable:
    """Validate a parsed mapping and build an ordered KeywordTable."""
    if not isinstance(raw, dict):
        raise KeywordTableError("Keyword table must be an object")
    table: KeywordTable = {}
    for name, keywords in raw.items():
        category = _parse_category(name)
        table[category] = _parse_keywords(name, keywords)
    return table


def _parse_category(name: Any) -> ExpenseCategory:
    try:
        category = ExpenseCategory(name)
    except ValueError as exc:
        raise KeywordTableError(f"Unknown category in keyword table: {name!r}") from exc
    if category is ExpenseCategory.OTHER:
        raise KeywordTableError("'other' cannot be auto-suggested")
    return category


def _parse_keywords(name: str, raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        raise KeywordTableError(f"Keywords for {name!r} must be a list")
    keywords: list[str] = []
    for keyword in raw:
        if not isinstance(keyword, str) or not keyword.strip():
            raise KeywordTableError(
                f"Keywords for {name!r} must be non-empty strings, got {keyword!r}"
            )
        keywords.append(keyword.strip().lower())
    return tuple(keywords)
