from dataclasses import dataclass
from enum import Enum


class ExpenseCategory(str, Enum):
    """Closed set of expense categories a user can pick from."""

    TRAVEL = "travel"
    FOOD = "food"
    LODGING = "lodging"
    OFFICE = "office"
    OTHER = "other"


@dataclass(frozen=True)
class CategorySuggestion:
    """A suggested category and the keyword found in the vendor text."""

    category: ExpenseCategory
    keyword: str
