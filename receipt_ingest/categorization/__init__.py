from receipt_ingest.categorization.classifier import KeywordClassifier
from receipt_ingest.categorization.keywords import load_keyword_table
from receipt_ingest.categorization.models import CategorySuggestion, ExpenseCategory

__all__ = ["CategorySuggestion", "ExpenseCategory", "KeywordClassifier", "load_keyword_table"]
