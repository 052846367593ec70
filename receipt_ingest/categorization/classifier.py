from receipt_ingest.categorization.keywords import KeywordTable, load_keyword_table
from receipt_ingest.categorization.models import CategorySuggestion


class KeywordClassifier:
    """Suggests an expense category from free-text vendor names.

    Categories are tried in table order and the first one with any keyword
    occurring in the vendor text wins, even if a later category also matches.
    """

    def __init__(self, table: KeywordTable | None = None) -> None:
        self._table = table if table is not None else load_keyword_table()

    def suggest(self, vendor_text: str) -> CategorySuggestion | None:
        text = vendor_text.strip().lower()
        if not text:
            return None
        for category, keywords in self._table.items():
            for keyword in keywords:
                if keyword in text:
                    return CategorySuggestion(category=category, keyword=keyword)
        return None
