class CategorizationError(Exception):
    """Base exception for category suggestion errors."""


class KeywordTableError(CategorizationError):
    """Raised when a keyword table cannot be loaded or is malformed."""
