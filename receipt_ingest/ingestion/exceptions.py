class IngestionError(Exception):
    """Raised when the ingestion session is used out of order."""
