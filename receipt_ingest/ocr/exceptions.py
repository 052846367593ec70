class OcrError(Exception):
    """Raised when receipt OCR fails."""


class OcrValidationError(OcrError):
    """Raised when the extracted fields fail validation."""


class OcrNetworkError(OcrError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
