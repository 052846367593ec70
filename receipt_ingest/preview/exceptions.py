class PreviewError(Exception):
    """Base exception for preview rendering errors."""


class PreviewRenderError(PreviewError):
    """Raised when a backend fails to decode or rasterize a file."""
