import base64
from dataclasses import dataclass, field
from enum import Enum


class FileKind(str, Enum):
    """How an upload is previewed, resolved once from its declared media type."""

    RASTER_IMAGE = "raster_image"
    PAGINATED_DOCUMENT = "paginated_document"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_media_type(cls, media_type: str) -> "FileKind":
        normalized = media_type.split(";", 1)[0].strip().lower()
        if normalized.startswith("image/"):
            return cls.RASTER_IMAGE
        if normalized == "application/pdf":
            return cls.PAGINATED_DOCUMENT
        return cls.UNSUPPORTED


@dataclass(frozen=True)
class UploadedFile:
    """A user-selected receipt file."""

    name: str
    media_type: str
    data: bytes = field(repr=False)
    kind: FileKind = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", FileKind.from_media_type(self.media_type))


class IconKind(str, Enum):
    PDF = "pdf"
    GENERIC = "generic"


@dataclass(frozen=True)
class RasterImage:
    """Displayable encoded image."""

    data: bytes = field(repr=False)
    width: int
    height: int
    media_type: str = "image/png"

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


@dataclass(frozen=True)
class FallbackIcon:
    """Placeholder shown when a file cannot be previewed."""

    kind: IconKind


@dataclass(frozen=True)
class Pending:
    """No preview available (yet, or ever for unsupported files)."""


PreviewResult = RasterImage | FallbackIcon | Pending
