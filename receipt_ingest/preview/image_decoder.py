import io

from PIL import Image

from receipt_ingest.preview.exceptions import PreviewRenderError
from receipt_ingest.preview.models import RasterImage


def decode_image(image_bytes: bytes, media_type: str) -> RasterImage:
    """Decode an image to check it is displayable and read its size.

    The original bytes are kept as the display encoding; no resizing happens.

    Raises:
        PreviewRenderError: if Pillow cannot decode the image.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            width, height = img.size
    except Exception as exc:
        raise PreviewRenderError(f"image decode failed: {exc}") from exc
    return RasterImage(data=image_bytes, width=width, height=height, media_type=media_type)
