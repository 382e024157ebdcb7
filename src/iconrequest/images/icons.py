"""Icon loading and PNG encoding."""

import io
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from iconrequest.errors import DecodeFailure
from iconrequest.log import get_logger
from iconrequest.models.request import UploadItem

logger = get_logger(__name__)


class IconSource(Protocol):
    """Provides the decoded icon for an item, or None if it has none."""

    def load_icon(self, item: UploadItem) -> Image.Image | None: ...


class FileIconSource:
    """Reads icons from each item's ``icon_path``."""

    def load_icon(self, item: UploadItem) -> Image.Image | None:
        if item.icon_path is None or not item.icon_path.exists():
            return None

        try:
            with Image.open(item.icon_path) as img:
                img.load()
                return img.copy()
        except (OSError, UnidentifiedImageError) as e:
            logger.error("Failed to read icon %s: %s", item.icon_path, e)
            return None


def _to_png_mode(image: Image.Image) -> Image.Image:
    # PNG can store these modes directly; anything else (CMYK, YCbCr) goes to RGBA
    if image.mode in ("1", "L", "LA", "I", "P", "RGB", "RGBA"):
        return image
    return image.convert("RGBA")


def encode_png(image: Image.Image) -> bytes:
    """
    Encode an image losslessly to PNG.

    Raises:
        DecodeFailure: If Pillow cannot encode the image
    """
    buffer = io.BytesIO()
    try:
        _to_png_mode(image).save(buffer, "PNG")
    except (OSError, ValueError) as e:
        raise DecodeFailure(str(e)) from e
    return buffer.getvalue()


def save_png(image: Image.Image, output_path: Path) -> bool:
    """Write an icon to disk as PNG. Returns False if it could not be written."""
    try:
        output_path.write_bytes(encode_png(image))
        return True
    except (DecodeFailure, OSError) as e:
        logger.error("Failed to save icon %s: %s", output_path, e)
        return False
