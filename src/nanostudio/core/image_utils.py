"""Helpers for turning stored data URLs into displayable or saved images."""

import io
import logging
import mimetypes
from pathlib import Path

from PIL import Image

from .models import GeneratedImage
from .translator import decode_data_url, split_data_url

logger = logging.getLogger(__name__)


def to_pil_image(image: GeneratedImage) -> Image.Image:
    """Decode a stored image into a PIL image for display.

    Raises:
        ValueError: If the URL is not a base64 data URL.
        PIL.UnidentifiedImageError: If the payload is not an image.
    """
    pil_image = Image.open(io.BytesIO(decode_data_url(image.url)))
    pil_image.load()
    return pil_image


def export_filename(image: GeneratedImage) -> str:
    """Name an exported image ``gemini-<id>.<ext>`` after its MIME type."""
    mime_type, _ = split_data_url(image.url)
    extension = mimetypes.guess_extension(mime_type) or ".png"
    if extension == ".jpe":
        extension = ".jpg"
    return f"gemini-{image.id}{extension}"


def export_image(image: GeneratedImage, directory: Path) -> Path:
    """Write the image bytes to ``directory`` and return the file path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(image)
    path.write_bytes(decode_data_url(image.url))
    logger.info(f"Exported image to {path}")
    return path
