"""Image source loading.

A layer's ``src`` is one of:
- a data URL (``data:image/png;base64,...``), as produced by file import,
  matting and export
- an http(s) URL (app library assets served by the backend)
- a local file path

Every loader returns an RGBA Pillow image or raises ImageLoadError.
"""

import asyncio
import base64
import binascii
import io
import logging
import re

import requests
from PIL import Image, UnidentifiedImageError

from constants import API_TIMEOUT_SECONDS, PNG_DATA_URL_PREFIX
from utils.errors import ImageLoadError

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r'^data:image/[\w.+-]+;base64,(.+)$', re.DOTALL)


def _read_source_bytes(src: str, session=None) -> bytes:
    match = DATA_URL_PATTERN.match(src)
    if match:
        return base64.b64decode(match.group(1), validate=False)

    if src.startswith(('http://', 'https://')):
        http = session or requests
        response = http.get(src, timeout=API_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.content

    with open(src, 'rb') as f:
        return f.read()


def load_image(src: str, session=None) -> Image.Image:
    """Fetch and decode an image source.

    Args:
        src: Data URL, http(s) URL or file path
        session: Optional requests.Session used for http(s) sources

    Returns:
        PIL.Image in RGBA mode

    Raises:
        ImageLoadError: the source is empty, unreachable or not an image
    """
    if not src:
        raise ImageLoadError('', 'empty source')
    try:
        raw = _read_source_bytes(src, session)
        img = Image.open(io.BytesIO(raw))
        img.load()
        return img.convert('RGBA')
    except (OSError, ValueError, binascii.Error, UnidentifiedImageError,
            requests.RequestException) as e:
        logger.debug("Image load failed for %.64s", src, exc_info=True)
        raise ImageLoadError(src, str(e)) from e


async def load_image_async(src: str, session=None) -> Image.Image:
    """load_image on the default executor so the event loop is not blocked."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_image, src, session)


def encode_png(img: Image.Image) -> bytes:
    """Losslessly encode a Pillow image as PNG bytes."""
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


def png_data_url(png_bytes: bytes) -> str:
    return PNG_DATA_URL_PREFIX + base64.b64encode(png_bytes).decode('ascii')


def image_to_data_url(img: Image.Image) -> str:
    """Encode a Pillow image as a base64 PNG data URL."""
    return png_data_url(encode_png(img))


def read_file_as_data_url(path: str) -> str:
    """Read an image file from disk into a PNG data URL.

    Used for device imports so the layer no longer depends on the file.
    """
    return image_to_data_url(load_image(path))
