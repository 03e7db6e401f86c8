"""Best-effort background removal for image layers.

The background color is estimated as the mean RGB of the four corner
pixels. Every pixel whose Euclidean RGB distance to that estimate is below
MATTE_THRESHOLD becomes fully transparent.

This is a single global pass with no connectivity check: interior pixels
that happen to match the background color are cleared as well.
"""

import logging

import numpy as np
from PIL import Image

from constants import MATTE_THRESHOLD
from models.layer import ImageLayer
from services.image_loader import load_image, image_to_data_url

logger = logging.getLogger(__name__)


def estimate_background_color(pixels: np.ndarray) -> np.ndarray:
    """Mean RGB of the four corner pixels of an (h, w, 4) array."""
    corners = pixels[[0, 0, -1, -1], [0, -1, 0, -1], :3].astype(np.float64)
    return corners.mean(axis=0)


def matte(img: Image.Image, threshold: float = MATTE_THRESHOLD) -> Image.Image:
    """Return an RGBA copy of ``img`` with background-colored pixels cleared.

    Args:
        img: Source image (any mode)
        threshold: Distance below which a pixel is made transparent

    Returns:
        New RGBA image; RGB values are untouched, only alpha changes
    """
    rgba = img.convert('RGBA')
    if rgba.width == 0 or rgba.height == 0:
        return rgba
    pixels = np.array(rgba)

    background = estimate_background_color(pixels)
    distance = np.sqrt(((pixels[..., :3].astype(np.float64) - background) ** 2).sum(axis=-1))
    pixels[distance < threshold, 3] = 0

    logger.debug("Matte cleared %d of %d pixels (bg=%s)",
                 int((distance < threshold).sum()), distance.size, background.round(1).tolist())
    return Image.fromarray(pixels)


def remove_background(layer: ImageLayer, session=None) -> ImageLayer:
    """Matte an image layer in place, replacing ``src`` with a PNG data URL.

    Raises:
        ImageLoadError: the layer's bitmap could not be decoded; the layer
            is left unmodified
    """
    source = load_image(layer.src, session)
    layer.src = image_to_data_url(matte(source))
    logger.info("Removed background from layer %s", layer.id)
    return layer
