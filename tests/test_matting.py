"""
Tests for corner-colour background removal.
"""
import numpy as np
import pytest
from PIL import Image

from conftest import solid_image, solid_data_url, BROKEN_DATA_URL
from models.layer import ImageLayer
from services.image_loader import load_image
from services.matting import estimate_background_color, matte, remove_background
from utils.errors import ImageLoadError


def _square_on_white(size=20, inset=5):
    """White canvas with a red square in the middle"""
    img = solid_image(size, size, (255, 255, 255, 255))
    img.paste((255, 0, 0, 255), (inset, inset, size - inset, size - inset))
    return img


# ══════════════════════════════════════════════════════════════════════════
# matte()
# ══════════════════════════════════════════════════════════════════════════

class TestMatte:

    def test_background_cleared_subject_kept(self):
        result = np.array(matte(_square_on_white()))
        assert result[0, 0, 3] == 0
        assert result[10, 10, 3] == 255
        assert tuple(result[10, 10, :3]) == (255, 0, 0)

    def test_rgb_untouched(self):
        result = np.array(matte(_square_on_white()))
        assert tuple(result[0, 0, :3]) == (255, 255, 255)

    def test_output_is_rgba_and_same_size(self):
        img = _square_on_white().convert('RGB')
        result = matte(img)
        assert result.mode == 'RGBA'
        assert result.size == img.size

    def test_threshold_is_strict(self):
        img = solid_image(3, 3, (100, 100, 100, 255))
        img.putpixel((1, 1), (100, 100, 139, 255))  # distance 39
        img.putpixel((1, 0), (100, 100, 140, 255))  # distance 40
        result = np.array(matte(img))
        assert result[1, 1, 3] == 0
        assert result[0, 1, 3] == 255

    def test_corner_mean_estimate(self):
        img = solid_image(4, 4, (0, 0, 0, 255))
        img.putpixel((3, 3), (200, 40, 80, 255))
        background = estimate_background_color(np.array(img))
        assert background.tolist() == pytest.approx([50, 10, 20])

    def test_uniform_image_fully_cleared(self):
        # Every pixel matches the corner colour exactly
        result = matte(solid_image(16, 16, (30, 140, 60, 255)))
        assert (np.array(result)[..., 3] == 0).all()

    def test_interior_match_also_cleared(self):
        # No connectivity check: a white hole inside the subject goes too
        img = _square_on_white()
        img.putpixel((10, 10), (255, 255, 255, 255))
        result = np.array(matte(img))
        assert result[10, 10, 3] == 0

    def test_zero_size_image(self):
        result = matte(Image.new('RGBA', (0, 0)))
        assert result.size == (0, 0)


# ══════════════════════════════════════════════════════════════════════════
# remove_background()
# ══════════════════════════════════════════════════════════════════════════

class TestRemoveBackground:

    def test_replaces_src_with_png_data_url(self):
        layer = ImageLayer(src=solid_data_url(8, 8, (0, 255, 0, 255)))
        remove_background(layer)
        assert layer.src.startswith('data:image/png;base64,')
        result = np.array(load_image(layer.src))
        # Uniform image: everything matches the corners
        assert (result[..., 3] == 0).all()

    def test_geometry_untouched(self):
        layer = ImageLayer(src=solid_data_url(8, 8), x=3, y=4, scale=2, rotation=15)
        remove_background(layer)
        assert (layer.x, layer.y, layer.scale, layer.rotation) == (3, 4, 2, 15)

    def test_undecodable_source_leaves_layer(self):
        layer = ImageLayer(src=BROKEN_DATA_URL)
        with pytest.raises(ImageLoadError):
            remove_background(layer)
        assert layer.src == BROKEN_DATA_URL
