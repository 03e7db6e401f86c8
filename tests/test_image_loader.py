"""
Tests for image source loading and PNG encoding.
"""
import asyncio

import pytest
import requests

from conftest import FakeResponse, FakeSession, solid_image, solid_data_url, BROKEN_DATA_URL
from services.image_loader import (
    load_image, load_image_async, encode_png, image_to_data_url, read_file_as_data_url,
)
from utils.errors import ImageLoadError


class TestLoadImage:

    def test_data_url(self):
        img = load_image(solid_data_url(7, 3, (1, 2, 3, 255)))
        assert img.size == (7, 3)
        assert img.mode == 'RGBA'
        assert img.getpixel((0, 0)) == (1, 2, 3, 255)

    def test_file_path(self, tmp_path):
        path = tmp_path / "photo.png"
        solid_image(5, 5).convert('RGB').save(path)
        img = load_image(str(path))
        assert img.mode == 'RGBA'
        assert img.getpixel((2, 2)) == (255, 0, 0, 255)

    def test_http_uses_session(self):
        session = FakeSession([FakeResponse(content=encode_png(solid_image(4, 4)))])
        img = load_image("http://localhost:3000/assets/a.png", session)
        assert img.size == (4, 4)
        assert session.calls[0][:2] == ('GET', "http://localhost:3000/assets/a.png")

    @pytest.mark.parametrize("src", ["", BROKEN_DATA_URL, "/no/such/file.png"])
    def test_bad_sources_raise(self, src):
        with pytest.raises(ImageLoadError):
            load_image(src)

    def test_http_failure_raises(self):
        session = FakeSession([requests.ConnectionError("refused")])
        with pytest.raises(ImageLoadError):
            load_image("https://example.invalid/a.png", session)

    def test_http_error_status_raises(self):
        session = FakeSession([FakeResponse(status_code=404)])
        with pytest.raises(ImageLoadError):
            load_image("https://example.invalid/a.png", session)

    def test_error_message_truncates_source(self):
        src = "data:image/png;base64," + "A" * 500
        with pytest.raises(ImageLoadError) as info:
            load_image(src)
        assert len(str(info.value)) < 200
        assert info.value.src == src

    def test_async_loader(self):
        img = asyncio.run(load_image_async(solid_data_url(2, 2)))
        assert img.size == (2, 2)


class TestEncoding:

    def test_data_url_prefix(self):
        assert image_to_data_url(solid_image(1, 1)).startswith("data:image/png;base64,")

    def test_png_lossless(self):
        original = solid_image(3, 3, (10, 20, 30, 40))
        assert load_image(image_to_data_url(original)).getpixel((1, 1)) == (10, 20, 30, 40)

    def test_read_file_as_data_url(self, tmp_path):
        path = tmp_path / "photo.jpg"
        solid_image(6, 4).convert('RGB').save(path, format='JPEG')
        data_url = read_file_as_data_url(str(path))
        assert data_url.startswith("data:image/png;base64,")
        assert load_image(data_url).size == (6, 4)
