"""
Shared fixtures for Collage Editor tests.

Provides sample documents, solid-colour test bitmaps as data URLs, and a
fake requests session for backend tests.
"""
import sys
import os
import pytest

# Ensure collage_editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'collage_editor', 'src'))

# Widgets and offscreen painting must work without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


# ── Bitmaps ─────────────────────────────────────────────────────────────

def solid_image(width, height, color=(255, 0, 0, 255)):
    """Solid RGBA Pillow image"""
    from PIL import Image
    return Image.new('RGBA', (width, height), color)


def solid_data_url(width, height, color=(255, 0, 0, 255)):
    """Solid RGBA image encoded as a PNG data URL"""
    from services.image_loader import image_to_data_url
    return image_to_data_url(solid_image(width, height, color))


BROKEN_DATA_URL = "data:image/png;base64,bm90IGFuIGltYWdl"  # "not an image"


# ── Fake HTTP ───────────────────────────────────────────────────────────

class FakeResponse:
    """Just enough of requests.Response for ApiClient and load_image"""

    def __init__(self, status_code=200, json_data=None, text='', content=b''):
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self.content = content

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json

    def raise_for_status(self):
        import requests
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    """Records requests and replays canned responses (or raises them)"""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def _next(self):
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self._next()

    def get(self, url, **kwargs):
        return self.request('GET', url, **kwargs)


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def red_src():
    """120x120 opaque red bitmap"""
    return solid_data_url(120, 120)


@pytest.fixture
def document():
    """Fresh empty document"""
    from models.document import Document
    return Document()


@pytest.fixture
def three_layer_document(red_src):
    """Document with image layers A, B, C at orders 1, 2, 3"""
    from models.document import Document
    doc = Document()
    for _ in range(3):
        doc.create_layer(red_src)
    return doc


@pytest.fixture
def fake_session():
    return FakeSession()
