"""Backend client.

Thin wrapper over the two endpoints the editor consumes:

    GET  /api/assets    -> pickable image/background/thumbnail libraries
    POST /api/collages  -> persist an exported PNG data URL

All failures surface as ApiError (InvalidPayloadError for HTTP 400).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

import requests

from constants import DEFAULT_API_BASE_URL, API_TIMEOUT_SECONDS, VISIBILITY_CHOICES
from utils.errors import ApiError, InvalidPayloadError

logger = logging.getLogger(__name__)


@dataclass
class Asset:
    id: str
    label: str
    src: str

    @classmethod
    def from_dict(cls, data: dict, base_url: str = '') -> 'Asset':
        src = data.get('src', '')
        if base_url and src.startswith('/'):
            src = urljoin(base_url, src)
        return cls(id=str(data.get('id', '')), label=data.get('label', ''), src=src)


@dataclass
class AssetCatalog:
    images: List[Asset] = field(default_factory=list)
    backgrounds: List[Asset] = field(default_factory=list)
    thumbnails: List[Asset] = field(default_factory=list)

    def find_image(self, asset_id: str) -> Optional[Asset]:
        return next((a for a in self.images if a.id == asset_id), None)


@dataclass
class CollageRecord:
    id: str
    owner_user_id: str
    image_url: str
    visibility: str
    created_at: str = ''
    updated_at: str = ''
    like_count: int = 0
    liked_by_viewer: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'CollageRecord':
        return cls(
            id=str(data['id']),
            owner_user_id=str(data.get('ownerUserID', '')),
            image_url=data.get('imageUrl', ''),
            visibility=data.get('visibility', ''),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
            like_count=int(data.get('likeCount') or 0),
            liked_by_viewer=bool(data.get('likedByViewer', False)),
        )


class ApiClient:
    """Same-origin JSON client for the collage backend."""

    def __init__(self, base_url: str = DEFAULT_API_BASE_URL, session: requests.Session = None,
                 timeout: float = API_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip('/') + '/'
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip('/'))

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(f"Could not reach {url}: {e}") from e

        if response.status_code == 400:
            raise InvalidPayloadError(self._error_message(response), status=400)
        if not response.ok:
            raise ApiError(self._error_message(response), status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {url}", status=response.status_code) from e

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get('error'):
            return body['error']
        return f"HTTP {response.status_code}"

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_assets(self) -> AssetCatalog:
        data = self._request('GET', '/api/assets')
        catalog = AssetCatalog(
            images=[Asset.from_dict(a, self.base_url) for a in data.get('images') or []],
            backgrounds=[Asset.from_dict(a, self.base_url) for a in data.get('backgrounds') or []],
            thumbnails=[Asset.from_dict(a, self.base_url) for a in data.get('thumbnails') or []],
        )
        logger.info("[assets] loaded %d images, %d backgrounds",
                    len(catalog.images), len(catalog.backgrounds))
        return catalog

    def create_collage(self, image_data: str, visibility: str, owner_user_id: str) -> CollageRecord:
        """Persist an exported collage.

        Args:
            image_data: ``data:image/png;base64,...`` from the rasterizer
            visibility: "public" or "private"
            owner_user_id: Logged-in user's id
        """
        if visibility not in VISIBILITY_CHOICES:
            raise ValueError(f"visibility must be one of {VISIBILITY_CHOICES}, got {visibility!r}")
        data = self._request('POST', '/api/collages', json={
            'imageData': image_data,
            'visibility': visibility,
            'ownerUserID': owner_user_id,
        })
        record = CollageRecord.from_dict(data)
        logger.info("Saved collage record %s (%s)", record.id, record.visibility)
        return record
