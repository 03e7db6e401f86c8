"""Editor controller: the single owner of session state.

Holds the Document, the logged-in user, the asset catalog, save flags and
the backend client. Toolbars, dialogs and the canvas call into it instead
of touching shared globals. Listeners follow along through Qt signals:

    document_changed   - structure or content changed, re-render everything
    selection_changed  - selected layer id changed (None for no selection)
    layer_changed      - one layer's geometry changed (gestures, sliders)

Input mistakes raise InputError with a user-facing message and leave state
unchanged. Backend failures raise ApiError; the document is never touched
on those paths.
"""

import asyncio
import logging
from typing import Iterable, List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from constants import (
    CANVAS_WIDTH, CANVAS_HEIGHT, VISIBILITY_CHOICES,
)
from models.document import Document
from models.layer import ImageLayer, TextLayer, ImageSourceTag, LayerKind, clamp_scale
from services.api_client import ApiClient, AssetCatalog
from services.export_rasterizer import ExportRasterizer
from services.image_loader import read_file_as_data_url
from services.matting import remove_background
from utils.errors import InputError, ImageLoadError

logger = logging.getLogger(__name__)


class EditorController(QObject):
    """Application context plus every editing action the UI exposes."""

    document_changed = pyqtSignal()
    selection_changed = pyqtSignal(object)
    layer_changed = pyqtSignal(object)

    def __init__(self, api: ApiClient = None, document: Document = None,
                 export_size=(CANVAS_WIDTH, CANVAS_HEIGHT), device_pixel_ratio: float = 1.0,
                 parent=None):
        super().__init__(parent)
        self.document = document or Document()
        self.api = api or ApiClient()
        self.catalog = AssetCatalog()
        self.user: Optional[dict] = None
        self.export_size = export_size
        self.device_pixel_ratio = device_pixel_ratio

        # Set once the current collage has been saved or published
        self.has_saved_current = False
        # Set between "done" and the save/publish choice
        self.unsaved_final = False

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def is_logged_in(self) -> bool:
        return bool(self.user and self.user.get('id'))

    @property
    def current_user_id(self) -> Optional[str]:
        return str(self.user['id']) if self.is_logged_in else None

    def login(self, user: dict):
        self.user = dict(user)
        logger.info("Logged in as: %s", self.current_user_id)

    def logout(self):
        self.user = None
        logger.info("Logged out")

    @property
    def has_unsaved_work(self) -> bool:
        return self.document.has_content() and not self.has_saved_current

    def load_assets(self) -> AssetCatalog:
        self.catalog = self.api.get_assets()
        return self.catalog

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def get_layer(self, layer_id):
        return self.document.get_layer(layer_id)

    def set_selected_layer(self, layer_id: Optional[str]):
        if layer_id == self.document.selected_layer_id:
            return
        self.document.set_selected_layer(layer_id)
        self.selection_changed.emit(self.document.selected_layer_id)

    def _require_selection(self, kind: LayerKind = None, message: str = None):
        layer = self.document.selected_layer
        if layer is None:
            raise InputError(message or "Select a layer first.")
        if kind is not None and layer.kind is not kind:
            raise InputError(message or f"Select a {kind.value} layer first.")
        return layer

    # ------------------------------------------------------------------
    # Adding content
    # ------------------------------------------------------------------

    def create_layer(self, src: str, source=ImageSourceTag.DEVICE) -> ImageLayer:
        layer = self.document.create_layer(src, source)
        self.document_changed.emit()
        return layer

    def create_text_layer(self, **params) -> TextLayer:
        layer = self.document.create_text_layer(**params)
        self.document_changed.emit()
        return layer

    def add_images_from_files(self, paths: Iterable[str]) -> List[ImageLayer]:
        """Import image files from disk; unreadable files are skipped."""
        added = []
        for path in paths:
            try:
                data_url = read_file_as_data_url(path)
            except ImageLoadError as e:
                logger.warning("Skipping %s: %s", path, e)
                continue
            added.append(self.document.create_layer(data_url, ImageSourceTag.DEVICE))
        if added:
            self.document_changed.emit()
        return added

    def add_library_images(self, asset_ids: Iterable[str]) -> List[ImageLayer]:
        added = []
        for asset_id in asset_ids:
            asset = self.catalog.find_image(asset_id)
            if asset is None:
                continue
            added.append(self.document.create_layer(asset.src, ImageSourceTag.APP))
        if added:
            self.document_changed.emit()
        return added

    def set_background(self, src: Optional[str]):
        self.document.set_background(src)
        self.document_changed.emit()

    def add_text_layer(self) -> TextLayer:
        """Create a default text layer and select it."""
        layer = self.document.create_text_layer()
        self.document.set_selected_layer(layer.id)
        self.document_changed.emit()
        self.selection_changed.emit(layer.id)
        return layer

    # ------------------------------------------------------------------
    # Layer tools
    # ------------------------------------------------------------------

    def set_scale(self, scale: float):
        layer = self._require_selection()
        layer.scale = clamp_scale(scale)
        self.layer_changed.emit(layer)

    def set_rotation(self, degrees: float):
        layer = self._require_selection()
        layer.rotation = degrees
        self.layer_changed.emit(layer)

    def notify_layer_changed(self, layer):
        """Gesture hook: a layer's geometry changed in place."""
        self.layer_changed.emit(layer)

    def bring_to_front(self):
        layer = self._require_selection()
        self.document.bring_to_front(layer.id)
        self.document_changed.emit()

    def send_to_back(self):
        layer = self._require_selection()
        self.document.send_to_back(layer.id)
        self.document_changed.emit()

    def delete_selected(self):
        layer = self._require_selection()
        self.document.remove_layer(layer.id)
        self.document_changed.emit()
        self.selection_changed.emit(None)

    def remove_background(self):
        """Matte the selected image layer.

        Raises:
            InputError: no image layer selected
            ImageLoadError: the bitmap could not be decoded (layer unchanged)
        """
        layer = self._require_selection(LayerKind.IMAGE, "Select an image layer to remove its background.")
        remove_background(layer, self.api.session)
        self.document_changed.emit()

    # ------------------------------------------------------------------
    # Text tools
    # ------------------------------------------------------------------

    def selected_text_layer(self) -> Optional[TextLayer]:
        layer = self.document.selected_layer
        return layer if layer is not None and layer.kind is LayerKind.TEXT else None

    def edit_text(self, text: str, layer_id: str = None):
        layer = self.document.get_layer(layer_id) if layer_id else self.document.selected_layer
        if layer is None or layer.kind is not LayerKind.TEXT:
            raise InputError("Select a text layer first.")
        layer.text = text
        self.document_changed.emit()

    def set_font_family(self, font_family: str):
        layer = self._require_selection(LayerKind.TEXT)
        if font_family:
            layer.font_family = font_family
            self.document_changed.emit()

    def set_text_color(self, color: str):
        layer = self._require_selection(LayerKind.TEXT)
        if color:
            layer.color = color
            self.document_changed.emit()

    # ------------------------------------------------------------------
    # Finishing
    # ------------------------------------------------------------------

    def clear(self):
        self.unsaved_final = False
        self.document.clear()
        self.document_changed.emit()
        self.selection_changed.emit(None)

    def finish(self):
        """Enter the save/publish step.

        Returns:
            True once the document is ready to be saved
        """
        if not self.document.has_content():
            raise InputError("Add at least one image or background before finishing.")
        self.unsaved_final = True
        return True

    def capture_collage_as_png(self) -> str:
        """Rasterize the current document to a PNG data URL.

        Runs the export to completion before returning, so exports are
        serialized at this call site.
        """
        width, height = self.export_size
        rasterizer = ExportRasterizer(session=self.api.session)
        return asyncio.run(rasterizer.capture(self.document, width, height, self.device_pixel_ratio))

    def save(self, visibility: str):
        """Export and persist the collage.

        Rasterization happens before the network call; a backend failure
        raises ApiError and leaves the document untouched.
        """
        if visibility not in VISIBILITY_CHOICES:
            raise ValueError(f"Unknown visibility: {visibility!r}")
        if not self.document.has_content():
            raise InputError("Add at least one image or background before saving.")
        if not self.is_logged_in:
            raise InputError("You need to be logged in before saving or publishing.")

        image_data = self.capture_collage_as_png()
        record = self.api.create_collage(image_data, visibility, self.current_user_id)

        self.unsaved_final = False
        self.has_saved_current = True
        return record

    def create_more(self):
        """Start a fresh collage after an export."""
        self.has_saved_current = False
        self.clear()
