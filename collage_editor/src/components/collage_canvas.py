"""Live collage canvas.

Projects the Document onto a QGraphicsScene whose coordinates are viewport
pixels (0..CANVAS_WIDTH, 0..CANVAS_HEIGHT). ``render_canvas`` rebuilds the
whole scene from the document every time; single-layer geometry updates
from gestures and sliders only re-apply that item's transform.
"""

import logging

from PyQt5.QtCore import Qt, QRectF, pyqtSignal
from PyQt5.QtGui import QColor, QBrush, QPainter, QTransform, QFont
from PyQt5.QtWidgets import QGraphicsView, QGraphicsScene, QGraphicsPixmapItem, QGraphicsSimpleTextItem

from constants import CANVAS_WIDTH, CANVAS_HEIGHT, FALLBACK_FILL_COLOR, CANVAS_PLACEHOLDER_TEXT
from models.layer import LayerKind
from services.image_loader import load_image
from utils.errors import ImageLoadError
from utils.image_convert import pil_to_qpixmap
from utils.transform_math import cover_rect
from .layer_items import LayerItem, create_layer_item

logger = logging.getLogger(__name__)


class CollageCanvas(QGraphicsView):
    """Interactive preview of the collage document.

    Args:
        controller: EditorController owning the document
    """

    textEditRequested = pyqtSignal(str)  # layer id

    def __init__(self, controller, width=CANVAS_WIDTH, height=CANVAS_HEIGHT, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.canvas_width = width
        self.canvas_height = height

        self._scene = QGraphicsScene(0, 0, width, height, self)
        self._scene.setBackgroundBrush(QBrush(QColor(FALLBACK_FILL_COLOR)))
        self.setScene(self._scene)
        self.setRenderHints(QPainter.Antialiasing | QPainter.SmoothPixmapTransform
                            | QPainter.TextAntialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.viewport().setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setMinimumSize(width // 2, height // 2)

        self._items = {}  # layer id -> LayerItem
        self._pixmap_cache = {}  # src -> QPixmap | None
        self._background_item = None
        self._placeholder_item = None

        controller.document_changed.connect(self.refresh)
        controller.selection_changed.connect(self.update_selection)
        controller.layer_changed.connect(self.apply_layer_transform)

        self.refresh()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh(self):
        self.render_canvas(self.controller.document)

    def render_canvas(self, document):
        """Rebuild every scene item from ``document``."""
        self._scene.clear()
        self._items = {}
        self._background_item = None
        self._placeholder_item = None

        if document.background is not None:
            self._background_item = self._create_background_item(document.background.src)

        if not document.has_content():
            self._placeholder_item = self._create_placeholder_item()

        for index, layer in enumerate(document.paint_order()):
            item = create_layer_item(
                layer,
                self._pixmap_for,
                on_select=self.controller.set_selected_layer,
                on_change=self.controller.notify_layer_changed,
                on_edit=self.textEditRequested.emit,
            )
            item.setZValue(index)
            self._scene.addItem(item)
            self._items[layer.id] = item

        self.update_selection(document.selected_layer_id)
        self._prune_pixmap_cache(document)

    def _create_background_item(self, src):
        pixmap = self._pixmap_for(src)
        if pixmap is None:
            return None
        x, y, w, h = cover_rect(pixmap.width(), pixmap.height(), self.canvas_width, self.canvas_height)
        item = QGraphicsPixmapItem(pixmap)
        item.setTransformationMode(Qt.SmoothTransformation)
        item.setTransform(QTransform.fromScale(w / pixmap.width(), h / pixmap.height()))
        item.setPos(x, y)
        item.setZValue(-1)
        item.setAcceptedMouseButtons(Qt.NoButton)
        self._scene.addItem(item)
        return item

    def _create_placeholder_item(self):
        item = QGraphicsSimpleTextItem(CANVAS_PLACEHOLDER_TEXT)
        font = QFont()
        font.setPixelSize(14)
        item.setFont(font)
        item.setBrush(QBrush(QColor('#7a6a8a')))
        rect = item.boundingRect()
        item.setPos((self.canvas_width - rect.width()) / 2, (self.canvas_height - rect.height()) / 2)
        item.setAcceptedMouseButtons(Qt.NoButton)
        self._scene.addItem(item)
        return item

    def _pixmap_for(self, src):
        """Decode (and cache) a bitmap for preview; None when it fails."""
        if src not in self._pixmap_cache:
            try:
                self._pixmap_cache[src] = pil_to_qpixmap(load_image(src, self.controller.api.session))
            except ImageLoadError as e:
                logger.warning("Preview could not load image: %s", e)
                self._pixmap_cache[src] = None
        return self._pixmap_cache[src]

    def _prune_pixmap_cache(self, document):
        live = {layer.src for layer in document.layers if layer.kind is LayerKind.IMAGE}
        if document.background is not None:
            live.add(document.background.src)
        for src in list(self._pixmap_cache):
            if src not in live:
                del self._pixmap_cache[src]

    # ------------------------------------------------------------------
    # Incremental updates
    # ------------------------------------------------------------------

    def update_selection(self, selected_id=None):
        for layer_id, item in self._items.items():
            item.set_selected(layer_id == selected_id)

    def apply_layer_transform(self, layer):
        item = self._items.get(layer.id)
        if item is not None:
            item.apply_layer_transform()

    # ------------------------------------------------------------------
    # Queries (toolbars, tests)
    # ------------------------------------------------------------------

    def item_for(self, layer_id) -> LayerItem:
        return self._items.get(layer_id)

    def painted_layer_ids(self):
        """Layer ids bottom-to-top as stacked in the scene."""
        return [item.layer_id for item in sorted(self._items.values(), key=lambda i: i.zValue())]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        """Pressing empty canvas clears the selection."""
        if not isinstance(self.itemAt(event.pos()), LayerItem):
            self.controller.set_selected_layer(None)
        super().mousePressEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.fitInView(QRectF(0, 0, self.canvas_width, self.canvas_height), Qt.KeepAspectRatio)
