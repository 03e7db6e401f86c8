"""Interactive scene items, one per collage layer.

Each item owns a GestureInterpreter and forwards mouse and touch input to it
in scene coordinates (= viewport pixels). The item's transform is always
``layer_qtransform(layer)``, the same transform the export rasterizer uses.
"""

import logging

from PyQt5.QtCore import Qt, QRectF, QEvent
from PyQt5.QtGui import QPen, QColor, QBrush
from PyQt5.QtWidgets import QGraphicsItem

from components.gestures import GestureInterpreter
from constants import (
    LAYER_BASE_SIZE, TEXT_PADDING_X, TEXT_PADDING_Y,
    SELECTION_OUTLINE_COLOR, SELECTION_OUTLINE_WIDTH,
)
from models.layer import LayerKind
from utils.text_layout import text_rect, draw_text_layer
from utils.transform_math import layer_qtransform, contain_rect

logger = logging.getLogger(__name__)

# Mouse is pointer 0; touch points are shifted so they never collide with it
MOUSE_POINTER_ID = 0
TOUCH_POINTER_OFFSET = 1


class LayerItem(QGraphicsItem):
    """Base item: gesture wiring, transform sync and selection outline.

    Args:
        layer: Layer rendered by this item (mutated by gestures)
        on_select: Called with the layer id on pointer down
        on_change: Called with the layer after a gesture changes it
    """

    def __init__(self, layer, on_select, on_change=None, parent=None):
        super().__init__(parent)
        self.layer = layer
        self.is_selected = False
        self.gesture = GestureInterpreter(layer, on_select, on_change)

        self.setAcceptTouchEvents(True)
        self.setAcceptedMouseButtons(Qt.LeftButton)
        self.apply_layer_transform()

    @property
    def layer_id(self) -> str:
        return self.layer.id

    def apply_layer_transform(self):
        """Re-read the layer's geometry into the item transform."""
        self.setTransform(layer_qtransform(self.layer))

    def set_selected(self, selected: bool):
        if selected != self.is_selected:
            self.is_selected = selected
            self.update()

    def _paint_outline(self, painter):
        if not self.is_selected:
            return
        pen = QPen(QColor(SELECTION_OUTLINE_COLOR), SELECTION_OUTLINE_WIDTH, Qt.DashLine)
        pen.setCosmetic(True)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(self.boundingRect())

    # ------------------------------------------------------------------
    # Mouse (pointer 0)
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        pos = event.scenePos()
        self.gesture.pointer_down(MOUSE_POINTER_ID, pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event):
        pos = event.scenePos()
        self.gesture.pointer_move(MOUSE_POINTER_ID, pos.x(), pos.y())
        event.accept()

    def mouseReleaseEvent(self, event):
        self.gesture.pointer_up(MOUSE_POINTER_ID)
        event.accept()

    # ------------------------------------------------------------------
    # Touch (one pointer per touch point)
    # ------------------------------------------------------------------

    def sceneEvent(self, event):
        etype = event.type()
        if etype in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd):
            for point in event.touchPoints():
                pointer_id = point.id() + TOUCH_POINTER_OFFSET
                pos = point.scenePos()
                state = point.state()
                if state == Qt.TouchPointPressed:
                    self.gesture.pointer_down(pointer_id, pos.x(), pos.y())
                elif state == Qt.TouchPointMoved:
                    self.gesture.pointer_move(pointer_id, pos.x(), pos.y())
                elif state == Qt.TouchPointReleased:
                    self.gesture.pointer_up(pointer_id)
            event.accept()
            return True
        if etype == QEvent.TouchCancel:
            self.gesture.reset()
            event.accept()
            return True
        return super().sceneEvent(event)


class ImageLayerItem(LayerItem):
    """Bitmap contained (aspect preserved, centred) in the fixed layer box."""

    def __init__(self, layer, pixmap, on_select, on_change=None, parent=None):
        super().__init__(layer, on_select, on_change, parent)
        self.pixmap = pixmap

    def boundingRect(self):
        return QRectF(0, 0, LAYER_BASE_SIZE, LAYER_BASE_SIZE)

    def paint(self, painter, option, widget=None):
        if self.pixmap is None or self.pixmap.isNull():
            # Broken bitmap: keep a visible, grabbable box
            painter.setPen(QPen(QColor('#999999'), 1, Qt.DotLine))
            painter.setBrush(QBrush(QColor(255, 255, 255, 60)))
            painter.drawRect(self.boundingRect())
        else:
            x, y, w, h = contain_rect(self.pixmap.width(), self.pixmap.height())
            painter.drawPixmap(QRectF(x, y, w, h), self.pixmap, QRectF(self.pixmap.rect()))
        self._paint_outline(painter)


class TextLayerItem(LayerItem):
    """Auto-sized text, left/top aligned at the layer origin."""

    def __init__(self, layer, on_select, on_change=None, on_edit=None, parent=None):
        super().__init__(layer, on_select, on_change, parent)
        self._on_edit = on_edit

    def boundingRect(self):
        return text_rect(self.layer).adjusted(-TEXT_PADDING_X, -TEXT_PADDING_Y,
                                              TEXT_PADDING_X, TEXT_PADDING_Y)

    def paint(self, painter, option, widget=None):
        draw_text_layer(painter, self.layer)
        self._paint_outline(painter)

    def mouseDoubleClickEvent(self, event):
        if self._on_edit is not None:
            self._on_edit(self.layer.id)
        event.accept()


def create_layer_item(layer, pixmap_for, on_select, on_change=None, on_edit=None) -> LayerItem:
    """Build the item for a layer, dispatching on its kind.

    Args:
        pixmap_for: Callable ``src -> QPixmap | None`` for image layers
    """
    if layer.kind is LayerKind.IMAGE:
        return ImageLayerItem(layer, pixmap_for(layer.src), on_select, on_change)
    if layer.kind is LayerKind.TEXT:
        return TextLayerItem(layer, on_select, on_change, on_edit)
    raise TypeError(f"Unhandled layer kind: {layer.kind!r}")
