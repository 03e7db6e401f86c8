"""
Collage Editor - Document Model

The Document is the whole editable canvas state:
- background: optional Background (covers the viewport, no transform)
- layers: Layer objects in insertion order
- selected_layer_id: at most one selected layer, None for no selection

Paint order is NOT the list position. It is an ascending, stable sort on
``layer.order`` so layers with equal order paint in insertion order.

Operations addressed by id never raise for unknown ids; they are no-ops.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from constants import (
    IMAGE_LAYER_SPAWN_MIN, TEXT_LAYER_SPAWN_MIN, LAYER_SPAWN_JITTER,
    DEFAULT_TEXT, DEFAULT_FONT_SIZE, DEFAULT_TEXT_COLOR, DEFAULT_FONT_FAMILY,
)
from .layer import (
    Layer, ImageLayer, TextLayer, Background, LayerKind, ImageSourceTag,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSnapshot:
    """Frozen copy of a Document taken at the start of an export.

    ``layers`` is already in paint order and holds detached layer copies,
    so later edits to the live document cannot leak into the export.
    """
    background: Optional[Background]
    layers: Tuple[Layer, ...]


class Document:
    """Whole-document state plus the layer operations the UI calls into."""

    def __init__(self):
        self.background: Optional[Background] = None
        self.layers: List[Layer] = []
        self.selected_layer_id: Optional[str] = None

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, kind: LayerKind, **params) -> Layer:
        """Create a layer of the given kind and append it."""
        if kind is LayerKind.IMAGE:
            return self.create_layer(**params)
        if kind is LayerKind.TEXT:
            return self.create_text_layer(**params)
        raise TypeError(f"Unknown layer kind: {kind!r}")

    def create_layer(self, src: str, source=ImageSourceTag.DEVICE,
                     x: float = None, y: float = None) -> ImageLayer:
        """Append a new image layer on top of the stack.

        Args:
            src: Bitmap reference (data URL, http(s) URL or file path)
            source: ImageSourceTag or its string value
            x, y: Optional position; defaults to a jittered spawn point
        """
        layer = ImageLayer(
            src=src,
            source=ImageSourceTag(source),
            x=self._spawn(IMAGE_LAYER_SPAWN_MIN) if x is None else x,
            y=self._spawn(IMAGE_LAYER_SPAWN_MIN) if y is None else y,
            order=self.max_order() + 1,
        )
        self._append(layer)
        return layer

    def create_text_layer(self, text: str = DEFAULT_TEXT, x: float = None, y: float = None,
                          font_size: int = DEFAULT_FONT_SIZE, color: str = DEFAULT_TEXT_COLOR,
                          font_family: str = None) -> TextLayer:
        """Append a new text layer on top of the stack."""
        layer = TextLayer(
            text=text,
            x=self._spawn(TEXT_LAYER_SPAWN_MIN) if x is None else x,
            y=self._spawn(TEXT_LAYER_SPAWN_MIN) if y is None else y,
            font_size=font_size,
            color=color,
            font_family=font_family or DEFAULT_FONT_FAMILY,
            order=self.max_order() + 1,
        )
        self._append(layer)
        return layer

    @staticmethod
    def _spawn(minimum: float) -> float:
        return minimum + random.random() * LAYER_SPAWN_JITTER

    def _append(self, layer: Layer):
        if self.get_layer(layer.id) is not None:
            raise ValueError(f"Duplicate layer id: {layer.id}")
        self.layers.append(layer)
        logger.debug("Added %s layer %s (order=%s)", layer.kind.value, layer.id, layer.order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_layer(self, layer_id: Optional[str]) -> Optional[Layer]:
        """Find a layer by id, or None."""
        if layer_id is None:
            return None
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    find = get_layer

    @property
    def selected_layer(self) -> Optional[Layer]:
        return self.get_layer(self.selected_layer_id)

    def max_order(self) -> int:
        """Highest order in the document, or 0 when empty."""
        return max((layer.order for layer in self.layers), default=0)

    def paint_order(self) -> List[Layer]:
        """Layers sorted ascending by order; ties keep insertion order."""
        return sorted(self.layers, key=lambda layer: layer.order)

    def has_content(self) -> bool:
        return bool(self.layers) or self.background is not None

    def snapshot(self) -> DocumentSnapshot:
        return DocumentSnapshot(
            background=self.background,
            layers=tuple(layer.copy() for layer in self.paint_order()),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_selected_layer(self, layer_id: Optional[str]):
        """Select a layer by id; None (or an unknown id) clears selection."""
        if layer_id is not None and self.get_layer(layer_id) is None:
            logger.debug("Ignoring selection of unknown layer %s", layer_id)
            layer_id = None
        self.selected_layer_id = layer_id

    def bring_to_front(self, layer_id: str):
        layer = self.get_layer(layer_id)
        if layer is None:
            return
        layer.order = self.max_order() + 1
        logger.debug("Brought %s to front (order=%s)", layer_id, layer.order)

    def send_to_back(self, layer_id: str):
        """Set the layer's order to 1.

        Other layers keep their order, so this can collide with a layer
        already at 1; the stable paint sort then falls back to insertion
        order.
        """
        layer = self.get_layer(layer_id)
        if layer is None:
            return
        layer.order = 1
        logger.debug("Sent %s to back", layer_id)

    def remove_layer(self, layer_id: str):
        before = len(self.layers)
        self.layers = [layer for layer in self.layers if layer.id != layer_id]
        if len(self.layers) == before:
            return
        if self.selected_layer_id == layer_id:
            self.selected_layer_id = None
        logger.debug("Removed layer %s", layer_id)

    def set_background(self, src: Optional[str]):
        self.background = Background(src) if src else None

    def clear(self):
        """Discard background, all layers and the selection."""
        self.layers = []
        self.background = None
        self.selected_layer_id = None
        logger.debug("Document cleared")
