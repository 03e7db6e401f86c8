"""
Collage Editor - Layer Data Model

A layer is one positionable, transformable element on the canvas. Layers
are a tagged union over LayerKind:

    ImageLayer  - bitmap drawn into the fixed square layer box
    TextLayer   - auto-sized text run

Both variants share the same geometry fields (x, y, scale, rotation, order).
Renderers dispatch on ``layer.kind`` and must handle every LayerKind.

This is part of the MODEL layer - pure data, no UI logic.
"""

import uuid as uuid_module
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import ClassVar

from constants import (
    SCALE_MIN, SCALE_MAX, DEFAULT_SCALE, DEFAULT_ROTATION,
    DEFAULT_TEXT, DEFAULT_FONT_SIZE, DEFAULT_TEXT_COLOR, DEFAULT_FONT_FAMILY,
    IMAGE_LAYER_ID_PREFIX, TEXT_LAYER_ID_PREFIX,
)


class LayerKind(Enum):
    IMAGE = 'image'
    TEXT = 'text'


class ImageSourceTag(Enum):
    """Where an image layer came from (UI labelling only)."""
    DEVICE = 'device'
    APP = 'app'


def new_layer_id(prefix: str) -> str:
    """Generate a fresh, document-unique layer id."""
    return f"{prefix}{uuid_module.uuid4().hex}"


def clamp_scale(value: float) -> float:
    """Clamp a uniform scale into [SCALE_MIN, SCALE_MAX]."""
    return max(SCALE_MIN, min(SCALE_MAX, value))


@dataclass
class Layer:
    """Common geometry shared by every layer variant.

    x, y are the top-left offset in viewport pixels. rotation is in degrees
    and unbounded. order decides paint sequence (higher draws on top).
    """
    kind: ClassVar[LayerKind]

    id: str = ''
    x: float = 0.0
    y: float = 0.0
    scale: float = DEFAULT_SCALE
    rotation: float = DEFAULT_ROTATION
    order: int = 1

    def copy(self):
        """Detached copy of this layer (same id)."""
        return replace(self)


@dataclass
class ImageLayer(Layer):
    kind: ClassVar[LayerKind] = LayerKind.IMAGE

    src: str = ''
    source: ImageSourceTag = ImageSourceTag.DEVICE

    def __post_init__(self):
        if not self.id:
            self.id = new_layer_id(IMAGE_LAYER_ID_PREFIX)
        self.source = ImageSourceTag(self.source)

    @property
    def label(self) -> str:
        return 'From gallery' if self.source is ImageSourceTag.DEVICE else 'App image'


@dataclass
class TextLayer(Layer):
    kind: ClassVar[LayerKind] = LayerKind.TEXT

    text: str = DEFAULT_TEXT
    font_size: int = DEFAULT_FONT_SIZE
    color: str = DEFAULT_TEXT_COLOR
    font_family: str = DEFAULT_FONT_FAMILY

    def __post_init__(self):
        if not self.id:
            self.id = new_layer_id(TEXT_LAYER_ID_PREFIX)

    @property
    def label(self) -> str:
        return 'Text layer'

    @property
    def display_text(self) -> str:
        """Text as drawn; empty content falls back to the placeholder."""
        return self.text or DEFAULT_TEXT


@dataclass(frozen=True)
class Background:
    """Canvas background. No transform; always covers the viewport."""
    src: str
