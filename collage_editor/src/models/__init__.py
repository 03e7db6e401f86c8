"""
Collage Editor - Data Models

This module contains the data model classes for the collage document.
This is the MODEL in MVC architecture.

Public API: Import Document, Layer variants and Background from models.
"""

from .layer import (
    Layer, ImageLayer, TextLayer, Background,
    LayerKind, ImageSourceTag, clamp_scale,
)
from .document import Document, DocumentSnapshot
from .transform import Vec2

__all__ = [
    'Document', 'DocumentSnapshot',
    'Layer', 'ImageLayer', 'TextLayer', 'Background',
    'LayerKind', 'ImageSourceTag', 'clamp_scale', 'Vec2',
]
